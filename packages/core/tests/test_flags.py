"""Tests for readiness flags and the fix-next list."""

import json
from decimal import Decimal
from typing import Any, Optional

import pytest

from moveout_core import ValidationError, compute_budget, compute_readiness_flags, load_schema
from moveout_core.config import EngineConfig
from moveout_core.flags import (
    AFFORDABILITY_MESSAGE,
    DEFICIT_MESSAGE,
    FRAGILE_BUFFER_MESSAGE,
    INCOME_REQUIREMENTS,
    TRANSPORT_REQUIREMENTS,
    ReadinessEvaluator,
    get_missing_evidence,
    get_missing_field_ids,
    get_unsourced_categories,
    schema_source_fields,
)
from moveout_core.models import (
    AssignmentSchema,
    Constants,
    DerivedTotals,
    EvidenceItem,
    HousingTotals,
    IncomeMode,
    SourceCategory,
    Submission,
    TransportMode,
)

REFLECTIONS = {"reflection_budget": "Rent is most of my budget."}

EVIDENCE = [
    EvidenceItem(id="e1", type="rental_ad", url="https://example.com/rental"),
    EvidenceItem(id="e2", type="vehicle_ad", file_ids=["file-1"]),
]


def make_submission(
    inputs: dict[str, Any],
    constants: Constants,
    reflections: Optional[dict[str, Any]] = None,
    derived: Optional[DerivedTotals] = None,
) -> Submission:
    return Submission(
        id="sub-1",
        inputs=inputs,
        reflections=reflections or {},
        derived=derived or compute_budget(inputs, constants),
    )


class TestModeRegistries:
    def test_every_mode_has_requirements(self):
        assert set(INCOME_REQUIREMENTS) == set(IncomeMode)
        assert set(TRANSPORT_REQUIREMENTS) == set(TransportMode)


class TestMissingFields:
    """Schema and mode-driven required fields."""

    def test_empty_worksheet(self, schema: AssignmentSchema, constants: Constants):
        submission = make_submission({}, constants)

        assert get_missing_field_ids(schema, submission, constants) == [
            "income_mode",
            "net_pay_per_cheque",
            "paycheques_per_month",
            "housing_option_label",
            "rent_monthly",
            "utilities_monthly",
            "transport_option_label",
            "transport_mode",
            "vehicle_price",
            "fuel_economy_l_per_100km",
            "food_table_weekly",
            "clothing_table_annual",
            "reflection_budget",
        ]

    def test_complete_worksheet(self, schema: AssignmentSchema, constants: Constants, base_inputs: dict):
        submission = make_submission(base_inputs, constants, REFLECTIONS)
        assert get_missing_field_ids(schema, submission, constants) == []

    def test_derived_fields_are_never_missing(self, schema: AssignmentSchema, constants: Constants):
        submission = make_submission({}, constants)
        assert "housing_monthly_total" not in get_missing_field_ids(schema, submission, constants)

    def test_hourly_mode_requires_wage_and_hours(self, schema: AssignmentSchema, constants: Constants):
        submission = make_submission({"income_mode": "hourly_estimate", "hourly_wage": 20}, constants)
        missing = get_missing_field_ids(schema, submission, constants)

        assert "hours_per_week" in missing
        assert "hourly_wage" not in missing
        assert "net_pay_per_cheque" not in missing

    def test_hourly_data_waives_paycheque_fields(self, schema: AssignmentSchema, constants: Constants):
        inputs = {"income_mode": "net_paycheque", "hourly_wage": 20, "hours_per_week": 30}
        missing = get_missing_field_ids(schema, make_submission(inputs, constants), constants)

        assert "net_pay_per_cheque" not in missing
        assert "paycheques_per_month" not in missing

    def test_transit_waives_vehicle_fields(self, schema: AssignmentSchema, constants: Constants):
        submission = make_submission({"transport_mode": "transit"}, constants)
        missing = get_missing_field_ids(schema, submission, constants)

        assert "vehicle_price" not in missing
        assert "fuel_economy_l_per_100km" not in missing
        assert "transit_monthly_pass" in missing

    @pytest.mark.parametrize(
        "extra",
        [{"transit_monthly_pass": 105}, {"transit_source_url": "https://example.com/fares"}],
    )
    def test_transit_pass_satisfied_by_amount_or_source(
        self, schema: AssignmentSchema, constants: Constants, extra: dict
    ):
        inputs = dict({"transport_mode": "transit"}, **extra)
        missing = get_missing_field_ids(schema, make_submission(inputs, constants), constants)

        assert "transit_monthly_pass" not in missing

    def test_table_rows_without_amounts_are_missing(self, schema: AssignmentSchema, constants: Constants):
        inputs = {"clothing_table_annual": json.dumps([{"item": "Jeans"}])}
        missing = get_missing_field_ids(schema, make_submission(inputs, constants), constants)

        assert "clothing_table_annual" in missing

    @pytest.mark.parametrize("value", ["", "   ", float("nan"), None])
    def test_blank_or_non_finite_scalar_is_missing(
        self, schema: AssignmentSchema, constants: Constants, value
    ):
        submission = make_submission({"rent_monthly": value}, constants)
        assert "rent_monthly" in get_missing_field_ids(schema, submission, constants)

    def test_zero_counts_as_entered(self, schema: AssignmentSchema, constants: Constants):
        submission = make_submission({"rent_monthly": 0}, constants)
        assert "rent_monthly" not in get_missing_field_ids(schema, submission, constants)

    def test_blank_reflection_is_missing(self, schema: AssignmentSchema, constants: Constants):
        submission = make_submission({}, constants, {"reflection_budget": "  "})
        assert "reflection_budget" in get_missing_field_ids(schema, submission, constants)


class TestMissingEvidence:
    def test_nothing_attached(self, schema: AssignmentSchema):
        assert get_missing_evidence(schema, []) == ["rental_ad", "vehicle_ad"]

    def test_url_or_file_satisfies(self, schema: AssignmentSchema):
        assert get_missing_evidence(schema, EVIDENCE) == []

    def test_blank_url_without_files_does_not_satisfy(self, schema: AssignmentSchema):
        evidence = [EvidenceItem(id="e1", type="rental_ad", url="   ")]
        assert get_missing_evidence(schema, evidence) == ["rental_ad", "vehicle_ad"]

    def test_any_usable_item_satisfies(self, schema: AssignmentSchema):
        evidence = [
            EvidenceItem(id="e1", type="rental_ad"),
            EvidenceItem(id="e2", type="rental_ad", url="https://example.com/ad"),
        ]
        assert get_missing_evidence(schema, evidence) == ["vehicle_ad"]


class TestUnsourcedCategories:
    def test_nothing_sourced(self, constants: Constants):
        assert get_unsourced_categories({}, constants) == [
            "income",
            "housing",
            "transportation",
            "essentials",
        ]

    def test_table_row_source_counts(self, constants: Constants, base_inputs: dict):
        assert get_unsourced_categories(base_inputs, constants) == ["housing", "transportation"]

    def test_scalar_sources(self, constants: Constants):
        inputs = {
            "income_source_url": "https://example.com/job",
            "utilities_source_url": "https://example.com/utilities",
            "transport_mode": "transit",
            "transit_source_url": "https://example.com/fares",
        }
        assert get_unsourced_categories(inputs, constants) == ["essentials"]

    def test_vehicle_price_source(self, constants: Constants):
        inputs = {"transport_mode": "car", "vehicle_price_source_url": "https://example.com/listing"}
        assert "transportation" not in get_unsourced_categories(inputs, constants)

    def test_transport_source_follows_mode(self, constants: Constants):
        vehicle_source = {"vehicle_price_source_url": "https://example.com/listing"}
        transit_source = {"transit_source_url": "https://example.com/fares"}

        assert "transportation" in get_unsourced_categories(
            dict(vehicle_source, transport_mode="transit"), constants
        )
        assert "transportation" in get_unsourced_categories(
            dict(transit_source, transport_mode="truck"), constants
        )

    def test_schema_declared_source_field(self, schema: AssignmentSchema, constants: Constants):
        inputs = {"transport_mode": "car", "vehicle_listing_url": "https://example.com/listing"}

        assert "transportation" in get_unsourced_categories(inputs, constants)
        assert "transportation" not in get_unsourced_categories(inputs, constants, schema)

    def test_schema_source_for_waived_field_is_ignored(self, schema: AssignmentSchema, constants: Constants):
        inputs = {"transport_mode": "transit", "vehicle_listing_url": "https://example.com/listing"}
        assert "transportation" in get_unsourced_categories(inputs, constants, schema)

    def test_schema_source_fields_by_section(self, schema: AssignmentSchema):
        assert schema_source_fields(schema, SourceCategory.TRANSPORTATION) == (
            "transit_source_url",
            "vehicle_listing_url",
        )
        assert schema_source_fields(schema, SourceCategory.HOUSING) == ()


class TestReadinessEvaluator:
    """Flag thresholds and fix-next ordering."""

    def test_empty_worksheet_fix_next(self, schema: AssignmentSchema, constants: Constants):
        flags = compute_readiness_flags(schema, make_submission({}, constants), [], constants)

        assert flags.fix_next == [
            "Enter: Income mode",
            "Enter: Net pay per cheque",
            "Enter: Paycheques per month",
            "Enter: Housing option",
            "Enter: Monthly rent",
            "Add rental ad URL evidence.",
            "Add vehicle ad URL evidence.",
            "Add source links for: income, housing, transportation, essentials.",
            FRAGILE_BUFFER_MESSAGE,
        ]
        assert flags.is_ready is False
        assert len(flags.missing_required_fields) == 13

    def test_complete_worksheet(self, schema: AssignmentSchema, constants: Constants, base_inputs: dict):
        submission = make_submission(base_inputs, constants, REFLECTIONS)
        flags = compute_readiness_flags(schema, submission, EVIDENCE, constants)

        assert flags.is_ready is True
        assert flags.affordability_fail is True
        assert flags.deficit is False
        assert flags.fragile_buffer is False
        assert flags.low_vehicle_price is False
        assert flags.surplus_or_deficit_amount == Decimal("183.88")
        assert flags.fix_next == [
            "Add source links for: housing, transportation.",
            AFFORDABILITY_MESSAGE,
        ]

    def test_affordability_threshold(self, schema: AssignmentSchema, constants: Constants):
        derived = DerivedTotals(
            net_monthly_income=Decimal("3000.00"),
            housing=HousingTotals(rent=Decimal("1100.00"), utilities=Decimal("170.00")),
            total_monthly_expenses=Decimal("1270.00"),
            monthly_surplus=Decimal("1730.00"),
        )
        flags = compute_readiness_flags(schema, make_submission({}, constants, derived=derived), [], constants)

        assert flags.affordability_fail is True
        assert AFFORDABILITY_MESSAGE in flags.fix_next

    def test_affordability_at_limit_passes(self, schema: AssignmentSchema, constants: Constants):
        derived = DerivedTotals(
            net_monthly_income=Decimal("3000.00"),
            housing=HousingTotals(rent=Decimal("900.00"), utilities=Decimal("150.00")),
            total_monthly_expenses=Decimal("1050.00"),
            monthly_surplus=Decimal("1950.00"),
        )
        flags = compute_readiness_flags(schema, make_submission({}, constants, derived=derived), [], constants)

        assert flags.affordability_fail is False

    def test_deficit_suppresses_buffer_message(self, schema: AssignmentSchema, constants: Constants):
        derived = DerivedTotals(
            net_monthly_income=Decimal("2000.00"),
            total_monthly_expenses=Decimal("2000.01"),
            monthly_surplus=Decimal("-0.01"),
        )
        flags = compute_readiness_flags(schema, make_submission({}, constants, derived=derived), [], constants)

        assert flags.deficit is True
        assert flags.fragile_buffer is True
        assert flags.surplus_or_deficit_amount == Decimal("-0.01")
        assert flags.fix_next[-1] == DEFICIT_MESSAGE
        assert FRAGILE_BUFFER_MESSAGE not in flags.fix_next

    def test_fragile_buffer(self, schema: AssignmentSchema, constants: Constants):
        derived = DerivedTotals(
            net_monthly_income=Decimal("2000.00"),
            total_monthly_expenses=Decimal("1950.00"),
            monthly_surplus=Decimal("50.00"),
        )
        flags = compute_readiness_flags(schema, make_submission({}, constants, derived=derived), [], constants)

        assert flags.deficit is False
        assert flags.fragile_buffer is True
        assert flags.fix_next[-1] == FRAGILE_BUFFER_MESSAGE

    def test_buffer_at_threshold_is_not_fragile(self, schema: AssignmentSchema, constants: Constants):
        derived = DerivedTotals(
            net_monthly_income=Decimal("2000.00"),
            total_monthly_expenses=Decimal("1900.00"),
            monthly_surplus=Decimal("100.00"),
        )
        flags = compute_readiness_flags(schema, make_submission({}, constants, derived=derived), [], constants)

        assert flags.fragile_buffer is False

    def test_low_vehicle_price(self, schema: AssignmentSchema, constants: Constants):
        submission = make_submission({"transport_mode": "car", "vehicle_price": 2500}, constants)
        flags = compute_readiness_flags(schema, submission, [], constants)

        assert flags.low_vehicle_price is True
        assert (
            "Vehicle price is below $3,000.00. Check that the listing is realistic."
            in flags.fix_next
        )

    def test_low_vehicle_price_ignored_for_transit(self, schema: AssignmentSchema, constants: Constants):
        submission = make_submission({"transport_mode": "transit", "vehicle_price": 2500}, constants)
        assert compute_readiness_flags(schema, submission, [], constants).low_vehicle_price is False

    def test_fix_limit_is_configurable(self, schema: AssignmentSchema, constants: Constants):
        evaluator = ReadinessEvaluator(EngineConfig(missing_field_fix_limit=2))
        flags = evaluator.evaluate(schema, make_submission({}, constants), [], constants)

        assert [item for item in flags.fix_next if item.startswith("Enter: ")] == [
            "Enter: Income mode",
            "Enter: Net pay per cheque",
        ]
        assert len(flags.missing_required_fields) == 13

    def test_generic_evidence_message(self, schema_document: dict, constants: Constants):
        schema_document["evidence_requirements"][2]["required"] = True
        schema = load_schema(schema_document)
        flags = compute_readiness_flags(schema, make_submission({}, constants), EVIDENCE, constants)

        assert flags.missing_required_evidence == ["other"]
        assert "Add evidence: Other evidence." in flags.fix_next

    def test_accepts_plain_documents(self, schema_document: dict, constants: Constants, base_inputs: dict):
        submission = make_submission(base_inputs, constants, REFLECTIONS)
        flags = compute_readiness_flags(
            schema_document,
            submission.model_dump(mode="json"),
            [item.model_dump() for item in EVIDENCE],
            constants,
        )

        assert flags.is_ready is True

    def test_invalid_submission_raises(self, schema: AssignmentSchema, constants: Constants):
        with pytest.raises(ValidationError) as exc_info:
            compute_readiness_flags(schema, {"id": "sub-1"}, [], constants)

        assert exc_info.value.details["field"] == "derived"

    def test_invalid_evidence_raises(self, schema: AssignmentSchema, constants: Constants, base_inputs: dict):
        submission = make_submission(base_inputs, constants, REFLECTIONS)

        with pytest.raises(ValidationError) as exc_info:
            compute_readiness_flags(schema, submission, [{"type": "rental_ad"}], constants)

        assert exc_info.value.details["field"] == "id"


class TestEnvironmentIsolation:
    """Module-level entry points use field defaults, not the process environment."""

    @pytest.fixture
    def hostile_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path):
        monkeypatch.setenv("MOVEOUT_LOG_LEVEL", "verbose")
        monkeypatch.setenv("MOVEOUT_MISSING_FIELD_FIX_LIMIT", "not-a-number")
        (tmp_path / ".env").write_text("MOVEOUT_MISSING_FIELD_FIX_LIMIT=1\n")
        monkeypatch.chdir(tmp_path)

    def test_readiness_flags_ignore_environment(
        self, schema: AssignmentSchema, constants: Constants, hostile_environment
    ):
        flags = compute_readiness_flags(schema, make_submission({}, constants), [], constants)

        assert len([item for item in flags.fix_next if item.startswith("Enter: ")]) == 5

    def test_explicit_config_still_reads_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path):
        monkeypatch.delenv("MOVEOUT_MISSING_FIELD_FIX_LIMIT", raising=False)
        (tmp_path / ".env").write_text("MOVEOUT_MISSING_FIELD_FIX_LIMIT=1\n")
        monkeypatch.chdir(tmp_path)

        assert EngineConfig().missing_field_fix_limit == 1

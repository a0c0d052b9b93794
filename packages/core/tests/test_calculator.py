"""Tests for the monthly budget calculator."""

import copy
import json
from decimal import Decimal

import pytest

from moveout_core import BudgetCalculator, ConfigurationError, DerivedTotals, compute_budget
from moveout_core.config import EngineConfig
from moveout_core.models import Constants
from moveout_core.standards import DEFAULT_CONSTANTS


class TestBudgetCalculator:
    """Test suite for BudgetCalculator."""

    def test_calculate_returns_derived_totals(self, base_inputs: dict, constants: Constants):
        """Calculator should return a DerivedTotals snapshot."""
        result = BudgetCalculator().calculate(base_inputs, constants)

        assert isinstance(result, DerivedTotals)
        assert result.gross_monthly_income == Decimal("3049.76")
        assert result.net_monthly_income == Decimal("2421.20")

    def test_worksheet_totals(self, base_inputs: dict, constants: Constants):
        result = compute_budget(base_inputs, constants)

        assert result.housing.total == Decimal("1370.00")
        assert result.housing.affordability_ratio == Decimal("0.5245")
        assert result.transportation.total == Decimal("568.94")
        assert result.living_expenses.total == Decimal("298.38")
        assert result.total_monthly_expenses == Decimal("2237.32")
        assert result.monthly_surplus == Decimal("183.88")

    def test_total_is_sum_of_categories(self, base_inputs: dict, constants: Constants):
        result = compute_budget(base_inputs, constants)

        assert result.total_monthly_expenses == (
            result.housing.total + result.transportation.total + result.living_expenses.total
        )
        assert result.monthly_surplus == result.net_monthly_income - result.total_monthly_expenses

    def test_idempotent(self, base_inputs: dict, constants: Constants):
        first = compute_budget(base_inputs, constants)
        second = compute_budget(base_inputs, constants)

        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_accepts_constants_dict(self, base_inputs: dict, constants: Constants):
        from_dict = compute_budget(base_inputs, copy.deepcopy(DEFAULT_CONSTANTS))
        assert from_dict == compute_budget(base_inputs, constants)

    def test_empty_inputs(self, constants: Constants):
        result = compute_budget({}, constants)

        assert result.net_monthly_income == Decimal("0.00")
        assert result.total_monthly_expenses == Decimal("0.00")
        assert result.monthly_surplus == Decimal("0.00")

    def test_malformed_table_equals_absent(self, base_inputs: dict, constants: Constants):
        broken = dict(base_inputs, clothing_table_annual="{{bad", food_table_weekly="[")
        absent = {
            k: v for k, v in base_inputs.items()
            if k not in ("clothing_table_annual", "food_table_weekly")
        }
        assert compute_budget(broken, constants) == compute_budget(absent, constants)

    def test_deficit_budget(self, constants: Constants):
        inputs = {
            "income_mode": "net_paycheque",
            "net_pay_per_cheque": 800,
            "paycheques_per_month": 2,
            "rent_monthly": 1400,
            "utilities_monthly": 150,
            "transport_mode": "transit",
        }
        result = compute_budget(inputs, constants)

        assert result.total_monthly_expenses == Decimal("1655.00")
        assert result.monthly_surplus == Decimal("-55.00")

    @pytest.mark.parametrize(
        "inputs",
        [
            {"income_mode": "net_paycheque", "net_pay_per_cheque": 1234.56, "paycheques_per_month": 2.17},
            {"hourly_wage": 16.45, "hours_per_week": 37.5, "transport_mode": "truck", "vehicle_price": 27500.01},
            {"transport_mode": "transit", "rent_monthly": 1020.005, "groceries_monthly": 287.333},
            {
                "rent_monthly": "875.255",
                "misc_table_monthly": json.dumps([{"monthly_total": 12.345}, {"annual_total": 100}]),
                "health_hygiene_table_annual": json.dumps([{"quantity_per_year": 3, "average_cost": 7.77}]),
            },
        ],
    )
    def test_additivity_holds_for_awkward_values(self, inputs: dict, constants: Constants):
        result = compute_budget(inputs, constants)

        assert result.total_monthly_expenses == (
            result.housing.total + result.transportation.total + result.living_expenses.total
        )
        assert result.monthly_surplus == result.net_monthly_income - result.total_monthly_expenses

    def test_step_logging_does_not_change_result(self, base_inputs: dict, constants: Constants):
        verbose = BudgetCalculator(EngineConfig(log_calculation_steps=True))
        assert verbose.calculate(base_inputs, constants) == compute_budget(base_inputs, constants)

    def test_missing_constants_section_raises(self, base_inputs: dict):
        document = copy.deepcopy(DEFAULT_CONSTANTS)
        del document["transportation"]

        with pytest.raises(ConfigurationError) as exc_info:
            compute_budget(base_inputs, document)

        assert exc_info.value.config_key == "transportation"

    def test_large_amounts_do_not_raise(self, constants: Constants):
        result = compute_budget({"rent_monthly": 1e30}, constants)

        assert result.housing.rent == Decimal("1e30")
        assert result.total_monthly_expenses == (
            result.housing.total + result.transportation.total + result.living_expenses.total
        )

    def test_amount_beyond_double_range_is_zero(self, constants: Constants):
        result = compute_budget({"rent_monthly": "1e400"}, constants)
        assert result.housing.rent == Decimal("0")

    def test_ignores_environment(self, base_inputs: dict, constants: Constants, monkeypatch: pytest.MonkeyPatch, tmp_path):
        expected = compute_budget(base_inputs, constants)
        monkeypatch.setenv("MOVEOUT_LOG_LEVEL", "verbose")
        monkeypatch.setenv("MOVEOUT_LOG_CALCULATION_STEPS", "not-a-bool")
        (tmp_path / ".env").write_text("MOVEOUT_MISSING_FIELD_FIX_LIMIT=zero\n")
        monkeypatch.chdir(tmp_path)

        assert compute_budget(base_inputs, constants) == expected

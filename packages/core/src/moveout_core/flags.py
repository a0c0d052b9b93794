"""Readiness flags: what is missing, what is risky, and what to fix next.

The evaluator reads the assignment schema to learn which fields and
evidence categories are required, then layers mode-specific requirements
on top. Each income and transport mode has its own requirements
evaluator; the registries below are keyed by every member of the mode
enums so adding a mode without an evaluator fails loudly.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .currency import round_currency
from .documents import load_constants, load_schema
from .exceptions import ValidationError
from .inputs import (
    InputMap,
    has_value,
    hourly_source_present,
    number_input,
    resolve_income_mode,
    resolve_transport_mode,
    string_input,
)
from .living_expenses import ESSENTIALS_TABLE_FIELDS
from .models import (
    AssignmentField,
    AssignmentSchema,
    Constants,
    EvidenceItem,
    FieldRole,
    FieldType,
    IncomeMode,
    ReadinessFlags,
    SourceCategory,
    Submission,
    TransportMode,
)
from .tables import FOOD_TABLE_FIELD, parse_expense_table, parse_food_table

logger = structlog.get_logger()

RecordT = TypeVar("RecordT", Submission, EvidenceItem)


# =============================================================================
# MODE-DEPENDENT REQUIREMENTS
# =============================================================================

VEHICLE_SOURCE_FIELD = "vehicle_price_source_url"
TRANSIT_SOURCE_FIELD = "transit_source_url"

HOURLY_INCOME_FIELDS = ("hourly_wage", "hours_per_week")
NET_PAYCHEQUE_FIELDS = ("net_pay_per_cheque", "paycheques_per_month")
VEHICLE_FIELDS = (
    "vehicle_price",
    "vehicle_down_payment_amount",
    "vehicle_term_months",
    "vehicle_apr_percent",
    "km_per_month",
    "km_per_week",
    "fuel_economy_l_per_100km",
    "gas_price_per_litre",
    "maintenance_monthly",
    VEHICLE_SOURCE_FIELD,
)
TRANSIT_FIELDS = ("transit_monthly_pass", TRANSIT_SOURCE_FIELD)


@dataclass(frozen=True)
class ModeRequirements:
    """Fields a mode adds to, or removes from, the schema's required set.

    Attributes:
        required: Field ids required in this mode (when defined in the schema)
        waived: Field ids not required in this mode even if the schema says so
        satisfiers: Custom presence checks for specific field ids
    """
    required: tuple[str, ...] = ()
    waived: frozenset[str] = frozenset()
    satisfiers: Mapping[str, Callable[[InputMap], bool]] = field(default_factory=dict)


def _transit_pass_satisfied(inputs: InputMap) -> bool:
    """A transit pass is covered by a positive amount or a fare source link."""
    return (
        number_input(inputs, "transit_monthly_pass") > 0
        or bool(string_input(inputs, TRANSIT_SOURCE_FIELD).strip())
    )


def _hourly_requirements(inputs: InputMap) -> ModeRequirements:
    return ModeRequirements(
        required=HOURLY_INCOME_FIELDS,
        waived=frozenset(NET_PAYCHEQUE_FIELDS),
    )


def _net_paycheque_requirements(inputs: InputMap) -> ModeRequirements:
    if hourly_source_present(inputs):
        return _hourly_requirements(inputs)
    return ModeRequirements(
        required=NET_PAYCHEQUE_FIELDS,
        waived=frozenset(HOURLY_INCOME_FIELDS),
    )


def _vehicle_requirements(inputs: InputMap) -> ModeRequirements:
    return ModeRequirements(
        required=("vehicle_price",),
        waived=frozenset(TRANSIT_FIELDS),
    )


def _transit_requirements(inputs: InputMap) -> ModeRequirements:
    return ModeRequirements(
        required=("transit_monthly_pass",),
        waived=frozenset(VEHICLE_FIELDS),
        satisfiers={"transit_monthly_pass": _transit_pass_satisfied},
    )


INCOME_REQUIREMENTS: dict[IncomeMode, Callable[[InputMap], ModeRequirements]] = {
    IncomeMode.HOURLY_ESTIMATE: _hourly_requirements,
    IncomeMode.NET_PAYCHEQUE: _net_paycheque_requirements,
}

TRANSPORT_REQUIREMENTS: dict[TransportMode, Callable[[InputMap], ModeRequirements]] = {
    TransportMode.CAR: _vehicle_requirements,
    TransportMode.TRUCK: _vehicle_requirements,
    TransportMode.TRANSIT: _transit_requirements,
}


def mode_requirements(inputs: InputMap, constants: Constants) -> ModeRequirements:
    """Combined requirements of the active income and transport modes."""
    parts = [
        INCOME_REQUIREMENTS[resolve_income_mode(inputs, constants)](inputs),
        TRANSPORT_REQUIREMENTS[resolve_transport_mode(inputs)](inputs),
    ]
    satisfiers: dict[str, Callable[[InputMap], bool]] = {}
    for part in parts:
        satisfiers.update(part.satisfiers)
    return ModeRequirements(
        required=tuple(field_id for part in parts for field_id in part.required),
        waived=frozenset().union(*(part.waived for part in parts)),
        satisfiers=satisfiers,
    )


# =============================================================================
# SOURCE LINKS
# =============================================================================

SOURCE_URL_FIELDS: dict[SourceCategory, tuple[str, ...]] = {
    SourceCategory.INCOME: ("income_source_url",),
    SourceCategory.HOUSING: ("rent_source_url", "utilities_source_url"),
}

TRANSPORT_SOURCE_FIELDS: dict[TransportMode, tuple[str, ...]] = {
    TransportMode.CAR: (VEHICLE_SOURCE_FIELD,),
    TransportMode.TRUCK: (VEHICLE_SOURCE_FIELD,),
    TransportMode.TRANSIT: (TRANSIT_SOURCE_FIELD,),
}

SOURCE_TABLE_FIELDS: dict[SourceCategory, tuple[str, ...]] = {
    SourceCategory.ESSENTIALS: ESSENTIALS_TABLE_FIELDS,
}


def schema_source_fields(
    schema: AssignmentSchema,
    category: SourceCategory,
    waived: frozenset[str] = frozenset(),
) -> tuple[str, ...]:
    """Fields whose ``ui.source_for_field_id`` targets a field in ``category``'s section.

    Sources for waived targets (vehicle fields in transit mode, for example)
    are skipped.
    """
    found: list[str] = []
    for field_def in schema.fields:
        target_id = field_def.ui.source_for_field_id if field_def.ui else None
        if not target_id or target_id in waived or field_def.id in waived:
            continue
        target = schema.get_field(target_id)
        if target is not None and target.section_id == category.value:
            found.append(field_def.id)
    return tuple(found)


def source_url_fields(
    category: SourceCategory,
    inputs: InputMap,
    constants: Constants,
    schema: Optional[AssignmentSchema] = None,
) -> tuple[str, ...]:
    """Scalar source-link fields that count for ``category`` in the active modes."""
    if category is SourceCategory.TRANSPORTATION:
        fields = TRANSPORT_SOURCE_FIELDS[resolve_transport_mode(inputs)]
    else:
        fields = SOURCE_URL_FIELDS.get(category, ())
    if schema is None:
        return fields
    waived = mode_requirements(inputs, constants).waived
    extra = tuple(
        field_id for field_id in schema_source_fields(schema, category, waived)
        if field_id not in fields
    )
    return fields + extra


def _table_rows_have_source(inputs: InputMap, constants: Constants, field_id: str) -> bool:
    if field_id == FOOD_TABLE_FIELD:
        rows = parse_food_table(inputs, constants).rows
    else:
        rows = parse_expense_table(inputs, field_id).rows
    return any(row.source_url.strip() for row in rows)


def get_unsourced_categories(
    inputs: InputMap,
    constants: Constants,
    schema: Optional[AssignmentSchema] = None,
) -> list[str]:
    """Categories where no contributing field carries a source URL.

    Without a schema only the built-in source fields are checked; with one,
    any url field declared as the source of a field in the category's
    section also counts.
    """
    unsourced: list[str] = []
    for category in SourceCategory:
        scalar_sourced = any(
            string_input(inputs, field_id).strip()
            for field_id in source_url_fields(category, inputs, constants, schema)
        )
        table_sourced = any(
            _table_rows_have_source(inputs, constants, field_id)
            for field_id in SOURCE_TABLE_FIELDS.get(category, ())
        )
        if not (scalar_sourced or table_sourced):
            unsourced.append(category.value)
    return unsourced


# =============================================================================
# MISSING FIELDS AND EVIDENCE
# =============================================================================

def _table_has_amount(field_def: AssignmentField, inputs: InputMap, constants: Constants) -> bool:
    if field_def.type is FieldType.FOOD_TABLE:
        rows = parse_food_table(inputs, constants, field_def.id).rows
        return any(row.estimated_cost > 0 for row in rows)
    rows = parse_expense_table(inputs, field_def.id).rows
    return any(row.has_positive_amount for row in rows)


def _field_is_present(
    field_def: AssignmentField,
    submission: Submission,
    constants: Constants,
    requirements: ModeRequirements,
) -> bool:
    if field_def.role is FieldRole.REFLECTION:
        reflection = submission.reflections.get(field_def.id)
        return isinstance(reflection, str) and bool(reflection.strip())

    satisfier = requirements.satisfiers.get(field_def.id)
    if satisfier is not None:
        return satisfier(submission.inputs)

    if field_def.type.is_table:
        return _table_has_amount(field_def, submission.inputs, constants)

    return has_value(submission.inputs.get(field_def.id))


def get_missing_field_ids(
    schema: AssignmentSchema,
    submission: Submission,
    constants: Constants,
) -> list[str]:
    """Required field ids that are not filled in, in schema order."""
    requirements = mode_requirements(submission.inputs, constants)
    mode_required = set(requirements.required)

    missing: list[str] = []
    for field_def in schema.fields:
        if field_def.role is FieldRole.DERIVED:
            continue
        required = (
            (field_def.required and field_def.id not in requirements.waived)
            or field_def.id in mode_required
        )
        if required and not _field_is_present(field_def, submission, constants, requirements):
            missing.append(field_def.id)
    return missing


def get_missing_evidence(schema: AssignmentSchema, evidence: Iterable[EvidenceItem]) -> list[str]:
    """Required evidence categories with no usable URL or file."""
    items = list(evidence)
    missing: list[str] = []
    for requirement in schema.evidence_requirements:
        if not requirement.required:
            continue
        if not any(item.type == requirement.id and item.is_usable for item in items):
            missing.append(requirement.id)
    return missing


# =============================================================================
# FIX-NEXT MESSAGES
# =============================================================================

EVIDENCE_MESSAGES = {
    "rental_ad": "Add rental ad URL evidence.",
    "vehicle_ad": "Add vehicle ad URL evidence.",
}
AFFORDABILITY_MESSAGE = "Housing is above the affordability target. Revisit rent or utilities."
DEFICIT_MESSAGE = "You are spending more than you earn. Reduce costs or increase income."
FRAGILE_BUFFER_MESSAGE = "Your budget has a low buffer. Add savings room if possible."


def _evidence_message(schema: AssignmentSchema, evidence_id: str) -> str:
    if evidence_id in EVIDENCE_MESSAGES:
        return EVIDENCE_MESSAGES[evidence_id]
    label = next(
        (req.label for req in schema.evidence_requirements if req.id == evidence_id and req.label),
        evidence_id,
    )
    return f"Add evidence: {label}."


def _low_vehicle_price_message(minimum: Decimal) -> str:
    return f"Vehicle price is below ${minimum:,.2f}. Check that the listing is realistic."


def _coerce_record(model: type[RecordT], value: Union[RecordT, dict[str, Any]], constraint: str) -> RecordT:
    """Validate a plain-dict record, raising the engine's ``ValidationError``."""
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except PydanticValidationError as e:
        location = ".".join(str(part) for part in e.errors()[0].get("loc", ())) if e.errors() else ""
        raise ValidationError(
            f"{model.__name__} failed validation",
            field=location or None,
            constraint=constraint,
        ) from e


class ReadinessEvaluator:
    """
    Evaluate readiness flags for a submission.

    Missing fields, missing evidence, unsourced categories and the
    affordability/deficit/buffer/vehicle-price warnings are computed from
    the submission's inputs and its already-derived totals.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_ENGINE_CONFIG

    def evaluate(
        self,
        schema: Union[AssignmentSchema, dict[str, Any]],
        submission: Union[Submission, dict[str, Any]],
        evidence: Iterable[Union[EvidenceItem, dict[str, Any]]],
        constants: Union[Constants, dict[str, Any]],
    ) -> ReadinessFlags:
        """
        Compute readiness flags.

        Args:
            schema: Assignment schema (model or plain dict)
            submission: Submission with inputs, reflections and derived totals
            evidence: Stored evidence records
            constants: Constants document (model or plain dict)

        Returns:
            ReadinessFlags with an ordered fix-next list
        """
        schema = load_schema(schema)
        constants = load_constants(constants)
        submission = _coerce_record(
            Submission, submission, "Submission with inputs, reflections and derived totals"
        )
        evidence_items = [
            _coerce_record(EvidenceItem, item, "Evidence record with id, type, url and file_ids")
            for item in evidence
        ]

        derived = submission.derived
        thresholds = constants.thresholds

        missing_fields = get_missing_field_ids(schema, submission, constants)
        missing_evidence = get_missing_evidence(schema, evidence_items)
        unsourced = get_unsourced_categories(submission.inputs, constants, schema)

        rent_plus_utilities = derived.housing.rent + derived.housing.utilities
        affordability_limit = (
            thresholds.affordability_housing_fraction_of_net.value * derived.net_monthly_income
        )
        affordability_fail = rent_plus_utilities > affordability_limit
        deficit = derived.total_monthly_expenses > derived.net_monthly_income
        surplus = round_currency(derived.monthly_surplus)
        fragile_buffer = surplus < thresholds.buffer_warning_threshold.value

        minimum_price = constants.transportation.minimum_vehicle_price.value
        vehicle_price = derived.transportation.vehicle_price
        low_vehicle_price = (
            derived.transportation.mode.uses_vehicle
            and 0 < vehicle_price < minimum_price
        )

        fix_next: list[str] = []
        for field_id in missing_fields[: self.config.missing_field_fix_limit]:
            fix_next.append(f"Enter: {schema.label_for(field_id)}")
        for evidence_id in missing_evidence:
            fix_next.append(_evidence_message(schema, evidence_id))
        if unsourced:
            fix_next.append(f"Add source links for: {', '.join(unsourced)}.")
        if low_vehicle_price:
            fix_next.append(_low_vehicle_price_message(minimum_price))
        if affordability_fail:
            fix_next.append(AFFORDABILITY_MESSAGE)
        if deficit:
            fix_next.append(DEFICIT_MESSAGE)
        elif fragile_buffer:
            fix_next.append(FRAGILE_BUFFER_MESSAGE)

        logger.debug(
            "readiness_flags_computed",
            missing_fields=len(missing_fields),
            missing_evidence=len(missing_evidence),
            affordability_fail=affordability_fail,
            deficit=deficit,
            fragile_buffer=fragile_buffer,
        )

        return ReadinessFlags(
            missing_required_fields=missing_fields,
            missing_required_evidence=missing_evidence,
            affordability_fail=affordability_fail,
            deficit=deficit,
            fragile_buffer=fragile_buffer,
            low_vehicle_price=low_vehicle_price,
            unsourced_categories=unsourced,
            surplus_or_deficit_amount=surplus,
            fix_next=fix_next,
        )


def compute_readiness_flags(
    schema: Union[AssignmentSchema, dict[str, Any]],
    submission: Union[Submission, dict[str, Any]],
    evidence: Iterable[Union[EvidenceItem, dict[str, Any]]],
    constants: Union[Constants, dict[str, Any]],
    config: Optional[EngineConfig] = None,
) -> ReadinessFlags:
    """Compute readiness flags; ``config`` defaults to ``DEFAULT_ENGINE_CONFIG``."""
    return ReadinessEvaluator(config).evaluate(schema, submission, evidence, constants)

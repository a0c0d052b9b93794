"""Pinned alternatives for side-by-side comparison.

A student can pin the housing or transportation option they are currently
considering. The pin stores a snapshot of the schema-configured fields and
the warning flags at the time of pinning, so later edits do not change it.
At most one pin per category is kept.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

import structlog

from .derived_lookup import lookup_derived_value
from .exceptions import PinningError
from .models import AssignmentSchema, FieldRole, PinCategory, PinnedChoice, Submission

logger = structlog.get_logger()

EVIDENCE_TYPE_BY_CATEGORY = {
    PinCategory.HOUSING: "rental_ad",
    PinCategory.TRANSPORTATION: "vehicle_ad",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_field_value(field_id: str, schema: AssignmentSchema, submission: Submission) -> Any:
    """Current value of a schema field: derived, reflection or raw input."""
    field_def = schema.get_field(field_id)
    if field_def is None:
        return None
    if field_def.role is FieldRole.DERIVED:
        return lookup_derived_value(submission.derived, field_def.compute_key)
    if field_def.role is FieldRole.REFLECTION:
        return submission.reflections.get(field_def.id)
    return submission.inputs.get(field_def.id)


def create_pinned_choice(
    category: PinCategory,
    schema: AssignmentSchema,
    submission: Submission,
    *,
    pin_id: Optional[str] = None,
    pinned_at: Optional[datetime] = None,
) -> PinnedChoice:
    """
    Snapshot the current option for ``category``.

    Args:
        category: Housing or transportation
        schema: Assignment schema with a pinning configuration for the category
        submission: Submission whose derived totals and flags are current
        pin_id: Explicit pin id (default: random UUID)
        pinned_at: Explicit timestamp (default: now, UTC)

    Raises:
        PinningError: If the schema has no pinning config for ``category``
    """
    category = PinCategory(category)
    config = schema.pin_category(category)
    if config is None:
        raise PinningError(
            f'Pinning category "{category.value}" is missing from schema.',
            category=category.value,
        )

    snapshot: dict[str, Any] = {
        field_id: get_field_value(field_id, schema, submission)
        for field_id in config.snapshot_field_ids
    }
    snapshot["affordability_fail"] = submission.flags.affordability_fail
    snapshot["deficit"] = submission.flags.deficit
    snapshot["fragile_buffer"] = submission.flags.fragile_buffer

    label_value = get_field_value(config.label_field_id, schema, submission)
    label = str(label_value) if label_value not in (None, "") else f"{category.value} choice"

    choice = PinnedChoice(
        id=pin_id or str(uuid4()),
        category=category,
        label=label,
        snapshot=snapshot,
        evidence_ids=list(submission.evidence_refs.get(EVIDENCE_TYPE_BY_CATEGORY[category], [])),
        pinned_at=pinned_at or _utc_now(),
    )
    logger.info("pinned_choice_created", category=category.value, pin_id=choice.id)
    return choice


def apply_pinned_choice(submission: Submission, pinned_choice: PinnedChoice) -> Submission:
    """Return a copy of ``submission`` with the pin replacing any of its category."""
    pinned = [item for item in submission.pinned if item.category != pinned_choice.category]
    pinned.append(pinned_choice)
    return submission.model_copy(update={"pinned": pinned, "updated_at": _utc_now()})


def remove_pinned_choice(submission: Submission, category: PinCategory) -> Submission:
    """Return a copy of ``submission`` without a pin for ``category``."""
    category = PinCategory(category)
    pinned = [item for item in submission.pinned if item.category != category]
    return submission.model_copy(update={"pinned": pinned, "updated_at": _utc_now()})


def summarize_pinned_choice(choice: PinnedChoice) -> list[str]:
    """Warnings captured in a pin, for comparison display."""
    warnings: list[str] = []
    if choice.snapshot.get("affordability_fail") is True:
        warnings.append("Affordability warning")
    if choice.snapshot.get("deficit") is True:
        warnings.append("Deficit")
    if choice.snapshot.get("fragile_buffer") is True:
        warnings.append("Low buffer")
    return warnings

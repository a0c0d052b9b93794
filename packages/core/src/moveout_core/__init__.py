"""Moveout Core - Budget computation and readiness evaluation."""

__version__ = "0.1.0"

from .calculator import BudgetCalculator, compute_budget
from .flags import ReadinessEvaluator, compute_readiness_flags
from .documents import load_constants, load_schema
from .standards import get_default_constants, CONSTANTS_VERSION
from .pinning import (
    apply_pinned_choice,
    create_pinned_choice,
    remove_pinned_choice,
    summarize_pinned_choice,
)
from .derived_lookup import lookup_derived_value
from .exceptions import (
    ConfigurationError,
    MoveoutError,
    PinningError,
    ValidationError,
)
from .models import (
    AssignmentSchema,
    Constants,
    DerivedTotals,
    EvidenceItem,
    IncomeMode,
    PinCategory,
    PinnedChoice,
    ReadinessFlags,
    Submission,
    TransportMode,
)

__all__ = [
    "BudgetCalculator",
    "compute_budget",
    "ReadinessEvaluator",
    "compute_readiness_flags",
    "load_constants",
    "load_schema",
    "get_default_constants",
    "CONSTANTS_VERSION",
    "apply_pinned_choice",
    "create_pinned_choice",
    "remove_pinned_choice",
    "summarize_pinned_choice",
    "lookup_derived_value",
    "ConfigurationError",
    "MoveoutError",
    "PinningError",
    "ValidationError",
    "AssignmentSchema",
    "Constants",
    "DerivedTotals",
    "EvidenceItem",
    "IncomeMode",
    "PinCategory",
    "PinnedChoice",
    "ReadinessFlags",
    "Submission",
    "TransportMode",
]

"""Data models for moveout-core.

This package provides the value objects exchanged with the form layer:
- Reference constants (constants.py)
- Assignment schema definitions (schema.py)
- Derived totals, readiness flags and table rows (budget.py)
- Submissions, evidence and pinned alternatives (submission.py)
"""

from moveout_core.models.enums import (
    IncomeMode,
    TransportMode,
    FieldRole,
    FieldType,
    PinCategory,
    SourceCategory,
)
from moveout_core.models.constants import (
    NumericConstant,
    SourcedConstant,
    IncomeConstants,
    DeductionRates,
    Thresholds,
    LoanPaymentPoint,
    LoanPaymentTable,
    OperatingCostPerKm,
    TransportationConstants,
    FoodConstants,
    EconomicSnapshot,
    Constants,
)
from moveout_core.models.schema import (
    TableColumn,
    FieldUi,
    AssignmentField,
    AssignmentSection,
    EvidenceRequirement,
    PinCategoryConfig,
    PinningConfig,
    AssignmentSchema,
)
from moveout_core.models.budget import (
    FoodTableRow,
    ExpenseTableRow,
    DeductionTotals,
    IncomeBreakdown,
    HousingTotals,
    TransportationTotals,
    LivingExpenseTotals,
    DerivedTotals,
    ReadinessFlags,
)
from moveout_core.models.submission import (
    EvidenceItem,
    PinnedChoice,
    StudentInfo,
    Submission,
)

__all__ = [
    # Enumerations
    "IncomeMode",
    "TransportMode",
    "FieldRole",
    "FieldType",
    "PinCategory",
    "SourceCategory",
    # Constants
    "NumericConstant",
    "SourcedConstant",
    "IncomeConstants",
    "DeductionRates",
    "Thresholds",
    "LoanPaymentPoint",
    "LoanPaymentTable",
    "OperatingCostPerKm",
    "TransportationConstants",
    "FoodConstants",
    "EconomicSnapshot",
    "Constants",
    # Schema
    "TableColumn",
    "FieldUi",
    "AssignmentField",
    "AssignmentSection",
    "EvidenceRequirement",
    "PinCategoryConfig",
    "PinningConfig",
    "AssignmentSchema",
    # Budget results
    "FoodTableRow",
    "ExpenseTableRow",
    "DeductionTotals",
    "IncomeBreakdown",
    "HousingTotals",
    "TransportationTotals",
    "LivingExpenseTotals",
    "DerivedTotals",
    "ReadinessFlags",
    # Submission
    "EvidenceItem",
    "PinnedChoice",
    "StudentInfo",
    "Submission",
]

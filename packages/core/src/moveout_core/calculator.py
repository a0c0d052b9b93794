"""Monthly budget composition.

``BudgetCalculator`` resolves income once, runs the housing,
transportation and living-expense aggregators, and combines their totals
into a single ``DerivedTotals`` snapshot. The only value passed between
components is net monthly income, which the housing affordability ratio
needs.
"""

from typing import Any, Optional, Union

import structlog

from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .currency import subtract_currency, sum_currency
from .documents import load_constants
from .housing import compute_housing
from .income import resolve_income
from .inputs import InputMap
from .living_expenses import compute_living_expenses
from .models import Constants, DerivedTotals
from .transportation import compute_transportation

logger = structlog.get_logger()


class BudgetCalculator:
    """
    Compute a complete monthly budget from raw worksheet inputs.

    The calculator holds no state between calls; the same inputs and
    constants always produce an equal ``DerivedTotals``.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize calculator.

        Args:
            config: Engine configuration (default: field defaults, no environment)
        """
        self.config = config or DEFAULT_ENGINE_CONFIG

    def _log_step(self, step: str, **values: Any) -> None:
        if self.config.log_calculation_steps:
            logger.debug("budget_calculation_step", step=step, **values)

    def calculate(self, inputs: InputMap, constants: Union[Constants, dict[str, Any]]) -> DerivedTotals:
        """
        Compute derived totals for one recompute cycle.

        Args:
            inputs: Raw field values keyed by field id
            constants: Constants document (model or plain dict)

        Returns:
            DerivedTotals snapshot

        Raises:
            ConfigurationError: If the constants document is unusable
        """
        constants = load_constants(constants)

        # Step 1: Income
        income = resolve_income(inputs, constants)
        self._log_step(
            "income",
            mode=income.mode.value,
            gross=str(income.gross_monthly_income),
            net=str(income.net_monthly_income),
            deductions=str(income.deductions.total),
        )

        # Step 2: Category aggregators
        housing = compute_housing(inputs, income.net_monthly_income)
        self._log_step(
            "housing",
            total=str(housing.total),
            affordability_ratio=str(housing.affordability_ratio),
        )

        transportation = compute_transportation(inputs, constants)
        self._log_step(
            "transportation",
            mode=transportation.mode.value,
            loan_payment=str(transportation.loan_payment),
            total=str(transportation.total),
        )

        living_expenses = compute_living_expenses(inputs, constants)
        self._log_step("living_expenses", total=str(living_expenses.total))

        # Step 3: Grand total and surplus
        total_expenses = sum_currency([housing.total, transportation.total, living_expenses.total])
        surplus = subtract_currency(income.net_monthly_income, total_expenses)
        self._log_step(
            "monthly_surplus",
            input=f"{income.net_monthly_income} - {total_expenses}",
            output=str(surplus),
        )

        return DerivedTotals(
            gross_monthly_income=income.gross_monthly_income,
            net_monthly_income=income.net_monthly_income,
            deductions=income.deductions,
            housing=housing,
            transportation=transportation,
            living_expenses=living_expenses,
            total_monthly_expenses=total_expenses,
            monthly_surplus=surplus,
        )


def compute_budget(
    inputs: InputMap,
    constants: Union[Constants, dict[str, Any]],
    config: Optional[EngineConfig] = None,
) -> DerivedTotals:
    """Compute derived totals; ``config`` defaults to ``DEFAULT_ENGINE_CONFIG``."""
    return BudgetCalculator(config).calculate(inputs, constants)

"""Map schema ``compute_key``s onto values in a ``DerivedTotals`` snapshot."""

from decimal import Decimal
from typing import Callable, Optional, Union

from .models import DerivedTotals

DERIVED_VALUE_GETTERS: dict[str, Callable[[DerivedTotals], Decimal]] = {
    "gross_monthly_income": lambda d: d.gross_monthly_income,
    "net_monthly_income": lambda d: d.net_monthly_income,
    "housing_monthly_total": lambda d: d.housing.total,
    "housing_affordability_ratio": lambda d: d.housing.affordability_ratio,
    "transport_loan_payment_monthly": lambda d: d.transportation.loan_payment,
    "transport_fuel_monthly": lambda d: d.transportation.fuel_cost,
    "transport_operating_monthly": lambda d: d.transportation.operating_cost,
    "transport_monthly_total": lambda d: d.transportation.total,
    "groceries_weekly_total": lambda d: d.living_expenses.groceries_weekly,
    "groceries_monthly": lambda d: d.living_expenses.groceries,
    "clothing_monthly_derived": lambda d: d.living_expenses.clothing,
    "health_hygiene_monthly_derived": lambda d: d.living_expenses.health_hygiene,
    "recreation_monthly_derived": lambda d: d.living_expenses.recreation,
    "misc_monthly_derived": lambda d: d.living_expenses.misc,
    "essentials_total": lambda d: d.living_expenses.total,
    "total_monthly_expenses": lambda d: d.total_monthly_expenses,
    "monthly_surplus": lambda d: d.monthly_surplus,
}


def lookup_derived_value(derived: DerivedTotals, compute_key: Optional[str]) -> Union[Decimal, str]:
    """Value for a derived field, or ``""`` for an empty or unknown key."""
    if not compute_key:
        return ""
    getter = DERIVED_VALUE_GETTERS.get(compute_key)
    if getter is None:
        return ""
    return getter(derived)

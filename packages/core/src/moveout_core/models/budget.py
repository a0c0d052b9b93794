"""Derived budget totals, readiness flags and parsed table rows.

Every monetary field is a ``Decimal`` already rounded to the cent. The
models are plain value objects: the engine builds a fresh ``DerivedTotals``
and ``ReadinessFlags`` on every recompute and never patches one in place.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from moveout_core.models.enums import IncomeMode, TransportMode

_ZERO = Decimal("0.00")


# =============================================================================
# PARSED TABLE ROWS
# =============================================================================

class FoodTableRow(BaseModel):
    """One line of the weekly grocery plan."""
    id: str
    item: str = ""
    planned_purchase: str = ""
    estimated_cost: Decimal = _ZERO
    source_url: str = ""


class ExpenseTableRow(BaseModel):
    """One line of an annual or monthly expense table.

    Annual tables fill ``quantity_per_year`` / ``average_cost`` and/or
    ``annual_total``; monthly tables fill ``monthly_total``. Any of them may
    be left at zero by a partially completed row.
    """
    id: str
    item: str = ""
    quantity_per_year: Decimal = _ZERO
    average_cost: Decimal = _ZERO
    annual_total: Decimal = _ZERO
    monthly_total: Decimal = _ZERO
    source_url: str = ""

    @property
    def computed_annual(self) -> Decimal:
        """Quantity times unit cost, or zero when either is missing."""
        if self.quantity_per_year > 0 and self.average_cost > 0:
            return self.quantity_per_year * self.average_cost
        return Decimal("0")

    @property
    def has_positive_amount(self) -> bool:
        return (
            self.computed_annual > 0
            or self.annual_total > 0
            or self.monthly_total > 0
        )


# =============================================================================
# DERIVED TOTALS
# =============================================================================

class DeductionTotals(BaseModel):
    """Payroll deductions; the four categories sum exactly to ``total``."""
    income_tax: Decimal = _ZERO
    cpp: Decimal = _ZERO
    ei: Decimal = _ZERO
    union_dues: Decimal = _ZERO
    total: Decimal = _ZERO


class IncomeBreakdown(BaseModel):
    """Resolved monthly income."""
    mode: IncomeMode
    gross_monthly_income: Decimal
    net_monthly_income: Decimal
    deductions: DeductionTotals = Field(default_factory=DeductionTotals)


class HousingTotals(BaseModel):
    rent: Decimal = _ZERO
    utilities: Decimal = _ZERO
    renter_insurance: Decimal = _ZERO
    internet_phone: Decimal = _ZERO
    other: Decimal = _ZERO
    total: Decimal = _ZERO
    affordability_ratio: Decimal = Field(
        default=Decimal("0"),
        description="(rent + utilities) / net monthly income, 4 decimal places",
    )


class TransportationTotals(BaseModel):
    mode: TransportMode = TransportMode.CAR
    vehicle_price: Decimal = _ZERO
    down_payment: Decimal = _ZERO
    financed_principal: Decimal = _ZERO
    term_months: Decimal = _ZERO
    apr_percent: Decimal = _ZERO
    loan_payment: Decimal = _ZERO
    fuel_economy_l_per_100km: Decimal = _ZERO
    gas_price_per_litre: Decimal = _ZERO
    km_per_month: Decimal = _ZERO
    fuel_cost: Decimal = _ZERO
    maintenance: Decimal = _ZERO
    operating_cost: Decimal = _ZERO
    insurance: Decimal = _ZERO
    parking: Decimal = _ZERO
    transit_pass: Decimal = _ZERO
    total: Decimal = _ZERO


class LivingExpenseTotals(BaseModel):
    groceries_weekly: Decimal = _ZERO
    groceries: Decimal = _ZERO
    clothing: Decimal = _ZERO
    household_maintenance: Decimal = _ZERO
    health_hygiene: Decimal = _ZERO
    recreation: Decimal = _ZERO
    savings: Decimal = _ZERO
    misc: Decimal = _ZERO
    total: Decimal = _ZERO


class DerivedTotals(BaseModel):
    """Complete monthly budget snapshot.

    ``total_monthly_expenses`` equals the sum of the three category totals
    to the cent, and ``monthly_surplus`` equals net income minus that total.
    """

    gross_monthly_income: Decimal = _ZERO
    net_monthly_income: Decimal = _ZERO
    deductions: DeductionTotals = Field(default_factory=DeductionTotals)
    housing: HousingTotals = Field(default_factory=HousingTotals)
    transportation: TransportationTotals = Field(default_factory=TransportationTotals)
    living_expenses: LivingExpenseTotals = Field(default_factory=LivingExpenseTotals)
    total_monthly_expenses: Decimal = _ZERO
    monthly_surplus: Decimal = _ZERO


# =============================================================================
# READINESS FLAGS
# =============================================================================

class ReadinessFlags(BaseModel):
    """Warnings and outstanding work for a submission."""

    missing_required_fields: list[str] = Field(default_factory=list)
    missing_required_evidence: list[str] = Field(default_factory=list)
    affordability_fail: bool = False
    deficit: bool = False
    fragile_buffer: bool = False
    low_vehicle_price: bool = False
    unsourced_categories: list[str] = Field(default_factory=list)
    surplus_or_deficit_amount: Decimal = _ZERO
    fix_next: list[str] = Field(default_factory=list)

    @property
    def is_ready(self) -> bool:
        """True when nothing required is missing."""
        return not self.missing_required_fields and not self.missing_required_evidence

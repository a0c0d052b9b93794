"""Versioned reference constants consumed by the budget engine.

A constants document carries every rate, threshold and lookup table the
engine needs. Documents are immutable: refreshing the minimum wage or the
transit fare produces a new ``Constants`` value with a new
``constants_version``, never an in-place edit.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from moveout_core.models.enums import IncomeMode, TransportMode


def _coerce_decimal(v):
    """Route floats through str so 0.1 stays 0.1."""
    if isinstance(v, float):
        return str(v)
    return v


class NumericConstant(BaseModel):
    """A single numeric constant with a human description."""

    model_config = {"frozen": True}

    value: Decimal
    description: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value_to_decimal(cls, v):
        """Coerce float values to Decimal without binary artifacts."""
        return _coerce_decimal(v)


class SourcedConstant(NumericConstant):
    """A constant that carries its own provenance."""

    source_url: str = ""
    last_updated: str = ""


class IncomeConstants(BaseModel):
    model_config = {"frozen": True}

    default_mode: IncomeMode = IncomeMode.NET_PAYCHEQUE
    reference_url: str = Field(
        default="",
        description="Payroll deductions calculator students can use to check net pay",
    )


class DeductionRates(BaseModel):
    """Payroll deduction rates expressed as fractions of gross income."""

    model_config = {"frozen": True}

    income_tax_rate: NumericConstant
    cpp_rate: NumericConstant
    ei_rate: NumericConstant
    union_dues_rate: NumericConstant

    @property
    def total_rate(self) -> Decimal:
        """Combined deduction rate."""
        return (
            self.income_tax_rate.value
            + self.cpp_rate.value
            + self.ei_rate.value
            + self.union_dues_rate.value
        )


class Thresholds(BaseModel):
    model_config = {"frozen": True}

    affordability_housing_fraction_of_net: NumericConstant
    buffer_warning_threshold: NumericConstant


class LoanPaymentPoint(BaseModel):
    """One point of the loan lookup table: principal -> monthly payment."""

    model_config = {"frozen": True}

    principal: Decimal
    monthly_payment: Decimal

    @field_validator("principal", "monthly_payment", mode="before")
    @classmethod
    def coerce_amount_to_decimal(cls, v):
        """Coerce float amounts to Decimal."""
        return _coerce_decimal(v)


class LoanPaymentTable(BaseModel):
    """Monthly payments for a fixed baseline term and APR.

    Payments for other terms and rates are derived by ratio-scaling
    against ``baseline_term_months`` / ``baseline_apr_percent``.
    """

    model_config = {"frozen": True}

    description: str = ""
    baseline_term_months: Decimal
    baseline_apr_percent: Decimal
    points: list[LoanPaymentPoint] = Field(default_factory=list)

    @field_validator("baseline_term_months", "baseline_apr_percent", mode="before")
    @classmethod
    def coerce_baseline_to_decimal(cls, v):
        """Coerce float baselines to Decimal."""
        return _coerce_decimal(v)


class OperatingCostPerKm(BaseModel):
    """Flat per-kilometre operating cost by vehicle class."""

    model_config = {"frozen": True}

    car: NumericConstant
    truck: NumericConstant
    transit: NumericConstant

    def for_mode(self, mode: TransportMode) -> Decimal:
        """Per-km cost for a transport mode."""
        return getattr(self, mode.value).value


class TransportationConstants(BaseModel):
    model_config = {"frozen": True}

    weeks_per_month: NumericConstant
    default_down_payment_fraction: NumericConstant
    default_term_months: NumericConstant
    default_apr_percent: NumericConstant
    minimum_vehicle_price: NumericConstant
    transit_monthly_pass_default: NumericConstant
    transit_monthly_pass_source_url: str = ""
    transit_monthly_pass_last_updated: str = ""
    operating_cost_per_km: OperatingCostPerKm
    loan_payment_table: LoanPaymentTable


class FoodConstants(BaseModel):
    model_config = {"frozen": True}

    weeks_per_month: NumericConstant
    default_items: list[str] = Field(default_factory=list)


class EconomicSnapshot(BaseModel):
    """Reference economic values shown alongside the worksheet.

    Values are refreshed by the caller from live sources; the engine only
    reads them (the gas benchmark backs an empty gas price entry).
    """

    model_config = {"frozen": True}

    minimum_wage: Optional[SourcedConstant] = None
    gas_benchmark: Optional[SourcedConstant] = None
    cpi_yoy: Optional[SourcedConstant] = None


class Constants(BaseModel):
    """Complete constants document for one computation."""

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "constants_version": "2026.02",
                    "dataset_date": "2026-02-01",
                    "currency": "CAD",
                }
            ]
        },
    }

    schema_version: str = "1.0.0"
    constants_version: str
    dataset_date: str = ""
    currency: str = "CAD"
    income: IncomeConstants = Field(default_factory=IncomeConstants)
    deductions: DeductionRates
    thresholds: Thresholds
    transportation: TransportationConstants
    food: FoodConstants
    economic_snapshot: EconomicSnapshot = Field(default_factory=EconomicSnapshot)

"""Built-in reference constants for the moving-out worksheet.

These are the seed values shipped with the engine, used when the caller has
not supplied its own constants document. Economic snapshot values carry the
source they were taken from so the worksheet can show provenance.

Sources:
- Minimum wage: https://www.alberta.ca/minimum-wage
- Gas benchmark: https://www150.statcan.gc.ca/t1/tbl1/en/tv.action?pid=1810000101
- CPI: https://www150.statcan.gc.ca/t1/tbl1/en/tv.action?pid=1810000401
- Transit pass: https://www.calgarytransit.com/fares-passes.html

Updated: 2026-02 (dataset date 2026-02-01)
"""

import copy
from typing import Any

from .documents import load_constants
from .models import Constants


# =============================================================================
# VERSION TRACKING
# =============================================================================

CONSTANTS_VERSION = "2026.02"
DATASET_DATE = "2026-02-01"


# =============================================================================
# LOAN PAYMENT TABLE
# =============================================================================
# Monthly payments for a 60 month loan at 7.99% APR. Other terms and rates
# are derived by ratio-scaling against this baseline.

LOAN_BASELINE_TERM_MONTHS = 60
LOAN_BASELINE_APR_PERCENT = "7.99"

LOAN_PAYMENT_POINTS = [
    {"principal": "5000", "monthly_payment": "101.36"},
    {"principal": "10000", "monthly_payment": "202.72"},
    {"principal": "15000", "monthly_payment": "304.08"},
    {"principal": "20000", "monthly_payment": "405.44"},
    {"principal": "30000", "monthly_payment": "608.16"},
]


# =============================================================================
# DEFAULT GROCERY ITEMS
# =============================================================================

DEFAULT_FOOD_ITEMS = [
    "Bread",
    "Milk",
    "Eggs",
    "Fruit",
    "Vegetables",
    "Rice or pasta",
    "Chicken",
    "Cheese",
]


DEFAULT_CONSTANTS: dict[str, Any] = {
    "schema_version": "1.0.0",
    "constants_version": CONSTANTS_VERSION,
    "dataset_date": DATASET_DATE,
    "currency": "CAD",
    "income": {
        "default_mode": "net_paycheque",
        "reference_url": "https://www.canada.ca/en/revenue-agency/services/e-services/digital-services-businesses/payroll-deductions-online-calculator.html",
    },
    "deductions": {
        "income_tax_rate": {"value": "0.12", "description": "Blended federal and provincial income tax"},
        "cpp_rate": {"value": "0.0595", "description": "Canada Pension Plan contribution"},
        "ei_rate": {"value": "0.0166", "description": "Employment Insurance premium"},
        "union_dues_rate": {"value": "0.01", "description": "Typical union dues"},
    },
    "thresholds": {
        "affordability_housing_fraction_of_net": {
            "value": "0.35",
            "description": "Rent plus utilities should stay at or below this share of net income",
        },
        "buffer_warning_threshold": {
            "value": "100",
            "description": "Monthly surplus below this amount is a fragile buffer",
        },
    },
    "transportation": {
        "weeks_per_month": {"value": "4.33", "description": "Average weeks in a month"},
        "default_down_payment_fraction": {"value": "0.10", "description": "Down payment when none is entered"},
        "default_term_months": {"value": "60", "description": "Loan term when none is entered"},
        "default_apr_percent": {"value": "7.99", "description": "Loan APR when none is entered"},
        "minimum_vehicle_price": {"value": "3000", "description": "Listings below this price are unrealistic"},
        "transit_monthly_pass_default": {"value": "105.00", "description": "Adult monthly transit pass"},
        "transit_monthly_pass_source_url": "https://www.calgarytransit.com/fares-passes.html",
        "transit_monthly_pass_last_updated": "2026-01-01",
        "operating_cost_per_km": {
            "car": {"value": "0.18", "description": "Fuel and upkeep per km, compact car"},
            "truck": {"value": "0.26", "description": "Fuel and upkeep per km, pickup truck"},
            "transit": {"value": "0", "description": "No per-km cost on transit"},
        },
        "loan_payment_table": {
            "description": "Monthly payment by financed principal",
            "baseline_term_months": LOAN_BASELINE_TERM_MONTHS,
            "baseline_apr_percent": LOAN_BASELINE_APR_PERCENT,
            "points": LOAN_PAYMENT_POINTS,
        },
    },
    "food": {
        "weeks_per_month": {"value": "4.33", "description": "Weeks used to convert weekly groceries"},
        "default_items": DEFAULT_FOOD_ITEMS,
    },
    "economic_snapshot": {
        "minimum_wage": {
            "value": "15.00",
            "description": "Alberta general minimum wage per hour",
            "source_url": "https://www.alberta.ca/minimum-wage",
            "last_updated": "2025-10-01",
        },
        "gas_benchmark": {
            "value": "1.45",
            "description": "Average regular gasoline price per litre, Calgary",
            "source_url": "https://www150.statcan.gc.ca/t1/tbl1/en/tv.action?pid=1810000101",
            "last_updated": "2026-01-15",
        },
        "cpi_yoy": {
            "value": "2.1",
            "description": "Consumer Price Index, year over year percent change",
            "source_url": "https://www150.statcan.gc.ca/t1/tbl1/en/tv.action?pid=1810000401",
            "last_updated": "2026-01-20",
        },
    },
}


def get_default_constants() -> Constants:
    """Return a freshly validated copy of the built-in constants."""
    return load_constants(copy.deepcopy(DEFAULT_CONSTANTS))

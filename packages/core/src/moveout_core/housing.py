"""Monthly housing totals and the rent affordability ratio."""

from decimal import Decimal

from .currency import ZERO, quantize_exact, round_currency, sum_currency
from .inputs import InputMap, number_input
from .models import HousingTotals

RATIO_PLACES = Decimal("0.0001")


def compute_housing(inputs: InputMap, net_monthly_income: Decimal) -> HousingTotals:
    """Sum the housing line items and compute the affordability ratio.

    The ratio is ``(rent + utilities) / net income`` to four decimal places,
    or 0 when there is no positive net income.
    """
    rent = round_currency(number_input(inputs, "rent_monthly"))
    utilities = round_currency(number_input(inputs, "utilities_monthly"))
    renter_insurance = round_currency(number_input(inputs, "renter_insurance_monthly"))
    internet_phone = round_currency(number_input(inputs, "internet_phone_monthly"))
    other = round_currency(number_input(inputs, "other_housing_monthly"))

    if net_monthly_income > 0:
        ratio = quantize_exact((rent + utilities) / net_monthly_income, RATIO_PLACES)
    else:
        ratio = ZERO

    return HousingTotals(
        rent=rent,
        utilities=utilities,
        renter_insurance=renter_insurance,
        internet_phone=internet_phone,
        other=other,
        total=sum_currency([rent, utilities, renter_insurance, internet_phone, other]),
        affordability_ratio=ratio,
    )

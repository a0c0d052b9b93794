"""Monthly transportation cost for car, truck or transit.

Vehicle loans are approximated rather than solved: the financed principal
is looked up in the constants' payment table (which assumes a baseline
term and APR) and the result is rescaled by the ratio of amortized
payment-per-dollar factors for the requested term and APR.
"""

from decimal import Decimal, Overflow, localcontext
from typing import Iterable

from .currency import ZERO, round_currency, sum_currency
from .inputs import InputMap, number_input, resolve_transport_mode
from .models import Constants, LoanPaymentPoint, TransportationTotals, TransportMode

_ONE = Decimal("1")


def interpolate_loan_payment(points: Iterable[LoanPaymentPoint], principal: Decimal) -> Decimal:
    """Baseline monthly payment for ``principal`` from the lookup table.

    Below the first point the payment scales proportionally from the
    origin, above the last point it extends the last segment's slope, and
    in between it is linearly interpolated. Points with a non-positive
    principal are ignored. An empty table yields 0.
    """
    ordered = sorted((p for p in points if p.principal > 0), key=lambda p: p.principal)
    if principal <= 0 or not ordered:
        return ZERO

    first = ordered[0]
    if principal <= first.principal:
        return round_currency(principal / first.principal * first.monthly_payment)

    last = ordered[-1]
    if principal >= last.principal:
        prev = ordered[-2] if len(ordered) > 1 else first
        span = last.principal - prev.principal
        slope = (last.monthly_payment - prev.monthly_payment) / span if span else ZERO
        return round_currency(last.monthly_payment + (principal - last.principal) * slope)

    for left, right in zip(ordered, ordered[1:]):
        if left.principal <= principal <= right.principal:
            span = right.principal - left.principal
            ratio = (principal - left.principal) / span if span else ZERO
            return round_currency(
                left.monthly_payment + (right.monthly_payment - left.monthly_payment) * ratio
            )

    return ZERO


def amortized_payment_per_dollar(term_months: Decimal, apr_percent: Decimal) -> Decimal:
    """Standard amortized monthly payment per dollar borrowed.

    Returns 0 for a non-positive term, ``1 / term`` at 0% APR, and the
    interest-only limit ``rate`` when compounding overflows.
    """
    if term_months <= 0:
        return ZERO
    monthly_rate = apr_percent / 100 / 12
    if monthly_rate == 0:
        return _ONE / term_months
    if monthly_rate <= -1:
        return ZERO
    with localcontext() as ctx:
        ctx.traps[Overflow] = False
        growth = (_ONE + monthly_rate) ** term_months
    if not growth.is_finite():
        return monthly_rate
    if growth == _ONE:
        return _ONE / term_months
    return monthly_rate * growth / (growth - _ONE)


def compute_vehicle_loan_payment(
    financed_principal: Decimal,
    term_months: Decimal,
    apr_percent: Decimal,
    constants: Constants,
) -> Decimal:
    """Monthly loan payment, rescaled from the table's baseline term/APR."""
    if financed_principal <= 0:
        return ZERO

    table = constants.transportation.loan_payment_table
    baseline_payment = interpolate_loan_payment(table.points, financed_principal)
    baseline_factor = amortized_payment_per_dollar(
        table.baseline_term_months, table.baseline_apr_percent
    )
    target_factor = amortized_payment_per_dollar(term_months, apr_percent)
    if baseline_factor == 0 or target_factor == 0:
        return round_currency(baseline_payment)
    return round_currency(baseline_payment * (target_factor / baseline_factor))


def monthly_distance(inputs: InputMap, constants: Constants) -> Decimal:
    """Kilometres per month, falling back to ``km_per_week`` x weeks/month."""
    km_per_month = number_input(inputs, "km_per_month")
    if km_per_month > 0:
        return km_per_month
    km_per_week = number_input(inputs, "km_per_week")
    return km_per_week * constants.transportation.weeks_per_month.value


def _transit_totals(inputs: InputMap, constants: Constants) -> TransportationTotals:
    entered_pass = number_input(inputs, "transit_monthly_pass")
    transit_pass = (
        entered_pass
        if entered_pass > 0
        else constants.transportation.transit_monthly_pass_default.value
    )
    insurance = number_input(inputs, "transport_insurance_monthly")
    parking = number_input(inputs, "parking_monthly")

    return TransportationTotals(
        mode=TransportMode.TRANSIT,
        vehicle_price=round_currency(number_input(inputs, "vehicle_price")),
        insurance=round_currency(insurance),
        parking=round_currency(parking),
        transit_pass=round_currency(transit_pass),
        total=sum_currency([transit_pass, insurance, parking]),
    )


def _vehicle_totals(mode: TransportMode, inputs: InputMap, constants: Constants) -> TransportationTotals:
    assumptions = constants.transportation

    vehicle_price = number_input(inputs, "vehicle_price")
    entered_down = number_input(inputs, "vehicle_down_payment_amount")
    down_payment = (
        entered_down
        if entered_down > 0
        else vehicle_price * assumptions.default_down_payment_fraction.value
    )
    financed_principal = max(vehicle_price - down_payment, ZERO)

    entered_term = number_input(inputs, "vehicle_term_months")
    entered_apr = number_input(inputs, "vehicle_apr_percent")
    term_months = entered_term if entered_term > 0 else assumptions.default_term_months.value
    apr_percent = entered_apr if entered_apr > 0 else assumptions.default_apr_percent.value

    loan_payment = compute_vehicle_loan_payment(
        financed_principal, term_months, apr_percent, constants
    )

    km_per_month = monthly_distance(inputs, constants)
    fuel_economy = number_input(inputs, "fuel_economy_l_per_100km")
    gas_price = number_input(inputs, "gas_price_per_litre")
    if fuel_economy > 0:
        if gas_price <= 0 and constants.economic_snapshot.gas_benchmark is not None:
            gas_price = constants.economic_snapshot.gas_benchmark.value
        fuel_cost = round_currency(km_per_month * fuel_economy * gas_price / 100)
    else:
        fuel_cost = round_currency(km_per_month * assumptions.operating_cost_per_km.for_mode(mode))

    maintenance = round_currency(number_input(inputs, "maintenance_monthly"))
    operating_cost = sum_currency([fuel_cost, maintenance])
    insurance = number_input(inputs, "transport_insurance_monthly")
    parking = number_input(inputs, "parking_monthly")

    return TransportationTotals(
        mode=mode,
        vehicle_price=round_currency(vehicle_price),
        down_payment=round_currency(down_payment),
        financed_principal=round_currency(financed_principal),
        term_months=round_currency(term_months),
        apr_percent=round_currency(apr_percent),
        loan_payment=loan_payment,
        fuel_economy_l_per_100km=round_currency(fuel_economy),
        gas_price_per_litre=round_currency(gas_price),
        km_per_month=round_currency(km_per_month),
        fuel_cost=fuel_cost,
        maintenance=maintenance,
        operating_cost=operating_cost,
        insurance=round_currency(insurance),
        parking=round_currency(parking),
        total=sum_currency([loan_payment, operating_cost, insurance, parking]),
    )


def compute_transportation(inputs: InputMap, constants: Constants) -> TransportationTotals:
    """Transportation totals for the selected mode."""
    mode = resolve_transport_mode(inputs)
    if mode is TransportMode.TRANSIT:
        return _transit_totals(inputs, constants)
    return _vehicle_totals(mode, inputs, constants)

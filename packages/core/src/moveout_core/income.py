"""Gross and net monthly income under the two income entry modes.

Hourly estimate:
    gross = wage x hours/week x weeks/month + other income, and each
    deduction is computed forward from gross.

Net paycheque:
    the student enters take-home pay per cheque. Gross is estimated by
    grossing net pay up by the combined deduction rate, and the deduction
    breakdown is back-derived from gross - net. When wage and hours are both
    entered, that source data wins and the hourly estimate is used instead.
"""

from decimal import Decimal
from typing import Callable

from .currency import ZERO, from_cents, round_currency, sum_currency, to_cents
from .inputs import InputMap, hourly_source_present, number_input, resolve_income_mode
from .models import Constants, DeductionTotals, IncomeBreakdown, IncomeMode


def apportion_deductions(total: Decimal, constants: Constants) -> DeductionTotals:
    """Split a known deduction total across the four categories.

    Income tax, CPP and EI each take their rate-proportional share rounded
    to the cent; union dues take the exact remainder so the parts sum to
    ``total``.
    """
    rates = constants.deductions
    total_rate = rates.total_rate
    total = round_currency(total)
    if total <= 0 or total_rate <= 0:
        return DeductionTotals()

    income_tax = round_currency(total * rates.income_tax_rate.value / total_rate)
    cpp = round_currency(total * rates.cpp_rate.value / total_rate)
    ei = round_currency(total * rates.ei_rate.value / total_rate)
    union_dues = from_cents(
        to_cents(total) - to_cents(income_tax) - to_cents(cpp) - to_cents(ei)
    )
    return DeductionTotals(
        income_tax=income_tax,
        cpp=cpp,
        ei=ei,
        union_dues=union_dues,
        total=total,
    )


def forward_deductions(gross: Decimal, constants: Constants) -> DeductionTotals:
    """Each deduction as ``gross x rate`` rounded to the cent."""
    rates = constants.deductions
    income_tax = round_currency(gross * rates.income_tax_rate.value)
    cpp = round_currency(gross * rates.cpp_rate.value)
    ei = round_currency(gross * rates.ei_rate.value)
    union_dues = round_currency(gross * rates.union_dues_rate.value)
    return DeductionTotals(
        income_tax=income_tax,
        cpp=cpp,
        ei=ei,
        union_dues=union_dues,
        total=sum_currency([income_tax, cpp, ei, union_dues]),
    )


def _hourly_estimate(inputs: InputMap, constants: Constants) -> IncomeBreakdown:
    wage = number_input(inputs, "hourly_wage")
    hours = number_input(inputs, "hours_per_week")
    other = number_input(inputs, "other_monthly_income")
    weeks = constants.transportation.weeks_per_month.value

    gross = round_currency(wage * hours * weeks + other)
    deductions = forward_deductions(gross, constants)
    net = from_cents(to_cents(gross) - to_cents(deductions.total))
    return IncomeBreakdown(
        mode=IncomeMode.HOURLY_ESTIMATE,
        gross_monthly_income=gross,
        net_monthly_income=net,
        deductions=deductions,
    )


def _net_paycheque(inputs: InputMap, constants: Constants) -> IncomeBreakdown:
    if hourly_source_present(inputs):
        return _hourly_estimate(inputs, constants)

    other = number_input(inputs, "other_monthly_income")
    net_per_cheque = number_input(inputs, "net_pay_per_cheque")
    cheques = max(number_input(inputs, "paycheques_per_month"), Decimal("1"))
    net_employment = net_per_cheque * cheques

    total_rate = constants.deductions.total_rate
    if 0 < total_rate < 1:
        gross = round_currency(net_employment / (1 - total_rate) + other)
    else:
        gross = round_currency(net_employment + other)
    net = round_currency(net_employment + other)

    deductions = apportion_deductions(max(gross - net, ZERO), constants)
    return IncomeBreakdown(
        mode=IncomeMode.NET_PAYCHEQUE,
        gross_monthly_income=gross,
        net_monthly_income=net,
        deductions=deductions,
    )


_INCOME_RESOLVERS: dict[IncomeMode, Callable[[InputMap, Constants], IncomeBreakdown]] = {
    IncomeMode.HOURLY_ESTIMATE: _hourly_estimate,
    IncomeMode.NET_PAYCHEQUE: _net_paycheque,
}


def resolve_income(inputs: InputMap, constants: Constants) -> IncomeBreakdown:
    """Resolve gross income, net income and deductions for the input map.

    The returned ``mode`` is the mode actually applied, which is
    ``hourly_estimate`` when hourly source data overrides a stated
    net-paycheque mode.
    """
    mode = resolve_income_mode(inputs, constants)
    return _INCOME_RESOLVERS[mode](inputs, constants)

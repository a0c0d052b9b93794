"""Reading values out of a raw input map.

The form layer stores each field as a number, text, boolean or nothing.
These helpers give the rest of the engine a single, forgiving view of that
map: unreadable numbers are zero, non-text is an empty string, and unknown
mode values fall back to a safe default.
"""

import math
from decimal import Decimal
from typing import Any, Mapping

from .currency import finite_amount
from .models import Constants, IncomeMode, TransportMode

InputMap = Mapping[str, Any]


def number_input(inputs: InputMap, field_id: str) -> Decimal:
    """Numeric value of a field; absent, boolean, unparseable or out-of-range values are 0."""
    return finite_amount(inputs.get(field_id))


def string_input(inputs: InputMap, field_id: str) -> str:
    """Text value of a field; non-text values are an empty string."""
    value = inputs.get(field_id)
    return value if isinstance(value, str) else ""


def has_value(value: Any) -> bool:
    """Whether a scalar field counts as filled in.

    Numbers must be finite, text must be non-blank, booleans always count.
    """
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, Decimal)):
        return Decimal(value).is_finite()
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        return len(value.strip()) > 0
    return False


def resolve_income_mode(inputs: InputMap, constants: Constants) -> IncomeMode:
    """Income mode from ``income_mode``, else the constants default."""
    raw = string_input(inputs, "income_mode")
    try:
        return IncomeMode(raw)
    except ValueError:
        return constants.income.default_mode


def resolve_transport_mode(inputs: InputMap) -> TransportMode:
    """Transport mode from ``transport_mode``; anything unknown is a car."""
    raw = string_input(inputs, "transport_mode")
    try:
        return TransportMode(raw)
    except ValueError:
        return TransportMode.CAR


def hourly_source_present(inputs: InputMap) -> bool:
    """True when both wage and weekly hours are positive.

    Hourly source data takes precedence over a stated net-paycheque mode.
    """
    return number_input(inputs, "hourly_wage") > 0 and number_input(inputs, "hours_per_week") > 0

"""Defensive parsing of serialized table fields.

Grocery plans and expense tables are stored in the input map as JSON arrays
of row objects. Anything that is not a usable array (absent, blank, invalid
JSON, a non-list) yields the caller's fallback rows; parsing never raises.
Valid rows are normalized so downstream code can trust every attribute.
"""

import json
from decimal import Decimal
from typing import Any, NamedTuple, Union

import structlog

from .currency import ZERO, finite_amount
from .inputs import InputMap
from .models import Constants, ExpenseTableRow, FoodTableRow

logger = structlog.get_logger()

FOOD_TABLE_FIELD = "food_table_weekly"


class TableParseResult(NamedTuple):
    """Parsed rows and whether they came from the fallback."""
    rows: list
    used_fallback: bool

    @property
    def has_rows(self) -> bool:
        """True when the field itself supplied at least one row."""
        return not self.used_fallback and len(self.rows) > 0


def _row_string(row: dict[str, Any], key: str) -> str:
    value = row.get(key)
    return value if isinstance(value, str) else ""


def _row_number(row: dict[str, Any], key: str) -> Decimal:
    value = row.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ZERO
    return finite_amount(value)


def _row_id(row: dict[str, Any], index: int) -> str:
    value = row.get("id")
    if isinstance(value, str) and value:
        return value
    return f"row-{index + 1}"


def _decode_rows(raw: Any, field_id: str) -> Union[list[dict[str, Any]], None]:
    """Decode a serialized table, or None when it is unusable."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.debug("table_parse_fallback", field=field_id, reason="invalid_json")
        return None
    if not isinstance(parsed, list):
        logger.debug("table_parse_fallback", field=field_id, reason="not_a_list")
        return None
    return [row if isinstance(row, dict) else {} for row in parsed]


def default_food_rows(constants: Constants) -> list[FoodTableRow]:
    """One empty row per default grocery item."""
    return [
        FoodTableRow(id=f"default-{index + 1}", item=item)
        for index, item in enumerate(constants.food.default_items)
    ]


def parse_food_table(
    inputs: InputMap,
    constants: Constants,
    field_id: str = FOOD_TABLE_FIELD,
) -> TableParseResult:
    """Parse the weekly grocery table, seeding defaults when it is unusable.

    An empty array also falls back to the default items.
    """
    decoded = _decode_rows(inputs.get(field_id), field_id)
    if not decoded:
        return TableParseResult(default_food_rows(constants), True)

    rows = [
        FoodTableRow(
            id=_row_id(row, index),
            item=_row_string(row, "item"),
            planned_purchase=_row_string(row, "planned_purchase"),
            estimated_cost=_row_number(row, "estimated_cost"),
            source_url=_row_string(row, "source_url"),
        )
        for index, row in enumerate(decoded)
    ]
    return TableParseResult(rows, False)


def parse_expense_table(inputs: InputMap, field_id: str) -> TableParseResult:
    """Parse an annual or monthly expense table; unusable content is empty."""
    decoded = _decode_rows(inputs.get(field_id), field_id)
    if decoded is None:
        return TableParseResult([], True)

    rows = [
        ExpenseTableRow(
            id=_row_id(row, index),
            item=_row_string(row, "item"),
            quantity_per_year=_row_number(row, "quantity_per_year"),
            average_cost=_row_number(row, "average_cost"),
            annual_total=_row_number(row, "annual_total"),
            monthly_total=_row_number(row, "monthly_total"),
            source_url=_row_string(row, "source_url"),
        )
        for index, row in enumerate(decoded)
    ]
    return TableParseResult(rows, False)

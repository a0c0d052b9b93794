"""Monthly living expenses (the "essentials" category).

Several concepts exist in two schema generations: an older scalar monthly
field and a newer structured table. Each concept is resolved by
``resolve_table_or_legacy``: the table wins when it supplied rows,
otherwise a positive legacy scalar is used, otherwise the (zero) table
value stands. The two are never added together.
"""

from decimal import Decimal
from typing import NamedTuple

from .currency import ZERO, round_currency, sum_currency
from .inputs import InputMap, number_input
from .models import Constants, ExpenseTableRow, LivingExpenseTotals
from .tables import FOOD_TABLE_FIELD, TableParseResult, parse_expense_table, parse_food_table

MONTHS_PER_YEAR = Decimal("12")


class ExpenseConcept(NamedTuple):
    """A living-expense concept with a table field and a legacy scalar."""
    table_field: str
    legacy_field: str


CLOTHING = ExpenseConcept("clothing_table_annual", "clothing_monthly")
HEALTH_HYGIENE = ExpenseConcept("health_hygiene_table_annual", "health_hygiene_monthly")
RECREATION = ExpenseConcept("recreation_table_annual", "recreation_monthly")
MISC = ExpenseConcept("misc_table_monthly", "misc_monthly")
GROCERIES_LEGACY_FIELD = "groceries_monthly"

ESSENTIALS_TABLE_FIELDS = (
    FOOD_TABLE_FIELD,
    CLOTHING.table_field,
    HEALTH_HYGIENE.table_field,
    RECREATION.table_field,
    MISC.table_field,
)


class ResolvedAmount(NamedTuple):
    """A resolved monthly amount and which representation supplied it."""
    amount: Decimal
    from_table: bool


def resolve_table_or_legacy(
    table: TableParseResult,
    table_value: Decimal,
    legacy_value: Decimal,
) -> ResolvedAmount:
    """Pick the table value or the legacy scalar for one concept."""
    if table.has_rows:
        return ResolvedAmount(round_currency(table_value), True)
    if legacy_value > 0:
        return ResolvedAmount(round_currency(legacy_value), False)
    return ResolvedAmount(round_currency(table_value), True)


def annual_row_monthly(row: ExpenseTableRow) -> Decimal:
    """Monthly amount of an annual-table row.

    A partially filled row may carry quantity x unit cost, an annual total,
    a monthly total, or several; the largest monthly equivalent is used.
    """
    annual = max(row.computed_annual, row.annual_total)
    return max(round_currency(annual / MONTHS_PER_YEAR), round_currency(row.monthly_total))


def monthly_row_amount(row: ExpenseTableRow) -> Decimal:
    """Monthly amount of a monthly-table row."""
    return max(round_currency(row.monthly_total), round_currency(row.annual_total / MONTHS_PER_YEAR))


def _annual_concept(inputs: InputMap, concept: ExpenseConcept) -> Decimal:
    table = parse_expense_table(inputs, concept.table_field)
    from_table = sum_currency(annual_row_monthly(row) for row in table.rows)
    return resolve_table_or_legacy(table, from_table, number_input(inputs, concept.legacy_field)).amount


def _monthly_concept(inputs: InputMap, concept: ExpenseConcept) -> Decimal:
    table = parse_expense_table(inputs, concept.table_field)
    from_table = sum_currency(monthly_row_amount(row) for row in table.rows)
    return resolve_table_or_legacy(table, from_table, number_input(inputs, concept.legacy_field)).amount


def compute_groceries(inputs: InputMap, constants: Constants) -> tuple[Decimal, Decimal]:
    """Weekly and monthly grocery cost.

    Returns:
        Tuple of (groceries_weekly, groceries_monthly). When the legacy
        monthly scalar is used, weekly is back-derived from it.
    """
    weeks = constants.food.weeks_per_month.value
    table = parse_food_table(inputs, constants)
    weekly_from_table = sum_currency(row.estimated_cost for row in table.rows)
    monthly_from_table = round_currency(weekly_from_table * weeks)

    legacy_monthly = number_input(inputs, GROCERIES_LEGACY_FIELD)
    resolved = resolve_table_or_legacy(table, monthly_from_table, legacy_monthly)
    if resolved.from_table:
        return weekly_from_table, resolved.amount
    weekly = round_currency(resolved.amount / weeks) if weeks > 0 else ZERO
    return weekly, resolved.amount


def compute_living_expenses(inputs: InputMap, constants: Constants) -> LivingExpenseTotals:
    """Resolve every essentials line and total them in cents."""
    groceries_weekly, groceries = compute_groceries(inputs, constants)
    clothing = _annual_concept(inputs, CLOTHING)
    health_hygiene = _annual_concept(inputs, HEALTH_HYGIENE)
    recreation = _annual_concept(inputs, RECREATION)
    misc = _monthly_concept(inputs, MISC)
    household_maintenance = round_currency(number_input(inputs, "household_maintenance_monthly"))
    savings = round_currency(number_input(inputs, "savings_monthly"))

    return LivingExpenseTotals(
        groceries_weekly=groceries_weekly,
        groceries=groceries,
        clothing=clothing,
        household_maintenance=household_maintenance,
        health_hygiene=health_hygiene,
        recreation=recreation,
        savings=savings,
        misc=misc,
        total=sum_currency([
            groceries,
            clothing,
            household_maintenance,
            health_hygiene,
            recreation,
            savings,
            misc,
        ]),
    )

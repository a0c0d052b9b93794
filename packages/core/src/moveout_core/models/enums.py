"""Closed enumerations shared by the engine and its data models."""

from enum import Enum


class IncomeMode(str, Enum):
    """How monthly income is entered on the worksheet."""
    HOURLY_ESTIMATE = "hourly_estimate"
    NET_PAYCHEQUE = "net_paycheque"


class TransportMode(str, Enum):
    """Mutually exclusive ways of getting around."""
    CAR = "car"
    TRUCK = "truck"
    TRANSIT = "transit"

    @property
    def uses_vehicle(self) -> bool:
        """True for modes that finance and operate a vehicle."""
        return self is not TransportMode.TRANSIT


class FieldRole(str, Enum):
    """Role of a worksheet field in the assignment schema."""
    INPUT = "input"
    DERIVED = "derived"
    REFLECTION = "reflection"


class FieldType(str, Enum):
    """Widget/data type of a worksheet field."""
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    URL = "url"
    FOOD_TABLE = "food_table"
    EXPENSE_TABLE = "expense_table"

    @property
    def is_table(self) -> bool:
        """True for fields holding a serialized row collection."""
        return self in (FieldType.FOOD_TABLE, FieldType.EXPENSE_TABLE)


class PinCategory(str, Enum):
    """Categories that can hold a pinned alternative."""
    HOUSING = "housing"
    TRANSPORTATION = "transportation"


class SourceCategory(str, Enum):
    """Cost categories checked for supporting source links."""
    INCOME = "income"
    HOUSING = "housing"
    TRANSPORTATION = "transportation"
    ESSENTIALS = "essentials"

"""Field kind and subtype enumerations used by the factory and field classes."""

from enum import Enum


class FieldKind(str, Enum):
    """Closed set of supported field kinds."""
    TEXT = "Text"
    NUMBER = "Number"
    DATETIME = "DateTime"
    BOOLEAN = "Boolean"
    LOOKUP = "Lookup"


class TextFieldType(str, Enum):
    """Logical content type of a text field."""
    TEXT = "Text"
    RICH_TEXT = "RichText"
    EMAIL = "Email"
    PHONE_NUMBER = "PhoneNumber"
    LINK = "Link"


class NumberFieldType(str, Enum):
    """Integer accepts whole numbers only, Decimal accepts fractions."""
    INTEGER = "Integer"
    DECIMAL = "Decimal"


class DateTimeFieldType(str, Enum):
    """
    Logical type of a date/time picker.

    - TIME: time only, e.g. "7:36 AM"
    - DATE: date only, e.g. "03/27/2025"
    - DATETIME: date and time, e.g. "03/27/2025 7:36 AM"
    """
    TIME = "Time"
    DATE = "Date"
    DATETIME = "DateTime"


__all__ = [
    "FieldKind",
    "TextFieldType",
    "NumberFieldType",
    "DateTimeFieldType",
]

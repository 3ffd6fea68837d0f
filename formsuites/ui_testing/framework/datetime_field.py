"""
================================================================================
DateTime Field
================================================================================

crt-datetimepicker controls: Time, Date and DateTime.

UI formats (locale-invariant, US style):
    Time      7:36 AM
    Date      11/30/2025
    DateTime  11/30/2025 7:36 AM

Values read back are normalized per subtype:
    Time      0001-01-01 HH:MM:SS
    Date      YYYY-MM-DD 00:00:00
    DateTime  as parsed

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Tuple, Union

import allure
from dateutil import parser as date_parser
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .base_field import BaseField
from .enums import DateTimeFieldType, FieldKind
from .log_sink import LogSink


# Exact patterns tried before the general fallback, per subtype
PARSE_PATTERNS: Dict[DateTimeFieldType, Tuple[str, ...]] = {
    DateTimeFieldType.TIME: ("%I:%M %p", "%H:%M"),
    DateTimeFieldType.DATE: ("%m/%d/%Y",),
    DateTimeFieldType.DATETIME: ("%m/%d/%Y %I:%M %p",),
}


def _format_clock(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def format_datetime(value: Union[datetime, date], dt_type: DateTimeFieldType) -> str:
    """Render a value in the UI format of the given subtype."""
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)

    if dt_type == DateTimeFieldType.TIME:
        return _format_clock(value)
    if dt_type == DateTimeFieldType.DATE:
        return f"{value.month:02d}/{value.day:02d}/{value.year:04d}"
    return f"{value.month:02d}/{value.day:02d}/{value.year:04d} {_format_clock(value)}"


def normalize_datetime(value: datetime, dt_type: DateTimeFieldType) -> datetime:
    """Pin the components a subtype does not carry."""
    if dt_type == DateTimeFieldType.TIME:
        return datetime(1, 1, 1, value.hour, value.minute, value.second)
    if dt_type == DateTimeFieldType.DATE:
        return datetime(value.year, value.month, value.day)
    return value


def parse_datetime(raw: Optional[str], dt_type: DateTimeFieldType) -> Optional[datetime]:
    """
    Parse UI text into a normalized datetime.

    Exact subtype patterns come first, then a general parse. Blank or
    unparseable text yields None.
    """
    if raw is None or not raw.strip():
        return None

    text = " ".join(raw.split())
    parsed: Optional[datetime] = None

    for pattern in PARSE_PATTERNS[dt_type]:
        try:
            parsed = datetime.strptime(text, pattern)
            break
        except ValueError:
            continue

    if parsed is None:
        try:
            parsed = date_parser.parse(text)
        except (ValueError, OverflowError):
            return None

    return normalize_datetime(parsed, dt_type)


class DateTimeField(BaseField):
    """Date/time picker field."""

    KIND = FieldKind.DATETIME
    FIELD_TYPE_NAME = "DateTimeField"
    HOST_TAG = "crt-datetimepicker"
    VALUE_SELECTOR = "input.mat-input-element"

    def __init__(
        self,
        page: Page,
        title: str,
        code: str,
        read_only: bool = False,
        required: bool = False,
        placeholder: Optional[str] = None,
        date_time_type: DateTimeFieldType = DateTimeFieldType.DATETIME,
        sink: Optional[LogSink] = None,
        timeouts_ms=None,
    ):
        super().__init__(page, title, code, read_only, required, placeholder, sink, timeouts_ms)
        self.date_time_type = DateTimeFieldType(date_time_type)

    async def set_value(self, value: Union[datetime, date, str, None], debug: bool = False) -> None:
        """
        Set the field value.

        A ``datetime``/``date`` is formatted for the subtype; a string is
        typed as-is (it must already be in UI format).
        """
        if isinstance(value, (datetime, date)):
            text = format_datetime(value, self.date_time_type)
            self._log(
                debug,
                f"set_value(datetime) '{self.title}' (Code='{self.code}') raw={value.isoformat()}, "
                f"formatted='{text}', Type={self.date_time_type.value}.",
            )
        elif value is None or isinstance(value, str):
            text = value or ""
        else:
            raise TypeError(f"Unsupported date/time value type: {type(value).__name__}.")

        with allure.step(f"Set date/time field '{self.title}' = '{text}'"):
            root = await self._require_container(debug)
            value_input = self.get_value_locator(root)

            try:
                await value_input.fill(text)
            except PlaywrightError as e:
                self._log(debug, f"set_value Playwright error for '{self.title}' (Code='{self.code}'): {e.message}")
                raise

            self._log(
                debug,
                f"set_value '{self.title}' (Code='{self.code}') = '{text}', Type={self.date_time_type.value}.",
            )

    async def get_value(self, debug: bool = False) -> Optional[datetime]:
        root = await self._require_container(debug)
        raw = await self.get_value_locator(root).input_value()
        parsed = parse_datetime(raw, self.date_time_type)

        self._log(
            debug,
            f"get_value '{self.title}' (Code='{self.code}') raw='{raw}', "
            f"parsed={parsed.isoformat() if parsed else 'null'}, Type={self.date_time_type.value}.",
        )
        return parsed


__all__ = [
    "DateTimeField",
    "format_datetime",
    "normalize_datetime",
    "parse_datetime",
]

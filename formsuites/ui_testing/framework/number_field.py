"""
================================================================================
Number Field
================================================================================

crt-number-input controls for Integer and Decimal values.

Values are written in a locale-invariant format ("1234.5"). Reading tries
the invariant format first, then the current process locale, and returns
None for blank or unparseable text.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import locale
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

import allure
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .base_field import BaseField
from .enums import FieldKind, NumberFieldType
from .errors import FieldTypeMismatchError
from .log_sink import LogSink


def format_invariant_number(value: Union[int, Decimal]) -> str:
    """Serialize a number without grouping or exponent, using '.' as separator."""
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def _to_finite_decimal(text: str) -> Optional[Decimal]:
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def parse_number(raw: Optional[str]) -> Optional[Decimal]:
    """
    Parse text rendered by a number input.

    Invariant format (',' grouping, '.' decimal) is tried first, then the
    current locale's conventions.
    """
    if raw is None or not raw.strip():
        return None

    text = raw.strip()

    invariant = _to_finite_decimal(text.replace(",", "").replace(" ", ""))
    if invariant is not None:
        return invariant

    try:
        return _to_finite_decimal(locale.delocalize(text).replace(" ", "").replace("\u00a0", ""))
    except ValueError:
        return None


class NumberField(BaseField):
    """Numeric field; the declared number type guards every write."""

    KIND = FieldKind.NUMBER
    FIELD_TYPE_NAME = "NumberField"
    HOST_TAG = "crt-number-input"
    VALUE_SELECTOR = "input.mat-input-element"

    def __init__(
        self,
        page: Page,
        title: str,
        code: str,
        read_only: bool = False,
        required: bool = False,
        placeholder: Optional[str] = None,
        number_type: NumberFieldType = NumberFieldType.INTEGER,
        sink: Optional[LogSink] = None,
        timeouts_ms=None,
    ):
        super().__init__(page, title, code, read_only, required, placeholder, sink, timeouts_ms)
        self.number_type = NumberFieldType(number_type)

    async def set_int_value(self, value: int, debug: bool = False) -> None:
        """Set an integer value; the field must be declared Integer."""
        if self.number_type != NumberFieldType.INTEGER:
            raise FieldTypeMismatchError(
                f"Field '{self.title}' (Code='{self.code}') is not Integer type."
            )
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Integer value expected, got {type(value).__name__}.")

        await self._set_raw_value(format_invariant_number(value), debug)

    async def set_decimal_value(self, value: Decimal, debug: bool = False) -> None:
        """Set a decimal value; the field must be declared Decimal."""
        if self.number_type != NumberFieldType.DECIMAL:
            raise FieldTypeMismatchError(
                f"Field '{self.title}' (Code='{self.code}') is not Decimal type."
            )
        if not isinstance(value, Decimal):
            raise TypeError(f"Decimal value expected, got {type(value).__name__}.")

        await self._set_raw_value(format_invariant_number(value), debug)

    async def set_value(self, value: Union[int, Decimal, float], debug: bool = False) -> None:
        """
        Dispatch on the Python type: int goes to the Integer path,
        Decimal/float to the Decimal path.
        """
        if isinstance(value, bool):
            raise TypeError("Boolean is not a numeric field value.")
        if isinstance(value, int):
            await self.set_int_value(value, debug)
        elif isinstance(value, Decimal):
            await self.set_decimal_value(value, debug)
        elif isinstance(value, float):
            await self.set_decimal_value(Decimal(str(value)), debug)
        else:
            raise TypeError(f"Unsupported numeric value type: {type(value).__name__}.")

    async def _set_raw_value(self, text: str, debug: bool) -> None:
        with allure.step(f"Set number field '{self.title}' = {text}"):
            root = await self._require_container(debug)
            value_input: Locator = self.get_value_locator(root)

            try:
                await value_input.fill(text)
            except PlaywrightError as e:
                self._log(debug, f"set_value Playwright error for '{self.title}' (Code='{self.code}'): {e.message}")
                raise

            self._log(
                debug,
                f"set_value '{self.title}' (Code='{self.code}') = '{text}', Type={self.number_type.value}.",
            )

    async def get_value(self, debug: bool = False) -> Optional[Decimal]:
        """
        Return the current value as Decimal, or None when blank.

        Integer fields also return a Decimal (without a fractional part).
        """
        root = await self._require_container(debug)
        raw = await self.get_value_locator(root).input_value()
        parsed = parse_number(raw)

        self._log(
            debug,
            f"get_value '{self.title}' (Code='{self.code}') raw='{raw}', parsed={parsed}, "
            f"Type={self.number_type.value}.",
        )
        return parsed


__all__ = [
    "NumberField",
    "format_invariant_number",
    "parse_number",
]

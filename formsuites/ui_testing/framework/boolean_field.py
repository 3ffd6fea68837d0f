"""
================================================================================
Boolean Field
================================================================================

crt-checkbox controls.

Boolean fields are never required and never carry a placeholder, so those
two checks always pass. Read-only is detected from the checkbox's disabled
state instead of the common readonly markers.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .base_field import BaseField
from .enums import FieldKind
from .errors import CheckboxStateError
from .log_sink import LogSink


DISABLED_CLASS = "mat-checkbox-disabled"
CHECKBOX_WRAPPER_SELECTOR = "mat-checkbox"
CHECKBOX_LABEL_SELECTOR = "label.mat-checkbox-layout"


class BooleanField(BaseField):
    """Checkbox field."""

    KIND = FieldKind.BOOLEAN
    FIELD_TYPE_NAME = "BooleanField"
    HOST_TAG = "crt-checkbox"
    LABEL_SELECTOR = ".crt-checkbox-label"
    VALUE_SELECTOR = "input.mat-checkbox-input"

    def __init__(
        self,
        page: Page,
        title: str,
        code: str,
        read_only: bool = False,
        sink: Optional[LogSink] = None,
        timeouts_ms=None,
    ):
        super().__init__(
            page, title, code,
            read_only=read_only,
            required=False,
            placeholder=None,
            sink=sink,
            timeouts_ms=timeouts_ms,
        )

    async def detect_read_only(self, root: Locator, debug: bool) -> bool:
        value = self.get_value_locator(root)

        disabled_attr = await value.get_attribute("disabled")
        disabled = await value.is_disabled()
        input_class = await value.get_attribute("class") or ""

        wrapper = root.locator(CHECKBOX_WRAPPER_SELECTOR)
        wrapper_class = ""
        if await wrapper.count() > 0:
            wrapper_class = await wrapper.first.get_attribute("class") or ""

        detected = (
            disabled
            or disabled_attr is not None
            or DISABLED_CLASS in input_class.lower()
            or DISABLED_CLASS in wrapper_class.lower()
        )

        self._log(
            debug,
            f"detect_read_only: disabledAttr='{disabled_attr}', disabled={disabled}, "
            f"class='{input_class}', wrapperClass='{wrapper_class}', Result={detected}",
        )
        return detected

    async def check_if_required(self, debug: bool = False) -> bool:
        self._log(debug, "check_if_required: Boolean fields are never required. Expected=False.")
        return True

    async def check_placeholder(self, debug: bool = False) -> bool:
        self._log(debug, "check_placeholder: Boolean fields do not use placeholders.")
        return True

    async def get_value(self, debug: bool = False) -> bool:
        root = await self._require_container(debug)
        is_checked = await self.get_value_locator(root).is_checked()

        self._log(debug, f"get_value '{self.title}' (Code='{self.code}') = {is_checked}.")
        return is_checked

    async def _click_target(self, root: Locator) -> Locator:
        wrapper = root.locator(CHECKBOX_WRAPPER_SELECTOR)
        if await wrapper.count() > 0:
            return wrapper.first

        label = root.locator(CHECKBOX_LABEL_SELECTOR)
        if await label.count() > 0:
            return label.first

        return self.get_value_locator(root)

    async def set_value(self, value: bool, debug: bool = False) -> None:
        """
        Move the checkbox to ``value``.

        No click is sent when the state already matches. Raises
        CheckboxStateError when a click does not reach the target state.
        """
        if not isinstance(value, bool):
            raise TypeError(f"Boolean value expected, got {type(value).__name__}.")

        with allure.step(f"Set checkbox '{self.title}' = {value}"):
            root = await self._require_container(debug)
            value_input = self.get_value_locator(root)
            current = await value_input.is_checked()

            self._log(debug, f"set_value '{self.title}' (Code='{self.code}') current={current}, target={value}")

            if current == value:
                return

            target = await self._click_target(root)
            try:
                await target.click()
            except PlaywrightError as e:
                self._log(debug, f"set_value Playwright error for '{self.title}' (Code='{self.code}'): {e.message}")
                raise

            new_value = await value_input.is_checked()
            if new_value != value:
                message = (
                    f"Clicking the checkbox did not change its state for field '{self.title}' "
                    f"(Code='{self.code}'). Expected={value}, Actual={new_value}"
                )
                self._log(debug, f"set_value error: {message}")
                raise CheckboxStateError(message)


__all__ = ["BooleanField"]

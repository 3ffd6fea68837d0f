"""
================================================================================
Text Field
================================================================================

Text-like controls: crt-input, crt-rich-text-editor, crt-email-input,
crt-phone-input and crt-web-input.

Notes:
    - Phone and link controls render a hidden input behind a styled proxy.
      When the value input is not visible the value is assigned by script
      and an ``input`` event is dispatched instead of simulated typing.
    - Email has two UI states: an "add email" trigger while empty and an
      editable input once populated. Reading falls back to the rendered
      mailto link when the input is hidden.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Dict, Optional

import allure
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .base_field import BaseField, build_host_selector
from .enums import FieldKind, TextFieldType
from .log_sink import LogSink


# Script used when the value input exists but is hidden
SET_HIDDEN_VALUE_SCRIPT = """(el, v) => {
    if (!el) { return; }
    el.value = v ?? '';
    const evt = new Event('input', { bubbles: true, cancelable: true });
    el.dispatchEvent(evt);
}"""

EMAIL_HIDDEN_CLASS = "crt-input-control-element-hidden"
EMAIL_TEXT_CONTAINER_SELECTOR = ".crt-input-control-email-text"
EMAIL_INPUT_SELECTOR = 'input[data-qa="email-field-input"]'
EMAIL_ADD_BUTTON_SELECTOR = '[data-qa="add-email-field-button"]'
EMAIL_LINK_SELECTOR = 'a[data-qa="email-link-field-href"]'


class TextField(BaseField):
    """
    Text field with a content subtype.

    Example:
        email = TextField(page, "Email", "Email_x1", content_type=TextFieldType.EMAIL)
        await email.set_value("user@example.com")
        assert await email.get_value() == "user@example.com"
    """

    KIND = FieldKind.TEXT
    FIELD_TYPE_NAME = "TextField"

    HOST_TAGS: Dict[TextFieldType, str] = {
        TextFieldType.TEXT: "crt-input",
        TextFieldType.RICH_TEXT: "crt-rich-text-editor",
        TextFieldType.EMAIL: "crt-email-input",
        TextFieldType.PHONE_NUMBER: "crt-phone-input",
        TextFieldType.LINK: "crt-web-input",
    }

    VALUE_SELECTORS: Dict[TextFieldType, str] = {
        TextFieldType.TEXT: "input, textarea",
        TextFieldType.RICH_TEXT: ".cke_textarea_inline",
        TextFieldType.EMAIL: f"{EMAIL_TEXT_CONTAINER_SELECTOR} {EMAIL_INPUT_SELECTOR}",
        TextFieldType.PHONE_NUMBER: "input[crtphoneinput], input.mat-input-element",
        TextFieldType.LINK: 'input[data-qa="web-field-input"], input.mat-input-element',
    }

    def __init__(
        self,
        page: Page,
        title: str,
        code: str,
        read_only: bool = False,
        required: bool = False,
        placeholder: Optional[str] = None,
        content_type: TextFieldType = TextFieldType.TEXT,
        sink: Optional[LogSink] = None,
        timeouts_ms=None,
        email_reveal_timeout_ms: int = 10_000,
    ):
        super().__init__(page, title, code, read_only, required, placeholder, sink, timeouts_ms)
        self.content_type = TextFieldType(content_type)
        self.email_reveal_timeout_ms = email_reveal_timeout_ms

    def build_container_selector(self) -> str:
        return build_host_selector(self.HOST_TAGS[self.content_type], self.code)

    def get_value_locator(self, root: Locator) -> Locator:
        return root.locator(self.VALUE_SELECTORS[self.content_type])

    # =========================================================================
    # Set / Clear
    # =========================================================================

    async def set_value(self, value: Optional[str], debug: bool = False) -> None:
        """
        Set text value into the field.

        Args:
            value: Text to set (None is treated as empty)
            debug: Write progress to the sink
        """
        value = value or ""
        with allure.step(f"Set text field '{self.title}' = '{value}'"):
            root = await self._require_container(debug)

            if self.content_type == TextFieldType.EMAIL:
                await self._set_email_value(root, value, debug)
                return

            await self._fill_or_assign(self.get_value_locator(root), value, debug)

    async def clear_value(self, debug: bool = False) -> None:
        """Blank the field value; email reuses its own set path."""
        if self.content_type == TextFieldType.EMAIL:
            await self.set_value("", debug)
            return

        root = await self._require_container(debug)
        await self._fill_or_assign(self.get_value_locator(root), "", debug)

    async def _is_visible(self, locator: Locator, debug: bool) -> bool:
        try:
            return await locator.is_visible()
        except PlaywrightError as e:
            self._log(debug, f"is_visible failed for '{self.title}' (Code='{self.code}'): {e.message}")
            return False

    async def _fill_or_assign(self, value_locator: Locator, value: str, debug: bool) -> None:
        if await self._is_visible(value_locator, debug):
            try:
                await value_locator.fill(value)
            except PlaywrightError as e:
                self._log(debug, f"fill failed for '{self.title}' (Code='{self.code}'): {e.message}")
                raise
            self._log(debug, f"set_value '{self.title}' (Code='{self.code}') = '{value}' via fill.")
            return

        try:
            await value_locator.evaluate(SET_HIDDEN_VALUE_SCRIPT, value)
        except PlaywrightError as e:
            self._log(debug, f"script fallback failed for '{self.title}' (Code='{self.code}'): {e.message}")
            raise
        self._log(
            debug,
            f"set_value '{self.title}' (Code='{self.code}') = '{value}' via script fallback (hidden input).",
        )

    async def _is_email_input_hidden(self, root: Locator) -> bool:
        container = root.locator(EMAIL_TEXT_CONTAINER_SELECTOR)
        container_class = await container.get_attribute("class") or ""
        return EMAIL_HIDDEN_CLASS in container_class.lower()

    async def _set_email_value(self, root: Locator, value: str, debug: bool) -> None:
        email_input = self.get_value_locator(root)

        if await self._is_email_input_hidden(root):
            self._log(debug, "set_value: email input is hidden, clicking 'add email' button.")
            add_button = root.locator(EMAIL_ADD_BUTTON_SELECTOR)
            if await add_button.count() > 0:
                await add_button.first.click()
            await email_input.wait_for(state="visible", timeout=self.email_reveal_timeout_ms)

        try:
            await email_input.fill(value)
        except PlaywrightError as e:
            self._log(debug, f"set_value Playwright error for '{self.title}' (Code='{self.code}'): {e.message}")
            raise
        self._log(debug, f"set_value '{self.title}' (Code='{self.code}') = '{value}'.")

    # =========================================================================
    # Get
    # =========================================================================

    async def get_value(self, debug: bool = False) -> str:
        """Return the current text value."""
        root = await self._require_container(debug)

        if self.content_type == TextFieldType.EMAIL:
            value = await self._get_email_value(root, debug)
        elif self.content_type == TextFieldType.RICH_TEXT:
            value = await self.get_value_locator(root).inner_text()
        else:
            value = await self.get_value_locator(root).input_value()

        self._log(debug, f"get_value '{self.title}' (Code='{self.code}') = '{value}'.")
        return value

    async def _get_email_value(self, root: Locator, debug: bool) -> str:
        if not await self._is_email_input_hidden(root):
            return await self.get_value_locator(root).input_value()

        link = root.locator(EMAIL_LINK_SELECTOR)
        if await link.count() == 0:
            return ""

        href = await link.first.get_attribute("href") or ""
        if href.lower().startswith("mailto:"):
            href = href[len("mailto:"):]

        inner_text = await link.first.inner_text()
        result = inner_text.strip() if inner_text and inner_text.strip() else href

        self._log(debug, f"get_value email: href='{href}', innerText='{inner_text}', result='{result}'.")
        return result


__all__ = ["TextField"]

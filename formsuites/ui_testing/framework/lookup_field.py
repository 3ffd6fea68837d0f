"""
================================================================================
Lookup Field
================================================================================

Single-select autocomplete (crt-combobox) controls.

Selection protocol:
    1. Clear the current selection (clear icon, else blank the input)
    2. Focus the input and type the option text
    3. Wait for the autocomplete panel (hard failure on timeout)
    4. Poll the rendered options until one matches or the budget elapses;
       disabled and service options ("Add new ...") never match
    5. Click the match, let the DOM settle, confirm the value is non-blank

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional

import allure
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .base_field import BaseField, is_truthy_attribute
from .config_loader import LookupTimings
from .enums import FieldKind
from .errors import DropdownNotShownError, LookupOptionNotFoundError, LookupSelectionError
from .log_sink import LogSink


PANEL_SELECTOR = "div.mat-autocomplete-panel.mat-autocomplete-visible"
OPTION_SELECTOR = "mat-option"
CLEAR_ICON_SELECTOR = ".combobox-expander.clear, mat-icon[svgicon='small-close']"
SELECTED_LINK_SELECTOR = ".link-wrap a.crt-link"

OPTION_TEXT_SELECTORS = (
    ".mat-option-text span[crttextoverflowtitle]",
    ".mat-option-text",
)

STICKY_OPTION_ID = "stickyBottomOption"
ADD_RECORD_ID_PREFIX = "addrecord_"
ADD_NEW_TEXT_PREFIX = "add new"


@dataclass
class LookupOption:
    """Snapshot of one rendered dropdown option."""
    index: int
    id: Optional[str]
    aria_disabled: Optional[str]
    text: str

    @property
    def is_disabled(self) -> bool:
        return (self.aria_disabled or "").lower() == "true"

    @property
    def is_service(self) -> bool:
        """Affordances such as "Add new record" that are not real values."""
        option_id = (self.id or "").lower()
        if option_id == STICKY_OPTION_ID.lower() or option_id.startswith(ADD_RECORD_ID_PREFIX):
            return True
        return self.text.lstrip().lower().startswith(ADD_NEW_TEXT_PREFIX)

    @property
    def is_selectable(self) -> bool:
        return not self.is_disabled and not self.is_service


def _printable(text: Optional[str]) -> str:
    if text is None:
        return "<null>"
    return text.replace("\r", "\\r").replace("\n", "\\n")


async def read_option_text(option: Locator) -> str:
    """Best-effort display text of a mat-option."""
    for selector in OPTION_TEXT_SELECTORS:
        candidate = option.locator(selector)
        try:
            if await candidate.count() > 0:
                return (await candidate.first.inner_text() or "").strip()
        except PlaywrightError:
            continue

    try:
        return (await option.inner_text() or "").strip()
    except PlaywrightError:
        return ""


async def read_option(option: Locator, index: int) -> LookupOption:
    try:
        option_id = await option.get_attribute("id")
    except PlaywrightError:
        option_id = None
    try:
        aria_disabled = await option.get_attribute("aria-disabled")
    except PlaywrightError:
        aria_disabled = None

    text = await read_option_text(option)
    return LookupOption(index=index, id=option_id, aria_disabled=aria_disabled, text=text)


def find_matching_option(options: List[LookupOption], target: str) -> Optional[LookupOption]:
    """Exact match first, then case-insensitive; unselectable options are skipped."""
    selectable = [o for o in options if o.is_selectable]

    for option in selectable:
        if option.text == target:
            return option

    lowered = target.lower()
    for option in selectable:
        if option.text.lower() == lowered:
            return option

    return None


class LookupField(BaseField):
    """
    Autocomplete lookup field.

    Example:
        owner = LookupField(page, "Owner", "ComboBox_owner")
        await owner.set_value("John Best")
        assert await owner.get_value() == "John Best"
    """

    KIND = FieldKind.LOOKUP
    FIELD_TYPE_NAME = "LookupField"
    HOST_TAG = "crt-combobox"
    VALUE_SELECTOR = "input.mat-input-element, input.crt-autocomplete-input, input[role='combobox']"

    def __init__(
        self,
        page: Page,
        title: str,
        code: str,
        read_only: bool = False,
        required: bool = False,
        placeholder: Optional[str] = None,
        sink: Optional[LogSink] = None,
        timeouts_ms=None,
        timings: Optional[LookupTimings] = None,
    ):
        super().__init__(page, title, code, read_only, required, placeholder, sink, timeouts_ms)
        self.timings = timings or LookupTimings()

    async def detect_read_only(self, root: Locator, debug: bool) -> bool:
        # Comboboxes render no lock icon; only attribute/disabled markers count
        value = self.get_value_locator(root)

        root_readonly = await root.get_attribute("readonly")
        input_readonly = await value.get_attribute("readonly")
        aria_readonly = await value.get_attribute("aria-readonly")
        disabled = await value.is_disabled()

        detected = (
            is_truthy_attribute(root_readonly)
            or is_truthy_attribute(input_readonly)
            or (aria_readonly or "").lower() == "true"
            or disabled
        )

        self._log(
            debug,
            f"detect_read_only: rootReadonly='{root_readonly}', inputReadonly='{input_readonly}', "
            f"ariaReadonly='{aria_readonly}', disabled={disabled}, Result={detected}",
        )
        return detected

    # =========================================================================
    # Get / Clear
    # =========================================================================

    async def get_value(self, debug: bool = False) -> Optional[str]:
        """
        Return the selected display text, or None when nothing is selected.

        The input text is preferred; a selection rendered as a link is the
        fallback.
        """
        root = await self._require_container(debug)

        try:
            value = await self.get_value_locator(root).input_value()
        except PlaywrightError as e:
            self._log(debug, f"get_value: error reading input for '{self.title}' (Code='{self.code}'): {e.message}")
            value = ""

        if value and value.strip():
            self._log(debug, f"get_value '{self.title}' (Code='{self.code}') from input='{value.strip()}'.")
            return value.strip()

        link = root.locator(SELECTED_LINK_SELECTOR)
        if await link.count() > 0:
            try:
                link_text = (await link.first.inner_text() or "").strip()
            except PlaywrightError as e:
                self._log(debug, f"get_value: error reading link for '{self.title}' (Code='{self.code}'): {e.message}")
                link_text = ""
            if link_text:
                self._log(debug, f"get_value '{self.title}' (Code='{self.code}') from link='{link_text}'.")
                return link_text

        self._log(debug, f"get_value '{self.title}' (Code='{self.code}') = null/empty.")
        return None

    async def clear_value(self, debug: bool = False) -> None:
        """Clear the selection: clear icon when rendered, else blank the input."""
        root = await self._require_container(debug)

        clear_icon = root.locator(CLEAR_ICON_SELECTOR)
        if await clear_icon.count() > 0:
            try:
                await clear_icon.first.click()
                self._log(debug, f"clear_value '{self.title}' (Code='{self.code}') via clear icon.")
                return
            except PlaywrightError as e:
                self._log(debug, f"clear_value: clear icon click failed for '{self.title}': {e.message}")

        try:
            await self.get_value_locator(root).fill("")
        except PlaywrightError as e:
            self._log(debug, f"clear_value: input fill failed for '{self.title}' (Code='{self.code}'): {e.message}")
            raise
        self._log(debug, f"clear_value '{self.title}' (Code='{self.code}') via input fill('').")

    # =========================================================================
    # Dropdown
    # =========================================================================

    async def _wait_for_panel(self, target: Optional[str], debug: bool) -> Locator:
        panels = self.page.locator(PANEL_SELECTOR)
        try:
            await panels.first.wait_for(state="visible", timeout=self.timings.panel_timeout_ms)
        except PlaywrightError as e:
            subject = f"for '{target}' " if target is not None else ""
            raise DropdownNotShownError(
                f"Autocomplete dropdown did not appear {subject}in lookup field "
                f"'{self.title}' (Code='{self.code}')."
            ) from e

        if debug:
            self._log(debug, f"visible autocomplete panel count = {await panels.count()}.")
        return panels.first

    async def _snapshot_options(self, dropdown: Locator, debug: bool) -> List[LookupOption]:
        options = dropdown.locator(OPTION_SELECTOR)
        count = await options.count()

        snapshot = []
        for i in range(count):
            info = await read_option(options.nth(i), i)
            self._log(
                debug,
                f"Option #{i}: id='{info.id}', aria-disabled='{info.aria_disabled}', text='{_printable(info.text)}'.",
            )
            snapshot.append(info)
        return snapshot

    # =========================================================================
    # Set / Select
    # =========================================================================

    async def set_value(self, option_text: str, debug: bool = False) -> None:
        """
        Select the option whose display text equals ``option_text``.

        Raises:
            ValueError: Blank option text
            DropdownNotShownError: No panel appeared after typing
            LookupOptionNotFoundError: No match within the poll budget
            LookupSelectionError: The clicked option left the field blank
        """
        if not option_text or not option_text.strip():
            raise ValueError("Option text must be provided.")

        target = option_text.strip()

        with allure.step(f"Select lookup '{self.title}' = '{target}'"):
            root = await self._require_container(debug)
            self._log(debug, f"set_value '{self.title}' (Code='{self.code}') attempting to set '{target}'.")

            await self.clear_value(debug)

            value_input = self.get_value_locator(root)
            try:
                await value_input.click()
                await value_input.fill(target)
            except PlaywrightError as e:
                self._log(debug, f"set_value: error typing into input for '{self.title}': {e.message}")
                raise
            self._log(debug, f"set_value: typed '{target}' into '{self.title}' (Code='{self.code}').")

            dropdown = await self._wait_for_panel(target, debug)
            match = await self._poll_for_option(dropdown, target, debug)

            option_locator = dropdown.locator(OPTION_SELECTOR).nth(match.index)
            try:
                await option_locator.click()
            except PlaywrightError as e:
                self._log(debug, f"set_value: cannot click option '{target}' for '{self.title}': {e.message}")
                raise
            self._log(debug, f"set_value: clicked option '{target}' for '{self.title}' (Code='{self.code}').")

            await self.page.wait_for_timeout(self.timings.settle_delay_ms)

            final_value = await self.get_value(debug)
            if not final_value:
                raise LookupSelectionError(
                    f"Failed to set value '{target}' for lookup field '{self.title}' "
                    f"(Code='{self.code}'): resulting value is empty."
                )
            self._log(debug, f"set_value: final value for '{self.title}' = '{final_value}'.")

    async def _poll_for_option(self, dropdown: Locator, target: str, debug: bool) -> LookupOption:
        budget_ms = self.timings.poll_budget_ms
        deadline = time.monotonic() + budget_ms / 1000
        iteration = 0

        while True:
            iteration += 1
            snapshot = await self._snapshot_options(dropdown, debug)
            self._log(debug, f"set_value: iteration={iteration}, options count={len(snapshot)}.")

            match = find_matching_option(snapshot, target)
            if match is not None:
                self._log(debug, f"set_value: MATCH option #{match.index} text='{match.text}'.")
                return match

            if time.monotonic() >= deadline:
                raise LookupOptionNotFoundError(
                    f"Option '{target}' not found in lookup field '{self.title}' (Code='{self.code}') "
                    f"within {budget_ms} ms after dropdown appeared."
                )

            await self.page.wait_for_timeout(self.timings.poll_interval_ms)

    async def select_option(self, option_text: str, debug: bool = False) -> None:
        await self.set_value(option_text, debug)

    async def get_available_options(self, debug: bool = False) -> List[str]:
        """
        Open the dropdown and list selectable option texts.

        Disabled and service options are left out. Nothing is selected.
        """
        root = await self._require_container(debug)
        await self.get_value_locator(root).click()

        dropdown = await self._wait_for_panel(None, debug)
        snapshot = await self._snapshot_options(dropdown, debug)

        texts = [o.text for o in snapshot if o.is_selectable and o.text.strip()]
        self._log(debug, f"get_available_options: collected {len(texts)} options: [{', '.join(texts)}].")
        return texts


__all__ = [
    "LookupField",
    "LookupOption",
    "find_matching_option",
    "read_option",
    "read_option_text",
]

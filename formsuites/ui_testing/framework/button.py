"""
================================================================================
Button
================================================================================

crt-button controls, located by technical code and optionally checked
against their visible caption.

Buttons never cache their host element: every call re-queries the page so
disabled state and caption are always read fresh.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .base_field import build_host_selector
from .errors import ButtonDisabledError, ButtonNotFoundError
from .log_sink import LogSink, loguru_sink


BUTTON_HOST_TAG = "crt-button"
CAPTION_SELECTOR = ".crt-button-caption, .btn-reversible-content, .mdc-button__label, .mat-mdc-button-touch-target"
CLICKABLE_SELECTOR = "button, .mdc-button, .mat-mdc-unelevated-button"
DEFAULT_CLICK_TIMEOUT_MS = 10_000


class Button:
    """
    Form button.

    Usage:
        save = Button(page, title="Save", code="SaveButton")
        if await save.check_if_exist():
            await save.click()
    """

    def __init__(
        self,
        page: Page,
        title: Optional[str],
        code: str,
        sink: Optional[LogSink] = None,
        click_timeout_ms: int = DEFAULT_CLICK_TIMEOUT_MS,
    ):
        if page is None:
            raise ValueError("Page must be provided.")
        if not code or not code.strip():
            raise ValueError("Code must be provided.")

        self.page = page
        self.title = title or ""
        self.code = code
        self.sink: LogSink = sink or loguru_sink
        self.click_timeout_ms = click_timeout_ms

    def __repr__(self) -> str:
        return f"Button(title={self.title!r}, code={self.code!r})"

    def _log(self, debug: bool, message: str) -> None:
        if debug:
            self.sink(f"[Button] {message}")

    def build_selector(self) -> str:
        return build_host_selector(BUTTON_HOST_TAG, self.code)

    def get_root_locator(self) -> Locator:
        return self.page.locator(self.build_selector())

    async def _read_caption(self, root: Locator) -> Optional[str]:
        try:
            caption = root.locator(CAPTION_SELECTOR)
            if await caption.count() > 0:
                return (await caption.first.inner_text() or "").strip()
        except PlaywrightError:
            pass
        return None

    async def check_if_exist(self, debug: bool = False) -> bool:
        """
        Snapshot check, no waiting.

        True when the host is present and visible and, for a titled button,
        the caption equals the title ignoring case.
        """
        locator = self.get_root_locator()

        try:
            count = await locator.count()
        except PlaywrightError as e:
            self._log(debug, f"check_if_exist: error counting elements for Title='{self.title}', Code='{self.code}': {e.message}")
            return False

        if count == 0:
            self._log(debug, f"check_if_exist: Title='{self.title}', Code='{self.code}', Exists=False (Count=0).")
            return False

        root = locator.first
        try:
            is_visible = await root.is_visible()
        except PlaywrightError as e:
            self._log(debug, f"check_if_exist: is_visible error for Title='{self.title}', Code='{self.code}': {e.message}")
            is_visible = False

        caption = await self._read_caption(root)

        title_matches = True
        if self.title.strip():
            title_matches = bool(caption) and caption.lower() == self.title.strip().lower()

        self._log(
            debug,
            f"check_if_exist: Title='{self.title}', Code='{self.code}', Visible={is_visible}, "
            f"Caption='{caption}', TitleMatches={title_matches}.",
        )
        return is_visible and title_matches

    async def is_disabled(self, debug: bool = False) -> bool:
        """True when the host carries ``aria-disabled="true"`` or a ``disabled`` attribute."""
        root = self.get_root_locator().first
        try:
            aria_disabled = await root.get_attribute("aria-disabled")
            disabled_attr = await root.get_attribute("disabled")
        except PlaywrightError as e:
            self._log(debug, f"is_disabled: attribute read failed for Code='{self.code}': {e.message}")
            return False

        disabled = (aria_disabled or "").lower() == "true" or disabled_attr is not None
        self._log(
            debug,
            f"is_disabled: Title='{self.title}', Code='{self.code}', IsDisabled={disabled}, "
            f"aria-disabled='{aria_disabled}', disabled='{disabled_attr}'.",
        )
        return disabled

    async def click(self, debug: bool = False) -> None:
        """
        Click the button.

        Raises:
            ButtonNotFoundError: No host element in the DOM
            ButtonDisabledError: Host is technically disabled
        """
        with allure.step(f"Click button '{self.title or self.code}'"):
            locator = self.get_root_locator()
            if await locator.count() == 0:
                raise ButtonNotFoundError(
                    f"Button '{self.title}' (Code='{self.code}') not found on page "
                    f"(selector '{self.build_selector()}')."
                )

            root = locator.first
            clickable = root.locator(CLICKABLE_SELECTOR)
            target = clickable.first if await clickable.count() > 0 else root

            if await self.is_disabled(debug):
                raise ButtonDisabledError(
                    f"Button '{self.title}' (Code='{self.code}') is disabled and cannot be clicked."
                )

            await target.click(timeout=self.click_timeout_ms)
            self._log(debug, f"click: clicked button '{self.title}' (Code='{self.code}').")


__all__ = ["Button"]

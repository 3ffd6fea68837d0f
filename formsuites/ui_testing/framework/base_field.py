"""
================================================================================
Base Field
================================================================================

Foundation class for every field kind rendered on a form page.

Provides:
    - Container resolution by technical code with escalating timeouts
    - Label-based disambiguation between containers sharing one code
    - Lazy container cache with explicit invalidation
    - Declared-vs-observed checks: existence, read-only, required, placeholder

The resolved container is cached on first success and never re-validated.
Callers must call ``invalidate_cache()`` after any full page reload
(``PageContext.reload()`` does it for every field it owns).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

import allure
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .enums import FieldKind
from .errors import FieldNotFoundError
from .log_sink import LogSink, loguru_sink


# Escalating visibility waits (ms) used when no override is given
DEFAULT_TIMEOUTS_MS = (10_000, 20_000, 30_000)


def normalize_label_text(text: Optional[str]) -> str:
    """
    Normalize a label caption for comparison.

    Trims whitespace and strips trailing ``*``, ``:`` and spaces used to
    decorate required fields.

    Examples:
        >>> normalize_label_text("Name *")
        'Name'
        >>> normalize_label_text("Name:")
        'Name'
    """
    if text is None:
        return ""
    return text.strip().rstrip(" *:").strip()


def is_truthy_attribute(value: Optional[str]) -> bool:
    """An HTML flag attribute counts as set unless absent, empty or "false"."""
    return bool(value) and value.lower() != "false"


def build_host_selector(host_tag: str, code: str) -> str:
    """Selector matching a host tag by either ``element-name`` or ``id``."""
    return f'{host_tag}[element-name="{code}"], {host_tag}[id="{code}"]'


class BaseField(ABC):
    """
    Base class for all form fields.

    Subclasses declare the host tag and override the value/label locators
    and, where the control differs, the read-only/required detection.

    Usage:
        field = TextField(page, title="Name", code="Input_zsrmb1i", required=True)
        assert await field.check_field()
        await field.set_value("Sample Name")
    """

    KIND: FieldKind
    FIELD_TYPE_NAME: str = "Field"
    HOST_TAG: str = ""

    LABEL_SELECTOR = ".crt-input-label"
    VALUE_SELECTOR = "input, textarea"
    READONLY_ICON_SELECTOR = ".readonly-icon"
    REQUIRED_LABEL_CLASS = "crt-input-required"

    def __init__(
        self,
        page: Page,
        title: str,
        code: str,
        read_only: bool = False,
        required: bool = False,
        placeholder: Optional[str] = None,
        sink: Optional[LogSink] = None,
        timeouts_ms: Optional[Sequence[int]] = None,
    ):
        """
        Initialize field.

        Args:
            page: Playwright Page the field lives on
            title: Human label, used to pick between containers sharing a code
            code: Technical code (element-name / id of the host element)
            read_only: Declared read-only state
            required: Declared required state
            placeholder: Declared placeholder text (None when not used)
            sink: Debug message sink, defaults to Loguru
            timeouts_ms: Escalating resolution timeouts, defaults to 10s/20s/30s
        """
        if page is None:
            raise ValueError("Page must be provided.")
        if not title or not title.strip():
            raise ValueError("Title must be provided.")
        if not code or not code.strip():
            raise ValueError("Code must be provided.")

        self.page = page
        self.title = title
        self.code = code
        self.read_only = read_only
        self.required = required
        self.placeholder = placeholder
        self.sink: LogSink = sink or loguru_sink
        self.timeouts_ms = tuple(timeouts_ms or DEFAULT_TIMEOUTS_MS)

        self._cached_container: Optional[Locator] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(title={self.title!r}, code={self.code!r})"

    # =========================================================================
    # Locators
    # =========================================================================

    def build_container_selector(self) -> str:
        """Selector matching every container that carries this field's code."""
        return build_host_selector(self.HOST_TAG, self.code)

    def get_label_locator(self, root: Locator) -> Locator:
        return root.locator(self.LABEL_SELECTOR)

    def get_value_locator(self, root: Locator) -> Locator:
        return root.locator(self.VALUE_SELECTOR)

    # =========================================================================
    # Container resolution
    # =========================================================================

    @property
    def cached_container(self) -> Optional[Locator]:
        return self._cached_container

    def invalidate_cache(self) -> None:
        """Forget the resolved container (call after a page reload)."""
        self._cached_container = None

    def _log(self, debug: bool, message: str) -> None:
        if debug:
            self.sink(f"[Field:{self.FIELD_TYPE_NAME}] {message}")

    async def resolve_container(
        self,
        debug: bool = False,
        timeout_override_ms: Optional[int] = None,
    ) -> Optional[Locator]:
        """
        Locate the field container on the page.

        For every timeout tier: wait for any candidate to become visible,
        then look for the candidate whose normalized label equals the
        normalized title. Returns None when all tiers are exhausted.

        Args:
            debug: Write progress to the sink
            timeout_override_ms: Single timeout replacing the default tiers

        Returns:
            Container locator, or None when the field is absent
        """
        if self._cached_container is not None:
            return self._cached_container

        selector = self.build_container_selector()
        candidates = self.page.locator(selector)
        timeouts = (timeout_override_ms,) if timeout_override_ms else self.timeouts_ms

        for attempt, timeout in enumerate(timeouts, start=1):
            self._log(
                debug,
                f"Attempt {attempt} to find field '{self.title}' (Code='{self.code}') "
                f"with timeout {timeout} ms.",
            )

            try:
                await candidates.first.wait_for(state="visible", timeout=timeout)
            except PlaywrightTimeoutError:
                self._log(debug, f"Attempt {attempt} timed out.")
                continue
            except PlaywrightError as e:
                self._log(debug, f"Attempt {attempt} Playwright error: {e.message}")
                continue

            try:
                if debug:
                    await self._log_candidates(candidates)
                matched = await self._find_matching_container_by_label(candidates, debug)
            except PlaywrightError as e:
                self._log(debug, f"Attempt {attempt} failed while reading labels: {e.message}")
                continue

            if matched is not None:
                self._cached_container = matched
                return matched

        return None

    async def _log_candidates(self, candidates: Locator) -> None:
        count = await candidates.count()
        self._log(True, f"Total field containers on page: {count}")
        for i in range(count):
            container = candidates.nth(i)
            container_id = await container.get_attribute("id")
            element_name = await container.get_attribute("element-name")
            label = self.get_label_locator(container)
            label_text = ""
            if await label.count() > 0:
                label_text = await label.first.inner_text()
            self._log(
                True,
                f" #{i}: id='{container_id}', element-name='{element_name}', label='{label_text}'",
            )

    async def _find_matching_container_by_label(
        self,
        candidates: Locator,
        debug: bool,
    ) -> Optional[Locator]:
        count = await candidates.count()
        expected = normalize_label_text(self.title)

        for i in range(count):
            container = candidates.nth(i)
            label = self.get_label_locator(container)
            if await label.count() <= 0:
                continue

            actual = normalize_label_text(await label.first.inner_text())
            equal = actual == expected
            self._log(debug, f"Label match. Expected='{expected}', Actual='{actual}', Result={equal}")

            if equal:
                return container

        return None

    async def _require_container(self, debug: bool = False) -> Locator:
        """Resolve the container or raise FieldNotFoundError."""
        root = await self.resolve_container(debug)
        if root is None:
            raise FieldNotFoundError(self.title, self.code)
        return root

    # =========================================================================
    # State checks
    # =========================================================================

    async def check_if_exist(
        self,
        debug: bool = False,
        timeout_override_ms: Optional[int] = None,
    ) -> bool:
        """Return True when the container resolves."""
        return await self.resolve_container(debug, timeout_override_ms) is not None

    async def detect_read_only(self, root: Locator, debug: bool) -> bool:
        """Observe read-only state using the common markup rules."""
        value = self.get_value_locator(root)

        root_readonly = await root.get_attribute("readonly")
        input_readonly = await value.get_attribute("readonly")
        aria_readonly = await value.get_attribute("aria-readonly")
        disabled = await value.is_disabled()
        lock_icons = await root.locator(self.READONLY_ICON_SELECTOR).count()

        detected = (
            is_truthy_attribute(root_readonly)
            or is_truthy_attribute(input_readonly)
            or (aria_readonly or "").lower() == "true"
            or disabled
            or lock_icons > 0
        )

        self._log(
            debug,
            f"detect_read_only: rootReadonly='{root_readonly}', inputReadonly='{input_readonly}', "
            f"ariaReadonly='{aria_readonly}', disabled={disabled}, lockIconCount={lock_icons}, "
            f"Result={detected}",
        )
        return detected

    async def check_if_read_only(self, debug: bool = False) -> bool:
        """Return True when the observed read-only state equals the declared one."""
        root = await self.resolve_container(debug)
        if root is None:
            self._log(debug, f"check_if_read_only: field '{self.title}' (Code='{self.code}') not found.")
            return False

        detected = await self.detect_read_only(root, debug)
        self._log(debug, f"check_if_read_only: Expected={self.read_only}, Detected={detected}")
        return detected == self.read_only

    async def detect_required(self, root: Locator, debug: bool) -> bool:
        """Observe required state using the common markup rules."""
        value = self.get_value_locator(root)

        required_attr = await value.get_attribute("required")
        aria_required = await value.get_attribute("aria-required")
        input_class = await value.get_attribute("class") or ""

        label = self.get_label_locator(root)
        label_class = ""
        if await label.count() > 0:
            label_class = await label.first.get_attribute("class") or ""

        detected = (
            is_truthy_attribute(required_attr)
            or (aria_required or "").lower() == "true"
            or "required" in input_class.lower()
            or self.REQUIRED_LABEL_CLASS in label_class.lower()
        )

        self._log(
            debug,
            f"detect_required: requiredAttr='{required_attr}', ariaRequired='{aria_required}', "
            f"inputClass='{input_class}', labelClass='{label_class}', Result={detected}",
        )
        return detected

    async def check_if_required(self, debug: bool = False) -> bool:
        """Return True when the observed required state equals the declared one."""
        root = await self.resolve_container(debug)
        if root is None:
            self._log(debug, f"check_if_required: field '{self.title}' (Code='{self.code}') not found.")
            return False

        detected = await self.detect_required(root, debug)
        self._log(debug, f"check_if_required: Expected={self.required}, Detected={detected}")
        return detected == self.required

    async def check_placeholder(self, debug: bool = False) -> bool:
        """
        Compare the rendered placeholder with the declared one.

        ``data-placeholder`` wins over ``placeholder``; blank values on either
        side count as "no placeholder".
        """
        root = await self.resolve_container(debug)
        if root is None:
            self._log(debug, f"check_placeholder: field '{self.title}' (Code='{self.code}') not found.")
            return False

        value = self.get_value_locator(root)
        data_placeholder = await value.get_attribute("data-placeholder")
        placeholder_attr = await value.get_attribute("placeholder")

        actual_raw = placeholder_attr if not (data_placeholder or "").strip() else data_placeholder
        actual = (actual_raw or "").strip() or None
        expected = (self.placeholder or "").strip() or None

        self._log(debug, f"check_placeholder: Expected='{expected}', Actual='{actual}'")
        return actual == expected

    async def check_field(
        self,
        debug: bool = False,
        timeout_override_ms: Optional[int] = None,
    ) -> bool:
        """
        Composite check: existence, read-only, required, placeholder.

        Short-circuits on the first failing sub-check.
        """
        with allure.step(f"Check field '{self.title}' ({self.code})"):
            if not await self.check_if_exist(debug, timeout_override_ms):
                self._log(debug, f"check_field: field '{self.title}' (Code='{self.code}') does not exist.")
                return False

            if not await self.check_if_read_only(debug):
                self._log(debug, "check_field: read-only check failed.")
                return False

            if not await self.check_if_required(debug):
                self._log(debug, "check_field: required check failed.")
                return False

            if not await self.check_placeholder(debug):
                self._log(debug, "check_field: placeholder check failed.")
                return False

            self._log(debug, "check_field: all checks passed.")
            return True

    # =========================================================================
    # Value operations (kind specific)
    # =========================================================================

    @abstractmethod
    async def get_value(self, debug: bool = False):
        """Read the current value as a normalized domain value."""

    @abstractmethod
    async def set_value(self, value, debug: bool = False) -> None:
        """Write a value into the field."""


__all__ = [
    "BaseField",
    "DEFAULT_TIMEOUTS_MS",
    "build_host_selector",
    "is_truthy_attribute",
    "normalize_label_text",
]

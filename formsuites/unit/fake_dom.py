"""
================================================================================
Fake DOM
================================================================================

In-memory stand-in for the subset of the Playwright async Page/Locator API
the engine uses. Elements are registered under the exact selector strings
the engine queries, so no CSS parsing is involved.

    page = FakePage()
    host = page.add(build_host_selector("crt-input", "Name"), FakeElement())
    host.add(".crt-input-label", FakeElement(text="Name *"))
    host.add("input, textarea", FakeElement(value="John"))

Locators are lazy: they re-resolve their elements on every call, so DOM
changes made by click/fill callbacks are seen by later reads.

Driver failures are raised as real ``playwright.async_api`` errors.
================================================================================
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


class FakeElement:
    """One DOM node: attributes, text/value, state flags and child nodes."""

    def __init__(
        self,
        text: str = "",
        value: str = "",
        attrs: Optional[Dict[str, Optional[str]]] = None,
        visible: bool = True,
        disabled: bool = False,
        checked: bool = False,
        on_click: Optional[Callable[["FakeElement"], None]] = None,
        on_fill: Optional[Callable[["FakeElement", str], None]] = None,
    ):
        self.text = text
        self.value = value
        self.attrs: Dict[str, Optional[str]] = dict(attrs or {})
        self.visible = visible
        self.disabled = disabled
        self.checked = checked
        self.on_click = on_click
        self.on_fill = on_fill

        self.children: Dict[str, List[FakeElement]] = {}
        self.click_count = 0
        self.fill_history: List[str] = []
        self.evaluate_history: List[Any] = []

    def add(self, selector: str, element: "FakeElement") -> "FakeElement":
        self.children.setdefault(selector, []).append(element)
        return element

    def remove(self, selector: str) -> None:
        self.children.pop(selector, None)


class FakeLocator:
    """Lazy query over the fake DOM."""

    def __init__(self, page: "FakePage", resolve: Callable[[], List[FakeElement]], description: str):
        self._page = page
        self._resolve = resolve
        self._description = description

    def __repr__(self) -> str:
        return f"FakeLocator({self._description})"

    @property
    def elements(self) -> List[FakeElement]:
        return self._resolve()

    def _one(self) -> FakeElement:
        elements = self._resolve()
        if not elements:
            raise PlaywrightTimeoutError(f"Timeout: no element matches {self._description}")
        return elements[0]

    # Query -----------------------------------------------------------------

    def locator(self, selector: str) -> "FakeLocator":
        def resolve() -> List[FakeElement]:
            found: List[FakeElement] = []
            for element in self._resolve():
                found.extend(element.children.get(selector, []))
            return found

        return FakeLocator(self._page, resolve, f"{self._description} >> {selector}")

    @property
    def first(self) -> "FakeLocator":
        return self.nth(0)

    def nth(self, index: int) -> "FakeLocator":
        def resolve() -> List[FakeElement]:
            elements = self._resolve()
            return [elements[index]] if index < len(elements) else []

        return FakeLocator(self._page, resolve, f"{self._description} >> nth={index}")

    async def count(self) -> int:
        return len(self._resolve())

    # Reads -----------------------------------------------------------------

    async def get_attribute(self, name: str) -> Optional[str]:
        return self._one().attrs.get(name)

    async def inner_text(self) -> str:
        return self._one().text

    async def input_value(self) -> str:
        return self._one().value

    async def is_visible(self) -> bool:
        elements = self._resolve()
        return bool(elements) and elements[0].visible

    async def is_disabled(self) -> bool:
        return self._one().disabled

    async def is_checked(self) -> bool:
        return self._one().checked

    # Actions ---------------------------------------------------------------

    async def click(self, timeout: Optional[float] = None) -> None:
        element = self._one()
        if element.attrs.get("data-click-error") is not None:
            raise PlaywrightError(element.attrs["data-click-error"])
        element.click_count += 1
        self._page.clicks.append(self._description)
        if element.on_click:
            element.on_click(element)

    async def fill(self, value: str) -> None:
        element = self._one()
        element.value = value
        element.fill_history.append(value)
        if element.on_fill:
            element.on_fill(element, value)

    async def evaluate(self, script: str, arg: Any = None) -> None:
        element = self._one()
        element.evaluate_history.append(arg)
        element.value = "" if arg is None else arg

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        self._page.wait_for_calls.append((self._description, state, timeout))
        elements = self._resolve()

        if state == "visible" and elements and elements[0].visible:
            return
        if state == "attached" and elements:
            return
        if state == "detached" and not elements:
            return
        if state == "hidden" and (not elements or not elements[0].visible):
            return

        raise PlaywrightTimeoutError(
            f"Timeout {timeout}ms exceeded waiting for {self._description} to be {state}"
        )


class FakePage:
    """Top level of the fake DOM; records waits, clicks and delays."""

    def __init__(self) -> None:
        self.roots: Dict[str, List[FakeElement]] = {}
        self.wait_for_calls: List[Any] = []
        self.clicks: List[str] = []
        self.timeouts_waited: List[float] = []
        self.locator_calls = 0

    def add(self, selector: str, element: FakeElement) -> FakeElement:
        self.roots.setdefault(selector, []).append(element)
        return element

    def remove(self, selector: str) -> None:
        self.roots.pop(selector, None)

    def locator(self, selector: str) -> FakeLocator:
        self.locator_calls += 1
        return FakeLocator(self, lambda: self.roots.get(selector, []), selector)

    async def wait_for_timeout(self, timeout: float) -> None:
        self.timeouts_waited.append(timeout)
        await asyncio.sleep(timeout / 1000)


# =============================================================================
# Builders for common field markup
# =============================================================================

def add_field_host(
    page: FakePage,
    host_selector: str,
    label: Optional[str],
    label_selector: str = ".crt-input-label",
    label_class: str = "crt-input-label",
    host_attrs: Optional[Dict[str, Optional[str]]] = None,
) -> FakeElement:
    """Register a field host element with an optional label child."""
    host = page.add(host_selector, FakeElement(attrs=host_attrs))
    if label is not None:
        host.add(label_selector, FakeElement(text=label, attrs={"class": label_class}))
    return host


def add_value_input(
    host: FakeElement,
    selector: str,
    value: str = "",
    attrs: Optional[Dict[str, Optional[str]]] = None,
    **kwargs: Any,
) -> FakeElement:
    return host.add(selector, FakeElement(value=value, attrs=attrs, **kwargs))


__all__ = [
    "FakeElement",
    "FakeLocator",
    "FakePage",
    "add_field_host",
    "add_value_input",
]

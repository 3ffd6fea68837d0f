"""
================================================================================
Page Context
================================================================================

One opened form page plus the fields and buttons its descriptor declares,
keyed by technical code (case-sensitive).

Fields cache their resolved containers; after a full page reload those
caches are stale, so always reload through ``PageContext.reload()`` (or
call ``invalidate_fields()`` after reloading some other way).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Dict, Optional, Type, TypeVar

from playwright.async_api import Browser

from .base_field import BaseField
from .button import Button
from .config_loader import EngineSettings
from .environment import Environment
from .errors import ConfigurationError
from .field_factory import create_button, create_field
from .form_page import FormPage
from .log_sink import LogSink
from .page_config import PageConfig


F = TypeVar("F", bound=BaseField)


class PageContext:
    """
    Fields and buttons of one page, looked up by code.

    Usage:
        ctx = await create_page_context(config.get_page("ContactEdit"), env, browser)
        email = ctx.get_field("Email_x1", TextField)
        await email.set_value("user@example.com")
        await ctx.get_button("SaveButton").click()
    """

    def __init__(
        self,
        form_page: FormPage,
        config: PageConfig,
        fields: Dict[str, BaseField],
        buttons: Dict[str, Button],
    ):
        if form_page is None:
            raise ValueError("Form page must be provided.")
        if config is None:
            raise ValueError("Page config must be provided.")

        self.form_page = form_page
        self.config = config
        self.fields = dict(fields)
        self.buttons = dict(buttons)

    def __repr__(self) -> str:
        return (
            f"PageContext(page={self.config.name!r}, fields={len(self.fields)}, "
            f"buttons={len(self.buttons)})"
        )

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_field(self, code: str, field_type: Optional[Type[F]] = None) -> F:
        """
        Return the field with ``code``.

        Raises:
            ValueError: Blank code
            KeyError: No such field on this page
            TypeError: Field is not an instance of ``field_type``
        """
        if not code or not code.strip():
            raise ValueError("Field code must be provided.")

        try:
            field = self.fields[code]
        except KeyError:
            raise KeyError(
                f"Field with code '{code}' was not found in PageContext for page '{self.config.name}'."
            ) from None

        if field_type is not None and not isinstance(field, field_type):
            raise TypeError(
                f"Field with code '{code}' is of type '{type(field).__name__}', "
                f"which is not '{field_type.__name__}'."
            )
        return field

    def try_get_field(self, code: str, field_type: Optional[Type[F]] = None) -> Optional[F]:
        """Like get_field, but None instead of an error."""
        if not code or not code.strip():
            return None

        field = self.fields.get(code)
        if field is None:
            return None
        if field_type is not None and not isinstance(field, field_type):
            return None
        return field

    def get_button(self, code: str) -> Button:
        if not code or not code.strip():
            raise ValueError("Button code must be provided.")

        try:
            return self.buttons[code]
        except KeyError:
            raise KeyError(
                f"Button with code '{code}' was not found in PageContext for page '{self.config.name}'."
            ) from None

    def try_get_button(self, code: str) -> Optional[Button]:
        if not code or not code.strip():
            return None
        return self.buttons.get(code)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def invalidate_fields(self) -> None:
        """Drop every field's cached container."""
        for field in self.fields.values():
            field.invalidate_cache()

    async def reload(self, debug: bool = False) -> None:
        """Reload the page and invalidate all field caches."""
        await self.form_page.reload(debug)
        self.invalidate_fields()

    async def check_all_fields(self, debug: bool = False) -> Dict[str, bool]:
        """Run ``check_field`` on every declared field; returns code -> result."""
        results = {}
        for code, field in self.fields.items():
            results[code] = await field.check_field(debug)
        return results


# =============================================================================
# Factory functions
# =============================================================================

def build_page_context(
    form_page: FormPage,
    config: PageConfig,
    settings: Optional[EngineSettings] = None,
    sink: Optional[LogSink] = None,
) -> PageContext:
    """Create fields and buttons for an already initialized page handle."""
    if form_page is None or form_page.page is None:
        raise ValueError("Form page must be initialized before building its context.")
    if config is None:
        raise ValueError("Page config must be provided.")

    settings = settings or EngineSettings()
    page = form_page.page

    fields: Dict[str, BaseField] = {}
    for field_config in config.fields:
        if field_config.code in fields:
            raise ConfigurationError(
                f"Duplicate field code '{field_config.code}' on page '{config.name}'."
            )
        fields[field_config.code] = create_field(page, field_config, settings, sink)

    buttons: Dict[str, Button] = {}
    for button_config in config.buttons:
        if button_config.code in buttons:
            raise ConfigurationError(
                f"Duplicate button code '{button_config.code}' on page '{config.name}'."
            )
        buttons[button_config.code] = create_button(page, button_config, settings, sink)

    return PageContext(form_page, config, fields, buttons)


async def create_page_context(
    config: PageConfig,
    environment: Environment,
    browser: Browser,
    username: Optional[str] = None,
    debug: bool = False,
    settings: Optional[EngineSettings] = None,
    sink: Optional[LogSink] = None,
) -> PageContext:
    """
    Open the page described by ``config`` and build its context.

    When ``username`` is None the environment's first user is used.
    """
    if config is None:
        raise ValueError("Page config must be provided.")
    if not config.url or not config.url.strip():
        raise ConfigurationError(f"Page '{config.name}' has no url.")

    settings = settings or EngineSettings()
    form_page = FormPage(
        config.url,
        environment,
        browser,
        username=username,
        sink=sink,
        loading_timeout_ms=settings.page_loading_timeout_ms,
    )
    await form_page.initialize(debug)

    return build_page_context(form_page, config, settings, sink)


__all__ = [
    "PageContext",
    "build_page_context",
    "create_page_context",
]

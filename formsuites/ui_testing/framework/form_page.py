"""
================================================================================
Form Page
================================================================================

Navigable page handle for one form of the site under test.

Responsibilities:
    - Build the full URL from the environment base URL and a relative path
    - Open an isolated browser context carrying the user's session cookies
    - Navigate and wait for the site's loading overlay to go away
    - Reload, HTML snapshot and screenshot utilities

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

import allure
from loguru import logger
from playwright.async_api import Browser, BrowserContext, Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .environment import Environment, UserSession, normalize_relative_path
from .log_sink import LogSink, loguru_sink


LOADING_OVERLAY_SELECTOR = "#loading-animation"
DEFAULT_PAGE_LOADING_TIMEOUT_MS = 60_000

# Default output directory for screenshots
SCREENSHOT_DIR = Path(__file__).parent.parent / "screenshots"


def combine_url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + normalize_relative_path(path)


class FormPage:
    """
    Page handle bound to one user session.

    Usage:
        async with FormPage("/shell/#Section/Contacts", env, browser) as form_page:
            await form_page.initialize()
            ...
    """

    def __init__(
        self,
        path: str,
        environment: Environment,
        browser: Browser,
        username: Optional[str] = None,
        sink: Optional[LogSink] = None,
        loading_timeout_ms: int = DEFAULT_PAGE_LOADING_TIMEOUT_MS,
    ):
        if not path or not path.strip():
            raise ValueError("Path must be provided.")
        if environment is None:
            raise ValueError("Environment must be provided.")
        if browser is None:
            raise ValueError("Browser must be provided.")

        self.environment = environment
        self.browser = browser
        self.path = normalize_relative_path(path)
        self.full_url = combine_url(environment.base_url, self.path)
        self.user: UserSession = (
            environment.get_user(username) if username and username.strip() else environment.default_user()
        )
        self.sink: LogSink = sink or loguru_sink
        self.loading_timeout_ms = loading_timeout_ms

        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    def _log(self, debug: bool, message: str) -> None:
        if debug:
            self.sink(f"[FormPage] {message}")

    def _require_page(self) -> Page:
        if self.page is None:
            raise RuntimeError("Page is not initialized. Call initialize() first.")
        return self.page

    async def __aenter__(self) -> "FormPage":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def initialize(self, debug: bool = False) -> None:
        """Open the context, inject cookies and navigate. Idempotent."""
        if self.context is not None and self.page is not None:
            return

        with allure.step(f"Open page {self.path} as '{self.user.username}'"):
            self.context = await self.browser.new_context(base_url=self.environment.base_url)

            self._log(debug, f"BaseUrl: {self.environment.base_url}")
            self._log(debug, f"Path: {self.path}")
            self._log(debug, f"User: {self.user.username}")
            self._log(debug, f"Cookies count in user session: {len(self.user.cookies)}")

            if self.user.cookies:
                host = urlparse(self.environment.base_url).hostname
                await self.context.add_cookies([
                    {"name": name, "value": value, "domain": host, "path": "/"}
                    for name, value in self.user.cookies.items()
                ])
            else:
                self._log(debug, "WARNING: user has no cookies, navigation will be anonymous.")

            self.page = await self.context.new_page()
            response = await self.page.goto(self.full_url, wait_until="networkidle")

            if response is None:
                self._log(debug, "goto returned no response.")
            else:
                self._log(debug, f"goto: Status={response.status}, Url={response.url}")

            await self._wait_for_page_loaded(debug)
            logger.debug(f"Form page ready: {self.page.url}")

    async def reload(self, debug: bool = False) -> None:
        page = self._require_page()
        with allure.step(f"Reload page {self.path}"):
            response = await page.reload(wait_until="networkidle")
            self._log(debug, f"reload: Status={response.status if response else None}, Url={page.url}")
            await self._wait_for_page_loaded(debug)

    async def _wait_for_page_loaded(self, debug: bool) -> None:
        page = self._require_page()
        try:
            await page.locator(LOADING_OVERLAY_SELECTOR).wait_for(
                state="detached", timeout=self.loading_timeout_ms
            )
            self._log(debug, f"{LOADING_OVERLAY_SELECTOR} detached.")
        except PlaywrightTimeoutError as e:
            self._log(debug, f"wait for page loaded timeout: {e.message}")
        except PlaywrightError as e:
            self._log(debug, f"wait for page loaded Playwright error: {e.message}")

    async def save_html(self, file_path: Union[str, Path]) -> Path:
        """Write the current page HTML to ``file_path``."""
        page = self._require_page()
        target = Path(file_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(await page.content(), encoding="utf-8")
        return target

    async def screenshot(self, name: str, full_page: bool = False) -> Path:
        """Take a screenshot and attach it to the Allure report."""
        page = self._require_page()
        SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = SCREENSHOT_DIR / f"{name}_{timestamp}.png"

        await page.screenshot(path=str(filepath), full_page=full_page)
        allure.attach.file(str(filepath), name=name, attachment_type=allure.attachment_type.PNG)

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def close(self) -> None:
        if self.page is not None:
            await self.page.close()
            self.page = None
        if self.context is not None:
            await self.context.close()
            self.context = None


__all__ = [
    "FormPage",
    "LOADING_OVERLAY_SELECTOR",
    "combine_url",
]

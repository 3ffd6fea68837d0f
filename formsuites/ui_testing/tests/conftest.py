"""
================================================================================
Live Form Suite Pytest Configuration
================================================================================

Fixtures for running the engine against a real site:

    FORM_LIVE_TESTS=1        enable the suite (skipped otherwise)
    FORM_ENV_FILE            environment file (BaseUrl, AuthUrl, Users)
    FORM_SITE_FILE           optional site file (AuthPath)
    FORM_PAGES_FILE          page descriptor document
    FORM_HEADLESS            0 to watch the browser
    FORM_BROWSER             chromium | firefox | webkit

A screenshot of the open form is attached to the Allure report when a test
fails.

================================================================================
"""

import os
from typing import AsyncGenerator, Generator

import pytest
from loguru import logger
from playwright.async_api import Error as PlaywrightError

from formsuites.ui_testing.framework import (
    BrowserManager,
    EngineSettings,
    Environment,
    UiTestConfig,
    init_logger,
    load_ui_config,
)


def _live_enabled() -> bool:
    return os.getenv("FORM_LIVE_TESTS", "0") == "1"


# ================================================================================
# Session Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def live_enabled() -> bool:
    if not _live_enabled():
        pytest.skip("Live form tests disabled (set FORM_LIVE_TESTS=1 to enable)")
    init_logger()
    return True


@pytest.fixture(scope="session")
def ui_config(live_enabled) -> UiTestConfig:
    """Page descriptor document for the run."""
    return load_ui_config(os.environ["FORM_PAGES_FILE"])


@pytest.fixture(scope="session")
def engine_settings(live_enabled) -> EngineSettings:
    return EngineSettings.from_config()


@pytest.fixture(scope="session")
def environment(live_enabled) -> Generator[Environment, None, None]:
    """Logged-in users for the site under test."""
    env = Environment.from_file(os.environ["FORM_ENV_FILE"], os.getenv("FORM_SITE_FILE"))
    yield env
    env.close()


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
async def browser_manager(live_enabled) -> AsyncGenerator[BrowserManager, None]:
    """
    Browser per test.

    Playwright objects are bound to the event loop that created them, and
    each test runs in its own loop.
    """
    manager = BrowserManager(
        headless=os.getenv("FORM_HEADLESS", "1") != "0",
        browser_type=os.getenv("FORM_BROWSER", "chromium"),
    )
    await manager.start()
    yield manager
    await manager.close()


@pytest.fixture
def opened_contexts():
    """Page contexts opened by a test; closed and screenshotted on failure."""
    return []


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Record the call-phase outcome so fixtures can react to failures."""
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        item.call_failed = report.failed


@pytest.fixture(autouse=True)
async def _close_page_contexts(request, opened_contexts) -> AsyncGenerator[None, None]:
    yield
    failed = getattr(request.node, "call_failed", False)
    for ctx in opened_contexts:
        if failed:
            try:
                await ctx.form_page.screenshot(f"failure_{ctx.config.name}")
            except (PlaywrightError, RuntimeError) as e:
                logger.warning(f"Failed to capture screenshot on failure: {e}")
        await ctx.form_page.close()

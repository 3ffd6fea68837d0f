"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading (engine timeouts, logging)
    - Environment variable override (ENGINE_LOOKUP_POLL_BUDGET_MS overrides
      engine.lookup.poll_budget_ms)
    - Dot notation path access
    - Default value support
    - Typed EngineSettings snapshot consumed by the field/button factory

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from loguru import logger

from .errors import ConfigurationError


# Default configuration file path (<repo>/config/config.yaml)
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "config.yaml"


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (ENGINE_BUTTON_CLICK_TIMEOUT_MS)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("engine.lookup.poll_budget_ms", 3000)
        3000
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Singleton pattern - configuration is loaded once per process."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "engine.lookup.poll_interval_ms")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section, or an empty dict."""
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        Lists are given as comma-separated values.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value
        if isinstance(reference, (list, tuple)):
            items = [item.strip() for item in value.split(",") if item.strip()]
            try:
                return [int(item) for item in items]
            except ValueError:
                return items

        return value

    @classmethod
    def reset(cls) -> None:
        """Reset singleton instance (used by tests)."""
        cls._instance = None
        cls._config = {}


@dataclass(frozen=True)
class LookupTimings:
    """
    Timing policy of the lookup selection protocol (milliseconds).

    Attributes:
        panel_timeout_ms: Wait for the autocomplete panel to become visible
        poll_budget_ms: Total time spent polling for a matching option
        poll_interval_ms: Pause between two option enumerations
        settle_delay_ms: Pause after clicking the option before re-reading
    """
    panel_timeout_ms: int = 10_000
    poll_budget_ms: int = 3_000
    poll_interval_ms: int = 100
    settle_delay_ms: int = 200


@dataclass(frozen=True)
class EngineSettings:
    """Typed snapshot of the ``engine`` configuration section."""
    field_timeouts_ms: Tuple[int, ...] = (10_000, 20_000, 30_000)
    button_click_timeout_ms: int = 10_000
    email_reveal_timeout_ms: int = 10_000
    page_loading_timeout_ms: int = 60_000
    lookup: LookupTimings = LookupTimings()

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "EngineSettings":
        """Build settings from a ConfigLoader, falling back to defaults."""
        config = config or ConfigLoader()
        defaults = cls()
        lookup_defaults = defaults.lookup

        timeouts = config.get("engine.field_timeouts_ms", list(defaults.field_timeouts_ms))
        if not timeouts or not all(isinstance(t, int) and t > 0 for t in timeouts):
            raise ConfigurationError(
                f"engine.field_timeouts_ms must be a non-empty list of positive integers, got {timeouts!r}"
            )

        return cls(
            field_timeouts_ms=tuple(timeouts),
            button_click_timeout_ms=config.get(
                "engine.button_click_timeout_ms", defaults.button_click_timeout_ms
            ),
            email_reveal_timeout_ms=config.get(
                "engine.email_reveal_timeout_ms", defaults.email_reveal_timeout_ms
            ),
            page_loading_timeout_ms=config.get(
                "engine.page_loading_timeout_ms", defaults.page_loading_timeout_ms
            ),
            lookup=LookupTimings(
                panel_timeout_ms=config.get(
                    "engine.lookup.panel_timeout_ms", lookup_defaults.panel_timeout_ms
                ),
                poll_budget_ms=config.get(
                    "engine.lookup.poll_budget_ms", lookup_defaults.poll_budget_ms
                ),
                poll_interval_ms=config.get(
                    "engine.lookup.poll_interval_ms", lookup_defaults.poll_interval_ms
                ),
                settle_delay_ms=config.get(
                    "engine.lookup.settle_delay_ms", lookup_defaults.settle_delay_ms
                ),
            ),
        )


__all__ = [
    "ConfigLoader",
    "EngineSettings",
    "LookupTimings",
]

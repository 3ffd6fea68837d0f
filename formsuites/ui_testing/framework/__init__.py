"""
================================================================================
Form Testing Framework
================================================================================

Playwright-based engine for verifying and driving form pages.

Components:
    - base_field / *_field: field kinds (Text, Number, DateTime, Boolean, Lookup)
    - button: crt-button controls
    - field_factory: descriptor entries -> field/button objects
    - page_config: page descriptor loader
    - page_context: fields/buttons of one opened page
    - form_page / browser_manager / environment: page, browser and session lifecycle
    - config_loader / log_sink / errors: settings, logging and exceptions

Author: Automation Team
License: MIT
================================================================================
"""

from .base_field import BaseField, normalize_label_text
from .boolean_field import BooleanField
from .browser_manager import BrowserManager
from .button import Button
from .config_loader import ConfigLoader, EngineSettings, LookupTimings
from .datetime_field import DateTimeField
from .enums import DateTimeFieldType, FieldKind, NumberFieldType, TextFieldType
from .environment import Environment, UserCredentials, UserSession
from .errors import (
    AuthenticationError,
    ButtonDisabledError,
    ButtonError,
    ButtonNotFoundError,
    CheckboxStateError,
    ConfigurationError,
    DropdownNotShownError,
    FieldError,
    FieldNotFoundError,
    FieldTypeMismatchError,
    FormAutomationError,
    LookupOptionNotFoundError,
    LookupSelectionError,
)
from .field_factory import create_button, create_field
from .form_page import FormPage
from .log_sink import ListSink, LogSink, init_logger, loguru_sink
from .lookup_field import LookupField
from .number_field import NumberField
from .page_config import (
    ButtonConfig,
    FieldConfig,
    PageConfig,
    UiTestConfig,
    load_ui_config,
    load_ui_config_text,
)
from .page_context import PageContext, build_page_context, create_page_context
from .text_field import TextField

__all__ = [
    "AuthenticationError",
    "BaseField",
    "BooleanField",
    "BrowserManager",
    "Button",
    "ButtonConfig",
    "ButtonDisabledError",
    "ButtonError",
    "ButtonNotFoundError",
    "CheckboxStateError",
    "ConfigLoader",
    "ConfigurationError",
    "DateTimeField",
    "DateTimeFieldType",
    "DropdownNotShownError",
    "EngineSettings",
    "Environment",
    "FieldConfig",
    "FieldError",
    "FieldKind",
    "FieldNotFoundError",
    "FieldTypeMismatchError",
    "FormAutomationError",
    "FormPage",
    "ListSink",
    "LogSink",
    "LookupField",
    "LookupOptionNotFoundError",
    "LookupSelectionError",
    "LookupTimings",
    "NumberField",
    "NumberFieldType",
    "PageConfig",
    "PageContext",
    "TextField",
    "TextFieldType",
    "UiTestConfig",
    "UserCredentials",
    "UserSession",
    "build_page_context",
    "create_button",
    "create_field",
    "create_page_context",
    "init_logger",
    "load_ui_config",
    "load_ui_config_text",
    "loguru_sink",
    "normalize_label_text",
]

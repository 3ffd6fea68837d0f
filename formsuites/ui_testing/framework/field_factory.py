"""
================================================================================
Field / Button Factory
================================================================================

Turns page descriptor entries into field and button objects.

Type strings are matched case-insensitively and accept a few aliases:
    Text      text, textfield
    Number    number, numberfield
    DateTime  datetime, datetimefield
    Boolean   boolean, bool, booleanfield
    Lookup    lookup, lookupfield

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Dict, Optional

from playwright.async_api import Page

from .base_field import BaseField
from .boolean_field import BooleanField
from .button import Button
from .config_loader import EngineSettings
from .datetime_field import DateTimeField
from .enums import DateTimeFieldType, FieldKind, NumberFieldType, TextFieldType
from .errors import ConfigurationError
from .log_sink import LogSink
from .lookup_field import LookupField
from .number_field import NumberField
from .page_config import ButtonConfig, FieldConfig
from .text_field import TextField


FIELD_TYPE_ALIASES: Dict[str, FieldKind] = {
    "text": FieldKind.TEXT,
    "textfield": FieldKind.TEXT,
    "number": FieldKind.NUMBER,
    "numberfield": FieldKind.NUMBER,
    "datetime": FieldKind.DATETIME,
    "datetimefield": FieldKind.DATETIME,
    "boolean": FieldKind.BOOLEAN,
    "bool": FieldKind.BOOLEAN,
    "booleanfield": FieldKind.BOOLEAN,
    "lookup": FieldKind.LOOKUP,
    "lookupfield": FieldKind.LOOKUP,
}

TEXT_SUBTYPE_ALIASES: Dict[str, TextFieldType] = {
    "text": TextFieldType.TEXT,
    "richtext": TextFieldType.RICH_TEXT,
    "rich_text": TextFieldType.RICH_TEXT,
    "email": TextFieldType.EMAIL,
    "phone": TextFieldType.PHONE_NUMBER,
    "phonenumber": TextFieldType.PHONE_NUMBER,
    "phone_number": TextFieldType.PHONE_NUMBER,
    "link": TextFieldType.LINK,
}

NUMBER_SUBTYPE_ALIASES: Dict[str, NumberFieldType] = {
    "integer": NumberFieldType.INTEGER,
    "int": NumberFieldType.INTEGER,
    "decimal": NumberFieldType.DECIMAL,
}

DATETIME_SUBTYPE_ALIASES: Dict[str, DateTimeFieldType] = {
    "time": DateTimeFieldType.TIME,
    "date": DateTimeFieldType.DATE,
    "datetime": DateTimeFieldType.DATETIME,
}


def parse_field_kind(type_name: Optional[str]) -> FieldKind:
    if not type_name or not type_name.strip():
        raise ConfigurationError("Field type must not be empty.")
    try:
        return FIELD_TYPE_ALIASES[type_name.strip().lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown field type '{type_name}'. Expected: Text, Number, DateTime, Boolean, Lookup."
        ) from None


def _parse_subtype(subtype: Optional[str], aliases: Dict[str, object], default, kind: str):
    if not subtype or not subtype.strip():
        return default
    try:
        return aliases[subtype.strip().lower()]
    except KeyError:
        expected = ", ".join(sorted({v.value for v in aliases.values()}))
        raise ConfigurationError(
            f"Unknown {kind} field subtype '{subtype}'. Expected: {expected}."
        ) from None


def parse_text_subtype(subtype: Optional[str]) -> TextFieldType:
    return _parse_subtype(subtype, TEXT_SUBTYPE_ALIASES, TextFieldType.TEXT, "text")


def parse_number_subtype(subtype: Optional[str]) -> NumberFieldType:
    return _parse_subtype(subtype, NUMBER_SUBTYPE_ALIASES, NumberFieldType.INTEGER, "number")


def parse_datetime_subtype(subtype: Optional[str]) -> DateTimeFieldType:
    return _parse_subtype(subtype, DATETIME_SUBTYPE_ALIASES, DateTimeFieldType.DATETIME, "DateTime")


def create_field(
    page: Page,
    config: FieldConfig,
    settings: Optional[EngineSettings] = None,
    sink: Optional[LogSink] = None,
) -> BaseField:
    """
    Build the field object described by ``config``.

    Raises:
        ConfigurationError: Unknown type/subtype or blank code
    """
    if page is None:
        raise ValueError("Page must be provided.")
    if config is None:
        raise ValueError("Field config must be provided.")
    if not config.code or not config.code.strip():
        raise ConfigurationError("FieldConfig.code must not be empty.")

    settings = settings or EngineSettings()
    kind = parse_field_kind(config.type)
    common = dict(
        page=page,
        title=config.title,
        code=config.code,
        read_only=config.read_only,
        sink=sink,
        timeouts_ms=settings.field_timeouts_ms,
    )

    if kind == FieldKind.TEXT:
        return TextField(
            required=config.required,
            placeholder=config.placeholder,
            content_type=parse_text_subtype(config.subtype),
            email_reveal_timeout_ms=settings.email_reveal_timeout_ms,
            **common,
        )
    if kind == FieldKind.NUMBER:
        return NumberField(
            required=config.required,
            placeholder=config.placeholder,
            number_type=parse_number_subtype(config.subtype),
            **common,
        )
    if kind == FieldKind.DATETIME:
        return DateTimeField(
            required=config.required,
            placeholder=config.placeholder,
            date_time_type=parse_datetime_subtype(config.subtype),
            **common,
        )
    if kind == FieldKind.BOOLEAN:
        # Checkboxes ignore declared required/placeholder
        return BooleanField(**common)

    return LookupField(
        required=config.required,
        placeholder=config.placeholder,
        timings=settings.lookup,
        **common,
    )


def create_button(
    page: Page,
    config: ButtonConfig,
    settings: Optional[EngineSettings] = None,
    sink: Optional[LogSink] = None,
) -> Button:
    """Build a button; an empty title means it is matched by code only."""
    if page is None:
        raise ValueError("Page must be provided.")
    if config is None:
        raise ValueError("Button config must be provided.")
    if not config.code or not config.code.strip():
        raise ConfigurationError("ButtonConfig.code must not be empty.")

    settings = settings or EngineSettings()
    return Button(
        page,
        config.title or "",
        config.code,
        sink=sink,
        click_timeout_ms=settings.button_click_timeout_ms,
    )


__all__ = [
    "create_button",
    "create_field",
    "parse_datetime_subtype",
    "parse_field_kind",
    "parse_number_subtype",
    "parse_text_subtype",
]

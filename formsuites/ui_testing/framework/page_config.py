"""
================================================================================
Page Descriptor
================================================================================

Declarative description of the pages under test: which fields and buttons
each page carries and what their expected state is.

File format (YAML; JSON works too since it is a YAML subset):

    pages:
      - name: ContactEdit
        url: /shell/#Card/Contacts_FormPage/edit/...
        fields:
          - type: Text
            subtype: Email
            title: Email
            code: Email_x1
            required: true
            readOnly: false
            placeholder: null
        buttons:
          - title: Save
            code: SaveButton

Property names are matched case-insensitively. Validation errors name the
offending path, e.g. ``pages[0].fields[2].code``.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import ConfigurationError


@dataclass(frozen=True)
class FieldConfig:
    """Expected definition of one field."""
    type: str
    title: str
    code: str
    subtype: Optional[str] = None
    required: bool = False
    read_only: bool = False
    placeholder: Optional[str] = None


@dataclass(frozen=True)
class ButtonConfig:
    """Expected definition of one button; title may be empty."""
    code: str
    title: str = ""


@dataclass(frozen=True)
class PageConfig:
    """One page: where it lives and what it should show."""
    name: str
    url: str
    type: Optional[str] = None
    fields: List[FieldConfig] = field(default_factory=list)
    buttons: List[ButtonConfig] = field(default_factory=list)


@dataclass(frozen=True)
class UiTestConfig:
    """Root of the page descriptor document."""
    pages: List[PageConfig] = field(default_factory=list)

    def get_page(self, name: str) -> PageConfig:
        """Look a page up by exact name."""
        for page in self.pages:
            if page.name == name:
                return page
        known = ", ".join(p.name for p in self.pages) or "<none>"
        raise KeyError(f"Page '{name}' is not defined. Known pages: {known}")


# =============================================================================
# Parsing helpers
# =============================================================================

def _lower_keys(node: Any, path: str) -> Dict[str, Any]:
    if not isinstance(node, dict):
        raise ConfigurationError(f"{path} must be a mapping, got {type(node).__name__}")
    return {str(k).lower(): v for k, v in node.items()}


def _required_str(node: Dict[str, Any], key: str, path: str) -> str:
    value = node.get(key.lower())
    if value is None or not str(value).strip():
        raise ConfigurationError(f"{path}.{key} is required and must not be blank")
    return str(value)


def _optional_str(node: Dict[str, Any], key: str) -> Optional[str]:
    value = node.get(key.lower())
    return None if value is None else str(value)


def _bool(node: Dict[str, Any], key: str, path: str) -> bool:
    value = node.get(key.lower(), False)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ConfigurationError(f"{path}.{key} must be a boolean, got {value!r}")


def _list(node: Dict[str, Any], key: str, path: str) -> List[Any]:
    value = node.get(key.lower())
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigurationError(f"{path}.{key} must be a list")
    return value


def _parse_field(raw: Any, path: str) -> FieldConfig:
    node = _lower_keys(raw, path)
    return FieldConfig(
        type=_required_str(node, "type", path),
        title=_required_str(node, "title", path),
        code=_required_str(node, "code", path),
        subtype=_optional_str(node, "subtype"),
        required=_bool(node, "required", path),
        read_only=_bool(node, "readOnly", path),
        placeholder=_optional_str(node, "placeholder"),
    )


def _parse_button(raw: Any, path: str) -> ButtonConfig:
    node = _lower_keys(raw, path)
    return ButtonConfig(
        code=_required_str(node, "code", path),
        title=_optional_str(node, "title") or "",
    )


def _ensure_unique_codes(items: List[Any], path: str) -> None:
    seen = set()
    for i, item in enumerate(items):
        if item.code in seen:
            raise ConfigurationError(f"{path}[{i}].code duplicates code '{item.code}'")
        seen.add(item.code)


def _parse_page(raw: Any, path: str) -> PageConfig:
    node = _lower_keys(raw, path)

    fields = [
        _parse_field(item, f"{path}.fields[{i}]")
        for i, item in enumerate(_list(node, "fields", path))
    ]
    buttons = [
        _parse_button(item, f"{path}.buttons[{i}]")
        for i, item in enumerate(_list(node, "buttons", path))
    ]
    _ensure_unique_codes(fields, f"{path}.fields")
    _ensure_unique_codes(buttons, f"{path}.buttons")

    return PageConfig(
        name=_required_str(node, "name", path),
        url=_required_str(node, "url", path),
        type=_optional_str(node, "type"),
        fields=fields,
        buttons=buttons,
    )


def parse_ui_config(data: Any) -> UiTestConfig:
    """Build a UiTestConfig from an already decoded document."""
    root = _lower_keys(data, "<root>")
    pages = [
        _parse_page(item, f"pages[{i}]")
        for i, item in enumerate(_list(root, "pages", "<root>"))
    ]
    return UiTestConfig(pages=pages)


def load_ui_config_text(text: str) -> UiTestConfig:
    """Parse a descriptor document given as a YAML/JSON string."""
    if text is None or not text.strip():
        raise ConfigurationError("Page descriptor content must not be empty")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse page descriptor: {e}") from e
    return parse_ui_config(data)


def load_ui_config(path: Union[str, Path]) -> UiTestConfig:
    """Load a descriptor document from a file."""
    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Page descriptor file not found: '{file_path}'")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ConfigurationError(f"Failed to read page descriptor '{file_path}': {e}") from e

    try:
        return load_ui_config_text(text)
    except ConfigurationError as e:
        raise ConfigurationError(f"{file_path}: {e}") from e


__all__ = [
    "ButtonConfig",
    "FieldConfig",
    "PageConfig",
    "UiTestConfig",
    "load_ui_config",
    "load_ui_config_text",
    "parse_ui_config",
]

"""
================================================================================
Form Automation Errors
================================================================================

Exception hierarchy raised by the field/button engine.

Driver-level failures (playwright.async_api.Error / TimeoutError) are NOT
wrapped: they propagate unchanged from value operations. The classes below
cover contract violations and configuration problems only.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations


class FormAutomationError(Exception):
    """Base class for all engine errors."""
    pass


class FieldError(FormAutomationError):
    """Raised when an operation on a field cannot be completed."""
    pass


class FieldNotFoundError(FieldError):
    """Raised when a value operation targets a field whose container is absent."""

    def __init__(self, title: str, code: str):
        self.title = title
        self.code = code
        super().__init__(f"Field '{title}' (Code='{code}') not found on page.")


class FieldTypeMismatchError(FieldError):
    """Raised when a numeric value does not match the field's declared subtype."""
    pass


class DropdownNotShownError(FieldError):
    """Raised when the autocomplete panel never appeared after typing."""
    pass


class LookupOptionNotFoundError(FieldError):
    """Raised when no matching option was rendered within the poll budget."""
    pass


class LookupSelectionError(FieldError):
    """Raised when an option was clicked but the field value stayed blank."""
    pass


class CheckboxStateError(FieldError):
    """Raised when clicking a checkbox did not move it to the target state."""
    pass


class ButtonError(FormAutomationError):
    """Raised when an operation on a button cannot be completed."""
    pass


class ButtonNotFoundError(ButtonError):
    """Raised when a button is not present in the DOM."""
    pass


class ButtonDisabledError(ButtonError):
    """Raised when clicking a button that is technically disabled."""
    pass


class ConfigurationError(FormAutomationError):
    """Raised when configuration loading or validation fails."""
    pass


class AuthenticationError(FormAutomationError):
    """Raised when a user session cannot be established."""
    pass


__all__ = [
    "FormAutomationError",
    "FieldError",
    "FieldNotFoundError",
    "FieldTypeMismatchError",
    "DropdownNotShownError",
    "LookupOptionNotFoundError",
    "LookupSelectionError",
    "CheckboxStateError",
    "ButtonError",
    "ButtonNotFoundError",
    "ButtonDisabledError",
    "ConfigurationError",
    "AuthenticationError",
]

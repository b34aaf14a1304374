"""
Input validation for style rules and MCP server tool parameters.

Provides the error types raised by the style registry and reusable
validators that produce clear error messages for rule fields and for
parameters received from LLM callers.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, TypeVar

E = TypeVar("E", bound=Enum)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ValidationError(ValueError):
    """Raised when input validation fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateStyleError(ValidationError):
    """Raised when a style is registered for a tag that already has one."""

    def __init__(self, kind: str, tag: str) -> None:
        self.kind = kind
        self.tag = tag
        article = "An" if kind[:1] in "aeiou" else "A"
        super().__init__(f'{article} {kind} style for the tag "{tag}" already exists.')


# ---------------------------------------------------------------------------
# Primitive validators
# ---------------------------------------------------------------------------

def validate_tag(value: Any) -> str:
    """Ensure *value* is a usable style tag."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("A tag must be specified.")
    return value


def validate_non_empty_string(value: Any, field_name: str) -> str:
    """Ensure *value* is a non-empty string after stripping whitespace."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field_name}' must be a non-empty string.")
    return value.strip()


def validate_string(value: Any, field_name: str, *, allow_empty: bool = True) -> str:
    """Ensure *value* is a string (optionally non-empty)."""
    if not isinstance(value, str):
        raise ValidationError(f"'{field_name}' must be a string, got {type(value).__name__}.")
    if not allow_empty and not value.strip():
        raise ValidationError(f"'{field_name}' must not be empty.")
    return value


def validate_color(value: Any, field_name: str) -> str:
    """Validate a hex colour (#RGB or #RRGGBB) and return it lower-cased."""
    if not isinstance(value, str):
        raise ValidationError(f"'{field_name}' must be a hex color string, got {type(value).__name__}.")
    value = value.strip()
    if not re.match(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$", value):
        raise ValidationError(
            f"'{field_name}' must be a valid hex color (#RGB or #RRGGBB), got '{value}'."
        )
    return value.lower()


def validate_int(
    value: Any,
    field_name: str,
    *,
    min_val: int | None = None,
    max_val: int | None = None,
) -> int:
    """Validate an integer value and optional range."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(
            f"'{field_name}' must be an integer, got {type(value).__name__}."
        )
    if min_val is not None and value < min_val:
        raise ValidationError(
            f"'{field_name}' must be >= {min_val}, got {value}."
        )
    if max_val is not None and value > max_val:
        raise ValidationError(
            f"'{field_name}' must be <= {max_val}, got {value}."
        )
    return value


def validate_bool(value: Any, field_name: str) -> bool:
    """Ensure *value* is a boolean."""
    if not isinstance(value, bool):
        raise ValidationError(
            f"'{field_name}' must be a boolean, got {type(value).__name__}."
        )
    return value


def validate_enum(value: Any, field_name: str, enum_cls: type[E]) -> E:
    """Coerce *value* to a member of *enum_cls*.

    Accepts a member, its name or its value; names are matched
    case-insensitively so ``"roundedbox"`` and ``"RoundedBox"`` both work.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        wanted = value.strip().lower()
        for member in enum_cls:
            if wanted in (member.name.lower(), str(member.value).lower()):
                return member
    choices = ", ".join(m.value for m in enum_cls)
    raise ValidationError(
        f"'{field_name}' must be one of [{choices}], got '{value}'."
    )


def validate_list(value: Any, field_name: str, *, min_length: int = 0) -> list:
    """Ensure *value* is a list with at least *min_length* items."""
    if not isinstance(value, list):
        raise ValidationError(
            f"'{field_name}' must be a list, got {type(value).__name__}."
        )
    if len(value) < min_length:
        raise ValidationError(
            f"'{field_name}' must have at least {min_length} item(s), got {len(value)}."
        )
    return value


def validate_dict(value: Any, field_name: str) -> dict:
    """Ensure *value* is a dict."""
    if not isinstance(value, dict):
        raise ValidationError(
            f"'{field_name}' must be a dict/object, got {type(value).__name__}."
        )
    return value


# ---------------------------------------------------------------------------
# Style field validators
# ---------------------------------------------------------------------------

def validate_dimension(value: Any, field_name: str) -> int:
    """Validate a width, height, thickness or font size (>= 1)."""
    return validate_int(value, field_name, min_val=1)


def validate_percentage(value: Any, field_name: str) -> int:
    """Validate an opacity or position, clamping it into 0..100."""
    value = validate_int(value, field_name)
    return max(0, min(100, value))


# ---------------------------------------------------------------------------
# Tool-level validators
# ---------------------------------------------------------------------------

_STYLES_ACTIONS = {
    "ADD_ELEMENT", "ADD_RELATIONSHIP", "LIST",
    "CLEAR_ELEMENTS", "CLEAR_RELATIONSHIPS", "EXPORT", "IMPORT",
}
_RESOLVE_ACTIONS = {"ELEMENT", "RELATIONSHIP"}


def validate_action(value: Any, tool_name: str, allowed: set[str]) -> str:
    """Validate the action parameter for a tool (case-insensitive)."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{tool_name}' requires a non-empty 'action'.")
    normalized = value.strip().upper()
    if normalized not in allowed:
        choices = ", ".join(sorted(a.lower() for a in allowed))
        raise ValidationError(
            f"Unknown {tool_name} action '{value}'. Use one of: {choices}."
        )
    return normalized.lower()


def validate_tag_list(value: Any, field_name: str) -> list[str]:
    """Validate a list of tags; a comma-separated string is also accepted."""
    if isinstance(value, str):
        value = [t for t in value.split(",")]
    validate_list(value, field_name)
    tags: list[str] = []
    for i, tag in enumerate(value):
        if not isinstance(tag, str):
            raise ValidationError(
                f"'{field_name}[{i}]' must be a string, got {type(tag).__name__}."
            )
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags

"""Formatting utilities for rummage."""

from typing import Any, Optional

from ..core.models import NOT_AVAILABLE


def display_optional(value: Optional[str]) -> str:
    """Render an optional field, substituting a placeholder for None.

    Examples:
        >>> display_optional("x86_64")
        'x86_64'
        >>> display_optional(None)
        '<failed to get>'
    """
    return NOT_AVAILABLE if value is None else value


def format_fields(fields: dict[str, Any]) -> str:
    """Format structured fields as ``key=value`` pairs.

    Strings containing whitespace are quoted so values stay unambiguous.

    Examples:
        >>> format_fields({"os": "Linux 6.1.0", "dirty": False})
        "os='Linux 6.1.0' dirty=False"
    """
    parts = []
    for key, value in fields.items():
        if isinstance(value, str) and (not value or any(c.isspace() for c in value)):
            value = repr(value)
        parts.append(f"{key}={value}")
    return " ".join(parts)

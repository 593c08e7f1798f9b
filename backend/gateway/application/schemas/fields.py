"""Lenient input coercion shared by the request schemas."""

from typing import Any


def scalar_to_str(value: Any) -> Any:
    """Turn JSON numbers and booleans into strings; leave everything else to validation."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value

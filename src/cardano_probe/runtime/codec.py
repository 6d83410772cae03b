"""
JSON helpers for log output.

Lovelace quantities are arbitrary precision integers; log output renders
every integer as a decimal string so nothing downstream coerces them to floats.
"""

from __future__ import annotations
import json
from typing import Any


def replace_big_int(value: Any) -> Any:
    """
    Recursively replace integers with their decimal string form.

    Args:
        value: JSON-compatible value

    Returns:
        Copy of the value with every int (but not bool) turned into a str
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, dict):
        return {key: replace_big_int(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [replace_big_int(item) for item in value]
    return value


def encode_log_json(value: Any, indent: int = 2) -> str:
    """Encode a value as indented JSON with integers as strings."""
    return json.dumps(replace_big_int(value), indent=indent)


def encode_json(value: Any) -> str:
    """Compact JSON for the wire."""
    return json.dumps(value, separators=(',', ':'))


def loads(data: str) -> Any:
    """Decode JSON; integers keep arbitrary precision."""
    return json.loads(data)

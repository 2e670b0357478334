"""Serialization utilities."""

from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any


def serialize_dataclass(obj) -> dict:
    """Serialize a dataclass to a JSON-ready dict.

    Nested dataclasses are flattened by ``asdict``; datetimes at any depth
    are converted to ISO strings.
    """
    if not is_dataclass(obj):
        raise TypeError(f"Expected a dataclass instance, got {type(obj).__name__}")
    return _convert(asdict(obj))


def _convert(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(v) for v in value]
    return value

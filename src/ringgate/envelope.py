"""Utilities for reading fields from request envelopes."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ringgate.types import Payload


def field_of(payload: Payload, key: str, default: Any = None) -> Any:
    """Read a field from mapping-like or attribute-based payloads."""

    if isinstance(payload, Mapping):
        return payload.get(key, default)
    return getattr(payload, key, default)

"""
Marker for configuration values the host cannot resolve yet.

Declared values arrive in one of three states: null (``None``), unknown
(:data:`UNKNOWN`) or known (any other Python value).
"""

from __future__ import annotations

from typing import Any

UNKNOWN_PLACEHOLDER = "(known after apply)"


class UnknownValue:
    """Singleton type for :data:`UNKNOWN`."""

    _instance: "UnknownValue | None" = None

    def __new__(cls) -> "UnknownValue":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNKNOWN"


UNKNOWN = UnknownValue()


def is_unknown(value: Any) -> bool:
    return value is UNKNOWN


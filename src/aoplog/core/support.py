"""Helpers called from generated wrapper code."""

from __future__ import annotations

import inspect
import time
from functools import lru_cache
from typing import Any


class _Missing:
    """Sentinel default for parameters whose default is resolved from the original method."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def default_of(method: Any, parameter: str) -> Any:
    """Return the default value ``parameter`` has on ``method`` (bound or plain)."""
    function = getattr(method, "__func__", method)
    return _defaults(function)[parameter]


@lru_cache(maxsize=1024)
def _defaults(function: Any) -> dict[str, Any]:
    return {
        name: parameter.default
        for name, parameter in inspect.signature(function).parameters.items()
        if parameter.default is not inspect.Parameter.empty
    }


def start_timer() -> float:
    return time.perf_counter()


def elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000.0, 3)


def truncate(value: Any, max_length: int) -> Any:
    """Shorten string values to ``max_length`` characters; other values pass through."""
    if max_length < 0 or not isinstance(value, str) or len(value) <= max_length:
        return value
    return f"{value[:max_length]}... (truncated from {len(value)})"

"""Declarative directives for classes and methods.

The directives only record configuration on the decorated object; the
logging itself lives in modules produced by ``aoplog generate`` and merged in
by :func:`partial`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from ..models import (
    LogClass,
    LogException,
    LogLevel,
    LogMethod,
    LogResult,
    SensitiveData,
)
from ..models.directives import Directive
from .fragments import PARTIAL_ATTR, apply_fragment, load_fragment

T = TypeVar("T")

DIRECTIVES_ATTR = "__aoplog_directives__"


def log_class(target: Any = None, /, **fields: Any) -> Any:
    """Log every eligible method of the class.

    Usable bare (``@log_class``) or called (``@log_class(LogLevel.DEBUG,
    log_parameters=False)``).
    """
    return _directive(LogClass, target, fields)


def log_method(target: Any = None, /, **fields: Any) -> Any:
    """Log one method, or override the class directive for it (``skip=True`` opts out)."""
    return _directive(LogMethod, target, fields)


def log_exception(target: Any = None, /, **fields: Any) -> Any:
    """Set the level used when the method raises. Exceptions are always re-raised."""
    return _directive(LogException, target, fields)


def log_result(**fields: Any) -> Callable[[T], T]:
    directive = LogResult(**fields)
    return lambda func: _attach(func, directive)


def sensitive_data(mask_value: str | None = None, /, **fields: Any) -> Callable[[T], T]:
    """Mask the method's return value in logs."""
    if mask_value is not None:
        fields["mask_value"] = mask_value
    directive = SensitiveData(**fields)
    return lambda func: _attach(func, directive)


def partial(cls: type[T]) -> type[T]:
    """Declare a class open for generated members and merge its logging fragment."""
    setattr(cls, PARTIAL_ATTR, True)
    fragment = load_fragment(cls)
    if fragment is not None:
        apply_fragment(cls, fragment)
    return cls


def directives_of(obj: object) -> dict[str, Directive]:
    """Directives recorded on ``obj``, keyed by directive class name."""
    return dict(getattr(obj, "__dict__", {}).get(DIRECTIVES_ATTR, {}))


def _directive(directive_type: type[Directive], target: Any, fields: dict[str, Any]) -> Any:
    if target is not None and not isinstance(target, (LogLevel, str)):
        return _attach(target, directive_type(**fields))
    directive = directive_type(target, **fields) if target is not None else directive_type(**fields)
    return lambda obj: _attach(obj, directive)


def _attach(obj: T, directive: Directive) -> T:
    recorded = dict(getattr(obj, "__dict__", {}).get(DIRECTIVES_ATTR, {}))
    recorded[type(directive).__name__] = directive
    setattr(obj, DIRECTIVES_ATTR, recorded)
    return obj

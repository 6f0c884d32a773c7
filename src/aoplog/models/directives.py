"""Instrumentation directive records and the log level enumeration."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class LogLevel(StrEnum):
    TRACE = "trace"
    DEBUG = "debug"
    INFORMATION = "information"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    NONE = "none"

    @property
    def python_level(self) -> int | None:
        """Numeric stdlib ``logging`` level, or ``None`` for a level that never logs."""
        return _PYTHON_LEVELS[self]


_PYTHON_LEVELS: dict[LogLevel, int | None] = {
    LogLevel.TRACE: TRACE,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFORMATION: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
    LogLevel.NONE: None,
}


class _ClassOnlyHook:
    """A pydantic schema hook visible on the class but not on its instances.

    Directive instances are used as ``Annotated`` metadata on user models, where
    pydantic treats any metadata object exposing the hook as the field's schema.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._hook = BaseModel.__dict__[name]

    def __get__(self, instance: object, owner: type) -> Any:
        if instance is not None:
            raise AttributeError(self._name)
        return self._hook.__get__(None, owner)


class Directive(BaseModel):
    """Base for declarative directives.

    Directives accept their leading fields positionally, mirroring how they are
    written in source (``@log_method(LogLevel.DEBUG)``, ``SensitiveData("***")``).
    Which fields were given explicitly is available through ``model_fields_set``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    positional_fields: ClassVar[tuple[str, ...]] = ()

    __get_pydantic_core_schema__ = _ClassOnlyHook("__get_pydantic_core_schema__")
    __get_pydantic_json_schema__ = _ClassOnlyHook("__get_pydantic_json_schema__")

    def __init__(self, *args: Any, **data: Any) -> None:
        super().__init__(**_merge_positional(type(self), args, data))

    @classmethod
    def from_arguments(cls, args: list[Any], kwargs: dict[str, Any]) -> Directive:
        return cls.model_validate(_merge_positional(cls, tuple(args), kwargs))


def _merge_positional(
    cls: type[Directive], args: tuple[Any, ...], data: dict[str, Any]
) -> dict[str, Any]:
    if len(args) > len(cls.positional_fields):
        raise TypeError(
            f"{cls.__name__} takes at most {len(cls.positional_fields)} positional "
            f"argument(s), got {len(args)}"
        )
    merged = dict(data)
    for field_name, value in zip(cls.positional_fields, args, strict=False):
        if field_name in merged:
            raise TypeError(f"{cls.__name__} got multiple values for {field_name!r}")
        merged[field_name] = value
    return merged


class LogClass(Directive):
    """Type-level default: every eligible method of the class is logged."""

    positional_fields: ClassVar[tuple[str, ...]] = ("level",)

    level: LogLevel = LogLevel.INFORMATION
    log_execution_time: bool = True
    log_parameters: bool = True
    log_return_value: bool = True
    log_exceptions: bool = True


class LogMethod(LogClass):
    """Method-level override. Explicitly set fields win over the class directive."""

    skip: bool = False


class LogParameter(Directive):
    positional_fields: ClassVar[tuple[str, ...]] = ("name",)

    skip: bool = False
    name: str | None = None
    max_length: int = Field(default=-1, ge=-1)


class LogResult(Directive):
    skip: bool = False
    max_length: int = Field(default=-1, ge=-1)


class LogException(Directive):
    positional_fields: ClassVar[tuple[str, ...]] = ("level",)

    level: LogLevel = LogLevel.ERROR


class SensitiveData(Directive):
    """Marks a value whose content must never be logged.

    Only ``mask_value`` is ever surfaced; with ``show_length`` the real length
    is added to it, e.g. ``***SENSITIVE(10)***``.
    """

    positional_fields: ClassVar[tuple[str, ...]] = ("mask_value",)

    mask_value: str = "***SENSITIVE***"
    show_length: bool = False

"""Method logger protocol and the default ``logging``-backed implementation."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping
from typing import NamedTuple, Protocol, runtime_checkable

from ..models import LogLevel
from .formatting import ValueFormatter
from .options import RuntimeOptions
from .templates import (
    CLASS_NAME,
    EXCEPTION_MESSAGE,
    EXCEPTION_TYPE,
    EXECUTION_TIME,
    METHOD_NAME,
    PARAM_PREFIX,
    PARAMETERS,
    RETURN_VALUE,
    MessageTemplate,
)

DEFAULT_LOGGER_NAME = "aoplog"
DISABLED = "<disabled>"


@runtime_checkable
class MethodLogger(Protocol):
    """Receives entry, exit and exception events from generated wrappers.

    Implementations must not raise and must return immediately when
    ``level`` is disabled. ``level=None`` means the configured default level.
    """

    def log_entry(
        self,
        class_name: str,
        method_name: str,
        parameters: Mapping[str, object],
        level: LogLevel | None = None,
    ) -> None: ...

    def log_exit(
        self,
        class_name: str,
        method_name: str,
        return_value: object,
        elapsed_ms: float,
        level: LogLevel | None = None,
    ) -> None: ...

    def log_exception(
        self,
        class_name: str,
        method_name: str,
        exception: BaseException,
        elapsed_ms: float,
        level: LogLevel | None = None,
    ) -> None: ...


@runtime_checkable
class MethodLoggerAware(Protocol):
    """Capability implemented by every generated logging fragment."""

    def set_method_logger(self, method_logger: MethodLogger) -> None: ...


class NullMethodLogger:
    """No-op logger. Useful as a reference implementation and in tests."""

    def log_entry(
        self,
        class_name: str,
        method_name: str,
        parameters: Mapping[str, object],
        level: LogLevel | None = None,
    ) -> None:
        pass

    def log_exit(
        self,
        class_name: str,
        method_name: str,
        return_value: object,
        elapsed_ms: float,
        level: LogLevel | None = None,
    ) -> None:
        pass

    def log_exception(
        self,
        class_name: str,
        method_name: str,
        exception: BaseException,
        elapsed_ms: float,
        level: LogLevel | None = None,
    ) -> None:
        pass


class _Snapshot(NamedTuple):
    options: RuntimeOptions
    formatter: ValueFormatter
    entry: MessageTemplate
    exit: MessageTemplate
    exception: MessageTemplate


def _compile(options: RuntimeOptions) -> _Snapshot:
    return _Snapshot(
        options=options,
        formatter=ValueFormatter(options),
        entry=MessageTemplate(options.entry_format),
        exit=MessageTemplate(options.exit_format),
        exception=MessageTemplate(options.exception_format),
    )


class DefaultMethodLogger:
    """Formats method events and hands them to a stdlib ``logging.Logger``.

    Each record gets a message rendered from the configured template and, with
    ``use_structured_logging``, a flat field map attached as ``record.state``.
    A field other than ``ClassName``/``MethodName`` only enters that map when
    the template for the event references its placeholder, so nothing reaches
    structured sinks that the visible message does not show.

    Failures inside a call, including a logger whose level check raises, are
    reported with ``warnings.warn`` and never reach the wrapped method. Under
    a warnings filter set to ``error`` that warning is raised instead.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        options: RuntimeOptions | None = None,
    ) -> None:
        self._logger = logger if logger is not None else logging.getLogger(DEFAULT_LOGGER_NAME)
        self._snapshot = _compile(options if options is not None else RuntimeOptions())

    @property
    def options(self) -> RuntimeOptions:
        return self._snapshot.options

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def reconfigure(self, options: RuntimeOptions) -> None:
        """Swap in new options. Callers already formatting keep the old snapshot."""
        self._snapshot = _compile(options)

    def log_entry(
        self,
        class_name: str,
        method_name: str,
        parameters: Mapping[str, object],
        level: LogLevel | None = None,
    ) -> None:
        snapshot = self._snapshot
        try:
            python_level = self._enabled_level(level, snapshot.options)
            if python_level is None:
                return
            template = snapshot.entry
            values: dict[str, object] = {CLASS_NAME: class_name, METHOD_NAME: method_name}
            state = dict(values)
            if snapshot.options.log_parameters:
                if template.uses(PARAMETERS):
                    state[PARAMETERS] = snapshot.formatter.format_parameters(parameters)
                for placeholder in template.placeholders:
                    if not placeholder.startswith(PARAM_PREFIX):
                        continue
                    name = placeholder[len(PARAM_PREFIX) :]
                    if name in parameters:
                        state[placeholder] = snapshot.formatter.format_value(parameters[name])
            else:
                for placeholder in template.placeholders:
                    if placeholder == PARAMETERS or placeholder.startswith(PARAM_PREFIX):
                        values[placeholder] = DISABLED
            values.update(state)
            self._emit(python_level, template.render(values), state, None, snapshot.options)
        except Exception as exc:
            _warn_internal("entry", class_name, method_name, exc)

    def log_exit(
        self,
        class_name: str,
        method_name: str,
        return_value: object,
        elapsed_ms: float,
        level: LogLevel | None = None,
    ) -> None:
        snapshot = self._snapshot
        try:
            python_level = self._enabled_level(level, snapshot.options)
            if python_level is None:
                return
            options = snapshot.options
            template = snapshot.exit
            values: dict[str, object] = {CLASS_NAME: class_name, METHOD_NAME: method_name}
            state = dict(values)
            if template.uses(RETURN_VALUE):
                if options.log_return_values:
                    state[RETURN_VALUE] = snapshot.formatter.format_value(return_value)
                else:
                    values[RETURN_VALUE] = DISABLED
            if template.uses(EXECUTION_TIME):
                if options.log_execution_time:
                    state[EXECUTION_TIME] = elapsed_ms
                else:
                    values[EXECUTION_TIME] = DISABLED
            values.update(state)
            self._emit(python_level, template.render(values), state, None, options)
        except Exception as exc:
            _warn_internal("exit", class_name, method_name, exc)

    def log_exception(
        self,
        class_name: str,
        method_name: str,
        exception: BaseException,
        elapsed_ms: float,
        level: LogLevel | None = None,
    ) -> None:
        snapshot = self._snapshot
        if not snapshot.options.log_exceptions:
            return
        try:
            python_level = self._enabled_level(level, snapshot.options)
            if python_level is None:
                return
            options = snapshot.options
            template = snapshot.exception
            values: dict[str, object] = {CLASS_NAME: class_name, METHOD_NAME: method_name}
            state = dict(values)
            if template.uses(EXCEPTION_TYPE):
                state[EXCEPTION_TYPE] = type(exception).__name__
            if template.uses(EXCEPTION_MESSAGE):
                state[EXCEPTION_MESSAGE] = str(exception)
            if template.uses(EXECUTION_TIME):
                if options.log_execution_time:
                    state[EXECUTION_TIME] = elapsed_ms
                else:
                    values[EXECUTION_TIME] = DISABLED
            values.update(state)
            exc_info = exception if options.include_exception_details else None
            self._emit(python_level, template.render(values), state, exc_info, options)
        except Exception as exc:
            _warn_internal("exception", class_name, method_name, exc)

    def _enabled_level(self, level: LogLevel | None, options: RuntimeOptions) -> int | None:
        python_level = (level if level is not None else options.default_level).python_level
        if python_level is None or not self._logger.isEnabledFor(python_level):
            return None
        return python_level

    def _emit(
        self,
        python_level: int,
        message: str,
        state: dict[str, object],
        exc_info: BaseException | None,
        options: RuntimeOptions,
    ) -> None:
        if options.use_structured_logging:
            self._logger.log(python_level, message, exc_info=exc_info, extra={"state": state})
        else:
            self._logger.log(python_level, message, exc_info=exc_info)


def inject_method_logger(
    instance: object,
    method_logger: MethodLogger,
    options: RuntimeOptions | None = None,
) -> bool:
    """Hand ``method_logger`` to an instrumented object.

    Returns False when the object has no generated logging fragment or when
    the namespace/class filters in ``options`` exclude its class.
    """
    if not isinstance(instance, MethodLoggerAware):
        return False
    if options is not None:
        cls = type(instance)
        if not options.should_log(cls.__module__, cls.__qualname__):
            return False
    instance.set_method_logger(method_logger)
    return True


def _warn_internal(event: str, class_name: str, method_name: str, exc: Exception) -> None:
    warnings.warn(
        f"aoplog: failed to log {event} of {class_name}.{method_name}: {exc!r}",
        stacklevel=3,
    )

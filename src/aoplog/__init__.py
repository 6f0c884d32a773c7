"""aoplog: generated entry/exit/exception logging for annotated classes.

Annotate a class and mark it open for generated members:

    from aoplog import LogLevel, SensitiveData, log_class, log_method, partial

    @partial
    @log_class
    class UserService:
        def create_user_core(self, email: str, password: Annotated[str, SensitiveData()]) -> User:
            ...

Run ``aoplog generate <source root>`` at build time; it writes one logging
module per class, which ``@partial`` merges in at import. Then supply a logger:

    service = UserService()
    inject_method_logger(service, DefaultMethodLogger(options=RuntimeOptions(...)))
    service.create_user("a@example.com", "hunter2")   # logged, password masked
"""

from __future__ import annotations

from .core import (
    DefaultMethodLogger,
    MethodLogger,
    MethodLoggerAware,
    NullMethodLogger,
    RuntimeOptions,
    directives_of,
    inject_method_logger,
    log_class,
    log_exception,
    log_method,
    log_result,
    partial,
    sensitive_data,
)
from .exceptions import AoplogError, FragmentConflictError, SourceLoadError
from .models import (
    LogClass,
    LogException,
    LogLevel,
    LogMethod,
    LogParameter,
    LogResult,
    SensitiveData,
)

__all__ = [
    "AoplogError",
    "DefaultMethodLogger",
    "FragmentConflictError",
    "LogClass",
    "LogException",
    "LogLevel",
    "LogMethod",
    "LogParameter",
    "LogResult",
    "MethodLogger",
    "MethodLoggerAware",
    "NullMethodLogger",
    "RuntimeOptions",
    "SensitiveData",
    "SourceLoadError",
    "directives_of",
    "inject_method_logger",
    "log_class",
    "log_exception",
    "log_method",
    "log_result",
    "partial",
    "sensitive_data",
]

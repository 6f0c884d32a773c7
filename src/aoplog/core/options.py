"""Runtime options for the method logger."""

from __future__ import annotations

import re
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from ..models import LogLevel

DEFAULT_ENTRY_FORMAT = "Entering {ClassName}.{MethodName}"
DEFAULT_EXIT_FORMAT = "Exiting {ClassName}.{MethodName} (took {ExecutionTime}ms)"
DEFAULT_EXCEPTION_FORMAT = (
    "Exception in {ClassName}.{MethodName}: {ExceptionType} - {ExceptionMessage}"
)


class RuntimeOptions(BaseModel):
    """Validated, immutable logging options. Passed to the method logger at construction.

    Replace the whole value to reconfigure; instances are frozen so concurrent
    readers never observe a half-applied change.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_level: LogLevel = LogLevel.INFORMATION
    log_execution_time: bool = True
    log_parameters: bool = True
    log_return_values: bool = True
    log_exceptions: bool = True
    included_namespaces: tuple[str, ...] = ()
    excluded_namespaces: tuple[str, ...] = ()
    included_classes: tuple[str, ...] = ()
    excluded_classes: tuple[str, ...] = ()
    max_string_length: int = Field(default=1000, ge=0)
    max_collection_size: int = Field(default=10, ge=0)
    use_structured_logging: bool = True
    include_exception_details: bool = True
    entry_format: str = DEFAULT_ENTRY_FORMAT
    exit_format: str = DEFAULT_EXIT_FORMAT
    exception_format: str = DEFAULT_EXCEPTION_FORMAT

    def should_log_namespace(self, namespace: str) -> bool:
        """Exclusions win; an empty inclusion list includes everything."""
        lowered = namespace.casefold()
        if any(lowered.startswith(prefix.casefold()) for prefix in self.excluded_namespaces):
            return False
        if not self.included_namespaces:
            return True
        return any(lowered.startswith(prefix.casefold()) for prefix in self.included_namespaces)

    def should_log_class(self, class_name: str) -> bool:
        """Match ``class_name`` against ``*`` glob patterns. Exclusions win."""
        if any(_matches_pattern(class_name, pattern) for pattern in self.excluded_classes):
            return False
        if not self.included_classes:
            return True
        return any(_matches_pattern(class_name, pattern) for pattern in self.included_classes)

    def should_log(self, namespace: str, class_name: str) -> bool:
        return self.should_log_namespace(namespace) and self.should_log_class(class_name)


def _matches_pattern(value: str, pattern: str) -> bool:
    if pattern == "*":
        return True
    if "*" not in pattern:
        return value.casefold() == pattern.casefold()
    return _compile_glob(pattern).match(value) is not None


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    body = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.compile(rf"^{body}\Z", re.IGNORECASE)

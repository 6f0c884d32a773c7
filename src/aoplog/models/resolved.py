"""Merged per-method configuration produced by the resolver."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from .directives import LogLevel, SensitiveData


class ParameterKind(StrEnum):
    POSITIONAL_ONLY = "positional_only"
    POSITIONAL_OR_KEYWORD = "positional_or_keyword"
    VAR_POSITIONAL = "var_positional"
    KEYWORD_ONLY = "keyword_only"
    VAR_KEYWORD = "var_keyword"


class ParameterSpec(BaseModel):
    """A parameter of an instrumented method, as it will be reproduced and logged.

    ``annotation`` and ``default`` hold source text. ``default_is_literal`` is
    False when the default cannot be copied verbatim and must be looked up on
    the original method at call time.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: ParameterKind
    annotation: str | None = None
    default: str | None = None
    default_is_literal: bool = True
    log_name: str
    skip: bool = False
    max_length: int = -1
    sensitive: SensitiveData | None = None


class ResolvedMethodConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: LogLevel = LogLevel.INFORMATION
    log_execution_time: bool = True
    log_parameters: bool = True
    log_return_value: bool = True
    log_exceptions: bool = True
    exception_level: LogLevel | None = None
    result_max_length: int = -1
    result_sensitive: SensitiveData | None = None

    @property
    def effective_exception_level(self) -> LogLevel:
        return self.exception_level if self.exception_level is not None else self.level


class ResolvedMethod(BaseModel):
    """An eligible method together with everything needed to emit its wrapper."""

    model_config = ConfigDict(frozen=True)

    name: str
    is_async: bool
    parameters: tuple[ParameterSpec, ...]
    self_name: str = "self"
    returns: str | None = None
    config: ResolvedMethodConfig
    line: int

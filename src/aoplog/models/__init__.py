"""Data models for directives, resolved configuration and generation output."""

from .diagnostics import (
    INVALID_DIRECTIVE,
    PARTIAL_REQUIRED,
    RESERVED_MEMBER,
    WRAPPER_SKIPPED,
    Diagnostic,
    DiagnosticSeverity,
    GeneratedSource,
    GenerationResult,
    SourceLocation,
)
from .directives import (
    LogClass,
    LogException,
    LogLevel,
    LogMethod,
    LogParameter,
    LogResult,
    SensitiveData,
)
from .resolved import ParameterKind, ParameterSpec, ResolvedMethod, ResolvedMethodConfig

__all__ = [
    "INVALID_DIRECTIVE",
    "PARTIAL_REQUIRED",
    "RESERVED_MEMBER",
    "WRAPPER_SKIPPED",
    "Diagnostic",
    "DiagnosticSeverity",
    "GeneratedSource",
    "GenerationResult",
    "LogClass",
    "LogException",
    "LogLevel",
    "LogMethod",
    "LogParameter",
    "LogResult",
    "ParameterKind",
    "ParameterSpec",
    "ResolvedMethod",
    "ResolvedMethodConfig",
    "SensitiveData",
    "SourceLocation",
]

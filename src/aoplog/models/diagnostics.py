"""Generation diagnostics and generated source units."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

PARTIAL_REQUIRED = "AOPLOG001"
WRAPPER_SKIPPED = "AOPLOG002"
RESERVED_MEMBER = "AOPLOG003"
INVALID_DIRECTIVE = "AOPLOG004"


class DiagnosticSeverity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class SourceLocation(BaseModel):
    """Position of a declaration. Used as the identity of generation targets."""

    model_config = ConfigDict(frozen=True)

    path: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    severity: DiagnosticSeverity
    message: str
    location: SourceLocation


class GeneratedSource(BaseModel):
    """One generated logging module for one class."""

    model_config = ConfigDict(frozen=True)

    hint_name: str
    module_name: str
    target: str
    source_path: str
    output_path: str
    wrappers: tuple[str, ...] = ()
    text: str


class GenerationResult(BaseModel):
    sources: list[GeneratedSource] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == DiagnosticSeverity.ERROR]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

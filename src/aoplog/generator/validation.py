"""Deciding which candidate classes may receive generated members."""

from __future__ import annotations

import ast
from collections.abc import Iterable, Iterator

from ..models import (
    PARTIAL_REQUIRED,
    RESERVED_MEMBER,
    Diagnostic,
    DiagnosticSeverity,
    SourceLocation,
)
from .discovery import CandidateType

LOGGER_FIELD = "_aoplog_method_logger"
LOGGER_SETTER = "set_method_logger"
RESERVED_MEMBERS = frozenset({LOGGER_FIELD, LOGGER_SETTER})


def validate_candidates(
    candidates: Iterable[CandidateType],
) -> tuple[list[CandidateType], list[Diagnostic]]:
    """Split candidates into augmentable classes and diagnostics for the rest.

    Candidates are deduplicated first so a class found through several
    directives is reported once.
    """
    unique: dict[SourceLocation, CandidateType] = {}
    for candidate in candidates:
        unique.setdefault(candidate.location, candidate)

    valid: list[CandidateType] = []
    diagnostics: list[Diagnostic] = []
    for candidate in unique.values():
        if not candidate.is_partial:
            diagnostics.append(
                Diagnostic(
                    id=PARTIAL_REQUIRED,
                    severity=DiagnosticSeverity.ERROR,
                    message=(
                        f"Class '{candidate.name}' uses aoplog logging directives but is not "
                        "partial. Decorate it with @partial so generated logging members can "
                        "be added to it."
                    ),
                    location=candidate.location,
                )
            )
            continue
        clashes = sorted(RESERVED_MEMBERS & member_names(candidate.node))
        if clashes:
            diagnostics.append(
                Diagnostic(
                    id=RESERVED_MEMBER,
                    severity=DiagnosticSeverity.ERROR,
                    message=(
                        f"Class '{candidate.name}' defines {', '.join(clashes)}, reserved for "
                        "generated logging members. Rename the member(s)."
                    ),
                    location=candidate.location,
                )
            )
            continue
        valid.append(candidate)
    return valid, diagnostics


def member_names(node: ast.ClassDef) -> set[str]:
    """Every name bound directly in a class body."""
    return set(_bound_names(node.body))


def _bound_names(body: list[ast.stmt]) -> Iterator[str]:
    for statement in body:
        if isinstance(statement, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            yield statement.name
        elif isinstance(statement, ast.Assign):
            for target in statement.targets:
                yield from _target_names(target)
        elif isinstance(statement, (ast.AnnAssign, ast.AugAssign)):
            yield from _target_names(statement.target)
        elif isinstance(statement, (ast.Import, ast.ImportFrom)):
            for alias in statement.names:
                if alias.name != "*":
                    yield alias.asname or alias.name.partition(".")[0]
        elif isinstance(statement, (ast.For, ast.AsyncFor)):
            yield from _target_names(statement.target)
            yield from _bound_names(statement.body)
            yield from _bound_names(statement.orelse)
        elif isinstance(statement, (ast.If, ast.While)):
            yield from _bound_names(statement.body)
            yield from _bound_names(statement.orelse)
        elif isinstance(statement, (ast.With, ast.AsyncWith)):
            for item in statement.items:
                if item.optional_vars is not None:
                    yield from _target_names(item.optional_vars)
            yield from _bound_names(statement.body)
        elif isinstance(statement, (ast.Try, ast.TryStar)):
            yield from _bound_names(statement.body)
            for handler in statement.handlers:
                if handler.name:
                    yield handler.name
                yield from _bound_names(handler.body)
            yield from _bound_names(statement.orelse)
            yield from _bound_names(statement.finalbody)


def _target_names(target: ast.expr) -> Iterator[str]:
    if isinstance(target, ast.Name):
        yield target.id
    elif isinstance(target, (ast.Tuple, ast.List)):
        for element in target.elts:
            yield from _target_names(element)
    elif isinstance(target, ast.Starred):
        yield from _target_names(target.value)

"""Finding classes that carry logging directives."""

from __future__ import annotations

import ast
from collections.abc import Iterator

from ..models import SourceLocation
from .compilation import Compilation, SourceModule
from .directives import find_decorator

CLASS_DIRECTIVE = "log_class"
METHOD_DIRECTIVE = "log_method"
PARTIAL_DIRECTIVE = "partial"

FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef


class CandidateType:
    """A class declaration with at least one directive.

    Two candidates are the same candidate when they share a declaration
    location, however they were found.
    """

    def __init__(self, module: SourceModule, node: ast.ClassDef, qualname: str) -> None:
        self.module = module
        self.node = node
        self.qualname = qualname
        self.location = SourceLocation(path=module.path, line=node.lineno, column=node.col_offset)

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def class_directive(self) -> ast.expr | None:
        return find_decorator(self.module, self.node.decorator_list, CLASS_DIRECTIVE)

    @property
    def is_partial(self) -> bool:
        return find_decorator(self.module, self.node.decorator_list, PARTIAL_DIRECTIVE) is not None

    def methods(self) -> Iterator[FunctionNode]:
        for statement in self.node.body:
            if isinstance(statement, (ast.FunctionDef, ast.AsyncFunctionDef)):
                yield statement

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateType):
            return NotImplemented
        return self.location == other.location

    def __hash__(self) -> int:
        return hash(self.location)

    def __repr__(self) -> str:
        return f"CandidateType({self.module.name}.{self.qualname} at {self.location})"


def discover_candidates(compilation: Compilation) -> list[CandidateType]:
    """Union of classes with a class directive and classes with a method directive."""
    found: dict[SourceLocation, CandidateType] = {}
    for candidate in _with_class_directive(compilation):
        found.setdefault(candidate.location, candidate)
    for candidate in _with_method_directive(compilation):
        found.setdefault(candidate.location, candidate)
    return sorted(found.values(), key=_location_key)


def _with_class_directive(compilation: Compilation) -> Iterator[CandidateType]:
    for module in compilation:
        for qualname, node in iter_classes(module.tree):
            if find_decorator(module, node.decorator_list, CLASS_DIRECTIVE) is not None:
                yield CandidateType(module, node, qualname)


def _with_method_directive(compilation: Compilation) -> Iterator[CandidateType]:
    for module in compilation:
        for qualname, node in iter_classes(module.tree):
            for statement in node.body:
                if not isinstance(statement, (ast.FunctionDef, ast.AsyncFunctionDef)):
                    continue
                if find_decorator(module, statement.decorator_list, METHOD_DIRECTIVE) is not None:
                    yield CandidateType(module, node, qualname)
                    break


def iter_classes(tree: ast.Module) -> Iterator[tuple[str, ast.ClassDef]]:
    """Classes importable by qualified name: module level or nested in classes."""

    def visit(body: list[ast.stmt], prefix: str) -> Iterator[tuple[str, ast.ClassDef]]:
        for statement in body:
            if isinstance(statement, ast.ClassDef):
                qualname = f"{prefix}{statement.name}"
                yield qualname, statement
                yield from visit(statement.body, f"{qualname}.")

    yield from visit(tree.body, "")


def _location_key(candidate: CandidateType) -> tuple[str, int, int]:
    location = candidate.location
    return (location.path, location.line, location.column)

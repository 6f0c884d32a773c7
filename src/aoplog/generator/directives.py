"""Reading directive decorators and ``Annotated`` metadata from syntax."""

from __future__ import annotations

import ast
from typing import Any, TypeVar

from pydantic import ValidationError

from ..models import Diagnostic, DiagnosticSeverity, LogLevel, SourceLocation
from ..models.diagnostics import INVALID_DIRECTIVE
from ..models.directives import Directive
from .compilation import SourceModule, is_package_symbol

D = TypeVar("D", bound=Directive)


class _NotLiteral(Exception):
    pass


def find_decorator(module: SourceModule, decorators: list[ast.expr], symbol: str) -> ast.expr | None:
    """The first decorator naming ``aoplog.<symbol>``, called or bare."""
    for decorator in decorators:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if module.refers_to(target, symbol):
            return decorator
    return None


def annotated_metadata(module: SourceModule, annotation: ast.expr | None) -> list[ast.expr]:
    """Metadata expressions of an ``Annotated[T, ...]`` annotation, else nothing."""
    if not isinstance(annotation, ast.Subscript) or not module.is_annotated(annotation.value):
        return []
    index = annotation.slice
    if isinstance(index, ast.Tuple):
        return list(index.elts[1:])
    return []


def find_metadata(module: SourceModule, metadata: list[ast.expr], symbol: str) -> ast.expr | None:
    for item in metadata:
        target = item.func if isinstance(item, ast.Call) else item
        if module.refers_to(target, symbol):
            return item
    return None


def read_directive(
    module: SourceModule,
    node: ast.expr,
    directive_type: type[D],
    diagnostics: list[Diagnostic],
) -> D:
    """Build a directive record from a decorator or metadata expression.

    Arguments must be literals (or ``LogLevel`` members). Anything else is
    reported as ``AOPLOG004`` and the directive falls back to its defaults.
    """
    if not isinstance(node, ast.Call):
        return directive_type()
    try:
        args = [_evaluate(module, arg) for arg in node.args]
        kwargs = {kw.arg: _evaluate(module, kw.value) for kw in node.keywords if kw.arg}
        if any(kw.arg is None for kw in node.keywords):
            raise _NotLiteral("**kwargs")
        return directive_type.from_arguments(args, kwargs)  # type: ignore[return-value]
    except _NotLiteral as exc:
        reason = f"argument {exc} is not a literal"
    except (ValidationError, TypeError) as exc:
        reason = str(exc).splitlines()[0]
    diagnostics.append(
        Diagnostic(
            id=INVALID_DIRECTIVE,
            severity=DiagnosticSeverity.ERROR,
            message=f"Invalid {directive_type.__name__} directive: {reason}. Defaults are used instead.",
            location=SourceLocation(path=module.path, line=node.lineno, column=node.col_offset),
        )
    )
    return directive_type()


def _evaluate(module: SourceModule, node: ast.expr) -> Any:
    if isinstance(node, ast.Attribute):
        owner = module.resolve(node.value)
        if is_package_symbol(owner, "LogLevel"):
            try:
                return LogLevel[node.attr]
            except KeyError:
                raise _NotLiteral(ast.unparse(node)) from None
    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        raise _NotLiteral(ast.unparse(node)) from None

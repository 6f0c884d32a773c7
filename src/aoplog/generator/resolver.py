"""Merging class and method directives into one configuration per method."""

from __future__ import annotations

import ast
from collections.abc import Iterator

from ..models import (
    Diagnostic,
    LogClass,
    LogException,
    LogMethod,
    LogParameter,
    LogResult,
    ParameterKind,
    ParameterSpec,
    ResolvedMethod,
    ResolvedMethodConfig,
    SensitiveData,
)
from .compilation import SourceModule
from .directives import annotated_metadata, find_decorator, find_metadata, read_directive
from .discovery import METHOD_DIRECTIVE, CandidateType, FunctionNode

MERGED_FIELDS = (
    "level",
    "log_execution_time",
    "log_parameters",
    "log_return_value",
    "log_exceptions",
)

_EXCLUDING_DECORATORS = frozenset(
    {
        "builtins.staticmethod",
        "builtins.classmethod",
        "builtins.property",
        "functools.cached_property",
        "abc.abstractproperty",
        "abc.abstractclassmethod",
        "abc.abstractstaticmethod",
        "typing.overload",
        "typing_extensions.overload",
    }
)
_ACCESSOR_ATTRIBUTES = frozenset({"setter", "getter", "deleter"})


def resolve_config(
    class_directive: LogClass | None,
    method_directive: LogMethod | None,
    *,
    result: LogResult | None = None,
    exception: LogException | None = None,
    result_sensitive: SensitiveData | None = None,
) -> ResolvedMethodConfig:
    """Each field comes from the method directive when set there explicitly,
    else from the class directive, else from the hard defaults."""
    values: dict[str, object] = {}
    for field in MERGED_FIELDS:
        if method_directive is not None and field in method_directive.model_fields_set:
            values[field] = getattr(method_directive, field)
        elif class_directive is not None:
            values[field] = getattr(class_directive, field)
    if result is not None:
        if result.skip:
            values["log_return_value"] = False
        values["result_max_length"] = result.max_length
    if exception is not None:
        values["exception_level"] = exception.level
    values["result_sensitive"] = result_sensitive
    return ResolvedMethodConfig.model_validate(values)


def resolve_methods(candidate: CandidateType, diagnostics: list[Diagnostic]) -> list[ResolvedMethod]:
    """Resolved configuration for every method of ``candidate`` that gets a wrapper."""
    module = candidate.module
    class_node = candidate.class_directive
    class_directive = (
        read_directive(module, class_node, LogClass, diagnostics) if class_node is not None else None
    )
    resolved = []
    for function in candidate.methods():
        method_node = find_decorator(module, function.decorator_list, METHOD_DIRECTIVE)
        if class_directive is None and method_node is None:
            continue
        if not is_instrumentable(module, function):
            continue
        method_directive = (
            read_directive(module, method_node, LogMethod, diagnostics)
            if method_node is not None
            else None
        )
        if method_directive is not None and method_directive.skip:
            continue
        resolved.append(_resolve_method(module, function, class_directive, method_directive, diagnostics))
    return resolved


def is_instrumentable(module: SourceModule, function: FunctionNode) -> bool:
    """Only ordinary instance methods get wrappers."""
    name = function.name
    if name.startswith("__"):
        # dunder methods (constructors, operators) and name-mangled privates
        return False
    positional = function.args.posonlyargs + function.args.args
    if not positional:
        return False
    for decorator in function.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if module.resolve(target) in _EXCLUDING_DECORATORS:
            return False
        if isinstance(target, ast.Attribute) and target.attr in _ACCESSOR_ATTRIBUTES:
            return False
    return True


def _resolve_method(
    module: SourceModule,
    function: FunctionNode,
    class_directive: LogClass | None,
    method_directive: LogMethod | None,
    diagnostics: list[Diagnostic],
) -> ResolvedMethod:
    decorators = function.decorator_list
    result_node = find_decorator(module, decorators, "log_result")
    exception_node = find_decorator(module, decorators, "log_exception")
    sensitive_node = find_decorator(module, decorators, "sensitive_data")
    if sensitive_node is not None:
        result_sensitive = read_directive(module, sensitive_node, SensitiveData, diagnostics)
    else:
        result_sensitive = _sensitive_annotation(module, function.returns, diagnostics)

    config = resolve_config(
        class_directive,
        method_directive,
        result=read_directive(module, result_node, LogResult, diagnostics) if result_node else None,
        exception=(
            read_directive(module, exception_node, LogException, diagnostics)
            if exception_node
            else None
        ),
        result_sensitive=result_sensitive,
    )
    positional = function.args.posonlyargs + function.args.args
    return ResolvedMethod(
        name=function.name,
        is_async=isinstance(function, ast.AsyncFunctionDef) and not _is_generator(function),
        self_name=positional[0].arg,
        parameters=tuple(_parameters(module, function.args, diagnostics)),
        returns=ast.unparse(function.returns) if function.returns is not None else None,
        config=config,
        line=function.lineno,
    )


def _parameters(
    module: SourceModule, args: ast.arguments, diagnostics: list[Diagnostic]
) -> Iterator[ParameterSpec]:
    positional = args.posonlyargs + args.args
    defaults: list[ast.expr | None] = [None] * (len(positional) - len(args.defaults))
    defaults += args.defaults
    for index, (arg, default) in enumerate(zip(positional, defaults, strict=True)):
        if index == 0:
            continue
        kind = (
            ParameterKind.POSITIONAL_ONLY
            if index < len(args.posonlyargs)
            else ParameterKind.POSITIONAL_OR_KEYWORD
        )
        yield _parameter(module, arg, kind, default, diagnostics)
    if args.vararg is not None:
        yield _parameter(module, args.vararg, ParameterKind.VAR_POSITIONAL, None, diagnostics)
    for arg, default in zip(args.kwonlyargs, args.kw_defaults, strict=True):
        yield _parameter(module, arg, ParameterKind.KEYWORD_ONLY, default, diagnostics)
    if args.kwarg is not None:
        yield _parameter(module, args.kwarg, ParameterKind.VAR_KEYWORD, None, diagnostics)


def _parameter(
    module: SourceModule,
    arg: ast.arg,
    kind: ParameterKind,
    default: ast.expr | None,
    diagnostics: list[Diagnostic],
) -> ParameterSpec:
    metadata = annotated_metadata(module, arg.annotation)
    parameter_node = find_metadata(module, metadata, "LogParameter")
    directive = (
        read_directive(module, parameter_node, LogParameter, diagnostics)
        if parameter_node is not None
        else LogParameter()
    )
    sensitive_node = find_metadata(module, metadata, "SensitiveData")
    return ParameterSpec(
        name=arg.arg,
        kind=kind,
        annotation=ast.unparse(arg.annotation) if arg.annotation is not None else None,
        default=ast.unparse(default) if default is not None else None,
        default_is_literal=default is None or is_literal_default(default),
        log_name=directive.name or arg.arg,
        skip=directive.skip,
        max_length=directive.max_length,
        sensitive=(
            read_directive(module, sensitive_node, SensitiveData, diagnostics)
            if sensitive_node is not None
            else None
        ),
    )


def _sensitive_annotation(
    module: SourceModule, annotation: ast.expr | None, diagnostics: list[Diagnostic]
) -> SensitiveData | None:
    node = find_metadata(module, annotated_metadata(module, annotation), "SensitiveData")
    if node is None:
        return None
    return read_directive(module, node, SensitiveData, diagnostics)


def is_literal_default(node: ast.expr) -> bool:
    """Immutable literals can be copied into the wrapper signature verbatim."""
    if isinstance(node, ast.Constant):
        return True
    if isinstance(node, ast.UnaryOp) and isinstance(node.op, (ast.USub, ast.UAdd)):
        return isinstance(node.operand, ast.Constant) and isinstance(
            node.operand.value, (int, float, complex)
        )
    if isinstance(node, ast.Tuple):
        return all(is_literal_default(element) for element in node.elts)
    return False


def _is_generator(function: FunctionNode) -> bool:
    """True when ``yield`` occurs in the function's own body."""
    pending: list[ast.AST] = list(function.body)
    while pending:
        node = pending.pop()
        if isinstance(node, (ast.Yield, ast.YieldFrom)):
            return True
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda, ast.ClassDef)):
            continue
        pending.extend(ast.iter_child_nodes(node))
    return False

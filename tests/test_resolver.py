from __future__ import annotations

from aoplog import LogClass, LogException, LogLevel, LogMethod, LogResult, SensitiveData
from aoplog.generator import Compilation, discover_candidates, resolve_config, resolve_methods
from aoplog.models import INVALID_DIRECTIVE, Diagnostic, ParameterKind, ResolvedMethod


def _resolve(source: str) -> tuple[dict[str, ResolvedMethod], list[Diagnostic]]:
    compilation = Compilation.from_sources({"app.services": source})
    (candidate,) = discover_candidates(compilation)
    diagnostics: list[Diagnostic] = []
    methods = resolve_methods(candidate, diagnostics)
    return {method.name: method for method in methods}, diagnostics


def test_hard_defaults_apply_without_directives() -> None:
    config = resolve_config(None, None)
    assert config.level == LogLevel.INFORMATION
    assert config.log_parameters is True
    assert config.log_return_value is True
    assert config.effective_exception_level == LogLevel.INFORMATION


def test_explicit_method_fields_override_class_fields() -> None:
    config = resolve_config(
        LogClass(level=LogLevel.WARNING, log_parameters=False, log_execution_time=False),
        LogMethod(log_parameters=True),
    )
    assert config.level == LogLevel.WARNING
    assert config.log_parameters is True
    assert config.log_execution_time is False


def test_unset_method_fields_fall_back_to_class_fields() -> None:
    config = resolve_config(LogClass(LogLevel.DEBUG, log_return_value=False), LogMethod())
    assert config.level == LogLevel.DEBUG
    assert config.log_return_value is False


def test_method_directive_alone_uses_its_own_values() -> None:
    config = resolve_config(None, LogMethod(LogLevel.TRACE))
    assert config.level == LogLevel.TRACE
    assert config.log_exceptions is True


def test_result_and_exception_directives_refine_the_config() -> None:
    mask = SensitiveData("<hidden>")
    config = resolve_config(
        LogClass(),
        None,
        result=LogResult(skip=True, max_length=4),
        exception=LogException(LogLevel.CRITICAL),
        result_sensitive=mask,
    )
    assert config.log_return_value is False
    assert config.result_max_length == 4
    assert config.effective_exception_level == LogLevel.CRITICAL
    assert config.result_sensitive == mask


def test_only_ordinary_instance_methods_are_eligible() -> None:
    methods, diagnostics = _resolve(
        """
import functools
import typing
from aoplog import log_class, log_method, partial

@partial
@log_class
class Service:
    def __init__(self): ...
    def __str__(self): ...
    def __hidden(self): ...
    def _internal(self): ...
    def run(self): ...
    async def fetch(self): ...
    @log_method(skip=True)
    def skipped(self): ...
    @staticmethod
    def helper(value): ...
    @classmethod
    def build(cls): ...
    @property
    def size(self): ...
    @size.setter
    def size(self, value): ...
    @functools.cached_property
    def heavy(self): ...
    @typing.overload
    def pick(self, value: int) -> int: ...
    def pick(self, value): ...
    def no_self(): ...
"""
    )
    assert list(methods) == ["_internal", "run", "fetch", "pick"]
    assert methods["fetch"].is_async is True
    assert methods["run"].is_async is False
    assert diagnostics == []


def test_without_class_directive_only_marked_methods_are_resolved() -> None:
    methods, _ = _resolve(
        """
from aoplog import LogLevel, log_method, partial

@partial
class Service:
    def plain(self): ...

    @log_method(LogLevel.DEBUG, log_return_value=False)
    def validate(self, email: str) -> bool: ...
"""
    )
    assert list(methods) == ["validate"]
    config = methods["validate"].config
    assert config.level == LogLevel.DEBUG
    assert config.log_return_value is False
    assert methods["validate"].returns == "bool"


def test_parameters_keep_kinds_defaults_and_directives() -> None:
    methods, _ = _resolve(
        """
from typing import Annotated
from aoplog import LogParameter, SensitiveData, log_class, partial

SEP = ","

@partial
@log_class
class Service:
    def combine(
        this,
        first,
        /,
        email: Annotated[str, LogParameter("user_email", max_length=5)],
        token: Annotated[str, SensitiveData(show_length=True)],
        *rest,
        internal: Annotated[str, LogParameter(skip=True)] = "x",
        sep=SEP,
        offset=-1,
        **extra,
    ): ...
"""
    )
    method = methods["combine"]
    params = {p.name: p for p in method.parameters}

    assert method.self_name == "this"
    assert [p.kind for p in method.parameters] == [
        ParameterKind.POSITIONAL_ONLY,
        ParameterKind.POSITIONAL_OR_KEYWORD,
        ParameterKind.POSITIONAL_OR_KEYWORD,
        ParameterKind.VAR_POSITIONAL,
        ParameterKind.KEYWORD_ONLY,
        ParameterKind.KEYWORD_ONLY,
        ParameterKind.KEYWORD_ONLY,
        ParameterKind.VAR_KEYWORD,
    ]
    assert params["email"].log_name == "user_email"
    assert params["email"].max_length == 5
    assert params["token"].sensitive == SensitiveData(show_length=True)
    assert params["internal"].skip is True
    assert params["internal"].default == "'x'"
    assert params["sep"].default == "SEP"
    assert params["sep"].default_is_literal is False
    assert params["offset"].default_is_literal is True


def test_return_masking_from_decorator_or_annotation() -> None:
    methods, _ = _resolve(
        """
from typing import Annotated
from aoplog import SensitiveData, log_class, partial, sensitive_data

@partial
@log_class
class Vault:
    @sensitive_data("<redacted>")
    def secret(self) -> str: ...

    def token(self) -> Annotated[str, SensitiveData()]: ...
"""
    )
    assert methods["secret"].config.result_sensitive == SensitiveData("<redacted>")
    assert methods["token"].config.result_sensitive == SensitiveData()


def test_async_generators_are_not_awaited() -> None:
    methods, _ = _resolve(
        """
from aoplog import log_class, partial

@partial
@log_class
class Feed:
    async def stream(self):
        yield 1
"""
    )
    assert methods["stream"].is_async is False


def test_non_literal_directive_arguments_fall_back_to_defaults() -> None:
    methods, diagnostics = _resolve(
        """
from aoplog import log_class, log_method, partial

LEVEL = "debug"

@partial
@log_class(level="loud")
class Service:
    @log_method(level=LEVEL)
    def run(self): ...
"""
    )
    assert [d.id for d in diagnostics] == [INVALID_DIRECTIVE, INVALID_DIRECTIVE]
    assert "LEVEL" in diagnostics[1].message
    assert methods["run"].config.level == LogLevel.INFORMATION

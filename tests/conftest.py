from __future__ import annotations

import sys
import types
from collections.abc import Callable, Iterator, Mapping

import pytest

from aoplog import LogLevel
from aoplog.core.fragments import apply_fragment
from aoplog.generator import Compilation, generate
from aoplog.models import GenerationResult

SAMPLE_MODULE = "sample_app.services"


class RecordingMethodLogger:
    """Method logger that keeps every call for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[object, ...]] = []

    def log_entry(
        self,
        class_name: str,
        method_name: str,
        parameters: Mapping[str, object],
        level: LogLevel | None = None,
    ) -> None:
        self.events.append(("entry", class_name, method_name, dict(parameters), level))

    def log_exit(
        self,
        class_name: str,
        method_name: str,
        return_value: object,
        elapsed_ms: float,
        level: LogLevel | None = None,
    ) -> None:
        self.events.append(("exit", class_name, method_name, return_value, elapsed_ms, level))

    def log_exception(
        self,
        class_name: str,
        method_name: str,
        exception: BaseException,
        elapsed_ms: float,
        level: LogLevel | None = None,
    ) -> None:
        self.events.append(("exception", class_name, method_name, exception, elapsed_ms, level))


def generate_from(source: str, module_name: str = SAMPLE_MODULE) -> GenerationResult:
    return generate(Compilation.from_sources({module_name: source}))


def load_instrumented(
    source: str, qualname: str, module_name: str = SAMPLE_MODULE
) -> tuple[type, GenerationResult]:
    """Run ``source`` as a module and merge the fragment generated for ``qualname``."""
    result = generate_from(source, module_name)
    module = types.ModuleType(module_name)
    exec(compile(source, f"<{module_name}>", "exec"), module.__dict__)
    target: object = module
    for part in qualname.split("."):
        target = getattr(target, part)
    generated = next(s for s in result.sources if s.target == qualname)
    namespace: dict[str, object] = {"__name__": generated.module_name}
    exec(compile(generated.text, generated.hint_name, "exec"), namespace)
    cls = apply_fragment(target, namespace["__aoplog_fragment__"])  # type: ignore[arg-type]
    return cls, result


@pytest.fixture
def generated() -> Callable[..., GenerationResult]:
    return generate_from


@pytest.fixture
def instrument() -> Callable[..., tuple[type, GenerationResult]]:
    return load_instrumented


@pytest.fixture
def recorder() -> RecordingMethodLogger:
    return RecordingMethodLogger()


@pytest.fixture
def forget_modules() -> Iterator[Callable[[str], None]]:
    """Drop modules imported from a temporary source tree once the test ends."""
    packages: list[str] = []
    yield packages.append
    for package in packages:
        for name in list(sys.modules):
            if name == package or name.startswith(f"{package}."):
                del sys.modules[name]

from __future__ import annotations

from aoplog.generator import Compilation, discover_candidates, validate_candidates
from aoplog.models import PARTIAL_REQUIRED, RESERVED_MEMBER, DiagnosticSeverity


def _candidates(source: str, module_name: str = "app.services") -> list[str]:
    compilation = Compilation.from_sources({module_name: source})
    return [candidate.qualname for candidate in discover_candidates(compilation)]


def test_class_and_method_directives_make_one_candidate_each() -> None:
    source = """
from aoplog import log_class, log_method, partial

@partial
@log_class
class Orders:
    @log_method
    def place(self): ...

@partial
class Payments:
    @log_method(skip=False)
    def charge(self): ...

class Plain:
    def run(self): ...
"""
    assert _candidates(source) == ["Orders", "Payments"]


def test_directives_are_recognised_through_import_aliases() -> None:
    source = """
import aoplog as a
from aoplog import log_class as traced
from aoplog.core.decorators import log_method

@traced
class First: ...

@a.log_class(a.LogLevel.DEBUG)
class Second: ...

class Third:
    @log_method
    def go(self): ...
"""
    assert _candidates(source) == ["First", "Second", "Third"]


def test_lookalike_decorators_are_ignored() -> None:
    source = """
from tracing import log_class

@log_class
class Imported: ...

@log_method
class NotImported: ...
"""
    assert _candidates(source) == []


def test_nested_classes_are_found_by_qualified_name() -> None:
    source = """
from aoplog import log_class, partial

class Outer:
    @partial
    @log_class
    class Inner: ...

def factory():
    @log_class
    class Local: ...
    return Local
"""
    assert _candidates(source) == ["Outer.Inner"]


def test_candidates_are_sorted_and_repeatable() -> None:
    sources = {
        "b.mod": "from aoplog import log_class\n@log_class\nclass B: ...\n",
        "a.mod": "from aoplog import log_class\n@log_class\nclass A2: ...\n@log_class\nclass A1: ...\n",
    }
    first = [c.qualname for c in discover_candidates(Compilation.from_sources(sources))]
    second = [c.qualname for c in discover_candidates(Compilation.from_sources(sources))]
    assert first == second == ["A2", "A1", "B"]


def test_non_partial_class_gets_exactly_one_error() -> None:
    source = """
from aoplog import log_class, log_method

@log_class
class Reporter:
    @log_method
    def report(self): ...

    @log_method
    def summary(self): ...
"""
    candidates = discover_candidates(Compilation.from_sources({"app.reports": source}))
    valid, diagnostics = validate_candidates(candidates + candidates)

    assert valid == []
    assert len(diagnostics) == 1
    diagnostic = diagnostics[0]
    assert diagnostic.id == PARTIAL_REQUIRED
    assert diagnostic.severity == DiagnosticSeverity.ERROR
    assert "Reporter" in diagnostic.message
    assert "@partial" in diagnostic.message
    assert str(diagnostic.location) == "app/reports.py:5:0"


def test_class_defining_reserved_members_cannot_be_augmented() -> None:
    source = """
from aoplog import log_class, partial

@partial
@log_class
class Custom:
    _aoplog_method_logger = None

    def set_method_logger(self, logger): ...
"""
    candidates = discover_candidates(Compilation.from_sources({"app.custom": source}))
    valid, diagnostics = validate_candidates(candidates)

    assert valid == []
    assert [d.id for d in diagnostics] == [RESERVED_MEMBER]
    assert "_aoplog_method_logger, set_method_logger" in diagnostics[0].message


def test_partial_classes_pass_validation() -> None:
    source = """
import aoplog

@aoplog.partial
@aoplog.log_class
class Ready: ...
"""
    candidates = discover_candidates(Compilation.from_sources({"app.ready": source}))
    valid, diagnostics = validate_candidates(candidates)

    assert [c.qualname for c in valid] == ["Ready"]
    assert diagnostics == []

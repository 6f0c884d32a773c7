"""Rich-based rendering of generation results."""

from __future__ import annotations

from io import StringIO
from typing import Literal

from rich.console import Console
from rich.tree import Tree

from ..models import Diagnostic, DiagnosticSeverity, GenerationResult

Verbosity = Literal["minimal", "standard", "full"]


def render_generation(result: GenerationResult, *, verbosity: Verbosity = "standard") -> str:
    tree = Tree(_summary_label(result))
    for source in result.sources:
        branch = tree.add(f"{source.target} -> {source.module_name} ({len(source.wrappers)} wrappers)")
        if verbosity == "minimal":
            continue
        for wrapper in source.wrappers:
            branch.add(wrapper)
        if verbosity == "full":
            branch.add(f"source: {source.source_path}")
            branch.add(f"output: {source.output_path}")

    if result.diagnostics:
        diagnostics = tree.add("Diagnostics")
        for diagnostic in result.diagnostics:
            if verbosity == "minimal" and diagnostic.severity != DiagnosticSeverity.ERROR:
                continue
            diagnostics.add(_diagnostic_label(diagnostic))

    console = Console(record=True, width=120, markup=False, file=StringIO())
    console.print(tree)
    return console.export_text()


def _summary_label(result: GenerationResult) -> str:
    errors = len(result.errors)
    warnings = len(result.diagnostics) - errors
    return (
        f"aoplog: {len(result.sources)} module(s), "
        f"{errors} error(s), {warnings} warning(s)"
    )


def _diagnostic_label(diagnostic: Diagnostic) -> str:
    icon = "✗" if diagnostic.severity == DiagnosticSeverity.ERROR else "!"
    return f"{icon} {diagnostic.id} {diagnostic.location}: {diagnostic.message}"

"""The generation pipeline: discovery, validation, resolution and emission."""

from __future__ import annotations

from pathlib import Path

from ..models import GeneratedSource, GenerationResult
from .compilation import Compilation
from .discovery import discover_candidates
from .emitter import emit_fragment
from .resolver import resolve_methods
from .validation import validate_candidates


def generate(compilation: Compilation) -> GenerationResult:
    """Generate one logging module per valid candidate class.

    Ineligible classes produce diagnostics and no output; every other class is
    generated regardless. The result depends only on ``compilation``.
    """
    valid, diagnostics = validate_candidates(discover_candidates(compilation))
    sources = []
    for candidate in valid:
        methods = resolve_methods(candidate, diagnostics)
        sources.append(emit_fragment(candidate, methods, diagnostics))
    diagnostics.sort(key=lambda d: (d.location.path, d.location.line, d.location.column, d.id))
    return GenerationResult(sources=sources, diagnostics=diagnostics)


def stale_sources(result: GenerationResult) -> list[GeneratedSource]:
    """Generated sources whose file on disk is missing or differs."""
    stale = []
    for source in result.sources:
        path = Path(source.output_path)
        try:
            current = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            stale.append(source)
            continue
        if current != source.text:
            stale.append(source)
    return stale


def write_sources(result: GenerationResult) -> list[Path]:
    """Write stale generated modules next to their sources. Returns the written paths."""
    written = []
    for source in stale_sources(result):
        path = Path(source.output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source.text, encoding="utf-8")
        written.append(path)
    return written

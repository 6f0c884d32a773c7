"""Generate subcommand implementation."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Literal

from ..exceptions import SourceLoadError
from ..generator import Compilation, generate, stale_sources, write_sources
from ..models import GeneratedSource, GenerationResult
from ..renderers import render_generation

VerbosityArg = Literal["minimal", "standard", "full"]


def run_generate(
    root: Path,
    verbosity: VerbosityArg,
    *,
    check: bool,
    as_json: bool,
    dry_run: bool,
) -> int:
    try:
        compilation = Compilation.from_directory(root)
    except SourceLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    result = generate(compilation)

    written: list[Path] = []
    stale: list[GeneratedSource] = []
    if dry_run:
        if not as_json:
            for source in result.sources:
                print(f"# --- {source.output_path}")
                print(source.text)
    elif check:
        stale = stale_sources(result)
    else:
        written = write_sources(result)

    if as_json:
        print(json.dumps(_build_summary(result, written, stale), ensure_ascii=True, sort_keys=True))
    else:
        print(render_generation(result, verbosity=verbosity))
        for path in written:
            print(f"wrote {path}")
        for source in stale:
            print(f"stale: {source.output_path}", file=sys.stderr)

    if result.has_errors or stale:
        return 1
    return 0


def _build_summary(
    result: GenerationResult, written: list[Path], stale: list[GeneratedSource]
) -> dict[str, object]:
    return {
        "modules": [
            {
                "target": source.target,
                "module": source.module_name,
                "output": source.output_path,
                "wrappers": list(source.wrappers),
            }
            for source in result.sources
        ],
        "diagnostics": [
            {
                "id": diagnostic.id,
                "severity": diagnostic.severity.value,
                "message": diagnostic.message,
                "location": str(diagnostic.location),
            }
            for diagnostic in result.diagnostics
        ],
        "written": [str(path) for path in written],
        "stale": [source.output_path for source in stale],
    }

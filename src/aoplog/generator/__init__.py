"""Build-time generation of logging fragments from annotated sources."""

from .compilation import Compilation, SourceModule
from .discovery import CandidateType, discover_candidates
from .emitter import emit_fragment, wrapper_name
from .escaping import escape_string_literal
from .pipeline import generate, stale_sources, write_sources
from .resolver import resolve_config, resolve_methods
from .validation import validate_candidates

__all__ = [
    "CandidateType",
    "Compilation",
    "SourceModule",
    "discover_candidates",
    "emit_fragment",
    "escape_string_literal",
    "generate",
    "resolve_config",
    "resolve_methods",
    "stale_sources",
    "validate_candidates",
    "wrapper_name",
    "write_sources",
]

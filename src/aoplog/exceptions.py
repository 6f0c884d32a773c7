"""Public exception types for aoplog."""

from __future__ import annotations


class AoplogError(Exception):
    """Base class for all aoplog exceptions."""


class SourceLoadError(AoplogError):
    """Raised when a source file cannot be read or parsed for generation."""


class FragmentConflictError(AoplogError):
    """Raised when a generated logging fragment cannot be merged into its class."""

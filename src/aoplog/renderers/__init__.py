"""Console renderers."""

from .console import render_generation

__all__ = ["render_generation"]

"""Namespace imported by generated logging modules.

Generated code refers to everything it needs through this module only, so a
wrapper's parameter names can never shadow the helpers it calls.
"""

from .core.masking import mask_with_length
from .core.method_logger import MethodLogger, MethodLoggerAware
from .core.support import MISSING, default_of, elapsed_ms, start_timer, truncate
from .models import LogLevel

__all__ = [
    "MISSING",
    "LogLevel",
    "MethodLogger",
    "MethodLoggerAware",
    "default_of",
    "elapsed_ms",
    "mask_with_length",
    "start_timer",
    "truncate",
]

"""Runtime: directives, options, value formatting and the method logger."""

from .decorators import (
    directives_of,
    log_class,
    log_exception,
    log_method,
    log_result,
    partial,
    sensitive_data,
)
from .formatting import ValueFormatter
from .fragments import apply_fragment, fragment_module_name, load_fragment
from .method_logger import (
    DefaultMethodLogger,
    MethodLogger,
    MethodLoggerAware,
    NullMethodLogger,
    inject_method_logger,
)
from .options import RuntimeOptions
from .templates import MessageTemplate

__all__ = [
    "DefaultMethodLogger",
    "MessageTemplate",
    "MethodLogger",
    "MethodLoggerAware",
    "NullMethodLogger",
    "RuntimeOptions",
    "ValueFormatter",
    "apply_fragment",
    "directives_of",
    "fragment_module_name",
    "inject_method_logger",
    "load_fragment",
    "log_class",
    "log_exception",
    "log_method",
    "log_result",
    "partial",
    "sensitive_data",
]

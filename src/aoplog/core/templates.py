"""Message templates with a fixed placeholder vocabulary.

A template is tokenised once into literal and placeholder segments. Rendering
walks the segments a single time, so a substituted value that itself looks like
a placeholder is never expanded again.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

CLASS_NAME = "ClassName"
METHOD_NAME = "MethodName"
PARAMETERS = "Parameters"
PARAM_PREFIX = "Param_"
RETURN_VALUE = "ReturnValue"
EXECUTION_TIME = "ExecutionTime"
EXCEPTION_TYPE = "ExceptionType"
EXCEPTION_MESSAGE = "ExceptionMessage"

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class MessageTemplate:
    """A parsed message template."""

    __slots__ = ("text", "_segments", "placeholders")

    def __init__(self, text: str) -> None:
        self.text = text
        segments: list[tuple[bool, str]] = []
        position = 0
        for match in _PLACEHOLDER.finditer(text):
            if match.start() > position:
                segments.append((False, text[position : match.start()]))
            segments.append((True, match.group(1)))
            position = match.end()
        if position < len(text):
            segments.append((False, text[position:]))
        self._segments = tuple(segments)
        self.placeholders = frozenset(name for is_slot, name in segments if is_slot)

    def uses(self, placeholder: str) -> bool:
        return placeholder in self.placeholders

    def render(self, values: Mapping[str, object]) -> str:
        """Substitute ``values``; placeholders without a value are kept verbatim."""
        parts: list[str] = []
        for is_slot, content in self._segments:
            if not is_slot:
                parts.append(content)
            elif content in values:
                parts.append(str(values[content]))
            else:
                parts.append("{" + content + "}")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"MessageTemplate({self.text!r})"

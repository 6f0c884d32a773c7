"""Bounded, privacy-aware formatting of logged values."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Iterator, Mapping
from itertools import islice

from pydantic import BaseModel

from ..models import SensitiveData
from .masking import render_mask, sensitive_fields
from .options import RuntimeOptions

NULL = "null"
MAX_DEPTH = 4


class ValueFormatter:
    """Formats parameters and return values according to ``RuntimeOptions`` bounds.

    Collections are walked with ``islice`` so no more than
    ``max_collection_size + 1`` elements are ever pulled from a source,
    whatever its real (or infinite) length. One-shot iterators are not walked
    at all: consuming them would steal items from the caller.

    Dataclass and pydantic instances are always rendered field by field, so
    a ``SensitiveData`` field is masked however deep its record sits.
    """

    def __init__(self, options: RuntimeOptions) -> None:
        self._max_string_length = options.max_string_length
        self._max_collection_size = options.max_collection_size

    def format_parameters(self, parameters: Mapping[str, object]) -> str:
        if not parameters:
            return "no parameters"
        return ", ".join(f"{name}={self.format_value(value)}" for name, value in parameters.items())

    def format_value(self, value: object) -> object:
        """Return a loggable rendition of ``value``.

        Strings and containers become strings; scalars and other objects are
        returned unchanged. Never raises.
        """
        try:
            return self._format(value, 0)
        except Exception:
            return _unformattable(value)

    def _format(self, value: object, depth: int) -> object:
        if value is None:
            return NULL
        if isinstance(value, str):
            return self._format_string(value)
        if isinstance(value, (bool, int, float, complex)):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return self._truncate_text(repr(bytes(value)))
        if depth >= MAX_DEPTH:
            return "..."
        if isinstance(value, BaseModel) or (
            dataclasses.is_dataclass(value) and not isinstance(value, type)
        ):
            return self._format_record(value, sensitive_fields(type(value)), depth)
        if isinstance(value, Iterator):
            return f"<{type(value).__name__}>"
        if isinstance(value, Mapping):
            return self._format_items(
                (f"{self._text(key, depth)}: {self._text(item, depth)}" for key, item in value.items()),
                opening="{",
                closing="}",
            )
        if isinstance(value, Iterable):
            return self._format_items(
                (self._text(item, depth) for item in value), opening="[", closing="]"
            )
        return value

    def _text(self, value: object, depth: int) -> str:
        try:
            return str(self._format(value, depth + 1))
        except Exception:
            return _unformattable(value)

    def _format_string(self, value: str) -> str:
        limit = self._max_string_length
        if len(value) > limit:
            return f'"{value[:limit]}..." (truncated from {len(value)})'
        return f'"{value}"'

    def _truncate_text(self, text: str) -> str:
        limit = self._max_string_length
        if len(text) > limit:
            return f"{text[:limit]}... (truncated from {len(text)})"
        return text

    def _format_items(self, rendered: Iterable[str], *, opening: str, closing: str) -> str:
        limit = self._max_collection_size
        items = list(islice(rendered, limit + 1))
        truncated = len(items) > limit
        body = f"{opening}{', '.join(items[:limit])}{closing}"
        if truncated:
            return f"[Collection with {limit}+ items (showing first {limit}): {body}]"
        return body

    def _format_record(
        self, value: object, masked: Mapping[str, SensitiveData], depth: int
    ) -> str:
        if isinstance(value, BaseModel):
            names = list(type(value).model_fields)
        else:
            names = [field.name for field in dataclasses.fields(value)]  # type: ignore[arg-type]
        parts = []
        for name in names:
            field_value = getattr(value, name, None)
            marker = masked.get(name)
            if marker is not None:
                parts.append(f"{name}={render_mask(marker, field_value)}")
            else:
                parts.append(f"{name}={self._text(field_value, depth)}")
        return f"{type(value).__name__}({', '.join(parts)})"


def _unformattable(value: object) -> str:
    return f"<unformattable {type(value).__name__}>"

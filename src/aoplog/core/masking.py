"""Masking of sensitive values."""

from __future__ import annotations

import dataclasses
import typing
from functools import lru_cache

from pydantic import BaseModel

from ..models import SensitiveData


def mask_with_length(mask_value: str, value: object) -> str:
    """Return ``mask_value`` annotated with ``len(value)``; the value itself is never used.

    The length goes in front of a trailing run of ``*`` (``***SENSITIVE(8)***``),
    otherwise it is appended. Values without a length yield the bare mask.
    """
    try:
        length = len(value)  # type: ignore[arg-type]
    except Exception:
        return mask_value
    stripped = mask_value.rstrip("*")
    if stripped and stripped != mask_value:
        return f"{stripped}({length}){mask_value[len(stripped):]}"
    return f"{mask_value}({length})"


def render_mask(sensitive: SensitiveData, value: object) -> str:
    if sensitive.show_length:
        return mask_with_length(sensitive.mask_value, value)
    return sensitive.mask_value


def find_sensitive(metadata: typing.Iterable[object]) -> SensitiveData | None:
    for item in metadata:
        if isinstance(item, SensitiveData):
            return item
    return None


@lru_cache(maxsize=512)
def sensitive_fields(cls: type) -> dict[str, SensitiveData]:
    """Fields of a dataclass or pydantic model marked ``Annotated[..., SensitiveData()]``."""
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        found: dict[str, SensitiveData] = {}
        for name, field in cls.model_fields.items():
            marker = find_sensitive(field.metadata)
            if marker is not None:
                found[name] = marker
        return found
    if dataclasses.is_dataclass(cls):
        try:
            hints = typing.get_type_hints(cls, include_extras=True)
        except Exception:
            return {}
        found = {}
        for field in dataclasses.fields(cls):
            hint = hints.get(field.name)
            if typing.get_origin(hint) is typing.Annotated:
                marker = find_sensitive(typing.get_args(hint)[1:])
                if marker is not None:
                    found[field.name] = marker
        return found
    return {}

"""Merging generated logging fragments into ``@partial`` classes."""

from __future__ import annotations

import importlib
import types

from ..exceptions import FragmentConflictError

PARTIAL_ATTR = "__aoplog_partial__"
MEMBERS_ATTR = "__aoplog_members__"
FRAGMENT_ATTR = "__aoplog_fragment__"


def fragment_module_name(module: str, qualname: str) -> str:
    """Importable name of the generated module for a class.

    ``app.services`` + ``UserService`` -> ``app.services_UserService_logging``.
    """
    return f"{module}_{qualname.replace('.', '_')}_logging"


def fragment_file_name(module: str, qualname: str) -> str:
    return fragment_module_name(module, qualname).rpartition(".")[2] + ".py"


def load_fragment(cls: type) -> type | None:
    """Import the generated fragment for ``cls``; ``None`` when nothing was generated."""
    if "<" in cls.__qualname__:
        return None
    name = fragment_module_name(cls.__module__, cls.__qualname__)
    try:
        module = importlib.import_module(name)
    except ModuleNotFoundError as exc:
        if exc.name is not None and (name == exc.name or name.startswith(exc.name + ".")):
            return None
        raise
    fragment = getattr(module, FRAGMENT_ATTR, None)
    return fragment if isinstance(fragment, type) else None


def apply_fragment(cls: type, fragment: type) -> type:
    """Copy the members a fragment declares in ``__aoplog_members__`` onto ``cls``.

    Raises ``FragmentConflictError`` when ``cls`` is not ``@partial`` or when a
    member already exists on it, which happens when the generated module is
    older than the class it was generated from.
    """
    if not cls.__dict__.get(PARTIAL_ATTR, False):
        raise FragmentConflictError(f"{cls.__qualname__} is not declared @partial")
    members: tuple[str, ...] = fragment.__dict__.get(MEMBERS_ATTR, ())
    for name in members:
        if name in cls.__dict__:
            raise FragmentConflictError(
                f"{cls.__qualname__} already defines {name!r}; regenerate its logging module"
            )
    for name in members:
        value = fragment.__dict__[name]
        if isinstance(value, types.FunctionType):
            value.__qualname__ = f"{cls.__qualname__}.{name}"
        setattr(cls, name, value)
    setattr(cls, FRAGMENT_ATTR, fragment)
    return cls

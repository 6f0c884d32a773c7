"""Parsed view of the Python sources a generation run works on."""

from __future__ import annotations

import ast
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from ..exceptions import SourceLoadError

GENERATED_MARKER = "# <auto-generated/>"
PACKAGE = "aoplog"
ANNOTATED = frozenset({"typing.Annotated", "typing_extensions.Annotated"})


class SourceModule:
    """One parsed module plus the import aliases needed to resolve names in it."""

    def __init__(self, name: str, path: str, tree: ast.Module) -> None:
        self.name = name
        self.path = path
        self.tree = tree
        self._aliases = _collect_aliases(tree)

    @classmethod
    def parse(cls, name: str, path: str, text: str) -> SourceModule:
        try:
            tree = ast.parse(text, filename=path)
        except (SyntaxError, ValueError) as exc:
            raise SourceLoadError(f"Failed to parse {path}: {exc}") from exc
        return cls(name, path, tree)

    def resolve(self, node: ast.expr) -> str | None:
        """Dotted name an expression refers to, following this module's imports.

        Names that were not imported resolve under ``builtins``.
        """
        if isinstance(node, ast.Name):
            return self._aliases.get(node.id, f"builtins.{node.id}")
        if isinstance(node, ast.Attribute):
            base = self.resolve(node.value)
            return f"{base}.{node.attr}" if base is not None else None
        return None

    def refers_to(self, node: ast.expr, symbol: str) -> bool:
        """True if ``node`` names ``symbol`` exported by the aoplog package."""
        return is_package_symbol(self.resolve(node), symbol)

    def is_annotated(self, node: ast.expr) -> bool:
        return self.resolve(node) in ANNOTATED

    def __repr__(self) -> str:
        return f"SourceModule({self.name!r}, {self.path!r})"


def is_package_symbol(resolved: str | None, symbol: str) -> bool:
    if resolved is None:
        return False
    root, _, rest = resolved.partition(".")
    return root == PACKAGE and (rest == symbol or rest.endswith(f".{symbol}"))


def _collect_aliases(tree: ast.Module) -> dict[str, str]:
    aliases: dict[str, str] = {}
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname is not None:
                    aliases[alias.asname] = alias.name
                else:
                    top = alias.name.partition(".")[0]
                    aliases[top] = top
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            for alias in node.names:
                if alias.name == "*":
                    continue
                aliases[alias.asname or alias.name] = f"{node.module}.{alias.name}"
    return aliases


class Compilation:
    """An immutable set of parsed modules."""

    def __init__(self, modules: Iterable[SourceModule]) -> None:
        self.modules: tuple[SourceModule, ...] = tuple(modules)

    def __iter__(self) -> Iterator[SourceModule]:
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self.modules)

    @classmethod
    def from_sources(cls, sources: Mapping[str, str]) -> Compilation:
        """Build from ``{module_name: source_text}``; paths are derived from the names."""
        return cls(
            SourceModule.parse(name, name.replace(".", "/") + ".py", text)
            for name, text in sorted(sources.items())
        )

    @classmethod
    def from_directory(cls, root: str | Path) -> Compilation:
        """Parse every ``.py`` file under ``root``, skipping generated modules.

        Module names are dotted paths relative to ``root``, so ``root`` should
        be the directory that is on ``sys.path`` at run time.
        """
        root_path = Path(root)
        if not root_path.is_dir():
            raise SourceLoadError(f"Not a directory: {root_path}")
        modules = []
        for path in sorted(root_path.rglob("*.py")):
            relative = path.relative_to(root_path)
            if any(part.startswith(".") or part == "__pycache__" for part in relative.parts):
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise SourceLoadError(f"Failed to read {path}: {exc}") from exc
            if text.startswith(GENERATED_MARKER):
                continue
            modules.append(SourceModule.parse(_module_name(relative), str(path), text))
        return cls(modules)


def _module_name(relative: Path) -> str:
    parts = list(relative.with_suffix("").parts)
    if parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts)

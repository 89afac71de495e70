"""Import path resolution for Solidity sources."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from parse.treesitter_solidity import import_sources

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tree_sitter import Node


def resolve_import_path(
    import_text: str,
    importing_file: Path,
    dependency_root: Path,
) -> Path:
    """Resolve an import string to an absolute file path.

    Relative imports resolve against the importing file's directory; anything
    else resolves against the external dependency root.

    Examples:
        >>> str(resolve_import_path("./B.sol", Path("/p/A.sol"), Path("/nm")))
        '/p/B.sol'
        >>> str(resolve_import_path("lib/C.sol", Path("/p/A.sol"), Path("/nm")))
        '/nm/lib/C.sol'
    """
    if import_text.startswith("."):
        return (importing_file.parent / import_text).resolve()
    return (dependency_root / import_text).resolve()


def extract_import_paths(
    root: Node,
    importing_file: Path,
    dependency_root: Path,
) -> list[Path]:
    return [
        resolve_import_path(text, importing_file, dependency_root)
        for text in import_sources(root)
    ]


def find_import_for(name: str, import_paths: Sequence[Path]) -> Path | None:
    """Locate the import that provides contract ``name``.

    An import whose file stem equals the name wins; otherwise the first
    import whose file name contains the name.
    """
    for path in import_paths:
        if path.stem == name:
            return path
    for path in import_paths:
        if name and name in path.name:
            return path
    return None


__all__ = ["extract_import_paths", "find_import_for", "resolve_import_path"]

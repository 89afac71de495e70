"""Shared utilities for solgraph."""

from __future__ import annotations

from pathlib import Path


def display_path(path: str | Path, root: Path) -> str:
    """Render a source path for artifacts.

    Paths inside ``root`` become POSIX paths relative to it; anything else
    (dependency files outside the project) stays absolute.

    Examples:
        >>> display_path("/repo/contracts/A.sol", Path("/repo"))
        'contracts/A.sol'
        >>> display_path("/elsewhere/B.sol", Path("/repo"))
        '/elsewhere/B.sol'
    """
    path_obj = Path(path)
    try:
        return path_obj.relative_to(root).as_posix()
    except ValueError:
        return path_obj.as_posix()

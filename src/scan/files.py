"""Solidity source discovery."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence
    from pathlib import Path

DEFAULT_SKIP_DIRS = (".solgraph", "node_modules")


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return .gitignore files under root (root first), sorted by relative path."""
    found = {path for path in root.rglob(".gitignore") if path.is_file()}
    return sorted(found, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    matchers = [parse_gitignore(path) for path in _iter_gitignore_files(root)]
    if not matchers:
        return None

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # Matcher rooted elsewhere (e.g. a symlinked .gitignore).
                continue
        return False

    return matches


@dataclass(frozen=True)
class _SourceFilter:
    root: Path
    skip_dirs: frozenset[str]
    ignored: Callable[[str], bool] | None
    include: Sequence[str]
    exclude: Sequence[str]

    def relative(self, path: Path) -> Path | None:
        """Path relative to the resolved root, or None if it escapes it."""
        try:
            return path.resolve().relative_to(self.root)
        except (OSError, ValueError):
            return None

    def accepts(self, path: Path) -> bool:
        if path.is_symlink() or not path.is_file():
            return False
        rel_path = self.relative(path)
        if rel_path is None:
            return False
        if self.skip_dirs.intersection(rel_path.parts[:-1]):
            return False
        if self.ignored is not None and self.ignored(str(path)):
            return False
        rel = rel_path.as_posix()
        if self.include and not any(fnmatch(rel, pat) for pat in self.include):
            return False
        return not any(fnmatch(rel, pat) for pat in self.exclude)


def find_solidity_files(
    directory: Path,
    *,
    skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find the ``*.sol`` entry files under a directory.

    Args:
        directory: Directory to search for .sol files
        skip_dirs: Directory names pruned anywhere below ``directory``
            (output and dependency directories)
        include_patterns: Optional list of fnmatch patterns; if provided,
            files must match at least one pattern to be included
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded
        nested_gitignore: Honor every .gitignore below ``directory``, not
            just the root one

    Yields:
        Path objects sorted lexicographically by relative path. Symlinks and
        files that resolve outside ``directory`` are never yielded.
    """
    source_filter = _SourceFilter(
        root=directory.resolve(),
        skip_dirs=frozenset(name for name in skip_dirs if name),
        ignored=_build_gitignore_matcher(
            directory, nested_gitignore=nested_gitignore
        ),
        include=include_patterns or (),
        exclude=exclude_patterns or (),
    )

    matched_files = sorted(
        (path for path in directory.rglob("*.sol") if source_filter.accepts(path)),
        key=lambda p: p.relative_to(directory).as_posix(),
    )

    yield from matched_files


__all__ = ["DEFAULT_SKIP_DIRS", "find_solidity_files"]

"""Determinism verification for call graph artifacts."""

from __future__ import annotations

import filecmp
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.write import generate_all_artifacts

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()
    extra: tuple[str, ...] = ()


def _relative_files(directory: Path) -> set[str]:
    return {
        path.relative_to(directory).as_posix()
        for path in directory.rglob("*")
        if path.is_file()
    }


def compare_artifact_dirs(expected: Path, actual: Path) -> DeterminismResult:
    """Compare two artifact trees by relative path and exact bytes."""
    expected_files = _relative_files(expected)
    actual_files = _relative_files(actual)

    mismatches = tuple(
        rel
        for rel in sorted(expected_files & actual_files)
        if not filecmp.cmp(expected / rel, actual / rel, shallow=False)
    )
    missing = tuple(sorted(expected_files - actual_files))
    extra = tuple(sorted(actual_files - expected_files))
    return DeterminismResult(
        ok=not (mismatches or missing or extra),
        mismatches=mismatches,
        missing=missing,
        extra=extra,
    )


def verify_determinism(
    *,
    root: Path,
    artifacts_dir: Path,
    entry_files: Sequence[Path] | None = None,
) -> DeterminismResult:
    """Relink ``root`` into a scratch directory and diff it against artifacts_dir.

    Args:
        root: Project root to analyze.
        artifacts_dir: Directory holding previously generated artifacts.
        entry_files: Entry files the artifacts were generated from; every
            .sol file under root when omitted.

    Raises:
        FileNotFoundError: If artifacts_dir does not exist.
        NotADirectoryError: If artifacts_dir is not a directory.
    """
    if not artifacts_dir.exists():
        msg = f"Artifacts directory does not exist: {artifacts_dir}"
        raise FileNotFoundError(msg)
    if not artifacts_dir.is_dir():
        msg = f"Artifacts path is not a directory: {artifacts_dir}"
        raise NotADirectoryError(msg)

    with tempfile.TemporaryDirectory() as temp_dir:
        regenerated = Path(temp_dir)
        generate_all_artifacts(
            root=root, entry_files=entry_files, out_dir=regenerated
        )
        return compare_artifact_dirs(artifacts_dir, regenerated)


__all__ = ["DeterminismResult", "compare_artifact_dirs", "verify_determinism"]

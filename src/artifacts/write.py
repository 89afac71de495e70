from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.generators import CallsGenerator, ContractsGenerator, SummaryGenerator
from contract.artifacts import CALLS_JSONL, CONTRACTS_JSONL, SUMMARY_JSON
from graph.linker import link
from rules.config import load_config, resolve_dependency_root, resolve_output_dir
from scan.files import find_solidity_files

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rules.config import SolGraphConfig

logger = logging.getLogger(__name__)


def _discover_entry_files(root: Path, config: SolGraphConfig) -> list[Path]:
    skip_dirs = [
        Path(config.output_dir).parts[0],
        Path(config.dependency_root).parts[0],
    ]
    return list(
        find_solidity_files(
            root,
            skip_dirs=skip_dirs,
            include_patterns=config.include,
            exclude_patterns=config.exclude,
            nested_gitignore=config.nested_gitignore,
        )
    )


def generate_all_artifacts(
    *,
    root: Path,
    entry_files: Sequence[Path] | None = None,
    out_dir: Path | None = None,
    config: SolGraphConfig | None = None,
) -> dict[str, object]:
    """Link a Solidity project and write its call graph artifacts.

    Args:
        root: Project root; artifact paths are written relative to it
        entry_files: Files to analyze; every ``*.sol`` under root if omitted
        out_dir: Optional output directory for generated artifacts
        config: Optional configuration; loaded from root if omitted

    Returns:
        Dictionary with counts and list of generated artifact paths.

    Raises:
        SoliditySourceError: If a reachable source is unreadable or malformed.
    """
    root = root.resolve()
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    if entry_files is None:
        entry_files = _discover_entry_files(root, config)
    logger.info("linking %d entry file(s) under %s", len(entry_files), root)

    contracts_gen = ContractsGenerator(root)
    calls_gen = CallsGenerator(root)
    summary_gen = SummaryGenerator(root)

    link(
        entry_files,
        consumers=[contracts_gen, calls_gen, summary_gen],
        dependency_root=resolve_dependency_root(root, config.dependency_root),
        allow_parse_errors=config.allow_parse_errors,
    )

    contract_dicts, _ = contracts_gen.generate(out_dir)
    _, calls_stats = calls_gen.generate(out_dir)
    _, summary = summary_gen.generate(out_dir)

    artifacts_list = [CONTRACTS_JSONL, CALLS_JSONL, SUMMARY_JSON]

    return {
        "entry_file_count": len(entry_files),
        "contract_count": len(contract_dicts),
        "call_count": calls_stats["call_count"],
        "unresolved_count": calls_stats["unresolved_count"],
        "import_cycle_count": len(summary["import_cycles"]),
        "artifacts": [str(out_dir / name) for name in artifacts_list],
    }

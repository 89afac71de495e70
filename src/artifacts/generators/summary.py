"""Call graph summary generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.contracts import UNRESOLVED
from artifacts.models.artifacts.summary import CallGraphSummary
from artifacts.utils import _write_json
from contract.artifacts import SUMMARY_JSON
from graph.algos import build_import_graph, find_cycles
from utils import display_path

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from artifacts.models.artifacts.contracts import ContractRecord


class SummaryGenerator:
    """Generates callgraph_summary.json across all consumed universes."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._entry_files = 0
        self._contracts = 0
        self._functions = 0
        self._calls = 0
        self._unresolved = 0
        self._import_graph: dict[str, set[str]] = {}

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "summary"

    def consume(self, entry_file: Path, contracts: Sequence[ContractRecord]) -> None:
        del entry_file
        self._entry_files += 1
        self._contracts += len(contracts)
        for contract in contracts:
            self._functions += len(contract.functions)
            for function in contract.functions:
                self._calls += len(function.calls)
                self._unresolved += sum(
                    1
                    for call in function.calls
                    if (call.resolved_id or UNRESOLVED) == UNRESOLVED
                )

        graph = build_import_graph(
            contracts, label=lambda path: display_path(path, self._root)
        )
        for source, targets in graph.items():
            self._import_graph.setdefault(source, set()).update(targets)

    def generate(self, out_dir: Path) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Write summary artifact."""
        out_dir.mkdir(parents=True, exist_ok=True)
        summary = CallGraphSummary(
            entry_file_count=self._entry_files,
            contract_count=self._contracts,
            function_count=self._functions,
            call_count=self._calls,
            unresolved_count=self._unresolved,
            import_cycles=find_cycles(self._import_graph),
        )
        _write_json(out_dir / SUMMARY_JSON, summary)
        return [], summary.model_dump()


__all__ = ["SUMMARY_JSON", "SummaryGenerator"]

"""Contracts artifact generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.contracts import ContractArtifactRecord
from artifacts.utils import _write_jsonl
from contract.artifacts import CONTRACTS_JSONL
from utils import display_path

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from artifacts.models.artifacts.contracts import ContractRecord


class ContractsGenerator:
    """Generates contracts.jsonl: every contract of every linked universe."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._records: list[ContractArtifactRecord] = []

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "contracts"

    def consume(self, entry_file: Path, contracts: Sequence[ContractRecord]) -> None:
        entry = display_path(entry_file, self._root)
        for contract in contracts:
            self._records.append(
                ContractArtifactRecord(
                    entry_file=entry,
                    name=contract.name,
                    kind=contract.kind,
                    source_path=display_path(contract.source_path, self._root),
                    base_names=list(contract.base_names),
                    import_paths=[
                        display_path(path, self._root)
                        for path in contract.import_paths
                    ],
                    functions=[
                        function.model_copy(deep=True)
                        for function in contract.functions
                    ],
                )
            )

    def generate(self, out_dir: Path) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Write contracts artifact."""
        out_dir.mkdir(parents=True, exist_ok=True)
        _write_jsonl(out_dir / CONTRACTS_JSONL, self._records)

        record_dicts = [record.model_dump() for record in self._records]
        return record_dicts, {"contract_count": len(self._records)}


__all__ = ["CONTRACTS_JSONL", "ContractsGenerator"]

"""Resolved call edge artifact generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.calls import CallArgType, CallEdgeRecord
from artifacts.models.artifacts.contracts import UNRESOLVED
from artifacts.utils import _write_jsonl
from contract.artifacts import CALLS_JSONL, build_call_id
from utils import display_path

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from artifacts.models.artifacts.contracts import ContractRecord


class CallsGenerator:
    """Generates calls.jsonl: one edge per outbound call site."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._records: list[CallEdgeRecord] = []

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "calls"

    def consume(self, entry_file: Path, contracts: Sequence[ContractRecord]) -> None:
        entry = display_path(entry_file, self._root)
        for contract in contracts:
            for position, function in enumerate(contract.functions):
                for index, call in enumerate(function.calls):
                    callee = call.resolved_id or UNRESOLVED
                    self._records.append(
                        CallEdgeRecord(
                            call_id=build_call_id(
                                entry,
                                function.signature_id,
                                position,
                                index,
                                call.callee_name,
                            ),
                            entry_file=entry,
                            caller=function.signature_id,
                            callee_name=call.callee_name,
                            callee=callee,
                            resolved=callee != UNRESOLVED,
                            args=[
                                CallArgType(kind=arg.kind, text=arg.text)
                                for arg in call.args
                            ],
                        )
                    )

    def generate(self, out_dir: Path) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Write calls artifact."""
        out_dir.mkdir(parents=True, exist_ok=True)
        _write_jsonl(out_dir / CALLS_JSONL, self._records)

        unresolved = sum(1 for record in self._records if not record.resolved)
        record_dicts = [record.model_dump() for record in self._records]
        return record_dicts, {
            "call_count": len(self._records),
            "unresolved_count": unresolved,
        }


__all__ = ["CALLS_JSONL", "CallsGenerator"]

"""Call graph artifact contract definitions.

This module defines the stable filenames and formats downstream renderers
read.
"""

from __future__ import annotations

from dataclasses import dataclass

ARTIFACT_SCHEMA_VERSION = 1

CONTRACTS_JSONL = "contracts.jsonl"
CALLS_JSONL = "calls.jsonl"
SUMMARY_JSON = "callgraph_summary.json"


@dataclass(frozen=True)
class ArtifactSpec:
    """Specification for a call graph artifact."""

    filename: str
    format: str
    required_fields_note: str


# ---------------------------------------------------------------------------
# Deterministic call_id
# ---------------------------------------------------------------------------
# Canonical call_id format:
#   call:{entry_file}::{caller}@{position}#{index}:{callee_name}
# - entry_file: POSIX path as written to the artifact
# - caller: the caller's signature id
# - position: 0-based position of the caller among its contract's functions
#   (fallback and receive share a signature id)
# - index: 0-based position in the caller's call list


def build_call_id(
    entry_file: str, caller: str, position: int, index: int, callee_name: str
) -> str:
    """Build a deterministic call_id.

    Format: ``call:{entry_file}::{caller}@{position}#{index}:{callee_name}``
    """
    return f"call:{entry_file}::{caller}@{position}#{index}:{callee_name}"


ARTIFACT_SPECS: dict[str, ArtifactSpec] = {
    "contracts": ArtifactSpec(
        filename=CONTRACTS_JSONL,
        format="jsonl",
        required_fields_note="ContractArtifactRecord fields required by contract.",
    ),
    "calls": ArtifactSpec(
        filename=CALLS_JSONL,
        format="jsonl",
        required_fields_note="CallEdgeRecord fields required by contract.",
    ),
    "summary": ArtifactSpec(
        filename=SUMMARY_JSON,
        format="json",
        required_fields_note="CallGraphSummary fields required by contract.",
    ),
}

"""Stable artifact contract surface for solgraph.

This module exposes the filenames, schema version and record models that
downstream renderers depend on.
"""

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    ARTIFACT_SPECS,
    CALLS_JSONL,
    CONTRACTS_JSONL,
    SUMMARY_JSON,
    ArtifactSpec,
    build_call_id,
)


def __getattr__(name: str) -> object:
    if name in {"CallEdgeRecord", "CallGraphSummary", "ContractArtifactRecord"}:
        from contract.models import (
            CallEdgeRecord,
            CallGraphSummary,
            ContractArtifactRecord,
        )

        return {
            "CallEdgeRecord": CallEdgeRecord,
            "CallGraphSummary": CallGraphSummary,
            "ContractArtifactRecord": ContractArtifactRecord,
        }[name]

    if name in {"ValidationMessage", "ValidationResult", "validate_artifacts"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_artifacts,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_artifacts": validate_artifacts,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "ARTIFACT_SPECS",
    "CALLS_JSONL",
    "CONTRACTS_JSONL",
    "SUMMARY_JSON",
    "ArtifactSpec",
    "CallEdgeRecord",
    "CallGraphSummary",
    "ContractArtifactRecord",
    "ValidationMessage",
    "ValidationResult",
    "build_call_id",
    "validate_artifacts",
]

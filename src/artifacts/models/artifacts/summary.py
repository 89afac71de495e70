"""Summary model for call graph metrics."""

from __future__ import annotations

from pydantic import BaseModel, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION


class CallGraphSummary(BaseModel):
    """Counts across every linked universe, plus cyclic import groups."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    entry_file_count: int
    contract_count: int
    function_count: int
    call_count: int
    unresolved_count: int
    import_cycles: list[list[str]] = Field(default_factory=list)


__all__ = ["CallGraphSummary"]

"""Call edge models for resolved call references."""

from __future__ import annotations

from pydantic import BaseModel, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION


class CallArgType(BaseModel):
    """Raw argument summary carried on an edge."""

    kind: str
    text: str


class CallEdgeRecord(BaseModel):
    """Schema for calls.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    call_id: str
    entry_file: str
    caller: str
    callee_name: str
    callee: str
    resolved: bool
    args: list[CallArgType] = Field(default_factory=list)


__all__ = ["CallArgType", "CallEdgeRecord"]

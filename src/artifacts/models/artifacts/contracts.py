"""Contract, function and call-reference models for the call graph.

``ContractRecord``/``FunctionRecord``/``CallRef`` are the in-memory graph the
extractor builds and the resolver rewrites. ``ContractArtifactRecord`` is the
serialized form written to contracts.jsonl.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION

UNRESOLVED = "unresolved"

ContractKind = Literal["contract", "interface", "library"]
ArgKind = Literal["identifier", "member_access", "other"]

# contract name -> variable name -> declared type label
VariableTypeRegistry = dict[str, dict[str, str]]


class CallArg(BaseModel):
    """A raw argument expression at a call site."""

    kind: ArgKind
    text: str
    member: str | None = Field(
        default=None, description="Property name for member-access arguments"
    )


class CallRef(BaseModel):
    """An outbound call as written, plus its resolved target once linked."""

    callee_name: str
    args: list[CallArg] = Field(default_factory=list)
    resolved_id: str | None = None


class FunctionRecord(BaseModel):
    function_name: str
    signature_id: str
    calls: list[CallRef] = Field(default_factory=list)


class ContractRecord(BaseModel):
    name: str
    kind: ContractKind = "contract"
    source_path: str
    base_names: list[str] = Field(default_factory=list)
    import_paths: list[str] = Field(default_factory=list)
    functions: list[FunctionRecord] = Field(default_factory=list)

    def find_function(self, name: str) -> FunctionRecord | None:
        return next((f for f in self.functions if f.function_name == name), None)


class ContractArtifactRecord(BaseModel):
    """Schema for contracts.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    entry_file: str
    name: str
    kind: ContractKind
    source_path: str
    base_names: list[str]
    import_paths: list[str]
    functions: list[FunctionRecord]


__all__ = [
    "UNRESOLVED",
    "ArgKind",
    "CallArg",
    "CallRef",
    "ContractArtifactRecord",
    "ContractKind",
    "ContractRecord",
    "FunctionRecord",
    "VariableTypeRegistry",
]

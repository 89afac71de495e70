"""Model namespace for solgraph records and artifact schemas."""

from artifacts.models.artifacts.calls import CallArgType, CallEdgeRecord
from artifacts.models.artifacts.contracts import (
    UNRESOLVED,
    CallArg,
    CallRef,
    ContractArtifactRecord,
    ContractRecord,
    FunctionRecord,
)
from artifacts.models.artifacts.summary import CallGraphSummary

__all__ = [
    "UNRESOLVED",
    "CallArg",
    "CallArgType",
    "CallEdgeRecord",
    "CallGraphSummary",
    "CallRef",
    "ContractArtifactRecord",
    "ContractRecord",
    "FunctionRecord",
]

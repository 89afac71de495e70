"""Artifact models exposed to downstream renderers."""

from artifacts.models.artifacts.calls import CallEdgeRecord
from artifacts.models.artifacts.contracts import ContractArtifactRecord
from artifacts.models.artifacts.summary import CallGraphSummary

__all__ = ["CallEdgeRecord", "CallGraphSummary", "ContractArtifactRecord"]

"""Call graph artifact generators."""

from artifacts.generators.calls import CallsGenerator
from artifacts.generators.contracts import ContractsGenerator
from artifacts.generators.summary import SummaryGenerator

__all__ = [
    "CallsGenerator",
    "ContractsGenerator",
    "SummaryGenerator",
]

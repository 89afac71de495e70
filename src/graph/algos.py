"""Graph algorithms over contract import graphs."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from artifacts.models.artifacts.contracts import ContractRecord


def build_import_graph(
    contracts: Iterable[ContractRecord],
    label: Callable[[str], str] = str,
) -> dict[str, set[str]]:
    """Build a file-level import graph from extracted contracts.

    Args:
        contracts: Contract records; several may share one source file
        label: Maps an absolute path to the node label used in the graph

    Returns:
        Dictionary mapping each source file label to the labels it imports
    """
    graph: dict[str, set[str]] = defaultdict(set)

    for contract in contracts:
        source = label(contract.source_path)
        graph[source].update(label(path) for path in contract.import_paths)

    return dict(graph)


class _SccState:
    """Bookkeeping for one run of Tarjan's algorithm."""

    def __init__(self) -> None:
        self.counter = 0
        self.index: dict[str, int] = {}
        self.low: dict[str, int] = {}
        self.stack: list[str] = []
        self.on_stack: set[str] = set()
        self.cycles: list[list[str]] = []

    def pop_component(self, root: str) -> list[str]:
        component: list[str] = []
        while self.stack:
            member = self.stack.pop()
            self.on_stack.discard(member)
            component.append(member)
            if member == root:
                return component
        msg = f"SCC root {root!r} missing from the stack"
        raise RuntimeError(msg)


def _connect(node: str, graph: dict[str, set[str]], state: _SccState) -> None:
    state.index[node] = state.low[node] = state.counter
    state.counter += 1
    state.stack.append(node)
    state.on_stack.add(node)

    for target in sorted(graph.get(node, ())):
        if target not in state.index:
            _connect(target, graph, state)
            state.low[node] = min(state.low[node], state.low[target])
        elif target in state.on_stack:
            state.low[node] = min(state.low[node], state.index[target])

    if state.low[node] != state.index[node]:
        return
    component = state.pop_component(node)
    # Single files only count when they import themselves.
    if len(component) > 1 or node in graph.get(node, ()):
        state.cycles.append(component)


def find_cycles(graph: dict[str, set[str]]) -> list[list[str]]:
    """Find import cycles using Tarjan's algorithm.

    Nodes are visited in sorted order and each cycle is returned sorted, so
    the output is stable across runs.
    """
    state = _SccState()

    for node in sorted(graph):
        if node not in state.index:
            _connect(node, graph, state)

    return sorted(sorted(cycle) for cycle in state.cycles)


__all__ = [
    "build_import_graph",
    "find_cycles",
]

"""Call target resolution over a contract universe."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from artifacts.models.artifacts.contracts import (
        CallArg,
        CallRef,
        ContractRecord,
        VariableTypeRegistry,
    )

logger = logging.getLogger(__name__)

# Well-known members whose type is fixed regardless of the object.
MEMBER_ARGUMENT_TYPES: dict[str, str] = {
    "sender": "address",
    "value": "uint256",
}


def lookup_variable_type(
    variable_types: VariableTypeRegistry, variable_name: str
) -> str | None:
    """Return the first declared type for ``variable_name`` across all contracts.

    The lookup is not scoped to a contract: contracts are scanned in
    registration order and the first match wins.
    """
    for variables in variable_types.values():
        if variable_name in variables:
            return variables[variable_name]
    return None


def _argument_segment(
    arg: CallArg, variable_types: VariableTypeRegistry
) -> str | None:
    if arg.kind == "identifier":
        return lookup_variable_type(variable_types, arg.text) or ""
    if arg.kind == "member_access" and arg.member is not None:
        return MEMBER_ARGUMENT_TYPES.get(arg.member)
    return None


def build_call_identifier(
    contract_name: str,
    call: CallRef,
    variable_types: VariableTypeRegistry,
) -> str:
    """Build ``Contract:callee[:ArgType]*`` from the call-site argument types."""
    segments = [contract_name, call.callee_name]
    for arg in call.args:
        segment = _argument_segment(arg, variable_types)
        if segment is not None:
            segments.append(segment)
    return ":".join(segments)


def _find_contract(
    universe: Sequence[ContractRecord], name: str
) -> ContractRecord | None:
    return next((c for c in universe if c.name == name), None)


def _search(
    universe: Sequence[ContractRecord],
    current: ContractRecord | None,
    variable_types: VariableTypeRegistry,
    call: CallRef,
    in_progress: frozenset[str],
) -> str | None:
    if current is None or current.name in in_progress:
        return None

    if current.find_function(call.callee_name) is not None:
        return build_call_identifier(current.name, call, variable_types)

    in_progress = in_progress | {current.name}
    found: str | None = None

    # Later ancestors overwrite earlier matches.
    for base_name in current.base_names:
        result = _search(
            universe,
            _find_contract(universe, base_name),
            variable_types,
            call,
            in_progress,
        )
        if result is not None:
            found = result

    if found is not None:
        return found

    for import_path in current.import_paths:
        for candidate in universe:
            if candidate.source_path != import_path:
                continue
            if candidate.name in current.base_names:
                continue
            result = _search(universe, candidate, variable_types, call, in_progress)
            if result is not None:
                found = result

    return found


def resolve_call(
    universe: Sequence[ContractRecord] | None,
    root: ContractRecord,
    current: ContractRecord | None,
    variable_types: VariableTypeRegistry,
    call: CallRef,
) -> str | None:
    """Resolve one raw call to a canonical identifier.

    Searches ``current`` first, then its bases (last match wins), then the
    contracts of imported files that are not bases. Returns None when no
    reachable contract defines a function named ``call.callee_name``.
    """
    if universe is None:
        return None

    resolved = _search(universe, current, variable_types, call, frozenset())
    if resolved is None:
        logger.debug("unresolved call %r from %s", call.callee_name, root.name)
    return resolved


__all__ = [
    "MEMBER_ARGUMENT_TYPES",
    "build_call_identifier",
    "lookup_variable_type",
    "resolve_call",
]

"""Linking orchestrator: profile, extract and resolve every entry file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from artifacts.models.artifacts.contracts import UNRESOLVED
from parse.name_resolution import resolve_call
from parse.profile import profile_file
from parse.structure import extract_contracts

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from artifacts.models.artifacts.contracts import (
        ContractRecord,
        VariableTypeRegistry,
    )

logger = logging.getLogger(__name__)

DEFAULT_DEPENDENCY_DIR = "node_modules"


class UniverseConsumer(Protocol):
    """Receives each resolved universe, one entry file at a time."""

    def consume(
        self, entry_file: Path, contracts: Sequence[ContractRecord]
    ) -> None: ...


@dataclass(frozen=True)
class LinkedUniverse:
    """All contracts reachable from one entry file, calls resolved."""

    entry_file: Path
    contracts: tuple[ContractRecord, ...]


def resolve_universe(
    contracts: Sequence[ContractRecord],
    variable_types: VariableTypeRegistry,
) -> int:
    """Rewrite every call's ``resolved_id`` in place; return the unresolved count."""
    unresolved = 0
    for contract in contracts:
        for function in contract.functions:
            for call in function.calls:
                resolved = resolve_call(
                    contracts, contract, contract, variable_types, call
                )
                if resolved is None:
                    unresolved += 1
                    call.resolved_id = UNRESOLVED
                else:
                    call.resolved_id = resolved
    return unresolved


def build_universes(
    entry_files: Iterable[Path | str],
    *,
    dependency_root: Path | None = None,
    allow_parse_errors: bool = False,
) -> list[LinkedUniverse]:
    """Run the profile/extract/resolve pipeline over ``entry_files``.

    The variable-type registry is shared across all entry files; the ignore
    set, contract-name set and visited sets are fresh per entry file.

    Raises:
        SoliditySourceError: If any reachable file is unreadable or malformed.
    """
    if dependency_root is None:
        dependency_root = Path.cwd() / DEFAULT_DEPENDENCY_DIR
    dependency_root = dependency_root.resolve()

    variable_types: VariableTypeRegistry = {}
    universes: list[LinkedUniverse] = []

    for entry in entry_files:
        entry_file = Path(entry).resolve()
        ignored_names: set[str] = set()
        contract_names: set[str] = set()

        profile_file(
            entry_file,
            visited=set(),
            ignored_names=ignored_names,
            contract_names=contract_names,
            variable_types=variable_types,
            dependency_root=dependency_root,
            allow_parse_errors=allow_parse_errors,
        )
        contracts = extract_contracts(
            entry_file,
            visited=set(),
            ignored_names=ignored_names,
            contract_names=contract_names,
            dependency_root=dependency_root,
            allow_parse_errors=allow_parse_errors,
        )
        logger.info("%s: extracted %d contract(s)", entry_file, len(contracts))
        universes.append(
            LinkedUniverse(entry_file=entry_file, contracts=tuple(contracts))
        )

    for universe in universes:
        unresolved = resolve_universe(universe.contracts, variable_types)
        if unresolved:
            logger.info(
                "%s: %d call(s) left unresolved", universe.entry_file, unresolved
            )

    return universes


def link(
    entry_files: Iterable[Path | str],
    *,
    consumers: Sequence[UniverseConsumer],
    dependency_root: Path | None = None,
    allow_parse_errors: bool = False,
) -> None:
    """Build every universe and hand each one to all consumers, in file order."""
    universes = build_universes(
        entry_files,
        dependency_root=dependency_root,
        allow_parse_errors=allow_parse_errors,
    )
    for universe in universes:
        for consumer in consumers:
            consumer.consume(universe.entry_file, universe.contracts)


__all__ = [
    "DEFAULT_DEPENDENCY_DIR",
    "LinkedUniverse",
    "UniverseConsumer",
    "build_universes",
    "link",
    "resolve_universe",
]

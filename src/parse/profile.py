"""Profiling pass: contract names, ignored identifiers and variable types."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from parse.solidity_imports import extract_import_paths
from parse.treesitter_solidity import (
    contract_declarations,
    declaration_name,
    declared_type,
    parse_file,
    visit,
)

if TYPE_CHECKING:
    from pathlib import Path

    from tree_sitter import Node

    from artifacts.models.artifacts.contracts import VariableTypeRegistry

logger = logging.getLogger(__name__)

# Declarations whose use sites parse exactly like function calls.
_IGNORED_DECLARATIONS = (
    "event_definition",
    "struct_declaration",
    "enum_declaration",
    "error_declaration",
)

_VARIABLE_DECLARATIONS = (
    "state_variable_declaration",
    "variable_declaration",
    "parameter",
    "struct_member",
)


def _collect_variable_types(contract: Node) -> dict[str, str]:
    variables: dict[str, str] = {}

    def on_declaration(node: Node) -> None:
        name = declaration_name(node)
        if name:
            variables[name] = declared_type(node)

    visit(contract, dict.fromkeys(_VARIABLE_DECLARATIONS, on_declaration))
    return variables


def profile_file(
    source_file: Path,
    *,
    visited: set[str],
    ignored_names: set[str],
    contract_names: set[str],
    variable_types: VariableTypeRegistry,
    dependency_root: Path,
    allow_parse_errors: bool = False,
) -> None:
    """Profile one file and, recursively, everything it imports.

    Imports are profiled before the file's own contracts, so the variable
    registry lists dependencies first. Contract names are fixed before any
    variable is attributed to them.
    """
    visited.add(str(source_file))
    tree = parse_file(source_file, allow_errors=allow_parse_errors)
    root = tree.root_node

    for import_path in extract_import_paths(root, source_file, dependency_root):
        if str(import_path) in visited:
            continue
        profile_file(
            import_path,
            visited=visited,
            ignored_names=ignored_names,
            contract_names=contract_names,
            variable_types=variable_types,
            dependency_root=dependency_root,
            allow_parse_errors=allow_parse_errors,
        )

    def on_ignored(node: Node) -> None:
        name = declaration_name(node)
        if name:
            ignored_names.add(name)

    visit(root, dict.fromkeys(_IGNORED_DECLARATIONS, on_ignored))

    for contract in contract_declarations(root):
        name = declaration_name(contract)
        contract_names.add(name)
        variable_types[name] = _collect_variable_types(contract)

    logger.debug("profiled %s", source_file)


__all__ = ["profile_file"]

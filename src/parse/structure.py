"""Structural extraction: contracts, functions and their raw outbound calls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.models.artifacts.contracts import (
    CallArg,
    CallRef,
    ContractRecord,
    FunctionRecord,
)
from parse.solidity_imports import extract_import_paths, find_import_for
from parse.treesitter_solidity import (
    CONTRACT_KINDS,
    call_arguments,
    contract_declarations,
    contract_members,
    declaration_name,
    declared_type,
    enclosing_call,
    function_body,
    function_parameters,
    inheritance_names,
    modifier_invocation_names,
    node_text,
    parse_file,
    statement_count,
    unwrap_expression,
    visit,
)

if TYPE_CHECKING:
    from collections.abc import Set
    from pathlib import Path

    from tree_sitter import Node

logger = logging.getLogger(__name__)

BUILTIN_ASSERTIONS = frozenset({"require", "revert", "assert"})
BUILTIN_MEMBER_PROPERTIES = frozenset({"length"})
BASE_KEYWORD = "super"
# Global namespaces whose members are values or builtins, never contract calls.
BUILTIN_RECEIVERS = frozenset({"msg", "block", "tx", "abi"})


def classify_argument(node: Node) -> CallArg:
    target = unwrap_expression(node)
    text = node_text(target).strip()
    if target is not None and target.type == "identifier":
        return CallArg(kind="identifier", text=text)
    if target is not None and target.type == "member_expression":
        member = node_text(target.child_by_field_name("property")).strip()
        return CallArg(kind="member_access", text=text, member=member)
    return CallArg(kind="other", text=text)


def _is_countable_call(
    name: str,
    ignored_names: Set[str],
    contract_names: Set[str],
) -> bool:
    return (
        bool(name)
        and name not in BUILTIN_ASSERTIONS
        and name not in ignored_names
        and name not in contract_names
    )


def _local_names(function: Node) -> frozenset[str]:
    """Parameter, return-variable and local-variable names of one function."""
    names: set[str] = set()

    def on_declaration(node: Node) -> None:
        name = declaration_name(node)
        if name:
            names.add(name)

    handlers = dict.fromkeys(("parameter", "variable_declaration"), on_declaration)
    visit(function, handlers)
    return frozenset(names)


def _is_member_receiver(
    target: Node,
    call: Node | None,
    local_names: Set[str],
    contract_names: Set[str],
) -> bool:
    if target.type == "array_access":
        return False
    if target.type != "identifier":
        return True
    object_name = node_text(target).strip()
    if object_name in contract_names or object_name == BASE_KEYWORD:
        return True
    # State variables and other non-local names only count when invoked.
    return (
        call is not None
        and object_name not in local_names
        and object_name not in BUILTIN_RECEIVERS
    )


def _collect_calls(
    function: Node,
    function_name: str,
    body: Node,
    *,
    ignored_names: Set[str],
    contract_names: Set[str],
) -> list[CallRef]:
    calls: list[CallRef] = []
    single_statement = statement_count(body) == 1
    local_names = _local_names(function)

    def on_call(node: Node) -> None:
        callee = unwrap_expression(node.child_by_field_name("function"))
        if callee is None or callee.type != "identifier":
            return
        name = node_text(callee).strip()
        if not _is_countable_call(name, ignored_names, contract_names):
            return
        # A lone statement calling its own name is a pass-through override.
        if single_statement and name == function_name:
            return
        calls.append(
            CallRef(
                callee_name=name,
                args=[classify_argument(arg) for arg in call_arguments(node)],
            )
        )

    def on_member(node: Node) -> None:
        target = unwrap_expression(node.child_by_field_name("object"))
        if target is None:
            return
        call = enclosing_call(node)
        if not _is_member_receiver(target, call, local_names, contract_names):
            return
        member = node_text(node.child_by_field_name("property")).strip()
        if not member or member in BUILTIN_MEMBER_PROPERTIES:
            return
        args = (
            [classify_argument(arg) for arg in call_arguments(call)]
            if call is not None
            else []
        )
        calls.append(CallRef(callee_name=member, args=args))

    visit(body, {"call_expression": on_call, "member_expression": on_member})
    return calls


def build_signature_id(contract_name: str, function_name: str, function: Node) -> str:
    segments = [contract_name, function_name]
    segments.extend(declared_type(param) for param in function_parameters(function))
    return ":".join(segments)


def _is_constructor(member: Node, contract_name: str) -> bool:
    if member.type == "constructor_definition":
        return True
    return (
        member.type == "function_definition"
        and declaration_name(member) == contract_name
    )


def _function_record(
    member: Node,
    contract_name: str,
    *,
    ignored_names: Set[str],
    contract_names: Set[str],
) -> FunctionRecord:
    function_name = (
        declaration_name(member) if member.type == "function_definition" else ""
    )
    body = function_body(member)
    calls = (
        _collect_calls(
            member,
            function_name,
            body,
            ignored_names=ignored_names,
            contract_names=contract_names,
        )
        if body is not None
        else []
    )
    return FunctionRecord(
        function_name=function_name,
        signature_id=build_signature_id(contract_name, function_name, member),
        calls=calls,
    )


def extract_contracts(
    source_file: Path,
    *,
    visited: set[str],
    ignored_names: Set[str],
    contract_names: Set[str],
    dependency_root: Path,
    allow_parse_errors: bool = False,
) -> list[ContractRecord]:
    """Extract contracts from a file and every file it transitively needs.

    Dependencies are extracted first: constructor base calls, then inherited
    contracts, then the remaining imports. The returned list is in
    depth-first post-order, so a dependency always precedes its dependents.
    """
    visited.add(str(source_file))
    tree = parse_file(source_file, allow_errors=allow_parse_errors)
    root = tree.root_node
    processed: list[ContractRecord] = []

    def descend(dependency: Path | None, reason: str) -> None:
        if dependency is None or str(dependency) in visited:
            return
        logger.debug("%s: extracting %s (%s)", source_file, dependency, reason)
        processed.extend(
            extract_contracts(
                dependency,
                visited=visited,
                ignored_names=ignored_names,
                contract_names=contract_names,
                dependency_root=dependency_root,
                allow_parse_errors=allow_parse_errors,
            )
        )

    import_paths = extract_import_paths(root, source_file, dependency_root)
    declarations = [
        (declaration_name(node), node) for node in contract_declarations(root)
    ]

    functions_by_contract: dict[str, list[FunctionRecord]] = {}
    for contract_name, node in declarations:
        functions: list[FunctionRecord] = []
        for member in contract_members(node):
            if _is_constructor(member, contract_name):
                for modifier in modifier_invocation_names(member):
                    descend(find_import_for(modifier, import_paths), "constructor")
            elif member.type in ("function_definition", "fallback_receive_definition"):
                functions.append(
                    _function_record(
                        member,
                        contract_name,
                        ignored_names=ignored_names,
                        contract_names=contract_names,
                    )
                )
        functions_by_contract[contract_name] = functions

    bases_by_contract: dict[str, list[str]] = {}
    for contract_name, node in declarations:
        bases: list[str] = []
        for base_name in inheritance_names(node):
            descend(find_import_for(base_name, import_paths), "inheritance")
            bases.append(base_name)
        bases_by_contract[contract_name] = bases

    for import_path in import_paths:
        descend(import_path, "import")

    import_strings = [str(path) for path in import_paths]
    for contract_name, node in declarations:
        processed.append(
            ContractRecord(
                name=contract_name,
                kind=CONTRACT_KINDS[node.type],
                source_path=str(source_file),
                base_names=bases_by_contract[contract_name],
                import_paths=import_strings,
                functions=functions_by_contract[contract_name],
            )
        )
    return processed


__all__ = [
    "BASE_KEYWORD",
    "BUILTIN_ASSERTIONS",
    "BUILTIN_MEMBER_PROPERTIES",
    "BUILTIN_RECEIVERS",
    "build_signature_id",
    "classify_argument",
    "extract_contracts",
]

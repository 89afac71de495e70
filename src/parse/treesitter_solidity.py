"""Tree-sitter access layer for Solidity sources."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser, Tree
from tree_sitter_solidity import language as get_solidity_language

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

NodeHandler = Callable[[Node], None]

CONTRACT_KINDS: dict[str, str] = {
    "contract_declaration": "contract",
    "interface_declaration": "interface",
    "library_declaration": "library",
}

# Single-child wrappers the grammar puts around expressions.
_EXPRESSION_WRAPPERS = frozenset({"expression", "call_argument"})

_WHITESPACE = re.compile(r"\s+")
_PAYABLE_ADDRESS = re.compile(r"\baddress\s+payable\b")

_PARSER: Parser | None = None


class SoliditySourceError(Exception):
    """Raised when a Solidity source file cannot be turned into a tree."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class SourceReadError(SoliditySourceError):
    """The source file is missing or unreadable."""


class SourceParseError(SoliditySourceError):
    """The source text does not parse cleanly."""


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the Solidity grammar."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_solidity_language())
        _PARSER = Parser(lang)

    return _PARSER


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


def parse_source(source_bytes: bytes) -> Tree:
    return _get_parser().parse(source_bytes)


def parse_file(path: Path, *, allow_errors: bool = False) -> Tree:
    """Read and parse one Solidity file.

    Raises:
        SourceReadError: If the file cannot be read.
        SourceParseError: If the tree contains syntax errors and
            ``allow_errors`` is false.
    """
    try:
        source_bytes = path.read_bytes()
    except OSError as exc:
        raise SourceReadError(path, f"cannot read source: {exc}") from exc

    tree = parse_source(source_bytes)
    if not tree.root_node.has_error:
        return tree

    error_node = _first_error(tree.root_node) or tree.root_node
    line, col = error_node.start_point
    msg = f"syntax error at L{line + 1}:C{col + 1}"
    if not allow_errors:
        raise SourceParseError(path, msg)
    logger.warning("%s: %s; continuing with partial tree", path, msg)
    return tree


def visit(node: Node, handlers: Mapping[str, NodeHandler]) -> None:
    """Walk ``node`` depth-first, calling the handler registered for each kind.

    Children are always visited after their parent's handler returns, so a
    handler may run its own nested ``visit`` over the sub-tree.
    """
    handler = handlers.get(node.type)
    if handler is not None:
        handler(node)
    for child in node.children:
        visit(child, handlers)


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf8", errors="ignore")


def unwrap_expression(node: Node | None) -> Node | None:
    """Strip ``expression``/``call_argument`` wrappers down to the real node."""
    while (
        node is not None
        and node.type in _EXPRESSION_WRAPPERS
        and node.named_child_count == 1
    ):
        node = node.named_children[0]
    return node


def declaration_name(node: Node) -> str:
    return node_text(node.child_by_field_name("name")).strip()


def contract_declarations(root: Node) -> list[Node]:
    """Top-level contract, interface and library declarations in source order."""
    return [child for child in root.named_children if child.type in CONTRACT_KINDS]


def contract_members(contract: Node) -> list[Node]:
    body = contract.child_by_field_name("body")
    if body is None:
        body = next(
            (c for c in contract.named_children if c.type == "contract_body"), None
        )
    if body is None:
        return []
    return list(body.named_children)


def import_sources(root: Node) -> list[str]:
    """Unquoted import path strings, in declaration order."""
    sources: list[str] = []
    for child in root.named_children:
        if child.type != "import_directive":
            continue
        source = child.child_by_field_name("source")
        if source is None:
            source = next((c for c in child.named_children if c.type == "string"), None)
        text = node_text(source).strip()
        if len(text) >= 2 and text[0] in "\"'" and text[-1] == text[0]:
            text = text[1:-1]
        if text:
            sources.append(text)
    return sources


def _name_before_arguments(node: Node) -> str:
    """Return ``Name`` from ``Name(args)`` or ``Lib.Name(args)`` text."""
    head = node_text(node).split("(", 1)[0]
    return _WHITESPACE.sub("", head)


def inheritance_names(contract: Node) -> list[str]:
    return [
        _name_before_arguments(child)
        for child in contract.children
        if child.type == "inheritance_specifier"
    ]


def modifier_invocation_names(function: Node) -> list[str]:
    return [
        _name_before_arguments(child)
        for child in function.children
        if child.type == "modifier_invocation"
    ]


def function_parameters(function: Node) -> list[Node]:
    """Declared parameters only; return parameters live in a nested node."""
    return [child for child in function.children if child.type == "parameter"]


def function_body(function: Node) -> Node | None:
    body = function.child_by_field_name("body")
    if body is None:
        body = next((c for c in function.children if c.type == "function_body"), None)
    return body


def statement_count(body: Node) -> int:
    return sum(1 for child in body.named_children if child.type != "comment")


def type_label(type_node: Node | None) -> str:
    """Normalized declared type, e.g. ``uint256``, ``Lib.Item``, ``address[]``."""
    text = _PAYABLE_ADDRESS.sub("address", node_text(type_node))
    return _WHITESPACE.sub("", text)


def declared_type(declaration: Node) -> str:
    type_node = declaration.child_by_field_name("type")
    if type_node is None:
        type_node = next(
            (c for c in declaration.named_children if c.type == "type_name"), None
        )
    return type_label(type_node)


def call_arguments(call: Node) -> list[Node]:
    callee = call.child_by_field_name("function")
    return [
        child
        for child in call.named_children
        if child != callee and child.type != "comment"
    ]


def enclosing_call(node: Node) -> Node | None:
    """Return the call expression whose callee is ``node``, if any."""
    current = node
    parent = node.parent
    while parent is not None and parent.type == "expression":
        current = parent
        parent = parent.parent
    if parent is None or parent.type != "call_expression":
        return None
    if parent.child_by_field_name("function") != current:
        return None
    return parent


__all__ = [
    "CONTRACT_KINDS",
    "NodeHandler",
    "SoliditySourceError",
    "SourceParseError",
    "SourceReadError",
    "call_arguments",
    "contract_declarations",
    "contract_members",
    "declaration_name",
    "declared_type",
    "enclosing_call",
    "function_body",
    "function_parameters",
    "import_sources",
    "inheritance_names",
    "modifier_invocation_names",
    "node_text",
    "parse_file",
    "parse_source",
    "statement_count",
    "type_label",
    "unwrap_expression",
    "visit",
]

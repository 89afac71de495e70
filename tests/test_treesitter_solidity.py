from __future__ import annotations

import logging
from pathlib import Path

import pytest

from parse.treesitter_solidity import (
    SourceParseError,
    SourceReadError,
    contract_declarations,
    declaration_name,
    import_sources,
    inheritance_names,
    parse_file,
    parse_source,
    visit,
)


def _write_sol(root: Path, relative_path: str, source: str) -> Path:
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path


def test_parse_file_missing_source_raises_read_error(tmp_path: Path) -> None:
    with pytest.raises(SourceReadError):
        parse_file(tmp_path / "Missing.sol")


def test_parse_file_malformed_source_raises_parse_error(tmp_path: Path) -> None:
    path = _write_sol(tmp_path, "Broken.sol", "contract Broken { function ( }\n")

    with pytest.raises(SourceParseError, match="syntax error"):
        parse_file(path)


def test_parse_file_allow_errors_logs_and_returns_tree(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = _write_sol(tmp_path, "Broken.sol", "contract Broken { function ( }\n")

    with caplog.at_level(logging.WARNING, logger="parse.treesitter_solidity"):
        tree = parse_file(path, allow_errors=True)

    assert tree.root_node.has_error
    assert "syntax error" in caplog.text


def test_import_sources_strip_quotes_for_all_import_forms() -> None:
    tree = parse_source(
        b'import "./A.sol";\n'
        b"import {B} from './B.sol';\n"
        b'import "@oz/contracts/C.sol" as C;\n'
        b"contract D {}\n"
    )

    assert import_sources(tree.root_node) == [
        "./A.sol",
        "./B.sol",
        "@oz/contracts/C.sol",
    ]


def test_contract_declarations_and_inheritance_names() -> None:
    tree = parse_source(
        b"interface IThing {}\n"
        b"library Math {}\n"
        b"contract Child is Base, Other(1, 2), Lib.Nested {}\n"
    )

    declarations = contract_declarations(tree.root_node)

    assert [declaration_name(node) for node in declarations] == [
        "IThing",
        "Math",
        "Child",
    ]
    assert inheritance_names(declarations[2]) == ["Base", "Other", "Lib.Nested"]


def test_visit_calls_handlers_in_source_order_including_nested_nodes() -> None:
    tree = parse_source(
        b"contract A {\n"
        b"    function f() public { g(h()); }\n"
        b"}\n"
    )
    seen: list[str] = []

    def on_call(node) -> None:
        callee = node.child_by_field_name("function")
        seen.append(callee.text.decode("utf8"))

    visit(tree.root_node, {"call_expression": on_call})

    assert seen == ["g", "h"]

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    ARTIFACT_SPECS,
    CALLS_JSONL,
    CONTRACTS_JSONL,
    SUMMARY_JSON,
)
from contract.validation import (
    ValidationMessage,
    ValidationResult,
    validate_artifacts,
)


def _call_edge(**overrides: Any) -> dict[str, Any]:
    record = {
        "schema_version": ARTIFACT_SCHEMA_VERSION,
        "call_id": "call:Child.sol::Child:hello@0#0:greet",
        "entry_file": "Child.sol",
        "caller": "Child:hello",
        "callee_name": "greet",
        "callee": "Base:greet",
        "resolved": True,
        "args": [],
    }
    record.update(overrides)
    return record


def _write_valid_artifacts(d: Path) -> None:
    """Write a minimal valid artifact set to directory d."""
    d.mkdir(parents=True, exist_ok=True)

    contract_record = {
        "schema_version": ARTIFACT_SCHEMA_VERSION,
        "entry_file": "Child.sol",
        "name": "Child",
        "kind": "contract",
        "source_path": "Child.sol",
        "base_names": ["Base"],
        "import_paths": ["Base.sol"],
        "functions": [
            {
                "function_name": "hello",
                "signature_id": "Child:hello",
                "calls": [
                    {"callee_name": "greet", "args": [], "resolved_id": "Base:greet"}
                ],
            }
        ],
    }
    (d / CONTRACTS_JSONL).write_text(
        json.dumps(contract_record) + "\n", encoding="utf-8"
    )
    (d / CALLS_JSONL).write_text(json.dumps(_call_edge()) + "\n", encoding="utf-8")

    summary = {
        "schema_version": ARTIFACT_SCHEMA_VERSION,
        "entry_file_count": 1,
        "contract_count": 1,
        "function_count": 1,
        "call_count": 1,
        "unresolved_count": 0,
        "import_cycles": [],
    }
    (d / SUMMARY_JSON).write_text(json.dumps(summary), encoding="utf-8")


def _messages_contain(messages: list[ValidationMessage], needle: str) -> bool:
    return any(needle in message.message for message in messages)


def test_validation_message_location() -> None:
    with_line = ValidationMessage("calls", Path("x.jsonl"), "bad", line=7)
    assert with_line.location() == "x.jsonl:7"
    assert ValidationMessage("calls", Path("x.jsonl"), "bad").location() == "x.jsonl"


def test_validation_result_ok_reflects_errors() -> None:
    assert ValidationResult().ok is True
    failed = ValidationResult(errors=[ValidationMessage("x", Path("a"), "boom")])
    assert failed.ok is False


def test_missing_directory() -> None:
    result = validate_artifacts(Path("/nonexistent"))

    assert result.ok is False
    assert _messages_contain(result.errors, "Artifacts directory does not exist")


def test_missing_artifact_files(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    artifacts_dir.mkdir()

    result = validate_artifacts(artifacts_dir)

    assert len(result.errors) == len(ARTIFACT_SPECS)
    assert all("Required artifact file is missing" in m.message for m in result.errors)


def test_valid_artifacts_pass(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)

    result = validate_artifacts(artifacts_dir)

    assert result.errors == []
    assert result.warnings == []


def test_invalid_json_line(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    (artifacts_dir / CALLS_JSONL).write_text("{not-json}\n", encoding="utf-8")

    result = validate_artifacts(artifacts_dir)

    assert result.ok is False
    assert result.errors[0].line == 1
    assert _messages_contain(result.errors, "Invalid JSON")


def test_unknown_contract_kind_fails_schema(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    record = json.loads((artifacts_dir / CONTRACTS_JSONL).read_text(encoding="utf-8"))
    record["kind"] = "module"
    (artifacts_dir / CONTRACTS_JSONL).write_text(
        json.dumps(record) + "\n", encoding="utf-8"
    )

    result = validate_artifacts(artifacts_dir)

    assert _messages_contain(result.errors, "Schema validation failed")


def test_resolved_flag_must_match_callee(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    lines = [
        json.dumps(_call_edge()),
        json.dumps(_call_edge(callee="unresolved", resolved=True)),
        json.dumps(_call_edge(callee="unresolved", resolved=False)),
    ]
    (artifacts_dir / CALLS_JSONL).write_text("\n".join(lines) + "\n", encoding="utf-8")

    result = validate_artifacts(artifacts_dir)

    assert [(m.line, m.message) for m in result.errors] == [
        (2, "resolved flag disagrees with callee.")
    ]


def test_malformed_call_target(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    (artifacts_dir / CALLS_JSONL).write_text(
        json.dumps(_call_edge(callee="greet")) + "\n", encoding="utf-8"
    )

    result = validate_artifacts(artifacts_dir)

    assert _messages_contain(result.errors, "Malformed call target 'greet'")


def test_missing_schema_version_is_warning_unless_strict(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    edge = _call_edge()
    del edge["schema_version"]
    (artifacts_dir / CALLS_JSONL).write_text(
        json.dumps(edge) + "\n" + json.dumps(edge) + "\n", encoding="utf-8"
    )

    lenient = validate_artifacts(artifacts_dir)
    strict = validate_artifacts(artifacts_dir, strict_schema_version=True)

    assert lenient.ok is True
    assert len(lenient.warnings) == 1
    assert _messages_contain(lenient.warnings, "Missing schema_version")
    assert _messages_contain(strict.errors, "Missing schema_version")


def test_summary_wrong_schema_version(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    summary = json.loads((artifacts_dir / SUMMARY_JSON).read_text(encoding="utf-8"))
    summary["schema_version"] = 999
    (artifacts_dir / SUMMARY_JSON).write_text(json.dumps(summary), encoding="utf-8")

    result = validate_artifacts(artifacts_dir)

    assert _messages_contain(result.errors, "Schema version mismatch")


def test_summary_must_be_object(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    (artifacts_dir / SUMMARY_JSON).write_text("[]", encoding="utf-8")

    result = validate_artifacts(artifacts_dir)

    assert _messages_contain(result.errors, "Expected JSON object")

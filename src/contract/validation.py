"""Validation of a call graph artifacts directory.

Checks that every artifact listed in ``ARTIFACT_SPECS`` exists, parses, and
matches its record model, and that call edges agree with themselves: an edge
is ``resolved`` exactly when its callee is not ``unresolved``, and resolved
callees look like ``Contract:function[:Type]*``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

import orjson
from pydantic import ValidationError

from artifacts.models.artifacts.contracts import UNRESOLVED
from contract.artifacts import ARTIFACT_SCHEMA_VERSION, ARTIFACT_SPECS
from contract.models import CallEdgeRecord, CallGraphSummary, ContractArtifactRecord

if TYPE_CHECKING:
    from pathlib import Path


class _SchemaModel(Protocol):
    schema_version: int

    @classmethod
    def model_validate(cls, obj: Any) -> _SchemaModel: ...


_JSONL_MODELS: dict[str, type[_SchemaModel]] = {
    "contracts": ContractArtifactRecord,
    "calls": CallEdgeRecord,
}

_CALL_TARGET = re.compile(r"^[^:]+:[^:]+(:[^:]*)*$")


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "line": self.line,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class _ArtifactCheck:
    """Message sink bound to one artifact file."""

    artifact: str
    path: Path
    result: ValidationResult
    strict_schema_version: bool
    schema_warned: bool = False
    schema_mismatched: bool = False

    def error(self, message: str, line: int | None = None) -> None:
        self.result.errors.append(
            ValidationMessage(self.artifact, self.path, message, line)
        )

    def schema_version(
        self, present: bool, version: int, line: int | None = None
    ) -> None:
        """Report a missing or mismatched schema_version once per file."""
        if present and version != ARTIFACT_SCHEMA_VERSION:
            if not self.schema_mismatched:
                self.schema_mismatched = True
                self.error(
                    "Schema version mismatch: "
                    f"expected {ARTIFACT_SCHEMA_VERSION}, got {version}.",
                    line,
                )
            return
        if present or self.schema_warned:
            return
        self.schema_warned = True
        message = f"Missing schema_version; defaulted to {ARTIFACT_SCHEMA_VERSION}."
        if self.strict_schema_version:
            self.error(message, line)
        else:
            self.result.warnings.append(
                ValidationMessage(self.artifact, self.path, message, line)
            )


def validate_artifacts(
    artifacts_dir: Path, *, strict_schema_version: bool = False
) -> ValidationResult:
    result = ValidationResult()

    if not artifacts_dir.exists():
        message = "Artifacts directory does not exist."
    elif not artifacts_dir.is_dir():
        message = "Artifacts path is not a directory."
    else:
        message = ""
    if message:
        result.errors.append(
            ValidationMessage("artifacts_dir", artifacts_dir, message)
        )
        return result

    for artifact_name, spec in ARTIFACT_SPECS.items():
        check = _ArtifactCheck(
            artifact=artifact_name,
            path=artifacts_dir / spec.filename,
            result=result,
            strict_schema_version=strict_schema_version,
        )
        if not check.path.exists():
            check.error("Required artifact file is missing.")
        elif spec.format == "jsonl":
            _validate_jsonl(check, _JSONL_MODELS[artifact_name])
        elif spec.format == "json":
            _validate_summary(check)
        else:
            check.error(f"Unsupported artifact format: {spec.format}.")

    return result


def _validate_jsonl(check: _ArtifactCheck, model: type[_SchemaModel]) -> None:
    try:
        raw_lines = check.path.read_bytes().splitlines()
    except OSError as exc:
        check.error(f"Failed to read file: {exc}.")
        return

    for line_number, raw_line in enumerate(raw_lines, 1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            data = orjson.loads(line)
        except orjson.JSONDecodeError as exc:
            check.error(f"Invalid JSON: {exc}.", line_number)
            continue

        try:
            record = model.model_validate(data)
        except ValidationError as exc:
            check.error(f"Schema validation failed: {exc}.", line_number)
            continue

        if isinstance(record, CallEdgeRecord):
            _check_call_edge(check, line_number, record)
        check.schema_version(
            isinstance(data, dict) and "schema_version" in data,
            record.schema_version,
            line_number,
        )


def _check_call_edge(
    check: _ArtifactCheck, line: int, record: CallEdgeRecord
) -> None:
    if record.resolved == (record.callee == UNRESOLVED):
        check.error("resolved flag disagrees with callee.", line)
    elif record.resolved and not _CALL_TARGET.match(record.callee):
        check.error(f"Malformed call target {record.callee!r}.", line)


def _validate_summary(check: _ArtifactCheck) -> None:
    try:
        raw = orjson.loads(check.path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        check.error(f"Invalid JSON: {exc}.")
        return

    if not isinstance(raw, dict):
        check.error("Expected JSON object for the summary.")
        return

    try:
        summary = CallGraphSummary.model_validate(raw)
    except ValidationError as exc:
        check.error(f"Schema validation failed: {exc}.")
        return

    check.schema_version("schema_version" in raw, summary.schema_version)


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]

from __future__ import annotations

from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "solgraph.toml"


class SolGraphConfig(BaseModel):
    """Configuration for solgraph call graph generation."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".solgraph",
        description="Output directory for generated artifacts",
    )
    dependency_root: str = Field(
        default="node_modules",
        description="Directory non-relative imports resolve against",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for entry files (empty = all .sol files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for entry files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    allow_parse_errors: bool = Field(
        default=False,
        description="Analyze files with syntax errors instead of aborting",
    )

    @field_validator("dependency_root")
    @classmethod
    def validate_dependency_root(cls, v: str) -> str:
        if not v.strip():
            msg = "dependency_root must be a non-empty path"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the project root.

    The config output_dir must be a non-empty relative path that remains
    within the project root after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the project root"
        raise ConfigError(msg) from exc

    return resolved_output


def resolve_dependency_root(root: Path, dependency_root: str) -> Path:
    """Resolve the dependency root; relative values are taken from ``root``."""
    path = Path(dependency_root).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


def load_config(root: Path) -> SolGraphConfig:
    """Load configuration from solgraph.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return SolGraphConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return SolGraphConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e

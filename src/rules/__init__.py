"""Configuration for solgraph runs."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    SolGraphConfig,
    load_config,
    resolve_dependency_root,
    resolve_output_dir,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "SolGraphConfig",
    "load_config",
    "resolve_dependency_root",
    "resolve_output_dir",
]

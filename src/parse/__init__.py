"""Parsing, profiling, extraction and call resolution for Solidity sources."""

from parse.name_resolution import lookup_variable_type, resolve_call
from parse.profile import profile_file
from parse.solidity_imports import (
    extract_import_paths,
    find_import_for,
    resolve_import_path,
)
from parse.structure import extract_contracts
from parse.treesitter_solidity import (
    SoliditySourceError,
    SourceParseError,
    SourceReadError,
    parse_file,
    visit,
)

__all__ = [
    "SoliditySourceError",
    "SourceParseError",
    "SourceReadError",
    "extract_contracts",
    "extract_import_paths",
    "find_import_for",
    "lookup_variable_type",
    "parse_file",
    "profile_file",
    "resolve_call",
    "resolve_import_path",
    "visit",
]

"""Serialization helpers shared by the artifact generators."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from pydantic import BaseModel


def _write_jsonl(path: Path, records: Iterable[BaseModel]) -> None:
    """Write one sorted-key JSON object per line, in record order."""
    with path.open("wb") as f:
        for rec in records:
            f.write(orjson.dumps(rec.model_dump(), option=orjson.OPT_SORT_KEYS))
            f.write(b"\n")


def _write_json(path: Path, model: BaseModel) -> None:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.write_bytes(orjson.dumps(model.model_dump(), option=opts))

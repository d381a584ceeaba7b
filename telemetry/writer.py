"""Telemetry writers producing JSON lines and JSON summaries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping


def write_history(path: str | Path, records: Iterable[Mapping[str, object]]) -> int:
    """Write one JSON object per line; return the number of records written."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with target.open("w", encoding="utf-8") as handle:
        for record in records:
            handle.write(json.dumps(record, default=_json_fallback))
            handle.write("\n")
            written += 1
    return written


def write_summary(path: str | Path, summary: Mapping[str, Any]) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        json.dump(summary, handle, indent=2, sort_keys=True, default=_json_fallback)
        handle.write("\n")


def _json_fallback(obj):
    if hasattr(obj, "tolist"):
        return obj.tolist()
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"object of type {type(obj)!r} is not JSON serializable")

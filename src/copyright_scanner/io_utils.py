"""JSON and JSON Lines I/O built on orjson.

Dataclasses (``Match``, ``ConfigIssue``) and ``str`` enums serialize natively.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def dumps_jsonl_line(record: Any) -> bytes:
    """One JSON Lines record, newline included."""
    return orjson.dumps(record, option=orjson.OPT_APPEND_NEWLINE)


def save_jsonl(records: list[Any], path: Path) -> None:
    """Save records as a JSON Lines file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"".join(dumps_jsonl_line(r) for r in records))

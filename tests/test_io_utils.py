"""Tests for io_utils.py."""
from __future__ import annotations

from pathlib import Path

import orjson

from copyright_scanner.io_utils import dumps_jsonl_line, load_json, save_jsonl
from copyright_scanner.scanner import Match, MatchType, PartyType


class TestJson:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.json"
        path.write_bytes(b'{"third_party": ["MIT"], "third_party_allowed": true}')
        assert load_json(path) == {"third_party": ["MIT"], "third_party_allowed": True}


class TestJsonl:
    def test_match_serializes_with_enum_values(self) -> None:
        m = Match(PartyType.FIRST_PARTY, MatchType.LICENSE, "MIT", 1, 2, 0, 3)
        line = dumps_jsonl_line(m.to_dict())
        assert line.endswith(b"\n")
        assert b'"party_type":"FIRST_PARTY"' in line
        assert b'"match_type":"LICENSE"' in line

    def test_save_creates_parents(self, tmp_path: Path) -> None:
        path = tmp_path / "out" / "scan.jsonl"
        records = [{"name": "a.c", "allowed": True}, {"name": "b.c", "allowed": False}]
        save_jsonl(records, path)
        lines = path.read_bytes().splitlines()
        assert [orjson.loads(line) for line in lines] == records

    def test_save_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.jsonl"
        save_jsonl([], path)
        assert path.read_bytes() == b""

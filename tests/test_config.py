"""Tests for config.py: loading and validating rules files."""
from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from copyright_scanner.catalogue import CATALOGUE
from copyright_scanner.config import (
    ConfigError,
    ScanConfig,
    load_scan_config,
    scan_config_from_dict,
)


class TestScanConfigFromDict:
    def test_empty(self) -> None:
        config = scan_config_from_dict({})
        assert config == ScanConfig()
        assert config.rules.is_empty
        assert config.third_party_allowed is False

    def test_full(self) -> None:
        config = scan_config_from_dict({
            "first_party": ["APACHE2"],
            "third_party": ["MIT"],
            "first_party_owners": ["Example Corp"],
            "exclude_patterns": ["generated file"],
            "third_party_allowed": True,
        })
        apache = CATALOGUE["APACHE2"]
        assert config.rules.first_party_owners == apache.owners + ("Example Corp",)
        assert config.rules.third_party_licenses == CATALOGUE["MIT"].licenses
        assert config.rules.exclude_patterns[-1] == "generated file"
        assert config.third_party_allowed is True

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            scan_config_from_dict({"frist_party": ["MIT"]})
        [issue] = excinfo.value.issues
        assert issue.key == "frist_party"
        assert issue.message == "unknown key"

    def test_wrong_types(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            scan_config_from_dict({"third_party": "MIT", "third_party_allowed": "yes"})
        assert [i.key for i in excinfo.value.issues] == [
            "third_party", "third_party_allowed",
        ]

    def test_non_string_entries(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            scan_config_from_dict({"first_party_owners": ["ok", 3]})
        assert excinfo.value.issues[0].value == ["ok", 3]

    def test_unknown_rule_name(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            scan_config_from_dict({"third_party": ["MTT"]})
        [issue] = excinfo.value.issues
        assert issue.key == "third_party"
        assert issue.value == "MTT"
        assert "Did you mean MIT?" in issue.message

    def test_invalid_pattern(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            scan_config_from_dict({"first_party_owners": ["Example (Corp)"]})
        [issue] = excinfo.value.issues
        assert issue.key == "first_party_owners"
        assert issue.value == "Example (Corp)"
        assert "Capturing group" in issue.message

    def test_uncompilable_pattern(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            scan_config_from_dict({"first_party_owners": ["Example Corp)"]})
        [issue] = excinfo.value.issues
        assert issue.key == "first_party_owners"
        assert issue.value == "Example Corp)"
        assert "unbalanced parenthesis" in issue.message

    def test_every_problem_reported(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            scan_config_from_dict({
                "bogus": 1,
                "forbidden": ["NOPE_NOT_A_RULE"],
                "exclude_patterns": ["(unbalanced"],
            })
        assert [i.key for i in excinfo.value.issues] == [
            "bogus", "forbidden", "exclude_patterns",
        ]
        message = str(excinfo.value)
        assert message.startswith("Invalid scan configuration:\n")
        assert "bogus: unknown key" in message

    def test_not_an_object(self) -> None:
        with pytest.raises(ConfigError) as excinfo:
            scan_config_from_dict(["MIT"])  # type: ignore[arg-type]
        assert len(excinfo.value.issues) == 1

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            scan_config_from_dict({"bogus": True})


class TestLoadScanConfig:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.json"
        path.write_bytes(orjson.dumps({"first_party": ["APACHE2"], "forbidden": ["AGPL"]}))
        config = load_scan_config(path)
        assert config.rules.forbidden_licenses == CATALOGUE["AGPL"].licenses

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            load_scan_config(tmp_path / "missing.json")

"""Tests for catalogue.py: named rules and name lookup."""
from __future__ import annotations

import re

import pytest

from copyright_scanner.catalogue import (
    CATALOGUE,
    UnknownRuleError,
    edit_distance,
    known_rule_names,
    lookup_rule,
)
from copyright_scanner.patterns import compile_pattern

ALL_PATTERNS = [
    (name, pattern)
    for name, rule in CATALOGUE.items()
    for pattern in rule.owners + rule.licenses
]
ALL_EXCLUSIONS = [
    (name, pattern)
    for name, rule in CATALOGUE.items()
    for pattern in rule.exclusions
]


class TestCatalogueContents:
    def test_expected_names(self) -> None:
        assert len(CATALOGUE) == 51
        for name in ["APACHE2", "MIT", "BSD", "GPL2", "AGPL", "NOT_A_CONTRIBUTION",
                     "MS-PL", "LPL1.02", "AFL2.1", "ISC"]:
            assert name in CATALOGUE

    def test_boost_alias(self) -> None:
        assert CATALOGUE["BOOST"] is CATALOGUE["BSL1.0"]

    def test_read_only(self) -> None:
        with pytest.raises(TypeError):
            CATALOGUE["NEW"] = CATALOGUE["MIT"]  # type: ignore[index]

    def test_every_rule_has_patterns(self) -> None:
        for name, rule in CATALOGUE.items():
            assert rule.owners or rule.licenses, name

    @pytest.mark.parametrize(("name", "pattern"), ALL_PATTERNS)
    def test_pattern_compiles(self, name: str, pattern: str) -> None:
        compile_pattern(pattern)

    @pytest.mark.parametrize(("name", "pattern"), ALL_EXCLUSIONS)
    def test_exclusion_compiles(self, name: str, pattern: str) -> None:
        re.compile(pattern, re.IGNORECASE)


class TestRuleMatching:
    def test_apache_license_line(self) -> None:
        rule = lookup_rule("APACHE2")
        text = "Licensed under the Apache License, Version 2.0"
        assert any(compile_pattern(p).matches(text) for p in rule.licenses)

    def test_google_owner(self) -> None:
        rule = lookup_rule("GOOGLE")
        assert any(compile_pattern(p).matches("Google Inc.") for p in rule.owners)
        assert any(compile_pattern(p).matches("Google LLC") for p in rule.owners)

    def test_mit_spdx(self) -> None:
        rule = lookup_rule("MIT")
        text = "// SPDX-License-Identifier: MIT"
        assert any(compile_pattern(p).matches(text) for p in rule.licenses)

    def test_agpl_mentions_are_excluded(self) -> None:
        rule = lookup_rule("AGPL")
        text = "but the special requirements of the GNU Affero General Public License,"
        assert any(re.search(p, text, re.IGNORECASE) for p in rule.exclusions)


class TestLookup:
    def test_known_name(self) -> None:
        assert lookup_rule("MIT") is CATALOGUE["MIT"]

    def test_typo_suggests_closest(self) -> None:
        with pytest.raises(UnknownRuleError) as excinfo:
            lookup_rule("MTT")
        assert excinfo.value.name == "MTT"
        assert excinfo.value.suggestions == ("MIT",)
        assert str(excinfo.value) == (
            "Unknown license or copyright owner name: MTT\n\nDid you mean MIT?"
        )

    def test_several_suggestions_joined(self) -> None:
        with pytest.raises(UnknownRuleError) as excinfo:
            lookup_rule("GPL4")
        assert excinfo.value.suggestions == ("GPL", "GPL2", "GPL3")
        assert "Did you mean GPL, GPL2 or GPL3?" in str(excinfo.value)

    def test_distant_name_lists_everything(self) -> None:
        with pytest.raises(UnknownRuleError) as excinfo:
            lookup_rule("COMPLETELY_DIFFERENT")
        assert excinfo.value.suggestions == ()
        message = str(excinfo.value)
        assert "Known names are:" in message
        assert "ZPL" in message and "AFL2.1" in message

    def test_lookup_is_case_sensitive(self) -> None:
        with pytest.raises(UnknownRuleError):
            lookup_rule("mit")

    def test_is_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            lookup_rule("NOPE_NOT_A_RULE")


class TestHelpers:
    def test_known_rule_names_sorted(self) -> None:
        names = known_rule_names()
        assert list(names) == sorted(names)
        assert set(names) == set(CATALOGUE)

    @pytest.mark.parametrize(("a", "b", "expected"), [
        ("MIT", "MIT", 0),
        ("MIT", "MTT", 1),
        ("GPL", "GPL2", 1),
        ("BSD", "", 3),
        ("kitten", "sitting", 3),
    ])
    def test_edit_distance(self, a: str, b: str, expected: int) -> None:
        assert edit_distance(a, b) == expected

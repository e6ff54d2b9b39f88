"""Tests for rule_set.py: building, signing and validating rule sets."""
from __future__ import annotations

import pytest

from copyright_scanner.catalogue import CATALOGUE, UnknownRuleError
from copyright_scanner.rule_set import RuleSet, RuleSetBuilder


class TestBuilder:
    def test_named_rules_land_in_their_lists(self) -> None:
        rules = (
            RuleSet.builder()
            .add_first_party("APACHE2")
            .add_third_party("MIT")
            .add_forbidden("AGPL")
            .build()
        )
        apache, mit, agpl = CATALOGUE["APACHE2"], CATALOGUE["MIT"], CATALOGUE["AGPL"]
        assert rules.first_party_licenses == apache.licenses
        assert rules.first_party_owners == apache.owners
        assert rules.third_party_licenses == mit.licenses
        assert rules.third_party_owners == ()
        assert rules.forbidden_licenses == agpl.licenses
        assert rules.exclude_patterns == apache.exclusions + agpl.exclusions

    def test_exclude_takes_every_member(self) -> None:
        rules = RuleSet.builder().exclude("ANDROID").build()
        android = CATALOGUE["ANDROID"]
        assert rules.exclude_patterns == android.owners + android.licenses
        assert rules.first_party_owners == ()

    def test_raw_patterns(self) -> None:
        rules = (
            RuleSetBuilder()
            .add_first_party_license("Example License")
            .add_first_party_owner("Example Corp")
            .add_third_party_license("Other License")
            .add_third_party_owner("Other Corp")
            .add_forbidden_license("Bad License")
            .add_forbidden_owner("Bad Corp")
            .exclude_pattern("ignore me")
            .build()
        )
        assert rules.first_party_licenses == ("Example License",)
        assert rules.first_party_owners == ("Example Corp",)
        assert rules.third_party_licenses == ("Other License",)
        assert rules.third_party_owners == ("Other Corp",)
        assert rules.forbidden_licenses == ("Bad License",)
        assert rules.forbidden_owners == ("Bad Corp",)
        assert rules.exclude_patterns == ("ignore me",)

    def test_additive_order_preserved(self) -> None:
        rules = (
            RuleSet.builder()
            .add_first_party_owner("A")
            .add_first_party_owner("B")
            .add_first_party_owner("A")
            .build()
        )
        assert rules.first_party_owners == ("A", "B", "A")

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(UnknownRuleError):
            RuleSet.builder().add_third_party("MTT")

    def test_is_empty(self) -> None:
        assert RuleSet().is_empty
        assert not RuleSet.builder().exclude_pattern("x").build().is_empty


class TestSignature:
    def test_equal_sets_equal_signatures(self) -> None:
        a = RuleSet.builder().add_first_party("APACHE2").add_third_party("MIT").build()
        b = RuleSet.builder().add_first_party("APACHE2").add_third_party("MIT").build()
        assert a == b
        assert a.signature() == b.signature()

    def test_content_changes_signature(self) -> None:
        a = RuleSet.builder().add_first_party("APACHE2").build()
        b = RuleSet.builder().add_first_party("APACHE2").add_first_party_owner("X").build()
        assert a.signature() != b.signature()

    def test_list_membership_changes_signature(self) -> None:
        a = RuleSet.builder().add_first_party_owner("X").build()
        b = RuleSet.builder().add_third_party_owner("X").build()
        assert a.signature() != b.signature()

    def test_signature_is_hex_digest(self) -> None:
        signature = RuleSet().signature()
        assert len(signature) == 64
        int(signature, 16)


class TestValidate:
    def test_catalogue_rules_are_valid(self) -> None:
        builder = RuleSet.builder()
        for name in CATALOGUE:
            builder.add_third_party(name)
        assert builder.build().validate() == []

    def test_issue_labelled_with_list(self) -> None:
        rules = (
            RuleSet.builder()
            .add_first_party_owner("Example (Corp)")
            .add_forbidden_license("[a b]")
            .build()
        )
        issues = rules.validate()
        assert [i.field for i in issues] == ["first_party_owners", "forbidden_licenses"]
        assert issues[0].pattern == "Example (Corp)"

    def test_regex_syntax_error_reported(self) -> None:
        rules = (
            RuleSet.builder()
            .add_first_party_owner("Example Corp)")
            .add_third_party_license("Other License")
            .build()
        )
        [issue] = rules.validate()
        assert issue.field == "first_party_owners"
        assert issue.pattern == "Example Corp)"
        assert "unbalanced parenthesis" in issue.message

    def test_exclusions_checked_as_plain_regex(self) -> None:
        rules = (
            RuleSet.builder()
            .exclude_pattern("(?:ok)")
            .exclude_pattern("(unbalanced")
            .build()
        )
        issues = rules.validate()
        assert len(issues) == 1
        assert issues[0].field == "exclude_patterns"
        assert issues[0].pattern == "(unbalanced"

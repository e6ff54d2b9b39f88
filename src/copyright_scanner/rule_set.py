"""Per-project rule sets built from catalogue names and raw patterns."""
from __future__ import annotations

import dataclasses
import hashlib
import re
from dataclasses import dataclass

from copyright_scanner.catalogue import lookup_rule
from copyright_scanner.patterns import (
    PatternError,
    PatternIssue,
    check_pattern,
    compile_pattern,
)

# Signature section headers, in signature order.
SECTION_HEADERS: tuple[tuple[str, str], ...] = (
    ("1pl", "first_party_licenses"),
    ("1po", "first_party_owners"),
    ("3pl", "third_party_licenses"),
    ("3po", "third_party_owners"),
    ("!!l", "forbidden_licenses"),
    ("!!o", "forbidden_owners"),
    ("xx", "exclude_patterns"),
)


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Immutable pattern lists that drive one ``CopyrightScanner``."""

    first_party_licenses: tuple[str, ...] = ()
    first_party_owners: tuple[str, ...] = ()
    third_party_licenses: tuple[str, ...] = ()
    third_party_owners: tuple[str, ...] = ()
    forbidden_licenses: tuple[str, ...] = ()
    forbidden_owners: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()

    @staticmethod
    def builder() -> RuleSetBuilder:
        return RuleSetBuilder()

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, attr) for _, attr in SECTION_HEADERS)

    def signature(self) -> str:
        """Stable content hash; equal rule sets always share a signature."""
        sections = [
            f"{header}:\n" + "\n".join(getattr(self, attr))
            for header, attr in SECTION_HEADERS
        ]
        return hashlib.sha256("\n".join(sections).encode("utf-8")).hexdigest()

    def validate(self) -> list[PatternIssue]:
        """Check every pattern, labelling each issue with its list name.

        Patterns that pass the structural checks are also compiled, so a
        regex syntax error is reported here rather than at scanner
        construction.
        """
        issues: list[PatternIssue] = []
        for _, attr in SECTION_HEADERS[:-1]:
            for pattern in getattr(self, attr):
                found = check_pattern(pattern)
                if found:
                    issues.extend(dataclasses.replace(i, field=attr) for i in found)
                    continue
                try:
                    compile_pattern(pattern)
                except PatternError as exc:
                    issues.append(PatternIssue(str(exc), exc.position, pattern, attr))
        for pattern in self.exclude_patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                issues.append(PatternIssue(
                    f"Invalid exclusion /{pattern}/: {exc.msg}",
                    exc.pos or 0, pattern, "exclude_patterns",
                ))
        return issues


class RuleSetBuilder:
    """Accumulates patterns; every ``add_*`` call returns the builder."""

    def __init__(self) -> None:
        self._lists: dict[str, list[str]] = {
            attr: [] for _, attr in SECTION_HEADERS
        }

    def _add_rule(self, name: str, licenses: str, owners: str) -> RuleSetBuilder:
        rule = lookup_rule(name)
        self._lists[licenses].extend(rule.licenses)
        self._lists[owners].extend(rule.owners)
        self._lists["exclude_patterns"].extend(rule.exclusions)
        return self

    def add_first_party(self, name: str) -> RuleSetBuilder:
        return self._add_rule(name, "first_party_licenses", "first_party_owners")

    def add_third_party(self, name: str) -> RuleSetBuilder:
        return self._add_rule(name, "third_party_licenses", "third_party_owners")

    def add_forbidden(self, name: str) -> RuleSetBuilder:
        return self._add_rule(name, "forbidden_licenses", "forbidden_owners")

    def exclude(self, name: str) -> RuleSetBuilder:
        """Treat every pattern of the named rule as an exclusion."""
        rule = lookup_rule(name)
        self._lists["exclude_patterns"].extend(
            rule.owners + rule.licenses + rule.exclusions
        )
        return self

    def add_first_party_license(self, pattern: str) -> RuleSetBuilder:
        self._lists["first_party_licenses"].append(pattern)
        return self

    def add_first_party_owner(self, pattern: str) -> RuleSetBuilder:
        self._lists["first_party_owners"].append(pattern)
        return self

    def add_third_party_license(self, pattern: str) -> RuleSetBuilder:
        self._lists["third_party_licenses"].append(pattern)
        return self

    def add_third_party_owner(self, pattern: str) -> RuleSetBuilder:
        self._lists["third_party_owners"].append(pattern)
        return self

    def add_forbidden_license(self, pattern: str) -> RuleSetBuilder:
        self._lists["forbidden_licenses"].append(pattern)
        return self

    def add_forbidden_owner(self, pattern: str) -> RuleSetBuilder:
        self._lists["forbidden_owners"].append(pattern)
        return self

    def exclude_pattern(self, pattern: str) -> RuleSetBuilder:
        self._lists["exclude_patterns"].append(pattern)
        return self

    def build(self) -> RuleSet:
        return RuleSet(**{attr: tuple(items) for attr, items in self._lists.items()})

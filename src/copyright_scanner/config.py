"""Scan configuration loaded from a JSON rules file.

Example::

    {
      "first_party": ["APACHE2", "ANDROID"],
      "third_party": ["MIT", "BSD"],
      "forbidden": ["AGPL", "NOT_A_CONTRIBUTION"],
      "exclude": ["EXAMPLES"],
      "first_party_owners": ["Example Corp"],
      "third_party_allowed": false
    }

The four name lists take catalogue names; the ``*_licenses`` /
``*_owners`` / ``exclude_patterns`` lists take raw patterns. Every problem
in the file is collected before anything is raised, so one ``ConfigError``
reports them all.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from copyright_scanner.catalogue import UnknownRuleError
from copyright_scanner.io_utils import load_json
from copyright_scanner.rule_set import RuleSet, RuleSetBuilder


@dataclass(frozen=True, slots=True)
class ConfigIssue:
    """One problem in a configuration document."""

    key: str
    value: Any
    message: str


class ConfigError(ValueError):
    def __init__(self, issues: list[ConfigIssue]) -> None:
        lines = [f"{issue.key}: {issue.message}" for issue in issues]
        super().__init__("Invalid scan configuration:\n" + "\n".join(lines))
        self.issues = issues


@dataclass(frozen=True, slots=True)
class ScanConfig:
    rules: RuleSet = field(default_factory=RuleSet)
    third_party_allowed: bool = False


# Keys naming catalogue entries, and the builder method each one feeds.
NAME_KEYS: dict[str, str] = {
    "first_party": "add_first_party",
    "third_party": "add_third_party",
    "forbidden": "add_forbidden",
    "exclude": "exclude",
}

PATTERN_KEYS: dict[str, str] = {
    "first_party_licenses": "add_first_party_license",
    "first_party_owners": "add_first_party_owner",
    "third_party_licenses": "add_third_party_license",
    "third_party_owners": "add_third_party_owner",
    "forbidden_licenses": "add_forbidden_license",
    "forbidden_owners": "add_forbidden_owner",
    "exclude_patterns": "exclude_pattern",
}

KNOWN_KEYS: frozenset[str] = frozenset(
    {*NAME_KEYS, *PATTERN_KEYS, "third_party_allowed"}
)


def _string_list(
    data: dict[str, Any], key: str, issues: list[ConfigIssue],
) -> list[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        issues.append(ConfigIssue(key, value, "expected a list of strings"))
        return []
    return value


def scan_config_from_dict(data: dict[str, Any]) -> ScanConfig:
    """Build a ``ScanConfig``; raise ``ConfigError`` listing every problem."""
    if not isinstance(data, dict):
        raise ConfigError([ConfigIssue("", data, "expected a JSON object")])

    issues: list[ConfigIssue] = []
    for key in sorted(set(data) - KNOWN_KEYS):
        issues.append(ConfigIssue(key, data[key], "unknown key"))

    builder = RuleSetBuilder()
    for key, method in NAME_KEYS.items():
        for name in _string_list(data, key, issues):
            try:
                getattr(builder, method)(name)
            except UnknownRuleError as exc:
                issues.append(ConfigIssue(key, name, str(exc)))
    for key, method in PATTERN_KEYS.items():
        for pattern in _string_list(data, key, issues):
            getattr(builder, method)(pattern)

    third_party_allowed = data.get("third_party_allowed", False)
    if not isinstance(third_party_allowed, bool):
        issues.append(ConfigIssue(
            "third_party_allowed", third_party_allowed, "expected true or false",
        ))

    rules = builder.build()
    for issue in rules.validate():
        issues.append(ConfigIssue(issue.field, issue.pattern, issue.message))

    if issues:
        raise ConfigError(issues)
    return ScanConfig(rules=rules, third_party_allowed=third_party_allowed)


def load_scan_config(path: Path) -> ScanConfig:
    return scan_config_from_dict(load_json(path))

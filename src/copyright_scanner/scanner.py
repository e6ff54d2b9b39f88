"""Classifying copyright/license scanner.

A ``CopyrightScanner`` folds every pattern of a ``RuleSet`` into one composite
regular expression and runs it once over the first ``max_search_length``
characters of a file. Each alternative of the composite owns named capture
groups; the group a match lands in says what was found:

==================  ======================================================
Slot                Captures
==================  ======================================================
KNOWN_LICENSE       any configured license pattern
GENERIC_LICENSE     "is distributed under the ... license"
LICENSE_LABEL       "license: <names>" on one line
AUTHOR              "author: <owner>" / "the author of this software is"
COPYRIGHT_OWNER     owner part of "copyright (c) <years> <owner>" and the
                    reverse "<owner> <years>" order
==================  ======================================================

Matches without any populated group come from the contract-word alternative:
vocabulary typical of legal text ("liable", "merchantability" ...). They
are collected as UNKNOWN license fragments, coalesced when close together,
and only reported when the file has no recognizable license at all.

Every repetition in the composite is bounded by ``PatternLimits`` and the
search window by ``max_search_length``, so scan cost stays linear in the
window size.
"""
from __future__ import annotations

import io
import logging
import re
from dataclasses import asdict, dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

from copyright_scanner.line_reader import IndexedLineReader
from copyright_scanner.patterns import (
    CLOSE_QUOTE_CHARS,
    DEFAULT_LIMITS,
    FLAGS,
    LETTER,
    LOWER_CHAR,
    OPEN_QUOTE,
    UPPER_CHAR,
    WS,
    WSPCT,
    CompiledPattern,
    PatternError,
    PatternLimits,
    compile_pattern,
    name_expr,
    proper_name_expr,
    upper_name_expr,
    url_expr,
)
from copyright_scanner.rule_set import RuleSet

logger = logging.getLogger(__name__)

MATCH_THRESHOLD = 10
MAX_SEARCH_LENGTH = 256 * 1024

# Unknown fragments closer than this to the previous one are merged into it.
COALESCE_LINES = 6
COALESCE_CHARS = 300


class PartyType(StrEnum):
    FIRST_PARTY = "FIRST_PARTY"
    THIRD_PARTY = "THIRD_PARTY"
    FORBIDDEN = "FORBIDDEN"
    UNKNOWN = "UNKNOWN"


class MatchType(StrEnum):
    AUTHOR_OWNER = "AUTHOR_OWNER"
    LICENSE = "LICENSE"


class Slot(StrEnum):
    KNOWN_LICENSE = "known_license"
    GENERIC_LICENSE = "generic_license"
    LICENSE_LABEL = "license_label"
    AUTHOR = "author"
    COPYRIGHT_OWNER = "copyright_owner"

    @property
    def is_license(self) -> bool:
        return self in (
            Slot.KNOWN_LICENSE, Slot.GENERIC_LICENSE, Slot.LICENSE_LABEL,
        )


@dataclass(frozen=True, slots=True)
class Match:
    """One finding. Offsets are character offsets into the decoded text."""

    party_type: PartyType
    match_type: MatchType
    text: str
    start_line: int
    end_line: int
    start: int
    end: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ── Contract words ──────────────────────────────────────────────────────

_BY_VERBS = (
    "(?:(?:required|return|allocated|allowed|contributed|copyrighted|generated"
    "|provided|raised|understandable|used|written) )?"
)
_BY_HANDLE = r"[-\w.]{1,30}"

CONTRACT_WORDS: tuple[str, ...] = (
    "agree(?:s|d|ment)?",
    "amendments?",
    "applicable laws?",
    "any manner",
    f"auth?or(?:s|ed|ship)?:?(?-i: {UPPER_CHAR}{LOWER_CHAR}{{0,30}}){{2,5}}",
    "breach",
    f"{_BY_VERBS}by:? @{_BY_HANDLE}",
    f"{_BY_VERBS}by:? {_BY_HANDLE}@{_BY_HANDLE}",
    f"{_BY_VERBS}by:?(?-i: {UPPER_CHAR}{LOWER_CHAR}{{0,30}}){{2,5}}",
    "charge for",
    "constitut(?:e|es|ed|ing)",
    "contract(?:s|ed|ing|ual|ually)?",
    "contribut(?:e|es|or|ors|ion|ions)",
    "copyleft",
    f"{LETTER}{{1,30}} copyright(?:able)? {LETTER}{{1,30}}",
    "damages",
    "derivative",
    "disclaim(?:s|ed|er)?",
    "endorsements?",
    " [(]?EUPL[)]? ",
    "exemplary",
    "expressly",
    "fitness",
    "govern(?:s|ed|ing)?",
    "here(?:by|under)",
    "herein(?:after)?",
    "however caused",
    "incidental",
    "infring(?:e|es|ed|ing)",
    "injury",
    "jurisdictions?",
    "lawful",
    "liable",
    "liabilit(?:ies|y)",
    "(?:re)?licen[cs](?:e(?![:])|es|ed|ing|or)",
    "litigation",
    "merchantability",
    "must agree",
    "negligen(?:ce|t)",
    "no event",
    "no provision",
    "(?:non|un)enforce(?:s|d|able|ability)?",
    "nonexclusive",
    "notwithstanding",
    "obligations?",
    "otherwise agreed",
    "perpetu(?:al|ity)",
    "phonorecords?",
    "prior written",
    "provisions",
    "public domain",
    f"(?-i:(?:{upper_name_expr()} ){{0,5}}PUBLIC LICEN[CS]E)",
    f"(?-i:(?:{proper_name_expr()} ){{0,5}}Public Licen[cs]e)",
    "punitive",
    "pursuant",
    "redistribut(?:e|ion)",
    "right to",
    "royalties",
    "set forth",
    " [(]?SISSL[)]? ",
    "SPDX-License-Identifier[:]?",
    "stoppage",
    "terms and conditions",
    "the laws of",
    "third party",
    "tort(?:s|ious)?",
    "trademark",
    "waive(?:s|d|r)?",
    "warrant(?:s|y|ee|ed|ing)?",
    "whatsoever",
)

# ── Normalization ───────────────────────────────────────────────────────

RE_URL: re.Pattern[str] = re.compile(url_expr(), re.IGNORECASE)
RE_WS_RUN: re.Pattern[str] = re.compile(WS + "+")
RE_NEGATED: re.Pattern[str] = re.compile(r"no copyright(?:able)?", re.IGNORECASE)
RE_OWNER_TAIL: re.Pattern[str] = re.compile(
    r"[ ](?:all rights|(?:the|this) [^ ]+(?: [^ ]+){0,2} (?:is|assumes|may)"
    r"|permission|copyright|version \d|for conditions|include |include$"
    r"|modification|however|open source license|please (?:use|read)|libname"
    r"|if defined|usage|this is free|added|generic|redistribution|ifdef|ifndef"
    r"|for (?:more|terms)|copying and|you (?:may|can)|released under|see the"
    r"|full source|freedom to use|this program and|distributed|https?|unit ?test"
    r"|import|static|by obtaining|by using|by copying|example|namespace|config\b"
    r"|public (?:static|final|class)|package (?:org|com)|[^ ]+ is hereby)",
    re.IGNORECASE,
)


def normalize_text(text: str) -> str:
    """Collapse whitespace and comment decoration to single spaces.

    URLs are copied through untouched. The result is trimmed; normalizing a
    normalized string returns it unchanged.
    """
    parts: list[str] = []
    pos = 0
    for m in RE_URL.finditer(text):
        parts.append(RE_WS_RUN.sub(" ", text[pos:m.start()]))
        parts.append(m.group())
        pos = m.end()
    parts.append(RE_WS_RUN.sub(" ", text[pos:]))
    return "".join(parts).strip()


def normalize_owner(text: str) -> str:
    """Cut trailing boilerplate ("All rights reserved", "#ifdef" ...) from an owner."""
    return RE_OWNER_TAIL.split(text, maxsplit=1)[0]


# ── Unknown fragments ───────────────────────────────────────────────────


@dataclass(slots=True)
class _Fragment:
    text: str
    start_line: int
    end_line: int
    start: int
    end: int

    def to_match(self) -> Match:
        return Match(
            PartyType.UNKNOWN, MatchType.LICENSE, self.text,
            self.start_line, self.end_line, self.start, self.end,
        )


class _UnknownFragments:
    """Coalesces nearby contract-word hits into at most ``limit`` findings.

    Only the most recent fragment is open for extension; once a hit lands
    far enough away it is frozen into a ``Match``.
    """

    def __init__(self, limit: int) -> None:
        self._limit = limit
        self._pending: _Fragment | None = None
        self._done: list[Match] = []
        self.count = 0

    def add(self, text: str, start_line: int, end_line: int, start: int, end: int) -> None:
        prior = self._pending
        if prior is not None and (
            start_line - prior.end_line < COALESCE_LINES
            or start - prior.end < COALESCE_CHARS
        ):
            prior.text = f"{prior.text}...{text}"
            prior.end_line = end_line
            prior.end = end
            return
        if self.count < self._limit:
            if prior is not None:
                self._done.append(prior.to_match())
            self._pending = _Fragment(text, start_line, end_line, start, end)
        self.count += 1

    def matches(self) -> list[Match]:
        if self._pending is None:
            return list(self._done)
        return [*self._done, self._pending.to_match()]


# ── Composite expression ────────────────────────────────────────────────


class _CompositeBuilder:
    """Emits capture groups with unique names that encode their ``Slot``."""

    def __init__(self, limits: PatternLimits) -> None:
        self.limits = limits
        self._counts: dict[Slot, int] = {}

    def capture(self, slot: Slot, expr: str) -> str:
        n = self._counts.get(slot, 0) + 1
        self._counts[slot] = n
        return f"(?P<{slot.value}_{n}>{expr})"

    @staticmethod
    def slot_of(group_name: str) -> Slot:
        return Slot(group_name.rsplit("_", 1)[0])


class CopyrightScanner:
    """Scan decoded text for licenses, authors and copyright owners."""

    def __init__(
        self,
        rules: RuleSet,
        *,
        limits: PatternLimits = DEFAULT_LIMITS,
        max_search_length: int = MAX_SEARCH_LENGTH,
        match_threshold: int = MATCH_THRESHOLD,
    ) -> None:
        self.rules = rules
        self.limits = limits
        self.max_search_length = max_search_length
        self.match_threshold = match_threshold

        self._first_party_licenses = self._compile_all(rules.first_party_licenses)
        self._third_party_licenses = self._compile_all(rules.third_party_licenses)
        self._forbidden_licenses = self._compile_all(rules.forbidden_licenses)
        self._first_party_owners = self._compile_all(rules.first_party_owners)
        self._third_party_owners = self._compile_all(rules.third_party_owners)
        self._forbidden_owners = self._compile_all(rules.forbidden_owners)
        self._contract_words = self._compile_all(CONTRACT_WORDS)
        self._exclusions: list[re.Pattern[str]] = []
        for pattern in rules.exclude_patterns:
            try:
                self._exclusions.append(re.compile(pattern, re.IGNORECASE))
            except re.error as exc:
                raise PatternError(
                    f"Invalid exclusion /{pattern}/: {exc.msg}", pattern, exc.pos or 0,
                ) from exc

        self.pattern = re.compile(self._build_pattern(), FLAGS)
        self.slot_for_group: dict[int, Slot] = {
            index: _CompositeBuilder.slot_of(name)
            for name, index in self.pattern.groupindex.items()
        }
        self.signature = rules.signature()
        logger.debug(
            "compiled scanner %s: %d groups, %d characters",
            self.signature[:12], self.pattern.groups, len(self.pattern.pattern),
        )

    def _compile_all(self, patterns: tuple[str, ...]) -> list[CompiledPattern]:
        return [compile_pattern(p, self.limits) for p in patterns]

    # ── Pattern construction ───────────────────────────────────────────

    def _owner_expr(self, builder: _CompositeBuilder, slot: Slot) -> str:
        r = self.limits.name_repetition
        ws1 = f"{WS}{{1,{self.limits.space_length}}}"
        name = name_expr(self.limits)
        known = [
            p.body for p in (
                self._third_party_owners
                + self._first_party_owners
                + self._forbidden_owners
            )
        ]
        body = "|".join([*known, f"{name}(?:{ws1}{name}){{0,{r}}}"])
        return f"(?:by{ws1})?(?:the{ws1})?" + builder.capture(slot, body)

    def _build_pattern(self) -> str:
        lim = self.limits
        s, r, d = lim.space_length, lim.name_repetition, lim.date_repetition
        ws0 = f"{WS}{{0,{s}}}"
        ws1 = f"{WS}{{1,{s}}}"
        wsp1 = f"{WSPCT}{{1,{s}}}"
        name = name_expr(lim)
        b = _CompositeBuilder(lim)
        alternatives: list[str] = []

        known = [
            p.body for p in (
                self._third_party_licenses
                + self._first_party_licenses
                + self._forbidden_licenses
            )
        ]
        if known:
            alternatives.append(b.capture(Slot.KNOWN_LICENSE, "|".join(known)))

        alternatives.append(
            f"(?:is{ws1}(?:distributed|provided){ws1}under"
            f"(?:{ws1}(?:the|this))?{ws1}"
            + b.capture(Slot.GENERIC_LICENSE, f"(?:{name}{ws1}){{2,{r}}}?licen[cs]e")
            + "[,.;]{0,3}(?![:]))"
        )
        alternatives.append(
            f"(?-ms:licen[cs]e:\\s{{1,{s}}}"
            + b.capture(
                Slot.LICENSE_LABEL, f"{name}(?:\\s{{1,{s}}}{name}){{0,{r}}}",
            )
            + "\\n)"
        )
        alternatives.append(
            f"\\b(?:the{ws1}author{ws1}of{ws1}this{ws1}software{ws1}is"
            f"|(?:principal{ws1})?author:?){ws1}"
            + self._owner_expr(b, Slot.AUTHOR)
        )

        mark = "(?:[(]c[)]|&copy;|©)"
        years = (
            f"\\d{{2,4}}(?:{wsp1}(?:and{wsp1})?\\d{{2,4}}){{0,{d}}}"
            f"(?:{wsp1}(?:present|now))?"
        )

        def dated_owner() -> str:
            year_first = f"{years}{wsp1}" + self._owner_expr(b, Slot.COPYRIGHT_OWNER)
            owner_first = self._owner_expr(b, Slot.COPYRIGHT_OWNER) + f"{ws1}{years}"
            return f"(?:{year_first}|{owner_first})"

        first = (
            f"(?:{ws0}{mark}{ws0})?"
            f"(?:copy(?:right|left)(?:{ws1}notice)?(?:{ws0}{mark})?|{mark})"
            f"{ws1}" + dated_owner()
        )
        repeat = (
            f"(?:(?:portions)?{ws0}{mark}?{ws1}copy(?:right|left)"
            f"(?:{ws0}{mark})?{ws1}" + dated_owner() + ")"
        )
        alternatives.append(f"{first}{repeat}{{0,5}}")

        words = "|".join(p.body for p in self._contract_words)
        alternatives.append(
            f"(?:\\b|{OPEN_QUOTE})(?:{words})(?:{WS}(?:{words})){{0,{r}}}"
            f"(?:\\b|[,.;:{CLOSE_QUOTE_CHARS}])"
        )
        return "|".join(f"(?:{alt})" for alt in alternatives)

    # ── Classification ─────────────────────────────────────────────────

    def _is_excluded(self, text: str) -> bool:
        return any(p.search(text) for p in self._exclusions)

    def _known_license(self, text: str) -> PartyType | None:
        if any(p.matches(text) for p in self._forbidden_licenses):
            return PartyType.FORBIDDEN
        if any(p.matches(text) for p in self._third_party_licenses):
            return PartyType.THIRD_PARTY
        if any(p.matches(text) for p in self._first_party_licenses):
            return PartyType.FIRST_PARTY
        return None

    def _known_owner(self, owner: str) -> PartyType | None:
        if not owner:
            return None
        if any(p.matches(owner) for p in self._forbidden_owners):
            return PartyType.FORBIDDEN
        if any(p.matches(owner) for p in self._third_party_owners):
            return PartyType.THIRD_PARTY
        if any(p.matches(owner) for p in self._first_party_owners):
            return PartyType.FIRST_PARTY
        return None

    def classify(self, text: str, slot: Slot) -> tuple[PartyType, MatchType]:
        """Classify normalized capture ``text`` found in ``slot``."""
        party = self._known_license(text)
        if party is not None:
            return party, MatchType.LICENSE
        lowered = text.lower()
        if slot.is_license or "license" in lowered or "licence" in lowered:
            return PartyType.UNKNOWN, MatchType.LICENSE
        party = self._known_owner(normalize_owner(text))
        return party or PartyType.THIRD_PARTY, MatchType.AUTHOR_OWNER

    # ── Scanning ───────────────────────────────────────────────────────

    def find_matches(self, reader: IndexedLineReader, size: int = -1) -> list[Match]:
        """Scan the first window of ``reader`` and return findings in order."""
        if size < 1 or size > self.max_search_length:
            size = self.max_search_length
        text = reader.read(size)

        results: list[Match] = []
        unknowns = _UnknownFragments(self.match_threshold)
        num_licenses = 0
        num_known = 0
        for m in self.pattern.finditer(text):
            whole = normalize_text(m.group())
            num_built = 0
            for index in range(1, self.pattern.groups + 1):
                captured = m.group(index)
                if not captured:
                    continue
                found = normalize_text(captured)
                if not found or self._is_excluded(found):
                    continue
                party, kind = self.classify(found, self.slot_for_group[index])
                start, end = m.span(index)
                results.append(Match(
                    party, kind, whole,
                    reader.line_number(start), reader.line_number(end),
                    start, end,
                ))
                num_built += 1
                if kind is MatchType.LICENSE:
                    num_licenses += 1
                if party is not PartyType.UNKNOWN:
                    num_known += 1

            if num_built == 0 and num_licenses == 0 and unknowns.count <= self.match_threshold:
                if RE_NEGATED.match(whole) or self._is_excluded(whole):
                    continue
                start_line = reader.line_number(m.start())
                end_line = reader.line_number(m.end())
                kind = MatchType.LICENSE
                party = self._known_license(whole)
                if party is None:
                    kind = MatchType.AUTHOR_OWNER
                    party = self._known_owner(normalize_owner(whole))
                if party is None:
                    unknowns.add(whole, start_line, end_line, m.start(), m.end())
                    continue
                results.append(Match(
                    party, kind, whole, start_line, end_line, m.start(), m.end(),
                ))
                num_known += 1

            if num_known >= self.match_threshold:
                logger.debug(
                    "%s: stopping after %d known matches at offset %d",
                    reader.name, num_known, m.end(),
                )
                break

        if num_licenses == 0:
            results.extend(unknowns.matches())
        logger.debug("%s: %d matches", reader.name, len(results))
        return results

    def scan_bytes(self, data: bytes, name: str = "<bytes>") -> list[Match]:
        with IndexedLineReader(name, io.BytesIO(data), len(data)) as reader:
            return self.find_matches(reader, len(data))

    def scan_path(self, path: Path) -> list[Match]:
        size = path.stat().st_size
        with IndexedLineReader(str(path), path.open("rb"), size) as reader:
            return self.find_matches(reader, size)

"""Simplified pattern language for license and owner rules.

Rule authors write patterns as if a single space separated every word; the
compiler widens them into bounded regular expressions that tolerate comment
decoration, line breaks and punctuation between words:

* literal whitespace followed by ``?`` -> ``WS{0,S}``
* any other literal whitespace run     -> ``WS{1,S}``
* embedded ``.*`` / ``.+``             -> at most ``R`` bounded words
* leading / trailing ``.*`` / ``.+``   -> dropped from the inline form and
  remembered, so the whole-match form can put them back

Capturing groups are forbidden: the composite scanner owns every capture.
Character classes may not contain literal whitespace, since that whitespace
would never be widened.

Only stdlib ``re`` syntax is produced. Unicode property classes are spelled
with ``\\w`` / ``\\d`` arithmetic (``[^\\W\\d_]`` is a letter).
"""
from __future__ import annotations

import re
from dataclasses import dataclass

# ── Limits ──────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PatternLimits:
    """Repetition bounds shared by every compiled expression."""

    name_length: int = 30
    name_repetition: int = 35
    space_length: int = 47
    date_repetition: int = 30


DEFAULT_LIMITS = PatternLimits()

FLAGS = re.IGNORECASE | re.MULTILINE | re.DOTALL

# ── Vocabulary ──────────────────────────────────────────────────────────
# Comment decoration counts as whitespace: * / # · § soft-hyphen ¶ nbsp.

WS = r"[\s*/#\u00b7\u00a7\u00ad\u00b6\u00a0]"
WSPCT = r"[-,;.\s*/#\u00b7\u00a7\u00ad\u00b6\u00a0]"

LETTER = r"[^\W\d_]"
ALNUM = r"[^\W_]"
NAME_CHAR = r"[-\w]"
EMAIL_CHAR = r"[-.\w]"
URL_CHAR = r"[-.\w=%+]"
ANY_CHAR = r"[-.,\w]"

UPPER_CHAR = r"[A-Z\u00c0-\u00d6\u00d8-\u00de\u0391-\u03a9\u0410-\u042f]"
LOWER_CHAR = r"[a-z\u00df-\u00f6\u00f8-\u00ff\u03b1-\u03c9\u0430-\u044f]"

OPEN_QUOTE_CHARS = r"\u00ab\u2018\u201b\u201c\u201f\u2039\u2e02\u2e04\u2e09\u2e0c\u2e1c\u2e20"
CLOSE_QUOTE_CHARS = r"\u00bb\u2019\u201d\u203a\u2e03\u2e05\u2e0a\u2e0d\u2e1d\u2e21"
OPEN_QUOTE = f"[{OPEN_QUOTE_CHARS}]"
CLOSE_QUOTE = f"[{CLOSE_QUOTE_CHARS}]"
NOT_CLOSE_QUOTE = f"[^{CLOSE_QUOTE_CHARS}]"


def url_expr(limits: PatternLimits = DEFAULT_LIMITS) -> str:
    n = limits.name_length
    return (
        f"https?[:]/(?:[/?&]{URL_CHAR}{{1,{n}}}){{1,25}}"
        f"|www[.]{URL_CHAR}{{1,{n}}}"
        f"(?:[.]com|[.]net|[.]org|[.]{LETTER}{LETTER})"
        f"(?:[/?&#]{URL_CHAR}{{0,{n}}}){{0,25}}"
    )


def name_expr(limits: PatternLimits = DEFAULT_LIMITS) -> str:
    """One owner-name token: URL, word, email, dotted number, quote, initials."""
    n = limits.name_length
    alternatives = [
        url_expr(limits),
        f"{ALNUM}{NAME_CHAR}{{0,{n}}}\\b",
        f"[<]?{ALNUM}{EMAIL_CHAR}{{1,{n}}}@{ALNUM}{EMAIL_CHAR}{{1,{n}}}\\b[>]?",
        r"\b\d{1,2}(?:[.]\d{1,2}){1,5}\b",
        f"{OPEN_QUOTE}{NOT_CLOSE_QUOTE}{{0,65}}{CLOSE_QUOTE}",
        f"(?-i:{UPPER_CHAR}[-.]){{1,5}}",
        f"{EMAIL_CHAR}{{1,{n}}}(?:[.]com|[.]org|[.]net|[.]{LETTER}{LETTER})",
    ]
    return "(?:(?:" + "|".join(alternatives) + ")[,;:]?)"


def upper_name_expr(limits: PatternLimits = DEFAULT_LIMITS) -> str:
    return f"(?-i:\\b{UPPER_CHAR}{{1,{limits.name_length}}})"


def proper_name_expr(limits: PatternLimits = DEFAULT_LIMITS) -> str:
    return f"(?-i:\\b{UPPER_CHAR}{LOWER_CHAR}{{0,{limits.name_length}}})"


def any_word_expr(limits: PatternLimits = DEFAULT_LIMITS) -> str:
    return f"(?:{ANY_CHAR}{{1,{limits.name_length}}})"


def space_expr(minimum: int, limits: PatternLimits = DEFAULT_LIMITS) -> str:
    return f"{WS}{{{minimum},{limits.space_length}}}"


def wildcard_expr(minimum: int, limits: PatternLimits = DEFAULT_LIMITS) -> str:
    """Stand-in for an embedded ``.*`` (minimum 0) or ``.+`` (minimum 1)."""
    return (
        f"(?:{space_expr(1, limits)}{ANY_CHAR}{{1,{limits.name_length}}})"
        f"{{{minimum},{limits.name_repetition}}}{space_expr(0, limits)}"
    )


# ── Validation ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PatternIssue:
    """A structured problem found in a rule pattern."""

    message: str
    position: int
    pattern: str
    field: str = ""


class PatternError(ValueError):
    """A rule pattern that cannot be compiled."""

    def __init__(self, message: str, pattern: str, position: int = 0) -> None:
        super().__init__(message)
        self.pattern = pattern
        self.position = position


RE_WILDCARD_ONLY: re.Pattern[str] = re.compile(r"\s*(?:\.[*+]\s*)+")


def check_pattern(pattern: str) -> list[PatternIssue]:
    """Return every structural problem in ``pattern`` (empty list when fine)."""
    if not pattern or pattern.isspace():
        return [PatternIssue("Non-empty pattern required.", 0, pattern)]
    if RE_WILDCARD_ONLY.fullmatch(pattern):
        return [PatternIssue(
            f"Pattern /{pattern}/ matches everything.", 0, pattern,
        )]

    issues: list[PatternIssue] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "[":
            start = i
            i += 1
            if i < n and pattern[i] == "^":
                i += 1
            if i < n and pattern[i] == "]":
                i += 1
            has_space = False
            while i < n and pattern[i] != "]":
                if pattern[i] == "\\":
                    i += 2
                    continue
                if pattern[i].isspace():
                    has_space = True
                i += 1
            if i >= n:
                issues.append(PatternIssue(
                    f"Unterminated character class in /{pattern}/.",
                    start, pattern,
                ))
                break
            if has_space:
                issues.append(PatternIssue(
                    f"Character class with space in /{pattern}/. "
                    "Use (?: |...) instead of space in [...].",
                    start, pattern,
                ))
            i += 1
            continue
        if c == "(" and (
            not pattern.startswith("?", i + 1)
            or pattern.startswith("?P<", i + 1)
        ):
            issues.append(PatternIssue(
                f"Capturing group found in /{pattern}/. "
                "Use non-capturing (?:...) instead of (...).",
                i, pattern,
            ))
        i += 1
    return issues


# ── Compilation ─────────────────────────────────────────────────────────

RE_EMBEDDED_WILDCARD: re.Pattern[str] = re.compile(r"\s*(?<!\\)\.([*+])\s*")
RE_OPTIONAL_SPACE: re.Pattern[str] = re.compile(r"\s+\?")
RE_SPACE_RUN: re.Pattern[str] = re.compile(r"\s+")

_LOOSE_EDGES = (".*", ".+")


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A rule pattern widened into a bounded regular expression.

    ``body`` is the inline form used inside the composite scanner;
    ``regex`` anchors it for whole-text matching with ``.*`` restored at
    the loose edges.
    """

    source: str
    body: str
    loose_start: bool
    loose_end: bool
    regex: re.Pattern[str]

    def matches(self, text: str) -> bool:
        return self.regex.fullmatch(text) is not None


def _class_segments(pattern: str) -> list[tuple[str, bool]]:
    """Split ``pattern`` into ``(text, is_character_class)`` runs.

    Assumes ``check_pattern`` passed, so every class is terminated.
    """
    segments: list[tuple[str, bool]] = []
    start = i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c != "[":
            i += 1
            continue
        end = i + 1
        if end < n and pattern[end] == "^":
            end += 1
        if end < n and pattern[end] == "]":
            end += 1
        while end < n and pattern[end] != "]":
            end += 2 if pattern[end] == "\\" else 1
        end += 1
        segments.append((pattern[start:i], False))
        segments.append((pattern[i:end], True))
        start = i = end
    segments.append((pattern[start:], False))
    return segments


def _widen_wildcards(body: str, limits: PatternLimits) -> str:
    """Replace embedded ``.*`` / ``.+`` outside character classes."""
    return "".join(
        text if in_class else RE_EMBEDDED_WILDCARD.sub(
            lambda m: wildcard_expr(1 if m.group(1) == "+" else 0, limits), text,
        )
        for text, in_class in _class_segments(body)
    )


def _loose_end(pattern: str) -> bool:
    return pattern.endswith(_LOOSE_EDGES) and not pattern.endswith(
        ("\\.*", "\\.+")
    )


def compile_pattern(
    pattern: str, limits: PatternLimits = DEFAULT_LIMITS,
) -> CompiledPattern:
    """Widen ``pattern`` and compile it; raise ``PatternError`` when invalid."""
    issues = check_pattern(pattern)
    if issues:
        raise PatternError(issues[0].message, pattern, issues[0].position)

    loose_start = pattern.startswith(_LOOSE_EDGES)
    loose_end = _loose_end(pattern)
    body = pattern[2:] if loose_start else pattern
    if loose_end:
        body = body[:-2]

    body = _widen_wildcards(body, limits)
    body = RE_OPTIONAL_SPACE.sub(lambda m: space_expr(0, limits), body)
    body = RE_SPACE_RUN.sub(lambda m: space_expr(1, limits), body)

    whole = ("(?:.*)" if loose_start else "") + f"(?:{body})"
    whole += "(?:.*)" if loose_end else ""
    try:
        regex = re.compile(whole, FLAGS)
    except re.error as exc:
        raise PatternError(
            f"Invalid pattern /{pattern}/: {exc.msg}", pattern, exc.pos or 0,
        ) from exc
    return CompiledPattern(
        source=pattern,
        body=body,
        loose_start=loose_start,
        loose_end=loose_end,
        regex=regex,
    )

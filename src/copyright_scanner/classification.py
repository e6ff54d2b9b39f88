"""Fold per-finding classifications into one verdict for a file."""
from __future__ import annotations

from collections.abc import Iterable

from copyright_scanner.scanner import Match, MatchType, PartyType

# Higher rank wins when findings disagree.
PARTY_RANK: dict[PartyType, int] = {
    PartyType.FIRST_PARTY: 0,
    PartyType.THIRD_PARTY: 1,
    PartyType.UNKNOWN: 2,
    PartyType.FORBIDDEN: 3,
}


def party_type(matches: Iterable[Match]) -> PartyType:
    """Overall party of a file from its findings.

    A third-party owner alone does not make a file third party, and a
    first-party license alone does not lower anything: a file that carries
    the project's own license may credit outside authors. Every other finding
    raises the verdict to its own rank. A file whose only signals are
    third-party owners with no first-party license is third party.
    """
    overall = PartyType.FIRST_PARTY
    has_third_party_owner = False
    has_first_party_license = False
    for m in matches:
        if m.party_type is PartyType.THIRD_PARTY and m.match_type is MatchType.AUTHOR_OWNER:
            has_third_party_owner = True
        elif m.party_type is PartyType.FIRST_PARTY and m.match_type is MatchType.LICENSE:
            has_first_party_license = True
        elif PARTY_RANK[m.party_type] > PARTY_RANK[overall]:
            overall = m.party_type
    if (
        overall is PartyType.FIRST_PARTY
        and has_third_party_owner
        and not has_first_party_license
    ):
        return PartyType.THIRD_PARTY
    return overall


def finding_allowed(
    match: Match, overall: PartyType, third_party_allowed: bool,
) -> bool:
    """Whether a single finding is acceptable for the project."""
    if match.party_type is PartyType.FIRST_PARTY:
        return True
    if match.party_type is not PartyType.THIRD_PARTY:
        return False
    if third_party_allowed:
        return True
    return match.match_type is MatchType.AUTHOR_OWNER and overall is PartyType.FIRST_PARTY


def file_allowed(
    matches: Iterable[Match], third_party_allowed: bool,
) -> tuple[PartyType, bool]:
    """Overall party of a file and whether every finding in it is allowed."""
    matches = list(matches)
    overall = party_type(matches)
    allowed = all(finding_allowed(m, overall, third_party_allowed) for m in matches)
    return overall, allowed

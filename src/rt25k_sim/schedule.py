from __future__ import annotations

from itertools import combinations
from typing import Iterable

from .models import Match


def round_robin_pairs(team_names: Iterable[str]) -> list[tuple[str, str]]:
    """Every unordered pairing exactly once, ordered lexicographically by team name."""
    names = sorted(set(team_names))
    if len(names) < 2:
        return []
    return list(combinations(names, 2))


def completed_pairings(matches: Iterable[Match]) -> set[frozenset[str]]:
    return {match.pairing for match in matches if match.is_completed}


def pending_by_pairing(matches: Iterable[Match]) -> dict[frozenset[str], Match]:
    return {match.pairing: match for match in matches if not match.is_completed}


def unplayed_pairs(team_names: Iterable[str], matches: Iterable[Match]) -> list[tuple[str, str]]:
    played = completed_pairings(matches)
    return [pair for pair in round_robin_pairs(team_names) if frozenset(pair) not in played]


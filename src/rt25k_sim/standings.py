"""Per-group standings aggregation and the tie-break cascade.

Rows are folded one series at a time. Ordering inside a group is decided by:

1. total points;
2. head-to-head series wins against the other teams still tied;
3. point differential (games won minus games lost);
4. a random draw from the injected generator.

Steps 2 and 3 are re-applied from step 2 whenever they split a tie into a
smaller tied subset, so head-to-head always counts only the teams that are
still level.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Iterable

from .config import DEFAULT_CONFIG, SimulationConfig
from .engine import series_points
from .errors import InvalidMatchError, SimulationStateError, UnknownTeamError
from .models import Match, StandingRow, TeamProfile

logger = logging.getLogger(__name__)


class StandingsTable:
    def __init__(self, profiles: dict[str, TeamProfile], config: SimulationConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._rows: dict[str, StandingRow] = {}
        self._groups: dict[str, list[str]] = {}
        for name in sorted(profiles):
            profile = profiles[name]
            self._rows[name] = StandingRow(team=name, group=profile.group)
            self._groups.setdefault(profile.group, []).append(name)

    @property
    def groups(self) -> list[str]:
        return sorted(self._groups)

    def row(self, team_name: str) -> StandingRow:
        row = self._rows.get(team_name)
        if row is None:
            raise UnknownTeamError(team_name, "standings")
        return row

    def group_rows(self, group: str) -> list[StandingRow]:
        names = self._groups.get(group)
        if not names:
            raise SimulationStateError(f"Group '{group}' has no teams.")
        return [self._rows[name] for name in names]

    def record(
        self,
        team1: str,
        team2: str,
        score1: int,
        score2: int,
        best_of: int | None = None,
    ) -> tuple[int, int]:
        """Fold one finished series into both rows and return the points awarded."""
        if score1 == score2:
            raise SimulationStateError(f"Series {team1} vs {team2} has no winner ({score1}-{score2}).")
        row1 = self.row(team1)
        row2 = self.row(team2)
        if row1.group != row2.group:
            raise InvalidMatchError(f"{team1} ({row1.group}) and {team2} ({row2.group}) are in different groups.")

        points1, points2 = series_points(score1, score2, best_of, self.config)
        row1.points += points1
        row2.points += points2
        row1.round_wins += score1
        row1.round_losses += score2
        row2.round_wins += score2
        row2.round_losses += score1

        winner, loser = (row1, row2) if score1 > score2 else (row2, row1)
        winner.wins += 1
        loser.losses += 1
        winner.head_to_head[loser.team] = winner.head_to_head.get(loser.team, 0) + 1
        loser.head_to_head.setdefault(winner.team, 0)
        return points1, points2

    def update_standings(self, match: Match) -> tuple[int, int]:
        if not match.is_completed:
            raise SimulationStateError(f"Cannot fold pending match {match.team1} vs {match.team2} into standings.")
        return self.record(match.team1, match.team2, match.games1, match.games2, match.best_of)

    def incomplete_teams(self) -> list[str]:
        """Teams that have not met every other team in their group exactly once."""
        missing: list[str] = []
        for names in self._groups.values():
            expected = len(names) - 1
            missing.extend(name for name in names if self._rows[name].series_played != expected)
        return sorted(missing)

    def final_standings(self, rng: random.Random | None = None) -> dict[str, list[StandingRow]]:
        rng = rng or random.Random()
        return {group: rank_group(self.group_rows(group), rng) for group in self.groups}


def _partition(rows: Iterable[StandingRow], key: Callable[[StandingRow], float]) -> list[list[StandingRow]]:
    buckets: dict[float, list[StandingRow]] = {}
    for row in rows:
        buckets.setdefault(key(row), []).append(row)
    return [buckets[value] for value in sorted(buckets, reverse=True)]


def _break_tie(tied: list[StandingRow], draws: dict[str, float]) -> list[StandingRow]:
    if len(tied) < 2:
        return list(tied)

    still_tied = frozenset(row.team for row in tied)
    by_head_to_head = _partition(tied, lambda row: row.head_to_head_wins(still_tied))
    if len(by_head_to_head) > 1:
        return [row for subset in by_head_to_head for row in _break_tie(subset, draws)]

    by_differential = _partition(tied, lambda row: row.point_differential)
    if len(by_differential) > 1:
        return [row for subset in by_differential for row in _break_tie(subset, draws)]

    logger.debug("Random draw between %s", ", ".join(sorted(still_tied)))
    return sorted(tied, key=lambda row: draws[row.team], reverse=True)


def rank_group(rows: Iterable[StandingRow], rng: random.Random | None = None) -> list[StandingRow]:
    rng = rng or random.Random()
    ordered = sorted(rows, key=lambda row: row.team)
    # One draw per team in name order, tied or not.
    draws = {row.team: rng.random() for row in ordered}
    ranked: list[StandingRow] = []
    for level in _partition(ordered, lambda row: row.points):
        ranked.extend(_break_tie(level, draws))
    return ranked

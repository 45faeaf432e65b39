from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import ACTIVITY_TIER_WEIGHTS, DEFAULT_CONFIG, DEFAULT_GROUP, SimulationConfig, wins_needed


@dataclass(slots=True)
class TeamProfile:
    name: str
    group: str = DEFAULT_GROUP
    base_points: float = 0.0
    games_played: int = 0
    config: SimulationConfig = field(default=DEFAULT_CONFIG, repr=False, compare=False)

    @property
    def power(self) -> float:
        return max(self.config.min_power, self.base_points * self.config.base_power_multiplier)

    @property
    def activity(self) -> float:
        return min(max(0, self.games_played) / self.config.games_for_saturation, 1.0)

    @property
    def activity_tier(self) -> str:
        if self.games_played >= self.config.active_min_games:
            return "active"
        if self.games_played >= self.config.partial_min_games:
            return "partial"
        return "inactive"

    @property
    def activity_multiplier(self) -> float:
        tier_weight = ACTIVITY_TIER_WEIGHTS[self.activity_tier]
        return 1.0 + self.activity * tier_weight * self.config.boost_factor

    @property
    def adjusted_power(self) -> float:
        return self.power * self.activity_multiplier

    def register_series(self, points: float, games: int) -> None:
        self.base_points += max(0.0, points)
        self.games_played += max(0, games)

    def summary(self) -> dict[str, Any]:
        return {
            "team": self.name,
            "group": self.group,
            "points": self.base_points,
            "gamesPlayed": self.games_played,
            "power": round(self.power, 4),
            "activity": round(self.activity, 4),
            "activityTier": self.activity_tier,
            "activityMultiplier": round(self.activity_multiplier, 4),
            "adjustedPower": round(self.adjusted_power, 4),
        }


class MatchStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"


@dataclass(slots=True)
class Match:
    team1: str
    team2: str
    games1: int = 0
    games2: int = 0
    best_of: int = DEFAULT_CONFIG.best_of
    status: MatchStatus = MatchStatus.PENDING
    winner: str | None = None
    group: str | None = None

    @property
    def wins_needed(self) -> int:
        return wins_needed(self.best_of)

    @property
    def is_completed(self) -> bool:
        return self.status is MatchStatus.COMPLETED

    @property
    def started(self) -> bool:
        return self.games1 > 0 or self.games2 > 0

    @property
    def pairing(self) -> frozenset[str]:
        return frozenset((self.team1, self.team2))

    @property
    def loser(self) -> str | None:
        if self.winner is None:
            return None
        return self.team2 if self.winner == self.team1 else self.team1


@dataclass(slots=True)
class StandingRow:
    team: str
    group: str = DEFAULT_GROUP
    points: int = 0
    wins: int = 0
    losses: int = 0
    round_wins: int = 0
    round_losses: int = 0
    head_to_head: dict[str, int] = field(default_factory=dict)

    @property
    def point_differential(self) -> int:
        return self.round_wins - self.round_losses

    @property
    def series_played(self) -> int:
        return self.wins + self.losses

    def head_to_head_wins(self, opponents: set[str] | frozenset[str]) -> int:
        return sum(self.head_to_head.get(name, 0) for name in opponents if name != self.team)

    def to_dict(self) -> dict[str, Any]:
        return {
            "team": self.team,
            "group": self.group,
            "points": self.points,
            "wins": self.wins,
            "losses": self.losses,
            "roundWins": self.round_wins,
            "roundLosses": self.round_losses,
            "pointDifferential": self.point_differential,
            "headToHead": dict(self.head_to_head),
        }


@dataclass(slots=True)
class SeriesResult:
    team_a: str
    team_b: str
    score_a: int
    score_b: int
    games: list[str] = field(default_factory=list)

    @property
    def winner(self) -> str:
        return self.team_a if self.score_a > self.score_b else self.team_b


@dataclass(slots=True)
class SimulatedSeries:
    team1: str
    team2: str
    group: str
    score1: int
    score2: int
    points1: int
    points2: int
    games: list[str] = field(default_factory=list)

    @property
    def winner(self) -> str:
        return self.team1 if self.score1 > self.score2 else self.team2

    @property
    def loser(self) -> str:
        return self.team2 if self.score1 > self.score2 else self.team1

    @property
    def is_sweep(self) -> bool:
        return min(self.score1, self.score2) == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "team1": self.team1,
            "team2": self.team2,
            "group": self.group,
            "score1": self.score1,
            "score2": self.score2,
            "points1": self.points1,
            "points2": self.points2,
            "winner": self.winner,
            "isSweep": self.is_sweep,
            "games": list(self.games),
        }


@dataclass(slots=True)
class SimulationOutcome:
    standings: dict[str, list[StandingRow]]
    simulated_matches: list[SimulatedSeries]
    seed: int | None = None

    def position_of(self, team_name: str) -> int | None:
        for rows in self.standings.values():
            for idx, row in enumerate(rows, start=1):
                if row.team == team_name:
                    return idx
        return None

    def row_for(self, team_name: str) -> StandingRow | None:
        for rows in self.standings.values():
            for row in rows:
                if row.team == team_name:
                    return row
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "seed": self.seed,
            "standings": {
                group: [dict(row.to_dict(), position=idx) for idx, row in enumerate(rows, start=1)]
                for group, rows in self.standings.items()
            },
            "simulatedMatches": [series.to_dict() for series in self.simulated_matches],
        }


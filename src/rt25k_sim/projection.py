from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_CONFIG, DEFAULT_SIMULATION_RUNS, MAX_SIMULATION_RUNS, SimulationConfig
from .league import LeagueSimulator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TeamProjection:
    team: str
    group: str
    total_points: float = 0.0
    total_wins: int = 0
    total_losses: int = 0
    total_position: int = 0
    first_places: int = 0
    runs: int = 0

    @property
    def avg_points(self) -> float:
        return self.total_points / self.runs if self.runs else 0.0

    @property
    def avg_wins(self) -> float:
        return self.total_wins / self.runs if self.runs else 0.0

    @property
    def avg_losses(self) -> float:
        return self.total_losses / self.runs if self.runs else 0.0

    @property
    def avg_position(self) -> float:
        return self.total_position / self.runs if self.runs else 0.0

    @property
    def first_place_pct(self) -> float:
        return self.first_places / self.runs if self.runs else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "team": self.team,
            "group": self.group,
            "avgPoints": round(self.avg_points, 1),
            "avgWins": round(self.avg_wins, 2),
            "avgLosses": round(self.avg_losses, 2),
            "avgPosition": round(self.avg_position, 2),
            "firstPlacePct": round(self.first_place_pct, 4),
        }


@dataclass(slots=True)
class SeriesProjection:
    team1: str
    team2: str
    total_score1: int = 0
    total_score2: int = 0
    total_points1: int = 0
    total_points2: int = 0
    team1_wins: int = 0
    runs: int = 0

    @property
    def avg_score1(self) -> float:
        return self.total_score1 / self.runs if self.runs else 0.0

    @property
    def avg_score2(self) -> float:
        return self.total_score2 / self.runs if self.runs else 0.0

    @property
    def avg_points1(self) -> float:
        return self.total_points1 / self.runs if self.runs else 0.0

    @property
    def avg_points2(self) -> float:
        return self.total_points2 / self.runs if self.runs else 0.0

    @property
    def team1_win_pct(self) -> float:
        return self.team1_wins / self.runs if self.runs else 0.0

    def involves(self, team_name: str) -> bool:
        return team_name in (self.team1, self.team2)

    def to_dict(self) -> dict[str, Any]:
        return {
            "team1": self.team1,
            "team2": self.team2,
            "avgScore1": round(self.avg_score1, 2),
            "avgScore2": round(self.avg_score2, 2),
            "avgPoints1": round(self.avg_points1, 1),
            "avgPoints2": round(self.avg_points2, 1),
            "team1WinPct": round(self.team1_win_pct, 4),
            "runs": self.runs,
        }


@dataclass(slots=True)
class ProjectionReport:
    runs: int
    seed: int | None
    standings: dict[str, list[TeamProjection]] = field(default_factory=dict)
    series: list[SeriesProjection] = field(default_factory=list)

    def team(self, team_name: str) -> TeamProjection | None:
        for rows in self.standings.values():
            for row in rows:
                if row.team == team_name:
                    return row
        return None

    def for_team(self, team_name: str) -> list[SeriesProjection]:
        return [series for series in self.series if series.involves(team_name)]

    def to_dict(self, team_name: str | None = None) -> dict[str, Any]:
        series = self.for_team(team_name) if team_name else self.series
        return {
            "runs": self.runs,
            "seed": self.seed,
            "standings": {group: [row.to_dict() for row in rows] for group, rows in self.standings.items()},
            "simulatedMatches": [item.to_dict() for item in series],
        }


def project_standings(
    standings_rows: list[Any] | None,
    schedule_rows: list[Any] | None,
    runs: int = DEFAULT_SIMULATION_RUNS,
    seed: int | None = None,
    config: SimulationConfig | None = None,
    ignore_unknown_teams: bool = False,
) -> ProjectionReport:
    """Average ``runs`` independent simulations, each on a fresh simulator."""
    if runs < 1 or runs > MAX_SIMULATION_RUNS:
        raise ValueError(f"runs must be between 1 and {MAX_SIMULATION_RUNS}, got {runs}.")
    config = config or DEFAULT_CONFIG
    master = random.Random(seed)

    teams: dict[str, TeamProjection] = {}
    series: dict[tuple[str, str], SeriesProjection] = {}
    for run_idx in range(runs):
        run_seed = master.getrandbits(32)
        simulator = LeagueSimulator(
            standings_rows,
            schedule_rows,
            seed=run_seed,
            config=config,
            ignore_unknown_teams=ignore_unknown_teams,
        )
        outcome = simulator.run()
        for group, rows in outcome.standings.items():
            for position, row in enumerate(rows, start=1):
                projection = teams.setdefault(row.team, TeamProjection(team=row.team, group=group))
                projection.total_points += row.points
                projection.total_wins += row.wins
                projection.total_losses += row.losses
                projection.total_position += position
                projection.first_places += 1 if position == 1 else 0
                projection.runs += 1
        for item in outcome.simulated_matches:
            entry = series.setdefault((item.team1, item.team2), SeriesProjection(team1=item.team1, team2=item.team2))
            entry.total_score1 += item.score1
            entry.total_score2 += item.score2
            entry.total_points1 += item.points1
            entry.total_points2 += item.points2
            entry.team1_wins += 1 if item.winner == item.team1 else 0
            entry.runs += 1
        logger.debug("Projection run %d/%d finished (seed %d).", run_idx + 1, runs, run_seed)

    grouped: dict[str, list[TeamProjection]] = {}
    for projection in teams.values():
        grouped.setdefault(projection.group, []).append(projection)
    report = ProjectionReport(runs=runs, seed=seed)
    for group in sorted(grouped):
        report.standings[group] = sorted(
            grouped[group],
            key=lambda p: (-p.avg_points, p.avg_position, p.team),
        )
    report.series = list(series.values())
    logger.info("Projection complete: %d runs, %d teams, %d series.", runs, len(teams), len(series))
    return report

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Sequence

from .config import DEFAULT_BEST_OF, DEFAULT_SIMULATION_RUNS, STANDINGS_NOTE, SimulationConfig
from .errors import SimulationError
from .league import LeagueSimulator
from .models import SimulatedSeries, SimulationOutcome
from .projection import ProjectionReport, project_standings

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    root = logging.getLogger("rt25k_sim")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)
    root.setLevel(level)
    return root


def format_standings(outcome: SimulationOutcome) -> str:
    lines: list[str] = []
    for group, rows in outcome.standings.items():
        if lines:
            lines.append("")
        lines.append(f"[{group}]")
        lines.append("Pos Team                   Pts  W  L  RW  RL  Diff")
        for idx, row in enumerate(rows, start=1):
            lines.append(
                f"{idx:>3} {row.team:<20} {row.points:>5} {row.wins:>2} {row.losses:>2}"
                f" {row.round_wins:>3} {row.round_losses:>3} {row.point_differential:>5}"
            )
    return "\n".join(lines)


def format_simulated_matches(matches: Iterable[SimulatedSeries], team: str | None = None) -> str:
    lines = ["Simulated series"]
    for series in matches:
        if team and team not in (series.team1, series.team2):
            continue
        sweep = " (sweep)" if series.is_sweep else ""
        lines.append(
            f"{series.team1:<20} {series.score1}-{series.score2} {series.team2:<20}"
            f" [{series.points1}-{series.points2} pts]{sweep}"
        )
    if len(lines) == 1:
        lines.append("(none)")
    return "\n".join(lines)


def format_team_summary(simulator: LeagueSimulator, outcome: SimulationOutcome, team: str) -> str:
    row = outcome.row_for(team)
    profile = simulator.get_profile(team)
    if row is None or profile is None:
        return f"{team}: not in standings"
    return (
        f"{team}: #{outcome.position_of(team)} in {row.group} with {row.points} pts"
        f" ({row.wins}-{row.losses}), adjusted power {profile.adjusted_power:.2f}"
    )


def format_power_table(power_rows: Sequence[dict[str, Any]]) -> str:
    lines = ["Team                   Power  Games Tier      Mult   Final"]
    for row in power_rows:
        lines.append(
            f"{row['team']:<20} {row['power']:>7.2f} {row['gamesPlayed']:>6} {row['activityTier']:<8}"
            f" x{row['activityMultiplier']:.2f} {row['adjustedPower']:>7.2f}"
        )
    return "\n".join(lines)


def format_projection(report: ProjectionReport, team: str | None = None) -> str:
    lines = [f"Projected standings ({report.runs} runs)"]
    for group, rows in report.standings.items():
        lines.append("")
        lines.append(f"[{group}]")
        lines.append("Pos Team                  AvgPts  AvgW  AvgL  AvgPos  1st%")
        for idx, row in enumerate(rows, start=1):
            lines.append(
                f"{idx:>3} {row.team:<20} {row.avg_points:>7.1f} {row.avg_wins:>5.2f} {row.avg_losses:>5.2f}"
                f" {row.avg_position:>7.2f} {row.first_place_pct * 100:>5.1f}"
            )
    series = report.for_team(team) if team else report.series
    lines.append("")
    lines.append("Projected series")
    for item in series:
        lines.append(
            f"{item.team1:<20} {item.avg_score1:.2f}-{item.avg_score2:.2f} {item.team2:<20}"
            f" [{item.avg_points1:.1f}-{item.avg_points2:.1f} pts, {item.team1_win_pct * 100:.0f}% {item.team1}]"
        )
    return "\n".join(lines)


def _load_rows(path: str, key: str) -> list[Any]:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get(key)
    if not isinstance(payload, list):
        raise ValueError(f"{path} does not contain a list of {key} rows.")
    return payload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rt25k-sim",
        description="Simulate the remaining RT25K round-robin series and project final standings.",
        epilog=STANDINGS_NOTE,
    )
    parser.add_argument("standings", help="JSON file with standings rows")
    parser.add_argument("schedule", nargs="?", help="JSON file with schedule rows")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--runs", type=int, default=1, help=f"average several runs (the bot used {DEFAULT_SIMULATION_RUNS})")
    parser.add_argument("--best-of", type=int, default=DEFAULT_BEST_OF)
    parser.add_argument("--team", default=None, help="only list series involving this team and print its final position")
    parser.add_argument("--ignore-unknown-teams", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        config = SimulationConfig(best_of=args.best_of)
        standings = _load_rows(args.standings, "standings")
        schedule = _load_rows(args.schedule, "schedule") if args.schedule else []
        if args.runs > 1:
            report = project_standings(
                standings,
                schedule,
                runs=args.runs,
                seed=args.seed,
                config=config,
                ignore_unknown_teams=args.ignore_unknown_teams,
            )
            print(format_projection(report, team=args.team))
            return 0
        simulator = LeagueSimulator(
            standings,
            schedule,
            seed=args.seed,
            config=config,
            ignore_unknown_teams=args.ignore_unknown_teams,
        )
        print(format_power_table(simulator.power_table()))
        print()
        outcome = simulator.run()
        print(format_simulated_matches(outcome.simulated_matches, team=args.team))
        print()
        print(format_standings(outcome))
        if args.team:
            print()
            print(format_team_summary(simulator, outcome, args.team))
    except (OSError, json.JSONDecodeError, ValueError, SimulationError) as exc:
        logger.debug("Simulation failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

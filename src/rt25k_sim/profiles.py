from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from .config import DEFAULT_CONFIG, DEFAULT_GROUP, SimulationConfig
from .models import Match, TeamProfile
from .rows import read_field, read_text, to_float, to_non_negative_int

logger = logging.getLogger(__name__)

TEAM_KEYS = ("team", "name", "Team", "Team Name", "Teams")
GROUP_KEYS = ("group", "Group")
POINTS_KEYS = ("points", "total_points", "totalPoints", "Total Points", "Points")
GAMES_KEYS = ("gamesPlayed", "games_played", "Games Played", "GP")


@dataclass(slots=True)
class StandingInput:
    team: str
    group: str = DEFAULT_GROUP
    points: float = 0.0
    games_played: int = 0


def normalize_standing_row(row: Any) -> StandingInput | None:
    team = read_text(row, *TEAM_KEYS)
    if team is None:
        return None
    points = to_float(read_field(row, *POINTS_KEYS))
    return StandingInput(
        team=team,
        group=read_text(row, *GROUP_KEYS) or DEFAULT_GROUP,
        points=max(0.0, points),
        games_played=to_non_negative_int(read_field(row, *GAMES_KEYS)),
    )


def build_team_profiles(
    rows: Iterable[Any] | None,
    config: SimulationConfig = DEFAULT_CONFIG,
) -> dict[str, TeamProfile]:
    if not isinstance(rows, (list, tuple)):
        logger.warning("Standings input is not a list (%s); treating as empty.", type(rows).__name__)
        return {}

    profiles: dict[str, TeamProfile] = {}
    for row in rows:
        parsed = normalize_standing_row(row)
        if parsed is None:
            logger.warning("Skipping standings row without a team name: %r", row)
            continue
        if parsed.team in profiles:
            logger.debug("Duplicate standings row for %s; keeping the later row.", parsed.team)
        profiles[parsed.team] = TeamProfile(
            name=parsed.team,
            group=parsed.group,
            base_points=parsed.points,
            games_played=parsed.games_played,
            config=config,
        )
    return profiles


def backfill_games_played(profiles: dict[str, TeamProfile], matches: Iterable[Match]) -> None:
    """Raise reported game counts to what the completed schedule already shows."""
    counted: dict[str, int] = {}
    for match in matches:
        if not match.is_completed:
            continue
        games = match.games1 + match.games2
        counted[match.team1] = counted.get(match.team1, 0) + games
        counted[match.team2] = counted.get(match.team2, 0) + games
    for name, games in counted.items():
        profile = profiles.get(name)
        if profile is not None and profile.games_played < games:
            profile.games_played = games


def groups_of(profiles: dict[str, TeamProfile]) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {}
    for profile in profiles.values():
        groups.setdefault(profile.group, []).append(profile.name)
    return {group: sorted(names) for group, names in sorted(groups.items())}

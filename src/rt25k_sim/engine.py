from __future__ import annotations

import logging
import random

from .config import DEFAULT_CONFIG, SimulationConfig, wins_needed
from .errors import SimulationStateError, UnknownTeamError
from .models import Match, SeriesResult, TeamProfile

logger = logging.getLogger(__name__)


def series_points(
    score1: int,
    score2: int,
    best_of: int | None = None,
    config: SimulationConfig = DEFAULT_CONFIG,
) -> tuple[int, int]:
    """Points for each side of a finished series.

    Every game slot of the best-of pays out: games that were never played because
    the series was already decided count as wins for the winner and losses for
    the loser, so a best-of-3 sweep pays 75/45 and a 2-1 series 65/55.
    """
    total_games = best_of if best_of is not None else config.best_of
    unplayed = max(0, total_games - score1 - score2)
    if score1 > score2:
        wins1, losses1 = score1 + unplayed, score2
        wins2, losses2 = score2, score1 + unplayed
    else:
        wins1, losses1 = score1, score2 + unplayed
        wins2, losses2 = score2 + unplayed, score1
    points1 = wins1 * config.win_points + losses1 * config.loss_points
    points2 = wins2 * config.win_points + losses2 * config.loss_points
    return points1, points2


def _jittered_power(profile: TeamProfile, rng: random.Random, jitter: float) -> float:
    power = profile.adjusted_power
    if jitter <= 0:
        return power
    return power * (1.0 + rng.uniform(-jitter, jitter))


def game_win_probability(profile_a: TeamProfile, profile_b: TeamProfile) -> float:
    a_power = profile_a.adjusted_power
    b_power = profile_b.adjusted_power
    total = a_power + b_power
    if total <= 0:
        return 0.5
    return a_power / total


def simulate_game(
    profile_a: TeamProfile,
    profile_b: TeamProfile,
    rng: random.Random | None = None,
    config: SimulationConfig = DEFAULT_CONFIG,
) -> str:
    rng = rng or random.Random()
    a_power = _jittered_power(profile_a, rng, config.jitter)
    b_power = _jittered_power(profile_b, rng, config.jitter)
    total = a_power + b_power
    # Power is floored at min_power, so total stays positive unless the config is bypassed.
    if total <= 0:
        return profile_a.name if rng.random() < 0.5 else profile_b.name
    roll = rng.random() * total
    return profile_a.name if roll < a_power else profile_b.name


def simulate_series(
    profile_a: TeamProfile | None,
    profile_b: TeamProfile | None,
    rng: random.Random | None = None,
    config: SimulationConfig = DEFAULT_CONFIG,
    best_of: int | None = None,
    start_a: int = 0,
    start_b: int = 0,
    team_names: tuple[str, str] = ("", ""),
) -> SeriesResult:
    if profile_a is None:
        raise UnknownTeamError(team_names[0] or "<missing>", "series resolver")
    if profile_b is None:
        raise UnknownTeamError(team_names[1] or "<missing>", "series resolver")
    if profile_a.name == profile_b.name:
        raise SimulationStateError(f"Cannot simulate a series between {profile_a.name} and itself.")

    rng = rng or random.Random()
    needed = wins_needed(best_of if best_of is not None else config.best_of)
    score_a = max(0, start_a)
    score_b = max(0, start_b)
    if score_a >= needed or score_b >= needed:
        raise SimulationStateError(
            f"Series {profile_a.name} vs {profile_b.name} is already decided at {score_a}-{score_b}."
        )

    games: list[str] = []
    while score_a < needed and score_b < needed:
        winner = simulate_game(profile_a, profile_b, rng, config)
        if winner == profile_a.name:
            score_a += 1
        else:
            score_b += 1
        games.append(winner)

    logger.debug("Series %s %d-%d %s (%d games simulated)", profile_a.name, score_a, score_b, profile_b.name, len(games))
    return SeriesResult(
        team_a=profile_a.name,
        team_b=profile_b.name,
        score_a=score_a,
        score_b=score_b,
        games=games,
    )


def resolve_match(
    match: Match,
    profiles: dict[str, TeamProfile],
    rng: random.Random | None = None,
    config: SimulationConfig = DEFAULT_CONFIG,
) -> SeriesResult:
    """Play out a pending match from whatever tally it already has."""
    if match.is_completed:
        raise SimulationStateError(f"Match {match.team1} vs {match.team2} is already completed.")
    return simulate_series(
        profiles.get(match.team1),
        profiles.get(match.team2),
        rng=rng,
        config=config,
        best_of=match.best_of,
        start_a=match.games1,
        start_b=match.games2,
        team_names=(match.team1, match.team2),
    )

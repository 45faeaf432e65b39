"""Static simulation configuration constants."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_GROUP = "DefaultGroup"

# Power derived from league points; the floor keeps every team winnable.
BASE_POWER_MULTIPLIER = 0.1
MIN_POWER = 0.5

# Activity boost saturates once a team has this many individual games.
GAMES_FOR_SATURATION = 5
BOOST_FACTOR = 0.2

PARTIAL_MIN_GAMES = 2
ACTIVE_MIN_GAMES = 5
ACTIVITY_TIER_WEIGHTS: dict[str, float] = {
    "inactive": 0.1,
    "partial": 0.5,
    "active": 1.0,
}

# Symmetric uniform jitter applied to adjusted power for every game.
POWER_JITTER = 0.15

DEFAULT_BEST_OF = 3
MAX_BEST_OF = 9

# Points per game slot of a series; slots left unplayed go to the series winner.
WIN_POINTS = 25
LOSS_POINTS = 15

DEFAULT_SIMULATION_RUNS = 3
MAX_SIMULATION_RUNS = 1000

PLACEHOLDER_WINNERS = frozenset({"", "n/a", "na", "tbd", "tie", "draw", "-", "none", "null"})

STANDINGS_NOTE = (
    "Standings points only set team power. Ranking points start at zero and come from "
    "the series in the schedule, so list completed series there or their points are lost."
)


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    best_of: int = DEFAULT_BEST_OF
    win_points: int = WIN_POINTS
    loss_points: int = LOSS_POINTS
    base_power_multiplier: float = BASE_POWER_MULTIPLIER
    min_power: float = MIN_POWER
    boost_factor: float = BOOST_FACTOR
    games_for_saturation: int = GAMES_FOR_SATURATION
    partial_min_games: int = PARTIAL_MIN_GAMES
    active_min_games: int = ACTIVE_MIN_GAMES
    jitter: float = POWER_JITTER

    def __post_init__(self) -> None:
        if not 1 <= self.best_of <= MAX_BEST_OF:
            raise ValueError(f"best_of must be between 1 and {MAX_BEST_OF}, got {self.best_of}.")
        if self.min_power <= 0:
            raise ValueError("min_power must be strictly positive.")
        if self.win_points <= self.loss_points:
            raise ValueError("win_points must exceed loss_points.")
        if self.loss_points < 0 or self.base_power_multiplier < 0 or self.boost_factor < 0:
            raise ValueError("Point and power constants cannot be negative.")
        if self.games_for_saturation < 1:
            raise ValueError("games_for_saturation must be at least 1.")
        if not 0 <= self.partial_min_games <= self.active_min_games:
            raise ValueError("Activity thresholds must satisfy 0 <= partial <= active.")
        if not 0.0 <= self.jitter < 1.0:
            raise ValueError("jitter must be within [0, 1).")

    @property
    def wins_needed(self) -> int:
        return wins_needed(self.best_of)


DEFAULT_CONFIG = SimulationConfig()


def wins_needed(best_of: int) -> int:
    return max(1, (best_of + 1) // 2)

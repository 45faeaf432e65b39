import random

import pytest

from rt25k_sim.config import SimulationConfig
from rt25k_sim.engine import game_win_probability, resolve_match, series_points, simulate_game, simulate_series
from rt25k_sim.errors import SimulationStateError, UnknownTeamError
from rt25k_sim.models import Match, MatchStatus, TeamProfile


def _pair() -> tuple[TeamProfile, TeamProfile]:
    return TeamProfile("A", base_points=50, games_played=5), TeamProfile("B", base_points=50, games_played=5)


def test_series_points_best_of_three() -> None:
    assert series_points(2, 0) == (75, 45)
    assert series_points(0, 2) == (45, 75)
    assert series_points(2, 1) == (65, 55)
    assert series_points(1, 2) == (55, 65)


def test_series_points_reward_winner_and_sweeps() -> None:
    for best_of in (1, 3, 5, 7):
        needed = (best_of + 1) // 2
        gaps = []
        for loser_wins in range(needed):
            winner_points, loser_points = series_points(needed, loser_wins, best_of)
            assert winner_points > loser_points
            assert winner_points + loser_points == best_of * 40
            gaps.append(winner_points - loser_points)
        assert gaps == sorted(gaps, reverse=True)
        assert len(set(gaps)) == len(gaps)


def test_series_stops_at_threshold() -> None:
    profile_a, profile_b = _pair()
    for seed in range(200):
        for best_of, needed in ((3, 2), (5, 3)):
            result = simulate_series(profile_a, profile_b, random.Random(seed), best_of=best_of)
            assert max(result.score_a, result.score_b) == needed
            assert min(result.score_a, result.score_b) < needed
            assert len(result.games) == result.score_a + result.score_b


def test_series_continues_from_partial_tally() -> None:
    profile_a, profile_b = _pair()
    for seed in range(50):
        result = simulate_series(profile_a, profile_b, random.Random(seed), start_a=1)
        assert result.score_a >= 1
        assert len(result.games) == result.score_a + result.score_b - 1


def test_decided_series_cannot_be_simulated() -> None:
    profile_a, profile_b = _pair()
    with pytest.raises(SimulationStateError):
        simulate_series(profile_a, profile_b, random.Random(1), start_a=2)
    with pytest.raises(SimulationStateError):
        simulate_series(profile_a, profile_a, random.Random(1))


def test_missing_profile_raises_unknown_team() -> None:
    _, profile_b = _pair()
    with pytest.raises(UnknownTeamError) as excinfo:
        simulate_series(None, profile_b, random.Random(1), team_names=("Ghost", "B"))
    assert excinfo.value.team_name == "Ghost"
    assert "Ghost" in str(excinfo.value)


def test_resolve_match_rejects_completed_match() -> None:
    profile_a, profile_b = _pair()
    match = Match("A", "B", games1=2, games2=0, status=MatchStatus.COMPLETED, winner="A")
    with pytest.raises(SimulationStateError):
        resolve_match(match, {"A": profile_a, "B": profile_b}, random.Random(1))


def test_resolve_match_with_unknown_team() -> None:
    profile_a, _ = _pair()
    with pytest.raises(UnknownTeamError):
        resolve_match(Match("A", "Ghost"), {"A": profile_a}, random.Random(1))


def test_same_seed_same_series() -> None:
    profile_a, profile_b = _pair()
    first = simulate_series(profile_a, profile_b, random.Random(42), best_of=7)
    second = simulate_series(profile_a, profile_b, random.Random(42), best_of=7)
    assert first == second


def test_win_probability_follows_power_ratio() -> None:
    weak = TeamProfile("Weak", base_points=10, games_played=10)
    strong = TeamProfile("Strong", base_points=20, games_played=10)
    assert game_win_probability(strong, weak) == pytest.approx(2 / 3)
    assert game_win_probability(weak, strong) == pytest.approx(1 / 3)


def test_stronger_team_wins_most_games_without_jitter() -> None:
    config = SimulationConfig(jitter=0.0)
    weak = TeamProfile("Weak", config=config)
    strong = TeamProfile("Strong", base_points=100, games_played=10, config=config)
    rng = random.Random(7)
    wins = sum(1 for _ in range(500) if simulate_game(weak, strong, rng, config) == "Strong")
    assert wins >= 450

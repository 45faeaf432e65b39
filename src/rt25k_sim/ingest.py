from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from .config import DEFAULT_BEST_OF, MAX_BEST_OF, PLACEHOLDER_WINNERS, wins_needed
from .models import Match, MatchStatus
from .rows import read_field, read_text, to_int

logger = logging.getLogger(__name__)

TEAM1_KEYS = ("team1", "homeTeam", "home_team", "Team 1")
TEAM2_KEYS = ("team2", "awayTeam", "away_team", "Team 2")
GAMES_KEYS = ("games", "gameScores")
GAME_SCORE1_KEYS = ("score1", "homeScore", "home_score")
GAME_SCORE2_KEYS = ("score2", "awayScore", "away_score")
SERIES_SCORE_KEYS = ("seriesScore", "series_score", "score")
WINNER_KEYS = ("seriesWinner", "series_winner", "winner")
BEST_OF_KEYS = ("bestOf", "best_of")

SERIES_SCORE_RE = re.compile(r"^\s*(\d+)\s*[-:]\s*(\d+)\s*$")


def _tally_games(raw_games: Any, team1: str, team2: str) -> tuple[int, int]:
    if not isinstance(raw_games, (list, tuple)):
        return 0, 0
    wins1 = 0
    wins2 = 0
    for game in raw_games:
        game_winner = read_text(game, "winner")
        if game_winner is not None and game_winner in (team1, team2):
            if game_winner == team1:
                wins1 += 1
            else:
                wins2 += 1
            continue
        score1 = to_int(read_field(game, *GAME_SCORE1_KEYS))
        score2 = to_int(read_field(game, *GAME_SCORE2_KEYS))
        if score1 > score2:
            wins1 += 1
        elif score2 > score1:
            wins2 += 1
    return wins1, wins2


def _parse_series_score(raw: Any) -> tuple[int, int] | None:
    if raw is None:
        return None
    match = SERIES_SCORE_RE.match(str(raw))
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def _authoritative_winner(raw: Any, team1: str, team2: str) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    if text.lower() in PLACEHOLDER_WINNERS:
        return None
    for team in (team1, team2):
        if text.casefold() == team.casefold():
            return team
    logger.warning("Ignoring series winner %r: not one of %s / %s.", text, team1, team2)
    return None


def _best_of(raw: Any, default_best_of: int) -> int:
    value = to_int(raw, 0)
    if value == 0:
        return default_best_of
    if not 1 <= value <= MAX_BEST_OF:
        logger.warning("Ignoring best-of %d outside 1..%d; using %d.", value, MAX_BEST_OF, default_best_of)
        return default_best_of
    return value


def normalize_match_row(row: Any, default_best_of: int = DEFAULT_BEST_OF) -> Match | None:
    team1 = read_text(row, *TEAM1_KEYS)
    team2 = read_text(row, *TEAM2_KEYS)
    if team1 is None or team2 is None:
        return None
    if team1 == team2:
        logger.warning("Dropping schedule row pairing %s with itself.", team1)
        return None

    best_of = _best_of(read_field(row, *BEST_OF_KEYS), default_best_of)
    needed = wins_needed(best_of)

    tally = _parse_series_score(read_field(row, *SERIES_SCORE_KEYS))
    if tally is None:
        tally = _tally_games(read_field(row, *GAMES_KEYS), team1, team2)
    games1, games2 = (min(needed, value) for value in tally)

    winner = _authoritative_winner(read_field(row, *WINNER_KEYS), team1, team2)
    if winner is not None:
        if winner == team1:
            games1, games2 = needed, min(games2, needed - 1)
        else:
            games1, games2 = min(games1, needed - 1), needed
    elif games1 >= needed and games2 >= needed:
        logger.warning("Series %s vs %s reports %d-%d; treating as unplayed.", team1, team2, games1, games2)
        games1, games2 = 0, 0
    elif games1 >= needed:
        winner = team1
    elif games2 >= needed:
        winner = team2

    return Match(
        team1=team1,
        team2=team2,
        games1=games1,
        games2=games2,
        best_of=best_of,
        status=MatchStatus.COMPLETED if winner is not None else MatchStatus.PENDING,
        winner=winner,
    )


def ingest_schedule(rows: Iterable[Any] | None, default_best_of: int = DEFAULT_BEST_OF) -> list[Match]:
    if not isinstance(rows, (list, tuple)):
        if rows is not None:
            logger.warning("Schedule input is not a list (%s); treating as empty.", type(rows).__name__)
        return []

    matches: list[Match] = []
    index_by_pairing: dict[frozenset[str], int] = {}
    for row in rows:
        match = normalize_match_row(row, default_best_of)
        if match is None:
            logger.warning("Skipping unusable schedule row: %r", row)
            continue
        existing_idx = index_by_pairing.get(match.pairing)
        if existing_idx is None:
            index_by_pairing[match.pairing] = len(matches)
            matches.append(match)
        elif match.is_completed and not matches[existing_idx].is_completed:
            matches[existing_idx] = match
    completed = sum(1 for m in matches if m.is_completed)
    logger.info("Ingested %d series (%d completed, %d pending).", len(matches), completed, len(matches) - completed)
    return matches

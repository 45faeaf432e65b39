from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Any

from .config import DEFAULT_CONFIG, SimulationConfig
from .engine import resolve_match
from .errors import InvalidMatchError, UnknownTeamError
from .ingest import ingest_schedule
from .models import Match, SimulatedSeries, SimulationOutcome, TeamProfile
from .profiles import backfill_games_played, build_team_profiles, groups_of
from .schedule import pending_by_pairing, unplayed_pairs
from .standings import StandingsTable

logger = logging.getLogger(__name__)


class LeagueSimulator:
    """Projects final group standings by simulating every unplayed round-robin series.

    Profiles and matches are parsed once. Each call to :meth:`run` starts from
    that snapshot, so a simulator can be run repeatedly without carrying
    simulated points from one run into the next.
    """

    def __init__(
        self,
        standings: list[Any] | None,
        schedule: list[Any] | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
        config: SimulationConfig | None = None,
        ignore_unknown_teams: bool = False,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.seed = seed
        self._rng = rng if rng is not None else random.Random(seed)
        self._base_profiles = build_team_profiles(standings, self.config)
        if not self._base_profiles:
            logger.warning("No usable teams in standings input.")
        self.matches = self._validate_matches(
            ingest_schedule(schedule, self.config.best_of),
            ignore_unknown_teams=ignore_unknown_teams,
        )
        backfill_games_played(self._base_profiles, self.matches)
        self.profiles: dict[str, TeamProfile] = {}
        self._table = StandingsTable({}, self.config)
        self.last_outcome: SimulationOutcome | None = None
        self.reset()
        logger.info(
            "Simulator initialized with %d teams in %d groups and %d series (%d completed).",
            len(self._base_profiles),
            len(self.groups),
            len(self.matches),
            len(self.completed_matches()),
        )

    def _validate_matches(self, matches: list[Match], ignore_unknown_teams: bool) -> list[Match]:
        valid: list[Match] = []
        for match in matches:
            unknown = [name for name in (match.team1, match.team2) if name not in self._base_profiles]
            if unknown:
                if ignore_unknown_teams:
                    logger.warning("Dropping series %s vs %s: unknown team %s.", match.team1, match.team2, unknown[0])
                    continue
                raise UnknownTeamError(unknown[0], f"series {match.team1} vs {match.team2}")
            group1 = self._base_profiles[match.team1].group
            group2 = self._base_profiles[match.team2].group
            if group1 != group2:
                raise InvalidMatchError(
                    f"Series {match.team1} vs {match.team2} crosses groups ({group1} / {group2})."
                )
            valid.append(replace(match, group=group1))
        return valid

    @property
    def teams(self) -> list[str]:
        return sorted(self._base_profiles)

    @property
    def groups(self) -> list[str]:
        return sorted({profile.group for profile in self._base_profiles.values()})

    def get_profile(self, team_name: str) -> TeamProfile | None:
        return self.profiles.get(team_name)

    def completed_matches(self) -> list[Match]:
        return [match for match in self.matches if match.is_completed]

    def reset(self) -> None:
        self.profiles = {name: replace(profile) for name, profile in self._base_profiles.items()}
        self._table = StandingsTable(self.profiles, self.config)

    def power_table(self) -> list[dict[str, Any]]:
        rows = [profile.summary() for profile in self.profiles.values()]
        return sorted(rows, key=lambda row: (-row["adjustedPower"], row["team"]))

    def _resolve(self, match: Match) -> SimulatedSeries:
        result = resolve_match(match, self.profiles, self._rng, self.config)
        points1, points2 = self._table.record(
            match.team1, match.team2, result.score_a, result.score_b, match.best_of
        )
        simulated_games = len(result.games)
        self.profiles[match.team1].register_series(points1, simulated_games)
        self.profiles[match.team2].register_series(points2, simulated_games)
        return SimulatedSeries(
            team1=match.team1,
            team2=match.team2,
            group=match.group or self.profiles[match.team1].group,
            score1=result.score_a,
            score2=result.score_b,
            points1=points1,
            points2=points2,
            games=list(result.games),
        )

    def run(self) -> SimulationOutcome:
        self.reset()
        for match in self.matches:
            if match.is_completed:
                self._table.update_standings(match)

        pending = pending_by_pairing(self.matches)
        simulated: list[SimulatedSeries] = []
        for group, names in groups_of(self.profiles).items():
            for team1, team2 in unplayed_pairs(names, self.matches):
                match = pending.get(frozenset((team1, team2))) or Match(
                    team1=team1,
                    team2=team2,
                    best_of=self.config.best_of,
                    group=group,
                )
                simulated.append(self._resolve(match))

        standings = self._table.final_standings(self._rng)
        missing = self._table.incomplete_teams()
        if missing:
            logger.warning("Round robin incomplete for: %s", ", ".join(missing))
        logger.info("Simulated %d series across %d groups.", len(simulated), len(standings))
        self.last_outcome = SimulationOutcome(standings=standings, simulated_matches=simulated, seed=self.seed)
        return self.last_outcome

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from .config import (
    DEFAULT_BEST_OF,
    DEFAULT_SIMULATION_RUNS,
    MAX_BEST_OF,
    MAX_SIMULATION_RUNS,
    STANDINGS_NOTE,
    SimulationConfig,
)
from .errors import SimulationError
from .league import LeagueSimulator
from .profiles import build_team_profiles
from .projection import project_standings

logger = logging.getLogger(__name__)


class SimulationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    standings: list[dict[str, Any]] = Field(default_factory=list, description=STANDINGS_NOTE)
    schedule: list[dict[str, Any]] = Field(default_factory=list)
    seed: int | None = None
    best_of: int = Field(default=DEFAULT_BEST_OF, alias="bestOf", ge=1, le=MAX_BEST_OF)
    ignore_unknown_teams: bool = Field(default=False, alias="ignoreUnknownTeams")


class ProjectionRequest(SimulationRequest):
    runs: int = Field(default=DEFAULT_SIMULATION_RUNS, ge=1, le=MAX_SIMULATION_RUNS)
    team: str | None = None


class SimService:
    """Builds a fresh simulator for every request; nothing is shared between calls."""

    def _simulator(self, payload: SimulationRequest) -> LeagueSimulator:
        try:
            return LeagueSimulator(
                payload.standings,
                payload.schedule,
                seed=payload.seed,
                config=SimulationConfig(best_of=payload.best_of),
                ignore_unknown_teams=payload.ignore_unknown_teams,
            )
        except (SimulationError, ValueError) as exc:
            logger.info("Rejected simulation request: %s", exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    def simulate(self, payload: SimulationRequest) -> dict[str, Any]:
        simulator = self._simulator(payload)
        if not simulator.teams:
            raise HTTPException(status_code=400, detail="No teams in standings")
        power = simulator.power_table()
        try:
            outcome = simulator.run()
        except SimulationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        result = outcome.to_dict()
        result["powerTable"] = power
        return result

    def power(self, payload: SimulationRequest) -> list[dict[str, Any]]:
        return self._simulator(payload).power_table()

    def projection(self, payload: ProjectionRequest) -> dict[str, Any]:
        if not build_team_profiles(payload.standings):
            raise HTTPException(status_code=400, detail="No teams in standings")
        try:
            report = project_standings(
                payload.standings,
                payload.schedule,
                runs=payload.runs,
                seed=payload.seed,
                config=SimulationConfig(best_of=payload.best_of),
                ignore_unknown_teams=payload.ignore_unknown_teams,
            )
        except (SimulationError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if payload.team and report.team(payload.team) is None:
            raise HTTPException(status_code=404, detail="Team not found")
        return report.to_dict(team_name=payload.team)


service = SimService()
app = FastAPI(title="RT25K Standings Simulator API", version="0.1.0", description=STANDINGS_NOTE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/simulate")
def simulate(payload: SimulationRequest) -> dict[str, Any]:
    return service.simulate(payload)


@app.post("/api/projection")
def projection(payload: ProjectionRequest) -> dict[str, Any]:
    return service.projection(payload)


@app.post("/api/power")
def power(payload: SimulationRequest) -> list[dict[str, Any]]:
    return service.power(payload)

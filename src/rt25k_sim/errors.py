from __future__ import annotations


class SimulationError(Exception):
    """Base class for failures raised by the standings simulator."""


class UnknownTeamError(SimulationError):
    def __init__(self, team_name: str, context: str = "") -> None:
        self.team_name = team_name
        detail = f" ({context})" if context else ""
        super().__init__(f"Unknown team '{team_name}'{detail}: not present in standings.")


class InvalidMatchError(SimulationError):
    pass


class SimulationStateError(SimulationError):
    pass

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from rt25k_sim.api import app


@pytest.fixture(scope="module")
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def league_payload() -> dict[str, object]:
    return {
        "standings": [
            {"team": "Aurora", "group": "Group A", "points": 180, "gamesPlayed": 7},
            {"team": "Blizzard", "group": "Group A", "points": 90, "gamesPlayed": 4},
            {"team": "Cyclone", "group": "Group A", "points": 30, "gamesPlayed": 1},
        ],
        "schedule": [{"team1": "Aurora", "team2": "Blizzard", "seriesScore": "2-1"}],
        "seed": 17,
    }

"""Shared fixtures for the standings test suite."""

from datetime import datetime, timezone

import pytest

from src.standings.models import TeamRecord


# ------------------------------------------------------------------
# Lightweight factories – cheap to construct, no I/O
# ------------------------------------------------------------------

@pytest.fixture
def fixed_time():
    return datetime(2025, 3, 14, 18, 30, tzinfo=timezone.utc)


@pytest.fixture
def sample_records():
    """Four teams with one tie at the top."""
    return [
        TeamRecord(id="t1", name="Bravo", points=50),
        TeamRecord(id="t2", name="Alpha", points=50),
        TeamRecord(id="t3", name="Charlie", points=30),
        TeamRecord(id="t4", name="Delta", points=10),
    ]


@pytest.fixture
def teams_payload():
    """Body shaped like the backend's GET /user/get-all-teams response."""
    return {
        "teams": [
            {
                "_id": "65f0a1",
                "team_name": "Treasure Seekers",
                "team_member1": "Asha",
                "team_member2": "Ben",
                "points": 120,
            },
            {
                "_id": "65f0a2",
                "team_name": "Map Readers",
                "team_member1": "Chen",
                "points": 95,
            },
            {
                "_id": "65f0a3",
                "team_name": "Late Starters",
                "team_member1": "Dara",
            },
        ]
    }

from __future__ import annotations

import os
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

from rankboard.api.routes import get_service
from rankboard.main import create_app
from rankboard.models.leaderboard import LeaderboardEntry
from rankboard.services.leaderboard import LeaderboardService

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_entry(user_id: str, username: str, score: int, **fields) -> LeaderboardEntry:
    fields.setdefault("last_active_at", NOW)
    return LeaderboardEntry(user_id=user_id, username=username, score=score, **fields)


@pytest.fixture()
def entries() -> list[LeaderboardEntry]:
    return [
        make_entry(
            "user1", "AliceWonder", 2500,
            display_name="Alice Johnson",
            total_puzzles_completed=30,
            total_modules_completed=20,
            average_score=95,
            completion_percentage=90,
            last_active_at="2024-01-15",
            country="US",
            region="North America",
        ),
        make_entry(
            "user2", "BobBuilder", 2200,
            display_name="Bob Smith",
            total_puzzles_completed=25,
            total_modules_completed=15,
            average_score=88,
            completion_percentage=75,
            last_active_at="2024-01-14",
            country="CA",
            region="North America",
        ),
        make_entry(
            "user3", "CharlieChamp", 1800,
            display_name="Charlie Brown",
            total_puzzles_completed=20,
            total_modules_completed=12,
            average_score=90,
            completion_percentage=60,
            last_active_at="2024-01-13",
            country="UK",
            region="Europe",
        ),
        make_entry(
            "user4", "DianaQueen", 1500,
            display_name="Diana Prince",
            total_puzzles_completed=15,
            total_modules_completed=10,
            average_score=85,
            completion_percentage=50,
            last_active_at="2024-01-12",
            country="AU",
            region="Oceania",
        ),
        make_entry(
            "user5", "EveExplorer", 1200,
            display_name="Eve Wilson",
            total_puzzles_completed=12,
            total_modules_completed=8,
            average_score=80,
            completion_percentage=40,
            last_active_at="2024-01-11",
            country="DE",
            region="Europe",
        ),
    ]


class StaticSnapshotService(LeaderboardService):
    """Serves a fixed snapshot instead of reading Redis."""

    def __init__(self, snapshot: list[LeaderboardEntry]):
        super().__init__(redis_client=None)
        self.snapshot = snapshot

    async def load_snapshot(self, board_id: str) -> list[LeaderboardEntry]:
        return list(self.snapshot)


@pytest.fixture()
def api(entries):
    app = create_app()
    service = StaticSnapshotService(entries)
    app.dependency_overrides[get_service] = lambda: service

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="session")
def redis_url() -> str:
    return os.getenv("REDIS_URL", "redis://localhost:6379/0")


@pytest.fixture()
def client(redis_url: str):
    sync_redis = Redis.from_url(redis_url, decode_responses=True)
    try:
        sync_redis.ping()
    except RedisConnectionError:
        pytest.skip(f"Redis is not reachable at {redis_url}")

    app = create_app()
    board_id = f"testboard_{uuid.uuid4().hex}"

    with TestClient(app) as test_client:
        yield test_client, sync_redis, board_id

    for key in sync_redis.scan_iter(match=f"lb:{board_id}*"):
        sync_redis.delete(key)

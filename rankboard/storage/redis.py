"""Redis client creation and key layout for stored leaderboard snapshots.

Each board keeps a sorted set of ``user_id -> score`` for ordering and a hash
of ``user_id -> entry JSON`` holding the full record.
"""

from __future__ import annotations

import os

from redis.asyncio import Redis

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def get_redis_url() -> str:
    return os.getenv("REDIS_URL", DEFAULT_REDIS_URL)


def create_redis_client(redis_url: str | None = None) -> Redis:
    return Redis.from_url(redis_url or get_redis_url(), decode_responses=True)


def ranking_key(board_id: str) -> str:
    return f"lb:{board_id}"


def entries_key(board_id: str) -> str:
    return f"lb:{board_id}:entries"

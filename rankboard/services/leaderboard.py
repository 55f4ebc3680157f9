"""Leaderboard queries over board snapshots stored in Redis.

The service only loads and stores entries; every query runs through the
in-memory engine on a freshly loaded snapshot.
"""

from __future__ import annotations

import logging
from datetime import datetime

from redis.asyncio import Redis

from rankboard.models.leaderboard import (
    CursorPage,
    CursorQuery,
    FilterOptions,
    LeaderboardEntry,
    LeaderboardQuery,
    PaginatedLeaderboard,
)
from rankboard.services.cursor import paginate_by_cursor
from rankboard.services.facets import summarize
from rankboard.services.pagination import get_paginated_leaderboard
from rankboard.services.search import DEFAULT_SEARCH_LIMIT, search_entries
from rankboard.storage.redis import entries_key, ranking_key

logger = logging.getLogger(__name__)


class EntryNotFoundError(Exception):
    """Raised when a board has no entry for a user."""


class LeaderboardService:
    def __init__(self, redis_client: Redis):
        self.redis = redis_client

    async def submit_entry(
        self,
        board_id: str,
        entry: LeaderboardEntry,
        mode: str = "best",
    ) -> LeaderboardEntry:
        if mode != "latest":
            current = await self.redis.zscore(ranking_key(board_id), entry.user_id)
            if current is not None and entry.score <= int(current):
                logger.debug(
                    "Kept best score %d for %s on board %s",
                    int(current),
                    entry.user_id,
                    board_id,
                )
                return await self.get_entry(board_id, entry.user_id)

        # Stored entries never carry a rank; ranks are computed per query.
        stored = entry.model_copy(update={"rank": None})
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.zadd(ranking_key(board_id), {stored.user_id: stored.score})
            pipe.hset(entries_key(board_id), stored.user_id, stored.model_dump_json())
            await pipe.execute()
        logger.info("Stored entry %s on board %s (score %d)", stored.user_id, board_id, stored.score)
        return stored

    async def remove_entry(self, board_id: str, user_id: str) -> None:
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.zrem(ranking_key(board_id), user_id)
            pipe.hdel(entries_key(board_id), user_id)
            removed, _ = await pipe.execute()
        if not removed:
            raise EntryNotFoundError(user_id)
        logger.info("Removed entry %s from board %s", user_id, board_id)

    async def get_entry(self, board_id: str, user_id: str) -> LeaderboardEntry:
        payload = await self.redis.hget(entries_key(board_id), user_id)
        if payload is None:
            raise EntryNotFoundError(user_id)
        return LeaderboardEntry.model_validate_json(payload)

    async def load_snapshot(self, board_id: str) -> list[LeaderboardEntry]:
        user_ids = await self.redis.zrevrange(ranking_key(board_id), 0, -1)
        if not user_ids:
            return []
        payloads = await self.redis.hmget(entries_key(board_id), user_ids)
        snapshot = [
            LeaderboardEntry.model_validate_json(payload)
            for payload in payloads
            if payload is not None
        ]
        logger.debug("Loaded %d entries for board %s", len(snapshot), board_id)
        return snapshot

    async def get_leaderboard(
        self,
        board_id: str,
        query: LeaderboardQuery,
        now: datetime | None = None,
    ) -> PaginatedLeaderboard:
        snapshot = await self.load_snapshot(board_id)
        return get_paginated_leaderboard(snapshot, query, now=now)

    async def get_cursor_page(self, board_id: str, query: CursorQuery) -> CursorPage:
        snapshot = await self.load_snapshot(board_id)
        return paginate_by_cursor(snapshot, query.cursor, query.limit, query.criteria())

    async def search(
        self,
        board_id: str,
        term: str,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[LeaderboardEntry]:
        snapshot = await self.load_snapshot(board_id)
        return search_entries(snapshot, term, limit)

    async def filter_options(self, board_id: str) -> FilterOptions:
        snapshot = await self.load_snapshot(board_id)
        return summarize(snapshot)

    async def ping(self) -> bool:
        response = await self.redis.ping()
        return bool(response)

"""Pydantic response schemas specific to the HTTP layer.

Engine records (entries, pages, facets) live in ``rankboard.models.leaderboard``
and are returned by the routes directly.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

from rankboard.models.leaderboard import LeaderboardEntry


class ErrorBody(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    error: ErrorBody


class EntrySubmission(LeaderboardEntry):
    mode: Literal["best", "latest"] = "best"

    def entry(self) -> LeaderboardEntry:
        return LeaderboardEntry(**self.model_dump(exclude={"mode"}))


class SearchResponse(BaseModel):
    board_id: str
    term: str
    limit: int
    results: list[LeaderboardEntry]


class HealthResponse(BaseModel):
    status: Literal["ok"]


class ReadyResponse(BaseModel):
    status: Literal["ok"]

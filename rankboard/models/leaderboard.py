"""Pydantic records consumed and produced by the leaderboard query engine.

Entries arrive from the snapshot repository and are treated as immutable.
Query models clamp pagination parameters at construction so the engine never
has to reject a page or limit.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)

IDENTIFIER_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"
Identifier = Annotated[str, StringConstraints(pattern=IDENTIFIER_PATTERN)]

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

BoardType = Literal["global", "country", "region"]
Timeframe = Literal["daily", "weekly", "monthly", "all_time"]


def clamp_page(page: int) -> int:
    return max(DEFAULT_PAGE, page)


def clamp_limit(limit: int) -> int:
    return min(max(1, limit), MAX_LIMIT)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_timestamp(value: Any) -> Any:
    # fromisoformat accepts bare dates ("2024-01-13") as midnight.
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


Timestamp = Annotated[datetime, BeforeValidator(_parse_timestamp), AfterValidator(as_utc)]


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: Identifier
    username: str
    display_name: str | None = None
    score: int
    total_puzzles_completed: int = 0
    total_modules_completed: int = 0
    average_score: float = 0.0
    completion_percentage: float = 0.0
    last_active_at: Timestamp
    country: str | None = None
    region: str | None = None
    rank: int | None = None


class FilterCriteria(BaseModel):
    """Independent filter clauses, combined with AND by the filter engine."""

    type: BoardType = "global"
    country: str | None = None
    region: str | None = None
    challenge_type: str | None = None
    start_date: Timestamp | None = None
    end_date: Timestamp | None = None
    search: str | None = None
    min_score: int | None = None
    max_score: int | None = None


class LeaderboardQuery(FilterCriteria):
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    timeframe: Timeframe = "all_time"
    sort_by: str = "score"
    sort_order: str = "desc"

    @field_validator("page")
    @classmethod
    def _clamp_page(cls, value: int) -> int:
        return clamp_page(value)

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return clamp_limit(value)


class CursorQuery(FilterCriteria):
    cursor: str | None = None
    limit: int = DEFAULT_LIMIT

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return clamp_limit(value)

    def criteria(self) -> FilterCriteria:
        return FilterCriteria(**self.model_dump(include=set(FilterCriteria.model_fields)))


class CursorPosition(BaseModel):
    """Decoded cursor payload: the boundary entry of a page."""

    model_config = ConfigDict(frozen=True)

    score: int
    user_id: str = Field(alias="userId")


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ScoreRange(BaseModel):
    min: int
    max: int


class FilterOptions(BaseModel):
    challenge_types: list[str]
    countries: list[str]
    regions: list[str]
    timeframes: list[str]
    score_range: ScoreRange


class AppliedFilters(BaseModel):
    applied: list[str]
    available: FilterOptions


class PaginatedLeaderboard(BaseModel):
    data: list[LeaderboardEntry]
    meta: PageMeta
    filters: AppliedFilters
    last_updated: datetime


class CursorPage(BaseModel):
    data: list[LeaderboardEntry]
    next_cursor: str | None = None
    prev_cursor: str | None = None
    has_next: bool
    has_prev: bool

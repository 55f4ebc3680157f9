"""HTTP route handlers for leaderboard queries and service health checks."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request

from rankboard.api.errors import ENTRY_NOT_FOUND, INVALID_CURSOR, REDIS_UNAVAILABLE, APIError
from rankboard.models.leaderboard import (
    IDENTIFIER_PATTERN,
    MAX_LIMIT,
    CursorPage,
    CursorQuery,
    FilterOptions,
    LeaderboardEntry,
    LeaderboardQuery,
    PaginatedLeaderboard,
)
from rankboard.models.schemas import EntrySubmission, HealthResponse, ReadyResponse, SearchResponse
from rankboard.services.cursor import InvalidCursorError
from rankboard.services.leaderboard import EntryNotFoundError, LeaderboardService
from rankboard.services.search import DEFAULT_SEARCH_LIMIT

router = APIRouter(prefix="/v1")

BoardId = Annotated[str, Path(pattern=IDENTIFIER_PATTERN)]


def get_service(request: Request) -> LeaderboardService:
    return request.app.state.leaderboard_service


@router.post("/boards/{board_id}/entries", response_model=LeaderboardEntry)
async def submit_entry(
    payload: EntrySubmission,
    board_id: BoardId,
    service: LeaderboardService = Depends(get_service),
) -> LeaderboardEntry:
    return await service.submit_entry(board_id, payload.entry(), mode=payload.mode)


@router.get("/boards/{board_id}/entries/{user_id}", response_model=LeaderboardEntry)
async def get_entry(
    board_id: BoardId,
    user_id: str = Path(pattern=IDENTIFIER_PATTERN),
    service: LeaderboardService = Depends(get_service),
) -> LeaderboardEntry:
    try:
        return await service.get_entry(board_id, user_id)
    except EntryNotFoundError as exc:
        raise APIError(
            code=ENTRY_NOT_FOUND,
            message="User has no entry on this board",
            status_code=404,
        ) from exc


@router.delete("/boards/{board_id}/entries/{user_id}", status_code=204)
async def remove_entry(
    board_id: BoardId,
    user_id: str = Path(pattern=IDENTIFIER_PATTERN),
    service: LeaderboardService = Depends(get_service),
) -> None:
    try:
        await service.remove_entry(board_id, user_id)
    except EntryNotFoundError as exc:
        raise APIError(
            code=ENTRY_NOT_FOUND,
            message="User has no entry on this board",
            status_code=404,
        ) from exc


@router.get("/boards/{board_id}/leaderboard", response_model=PaginatedLeaderboard)
async def get_leaderboard(
    board_id: BoardId,
    query: Annotated[LeaderboardQuery, Query()],
    service: LeaderboardService = Depends(get_service),
) -> PaginatedLeaderboard:
    return await service.get_leaderboard(board_id, query)


@router.get("/boards/{board_id}/leaderboard/cursor", response_model=CursorPage)
async def get_cursor_page(
    board_id: BoardId,
    query: Annotated[CursorQuery, Query()],
    service: LeaderboardService = Depends(get_service),
) -> CursorPage:
    try:
        return await service.get_cursor_page(board_id, query)
    except InvalidCursorError as exc:
        raise APIError(
            code=INVALID_CURSOR,
            message="Cursor could not be decoded",
            status_code=400,
            details={"cursor": query.cursor},
        ) from exc


@router.get("/boards/{board_id}/search", response_model=SearchResponse)
async def search(
    board_id: BoardId,
    q: str = Query(default=""),
    limit: int = Query(default=DEFAULT_SEARCH_LIMIT, ge=0, le=MAX_LIMIT),
    service: LeaderboardService = Depends(get_service),
) -> SearchResponse:
    results = await service.search(board_id, q, limit)
    return SearchResponse(board_id=board_id, term=q, limit=limit, results=results)


@router.get("/boards/{board_id}/filters", response_model=FilterOptions)
async def get_filter_options(
    board_id: BoardId,
    service: LeaderboardService = Depends(get_service),
) -> FilterOptions:
    return await service.filter_options(board_id)


# These probes are intended for infrastructure and do not need to appear in API docs.
@router.get("/healthz", response_model=HealthResponse, include_in_schema=False)
async def healthz() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get("/readyz", response_model=ReadyResponse, include_in_schema=False)
async def readyz(service: LeaderboardService = Depends(get_service)) -> ReadyResponse:
    try:
        # Readiness verifies backing Redis connectivity, not just process liveness.
        is_ready = await service.ping()
    except Exception as exc:
        raise APIError(
            code=REDIS_UNAVAILABLE,
            message="Redis readiness check failed",
            status_code=503,
        ) from exc

    if not is_ready:
        raise APIError(
            code=REDIS_UNAVAILABLE,
            message="Redis readiness check failed",
            status_code=503,
        )
    return ReadyResponse(status="ok")

"""Offset pagination over a filtered, sorted leaderboard view."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import datetime, timezone

from rankboard.models.leaderboard import (
    AppliedFilters,
    LeaderboardEntry,
    LeaderboardQuery,
    PageMeta,
    PaginatedLeaderboard,
    clamp_limit,
    clamp_page,
)
from rankboard.services.facets import summarize
from rankboard.services.filtering import filter_entries
from rankboard.services.sorting import sort_entries

logger = logging.getLogger(__name__)


def paginate(
    entries: Sequence[LeaderboardEntry],
    page: int,
    limit: int,
) -> tuple[list[LeaderboardEntry], PageMeta]:
    page = clamp_page(page)
    limit = clamp_limit(limit)

    total = len(entries)
    total_pages = math.ceil(total / limit)
    offset = (page - 1) * limit

    # Ranks are local to this view; entries are copied, never mutated.
    data = [
        entry.model_copy(update={"rank": rank})
        for rank, entry in enumerate(entries[offset : offset + limit], start=offset + 1)
    ]
    meta = PageMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
    return data, meta


def applied_filters(query: LeaderboardQuery) -> list[str]:
    """Describe every non-default query parameter as a ``field:value`` token."""
    candidates = [
        ("type", query.type if query.type != "global" else None),
        ("country", query.country),
        ("region", query.region),
        ("challenge_type", query.challenge_type),
        ("timeframe", query.timeframe if query.timeframe != "all_time" else None),
        ("search", query.search),
        ("min_score", query.min_score),
        ("max_score", query.max_score),
        ("sort_by", query.sort_by if query.sort_by != "score" else None),
        ("sort_order", query.sort_order if query.sort_order != "desc" else None),
        ("start_date", query.start_date.isoformat() if query.start_date else None),
        ("end_date", query.end_date.isoformat() if query.end_date else None),
    ]
    return [f"{name}:{value}" for name, value in candidates if value not in (None, "")]


def get_paginated_leaderboard(
    entries: Sequence[LeaderboardEntry],
    query: LeaderboardQuery,
    now: datetime | None = None,
) -> PaginatedLeaderboard:
    now = now or datetime.now(timezone.utc)

    filtered = filter_entries(entries, query, now=now)
    ordered = sort_entries(filtered, query.sort_by, query.sort_order)
    data, meta = paginate(ordered, query.page, query.limit)
    logger.debug(
        "Served page %d/%d (%d of %d entries)",
        meta.page,
        meta.total_pages,
        len(data),
        meta.total,
    )

    return PaginatedLeaderboard(
        data=data,
        meta=meta,
        filters=AppliedFilters(
            applied=applied_filters(query),
            # Facets describe the whole snapshot, not the filtered view.
            available=summarize(entries),
        ),
        last_updated=now,
    )

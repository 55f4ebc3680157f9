"""Cursor pagination over the canonical leaderboard order.

The canonical order is score descending with ``user_id`` ascending as the
tie-break, independent of any requested sort. A cursor is an opaque token
holding the ``(score, user_id)`` of a page boundary entry.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Sequence

from pydantic import ValidationError

from rankboard.models.leaderboard import (
    DEFAULT_LIMIT,
    CursorPage,
    CursorPosition,
    FilterCriteria,
    LeaderboardEntry,
    clamp_limit,
)
from rankboard.services.filtering import filter_entries

logger = logging.getLogger(__name__)


class InvalidCursorError(ValueError):
    """Raised when a cursor token cannot be decoded."""


def encode_cursor(entry: LeaderboardEntry) -> str:
    payload = json.dumps({"score": entry.score, "userId": entry.user_id}, separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode()).rstrip(b"=").decode("ascii")


def decode_cursor(token: str) -> CursorPosition:
    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        return CursorPosition.model_validate_json(raw)
    except (UnicodeEncodeError, binascii.Error, ValidationError) as exc:
        raise InvalidCursorError(token) from exc


def canonical_order(entries: Sequence[LeaderboardEntry]) -> list[LeaderboardEntry]:
    return sorted(entries, key=lambda entry: (-entry.score, entry.user_id))


def _resume_index(ordered: Sequence[LeaderboardEntry], position: CursorPosition) -> int:
    for index, entry in enumerate(ordered):
        if entry.score == position.score and entry.user_id == position.user_id:
            return index + 1
    logger.info(
        "Cursor entry %s (score %d) no longer present; restarting from the top",
        position.user_id,
        position.score,
    )
    return 0


def paginate_by_cursor(
    entries: Sequence[LeaderboardEntry],
    cursor: str | None = None,
    limit: int = DEFAULT_LIMIT,
    criteria: FilterCriteria | None = None,
) -> CursorPage:
    limit = clamp_limit(limit)
    # Decode before doing any work so a bad token fails fast.
    position = decode_cursor(cursor) if cursor is not None else None

    if criteria is not None:
        entries = filter_entries(entries, criteria)
    ordered = canonical_order(entries)

    start = _resume_index(ordered, position) if position is not None else 0
    end = min(start + limit, len(ordered))
    data = ordered[start:end]

    has_next = end < len(ordered)
    has_prev = start > 0
    return CursorPage(
        data=data,
        next_cursor=encode_cursor(data[-1]) if has_next else None,
        prev_cursor=encode_cursor(ordered[start - 1]) if has_prev else None,
        has_next=has_next,
        has_prev=has_prev,
    )

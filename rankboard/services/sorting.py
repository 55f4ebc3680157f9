from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from rankboard.models.leaderboard import LeaderboardEntry

SORT_KEYS: dict[str, Callable[[LeaderboardEntry], Any]] = {
    "score": lambda entry: entry.score,
    "puzzles": lambda entry: entry.total_puzzles_completed,
    "modules": lambda entry: entry.total_modules_completed,
    "completion": lambda entry: entry.completion_percentage,
    "recent": lambda entry: entry.last_active_at,
}


def sort_entries(
    entries: Sequence[LeaderboardEntry],
    sort_by: str = "score",
    sort_order: str = "desc",
) -> list[LeaderboardEntry]:
    """Return a new, stably sorted list; unknown fields sort by score."""
    key = SORT_KEYS.get(sort_by, SORT_KEYS["score"])
    # sorted() keeps equal elements in input order even with reverse=True.
    return sorted(entries, key=key, reverse=sort_order != "asc")

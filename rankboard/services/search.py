"""Fuzzy player search scored by weighted field matches."""

from __future__ import annotations

from collections.abc import Sequence

from rankboard.models.leaderboard import LeaderboardEntry

DEFAULT_SEARCH_LIMIT = 10

# (exact, prefix, substring) points; only the best tier per field counts.
USERNAME_POINTS = (100, 80, 60)
DISPLAY_NAME_POINTS = (90, 70, 50)
USER_ID_POINTS = 40


def _tier_points(value: str | None, term: str, points: tuple[int, int, int]) -> int:
    if not value:
        return 0
    value = value.lower()
    exact, prefix, substring = points
    if value == term:
        return exact
    if value.startswith(term):
        return prefix
    if term in value:
        return substring
    return 0


def match_score(entry: LeaderboardEntry, term: str) -> int:
    """Score ``entry`` against an already lower-cased, stripped ``term``."""
    score = _tier_points(entry.username, term, USERNAME_POINTS)
    score += _tier_points(entry.display_name, term, DISPLAY_NAME_POINTS)
    if term in entry.user_id.lower():
        score += USER_ID_POINTS
    return score


def search_entries(
    entries: Sequence[LeaderboardEntry],
    term: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[LeaderboardEntry]:
    term = term.strip().lower()
    if not term:
        return []

    scored = [(match_score(entry, term), entry) for entry in entries]
    matches = [(points, entry) for points, entry in scored if points > 0]
    matches.sort(key=lambda item: (-item[0], -item[1].score))
    return [entry for _, entry in matches[: max(limit, 0)]]

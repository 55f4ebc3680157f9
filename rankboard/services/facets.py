from __future__ import annotations

from collections.abc import Sequence

from rankboard.models.leaderboard import FilterOptions, LeaderboardEntry, ScoreRange
from rankboard.services.filtering import CHALLENGE_BUCKETS

TIMEFRAMES = ["daily", "weekly", "monthly", "all_time"]


def summarize(entries: Sequence[LeaderboardEntry]) -> FilterOptions:
    """Build the facet catalog that populates client-side filter controls."""
    countries = sorted({entry.country for entry in entries if entry.country})
    regions = sorted({entry.region for entry in entries if entry.region})
    scores = [entry.score for entry in entries]

    return FilterOptions(
        challenge_types=list(CHALLENGE_BUCKETS),
        countries=countries,
        regions=regions,
        timeframes=list(TIMEFRAMES),
        score_range=ScoreRange(min=min(scores, default=0), max=max(scores, default=0)),
    )

"""Filter clauses applied to a leaderboard snapshot.

Every clause is an independent predicate over a single entry, so the order in
which clauses run never changes the result set.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from rankboard.models.leaderboard import FilterCriteria, LeaderboardEntry, as_utc

logger = logging.getLogger(__name__)

Clause = Callable[[LeaderboardEntry], bool]


@dataclass(frozen=True, slots=True)
class BucketRule:
    """Heuristic membership rule for a challenge-type bucket.

    A rule either requires ``field`` to reach ``minimum`` or, when ``within``
    is set, requires the timestamp in ``field`` to fall inside that window
    ending at the evaluation time.
    """

    field: str
    minimum: float | None = None
    within: timedelta | None = None

    def matches(self, entry: LeaderboardEntry, now: datetime) -> bool:
        value = getattr(entry, self.field)
        if self.within is not None:
            return value >= now - self.within
        return value >= self.minimum


CHALLENGE_BUCKETS: dict[str, BucketRule] = {
    "daily": BucketRule(field="last_active_at", within=timedelta(hours=24)),
    "weekly": BucketRule(field="last_active_at", within=timedelta(days=7)),
    "monthly": BucketRule(field="last_active_at", within=timedelta(days=30)),
    "puzzle": BucketRule(field="total_puzzles_completed", minimum=5),
    "module": BucketRule(field="total_modules_completed", minimum=3),
    "special_event": BucketRule(field="completion_percentage", minimum=80),
}


def _text_matches(entry: LeaderboardEntry, needle: str) -> bool:
    haystacks = (entry.username, entry.display_name, entry.user_id)
    return any(value is not None and needle in value.lower() for value in haystacks)


def build_clauses(criteria: FilterCriteria, now: datetime | None = None) -> list[Clause]:
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    clauses: list[Clause] = []

    # Geography only applies when the board type names that dimension.
    if criteria.type == "country" and criteria.country:
        clauses.append(lambda entry: entry.country == criteria.country)
    if criteria.type == "region" and criteria.region:
        clauses.append(lambda entry: entry.region == criteria.region)

    if criteria.challenge_type:
        rule = CHALLENGE_BUCKETS.get(criteria.challenge_type)
        if rule is None:
            logger.debug("Ignoring unknown challenge type %r", criteria.challenge_type)
        else:
            clauses.append(lambda entry: rule.matches(entry, now))

    if criteria.start_date is not None:
        clauses.append(lambda entry: entry.last_active_at >= criteria.start_date)
    if criteria.end_date is not None:
        clauses.append(lambda entry: entry.last_active_at <= criteria.end_date)

    if criteria.search:
        needle = criteria.search.lower()
        clauses.append(lambda entry: _text_matches(entry, needle))

    if criteria.min_score is not None:
        clauses.append(lambda entry: entry.score >= criteria.min_score)
    if criteria.max_score is not None:
        clauses.append(lambda entry: entry.score <= criteria.max_score)

    return clauses


def filter_entries(
    entries: Sequence[LeaderboardEntry],
    criteria: FilterCriteria,
    now: datetime | None = None,
) -> list[LeaderboardEntry]:
    clauses = build_clauses(criteria, now)
    if not clauses:
        return list(entries)
    filtered = [entry for entry in entries if all(clause(entry) for clause in clauses)]
    logger.debug("Filtered %d entries down to %d", len(entries), len(filtered))
    return filtered

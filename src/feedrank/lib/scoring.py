"""Pure feed scoring functions: no I/O, no framework imports.

Five signals, each clamped to [0.0, 1.0]:
  recency           : exponential decay, half-life = 24 h
  engagement        : likes + comments×2 + tips×10, saturating at 100
  creator_affinity  : raw affinity / 20, with a 0.5 floor bump for followed creators
  content_match     : 0.5 plus a bonus for the source that found the item
  watch_time_quality: completion / watch-time for video, view sampling otherwise

``trending_velocity`` also lives here so that trending order is computed in
Python over a plain time-window query rather than inside the store.
"""

import math
from dataclasses import dataclass, fields
from datetime import datetime, timezone

from ..models import (
    Candidate,
    CandidateSource,
    ContentItem,
    EngagementStat,
    MediaType,
    SignalBreakdown,
    UserContext,
)

RECENCY_HALF_LIFE_HOURS = 24.0

ENGAGEMENT_SATURATION = 100.0

# Raw affinity at which a non-followed creator reaches 1.0.
AFFINITY_CEILING = 20.0
FOLLOWED_AFFINITY_FLOOR = 0.5

CONTENT_MATCH_BASE = 0.5
SOURCE_BONUS: dict[CandidateSource, float] = {
    CandidateSource.FOLLOWED: 0.2,
    CandidateSource.SIMILAR: 0.15,
    CandidateSource.TRENDING: 0.1,
    CandidateSource.FRESH: 0.0,
}

# Neutral prior when no watch statistics exist.
WATCH_TIME_PRIOR = 0.5


@dataclass(frozen=True)
class WeightPreset:
    """Per-signal weights for the linear combiner.  Must sum to 1.0."""

    recency: float
    engagement: float
    creator_affinity: float
    content_match: float
    watch_time_quality: float = 0.0

    def __post_init__(self):
        total = sum(getattr(self, f.name) for f in fields(self))
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"weights must sum to 1.0, got {total}")


WATCH_TIME_WEIGHTS = WeightPreset(
    recency=0.20,
    engagement=0.25,
    creator_affinity=0.20,
    content_match=0.15,
    watch_time_quality=0.20,
)

NO_WATCH_TIME_WEIGHTS = WeightPreset(
    recency=0.25,
    engagement=0.30,
    creator_affinity=0.25,
    content_match=0.20,
)

WEIGHT_PRESETS: dict[str, WeightPreset] = {
    "watch_time": WATCH_TIME_WEIGHTS,
    "no_watch_time": NO_WATCH_TIME_WEIGHTS,
}


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def hours_since(created_at: datetime, now: datetime) -> float:
    """Hours between *created_at* and *now*; naive datetimes are taken as UTC."""
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - created_at).total_seconds() / 3600.0


def trending_velocity(item: ContentItem, now: datetime) -> float:
    """Engagement per hour since publication, with the age floored at one hour."""
    weighted = (
        item.like_count * 2
        + item.comment_count * 3
        + float(item.tip_total) * 10
        + item.view_count * 0.1
    )
    age = hours_since(item.created_at, now) if item.created_at else 0.0
    return weighted / max(age, 1.0)


def score_recency(created_at: datetime | None, now: datetime) -> float:
    """Returns 1.0 for a brand-new post, 0.5 after 24 h, 0.25 after 48 h, etc."""
    if created_at is None:
        return 0.0
    age = hours_since(created_at, now)
    if age <= 0:
        return 1.0
    return _clamp(math.pow(0.5, age / RECENCY_HALF_LIFE_HOURS))


def score_engagement(item: ContentItem) -> float:
    raw = item.like_count + item.comment_count * 2 + float(item.tip_total) * 10
    return _clamp(raw / ENGAGEMENT_SATURATION)


def score_creator_affinity(author_id: str, context: UserContext) -> float:
    affinity = context.creator_affinities.get(author_id, 0.0) / AFFINITY_CEILING
    if author_id in context.followed_creator_ids:
        return _clamp(FOLLOWED_AFFINITY_FLOOR + affinity)
    return _clamp(affinity)


def score_content_match(candidate: Candidate, context: UserContext) -> float:
    """Already-liked items score 0 so they are not surfaced again."""
    if candidate.item.id in context.liked_item_ids:
        return 0.0
    return _clamp(CONTENT_MATCH_BASE + SOURCE_BONUS[candidate.source])


def score_watch_time_quality(item: ContentItem, stat: EngagementStat | None) -> float:
    if stat is None:
        return WATCH_TIME_PRIOR

    if item.media_type == MediaType.VIDEO and item.duration_seconds and item.duration_seconds > 0:
        completion_rate = stat.avg_completion_percentage / 100
        expected_watch_time = item.duration_seconds * 0.5
        watch_ratio = min(1.0, stat.avg_watch_time_seconds / expected_watch_time)
        score = WATCH_TIME_PRIOR + completion_rate * 0.3 + watch_ratio * 0.2
    else:
        sample_ratio = stat.sample_view_count / max(item.view_count, 1)
        score = WATCH_TIME_PRIOR + min(0.3, sample_ratio * 0.3)

    return _clamp(score)


class SignalScorer:
    """Computes the five ranking signals for one candidate."""

    def score(
        self,
        candidate: Candidate,
        context: UserContext,
        stat: EngagementStat | None,
        now: datetime,
    ) -> SignalBreakdown:
        item = candidate.item
        return SignalBreakdown(
            recency=score_recency(item.created_at, now),
            engagement=score_engagement(item),
            creator_affinity=score_creator_affinity(item.author_id, context),
            content_match=score_content_match(candidate, context),
            watch_time_quality=score_watch_time_quality(item, stat),
        )


def score_composite(signals: SignalBreakdown, weights: WeightPreset = WATCH_TIME_WEIGHTS) -> float:
    """Weighted linear combination of the signals."""
    return (
        weights.recency * signals.recency
        + weights.engagement * signals.engagement
        + weights.creator_affinity * signals.creator_affinity
        + weights.content_match * signals.content_match
        + weights.watch_time_quality * signals.watch_time_quality
    )

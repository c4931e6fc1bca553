"""Tests for the pure scoring functions."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from ..models import (
    Candidate,
    CandidateSource,
    ContentItem,
    EngagementStat,
    MediaType,
    SignalBreakdown,
    UserContext,
)
from .scoring import (
    NO_WATCH_TIME_WEIGHTS,
    WATCH_TIME_WEIGHTS,
    WEIGHT_PRESETS,
    SignalScorer,
    WeightPreset,
    score_composite,
    score_content_match,
    score_creator_affinity,
    score_engagement,
    score_recency,
    score_watch_time_quality,
    trending_velocity,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def make_item(**overrides) -> ContentItem:
    fields = {
        "id": "post-1",
        "author_id": "creator-1",
        "created_at": NOW,
    }
    fields.update(overrides)
    return ContentItem(**fields)


def make_candidate(source=CandidateSource.FRESH, **overrides) -> Candidate:
    return Candidate(item=make_item(**overrides), source=source)


# ---------------------------------------------------------------------------
# Weight presets
# ---------------------------------------------------------------------------

class TestWeightPresets:
    @pytest.mark.parametrize("name", sorted(WEIGHT_PRESETS))
    def test_presets_sum_to_one(self, name):
        preset = WEIGHT_PRESETS[name]
        total = (
            preset.recency
            + preset.engagement
            + preset.creator_affinity
            + preset.content_match
            + preset.watch_time_quality
        )
        assert total == pytest.approx(1.0, abs=1e-9)

    def test_no_watch_time_preset_ignores_watch_time(self):
        assert NO_WATCH_TIME_WEIGHTS.watch_time_quality == 0.0

    def test_rejects_weights_not_summing_to_one(self):
        with pytest.raises(ValueError):
            WeightPreset(recency=0.5, engagement=0.5, creator_affinity=0.5, content_match=0.0)


# ---------------------------------------------------------------------------
# Recency
# ---------------------------------------------------------------------------

class TestRecency:
    def test_brand_new_is_one(self):
        assert score_recency(NOW, NOW) == pytest.approx(1.0)

    def test_half_life_24h(self):
        assert score_recency(NOW - timedelta(hours=24), NOW) == pytest.approx(0.5, abs=1e-9)

    def test_quarter_at_48h(self):
        assert score_recency(NOW - timedelta(hours=48), NOW) == pytest.approx(0.25, abs=1e-9)

    def test_missing_created_at_is_zero(self):
        assert score_recency(None, NOW) == 0.0

    def test_future_timestamp_clamped(self):
        assert score_recency(NOW + timedelta(hours=5), NOW) == 1.0

    def test_naive_datetime_treated_as_utc(self):
        naive = (NOW - timedelta(hours=24)).replace(tzinfo=None)
        assert score_recency(naive, NOW) == pytest.approx(0.5, abs=1e-9)


# ---------------------------------------------------------------------------
# Engagement
# ---------------------------------------------------------------------------

class TestEngagement:
    def test_weighted_raw_score(self):
        item = make_item(like_count=10, comment_count=5, tip_total=Decimal("2.0"))
        # 10 + 10 + 20 = 40
        assert score_engagement(item) == pytest.approx(0.4)

    def test_saturates_at_one(self):
        assert score_engagement(make_item(like_count=5000)) == 1.0

    def test_zero_engagement(self):
        assert score_engagement(make_item()) == 0.0


# ---------------------------------------------------------------------------
# Creator affinity
# ---------------------------------------------------------------------------

class TestCreatorAffinity:
    def test_unknown_creator_is_zero(self):
        assert score_creator_affinity("creator-1", UserContext()) == 0.0

    def test_scaled_by_twenty(self):
        ctx = UserContext(creator_affinities={"creator-1": 5.0})
        assert score_creator_affinity("creator-1", ctx) == pytest.approx(0.25)

    def test_followed_creator_gets_floor_bump(self):
        ctx = UserContext(
            followed_creator_ids={"creator-1"},
            creator_affinities={"creator-1": 5.0},
        )
        assert score_creator_affinity("creator-1", ctx) == pytest.approx(0.75)

    def test_followed_at_least_unfollowed_for_equal_affinity(self):
        affinities = {"followed": 7.0, "stranger": 7.0}
        ctx = UserContext(followed_creator_ids={"followed"}, creator_affinities=affinities)
        assert score_creator_affinity("followed", ctx) >= score_creator_affinity("stranger", ctx)

    def test_capped_at_one(self):
        ctx = UserContext(
            followed_creator_ids={"creator-1"},
            creator_affinities={"creator-1": 100.0},
        )
        assert score_creator_affinity("creator-1", ctx) == 1.0


# ---------------------------------------------------------------------------
# Content match
# ---------------------------------------------------------------------------

class TestContentMatch:
    @pytest.mark.parametrize(
        "source,expected",
        [
            (CandidateSource.FRESH, 0.5),
            (CandidateSource.TRENDING, 0.6),
            (CandidateSource.SIMILAR, 0.65),
            (CandidateSource.FOLLOWED, 0.7),
        ],
    )
    def test_source_bonus(self, source, expected):
        assert score_content_match(make_candidate(source), UserContext()) == pytest.approx(expected)

    @pytest.mark.parametrize("source", list(CandidateSource))
    def test_already_liked_is_zero(self, source):
        ctx = UserContext(liked_item_ids={"post-1"})
        assert score_content_match(make_candidate(source), ctx) == 0.0


# ---------------------------------------------------------------------------
# Watch-time quality
# ---------------------------------------------------------------------------

class TestWatchTimeQuality:
    def test_no_stat_is_neutral(self):
        assert score_watch_time_quality(make_item(), None) == 0.5

    def test_video_formula(self):
        item = make_item(media_type=MediaType.VIDEO, duration_seconds=60)
        stat = EngagementStat(avg_completion_percentage=80, avg_watch_time_seconds=40)
        # 0.5 + 0.8*0.3 + min(1, 40/30)*0.2
        assert score_watch_time_quality(item, stat) == pytest.approx(0.94)

    def test_video_without_duration_uses_view_sampling(self):
        item = make_item(media_type=MediaType.VIDEO, duration_seconds=0, view_count=10)
        stat = EngagementStat(avg_completion_percentage=100, sample_view_count=5)
        assert score_watch_time_quality(item, stat) == pytest.approx(0.65)

    def test_non_video_view_sampling(self):
        item = make_item(media_type=MediaType.PHOTO, view_count=100)
        stat = EngagementStat(sample_view_count=50)
        assert score_watch_time_quality(item, stat) == pytest.approx(0.65)

    def test_non_video_zero_views_does_not_divide_by_zero(self):
        item = make_item(view_count=0)
        stat = EngagementStat(sample_view_count=3)
        assert score_watch_time_quality(item, stat) == pytest.approx(0.8)

    def test_clamped_to_one(self):
        item = make_item(media_type=MediaType.VIDEO, duration_seconds=10)
        stat = EngagementStat(avg_completion_percentage=400, avg_watch_time_seconds=100)
        assert score_watch_time_quality(item, stat) == 1.0


# ---------------------------------------------------------------------------
# Trending velocity
# ---------------------------------------------------------------------------

class TestTrendingVelocity:
    def test_formula(self):
        item = make_item(
            like_count=10,
            comment_count=5,
            tip_total=Decimal("2"),
            view_count=100,
            created_at=NOW - timedelta(hours=2),
        )
        # (20 + 15 + 20 + 10) / 2
        assert trending_velocity(item, NOW) == pytest.approx(32.5)

    def test_age_floored_to_one_hour(self):
        item = make_item(like_count=10, created_at=NOW - timedelta(minutes=6))
        assert trending_velocity(item, NOW) == pytest.approx(20.0)

    def test_brand_new_post_does_not_divide_by_zero(self):
        assert trending_velocity(make_item(like_count=1), NOW) == pytest.approx(2.0)


# ---------------------------------------------------------------------------
# Scorer + composite
# ---------------------------------------------------------------------------

class TestSignalScorer:
    def test_all_signals_in_unit_interval(self):
        scorer = SignalScorer()
        ctx = UserContext(
            liked_item_ids={"p2"},
            followed_creator_ids={"c1"},
            creator_affinities={"c1": 300.0, "c2": 3.0},
        )
        items = [
            (make_candidate(CandidateSource.FOLLOWED, id="p1", author_id="c1", like_count=10**6), None),
            (make_candidate(CandidateSource.SIMILAR, id="p2", author_id="c2", created_at=None),
             EngagementStat(sample_view_count=10**6)),
            (make_candidate(CandidateSource.TRENDING, id="p3", author_id="c3",
                            media_type=MediaType.VIDEO, duration_seconds=1,
                            created_at=NOW + timedelta(days=1)),
             EngagementStat(avg_completion_percentage=1000, avg_watch_time_seconds=1000)),
        ]
        for candidate, stat in items:
            signals = scorer.score(candidate, ctx, stat, NOW)
            for value in signals.model_dump().values():
                assert 0.0 <= value <= 1.0

    def test_composite_uses_weights(self):
        signals = SignalBreakdown(
            recency=1.0, engagement=0.0, creator_affinity=0.0,
            content_match=0.0, watch_time_quality=1.0,
        )
        assert score_composite(signals, WATCH_TIME_WEIGHTS) == pytest.approx(0.4)
        assert score_composite(signals, NO_WATCH_TIME_WEIGHTS) == pytest.approx(0.25)

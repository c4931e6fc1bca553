"""Weighted-linear ranking and the top-level recommendation service.

``RecommenderService`` is constructed once at startup (see ``main.lifespan``)
and shared by request handlers; it holds no per-request state.
"""

import logging
from datetime import datetime, timezone

from ..models import (
    Candidate,
    ContentItem,
    EngagementStat,
    ScoredCandidate,
    UserContext,
    Visibility,
)
from .candidates import TRENDING_WINDOW_HOURS, CandidateGenerator
from .candidates.generator import own_items_removed
from .context import UserContextBuilder
from .fanout import gather_fail_fast
from .scoring import WATCH_TIME_WEIGHTS, SignalScorer, WeightPreset, score_composite
from .stores import ContentStore, EngagementStore, SocialGraphStore

logger = logging.getLogger(__name__)

# Raw candidates requested per returned feed slot.
CANDIDATE_MULTIPLIER = 3

DEFAULT_FEED_LIMIT = 20
DEFAULT_LIST_FEED_LIMIT = 50


def _created_ts(candidate: Candidate) -> float:
    created_at = candidate.item.created_at
    if created_at is None:
        return float("-inf")
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.timestamp()


class RankingEngine:
    """Scores candidates and orders them best-first.

    Ties on score are broken by newest ``created_at`` first, then by
    ascending content id, so the output is reproducible.
    """

    def __init__(self, weights: WeightPreset = WATCH_TIME_WEIGHTS, scorer: SignalScorer | None = None):
        self.weights = weights
        self._scorer = scorer or SignalScorer()

    def rank(
        self,
        candidates: list[Candidate],
        context: UserContext,
        stats: dict[str, EngagementStat] | None = None,
        now: datetime | None = None,
    ) -> list[ScoredCandidate]:
        stats = stats or {}
        now = now or datetime.now(timezone.utc)

        keyed: list[tuple[tuple, ScoredCandidate]] = []
        for candidate in candidates:
            signals = self._scorer.score(candidate, context, stats.get(candidate.item.id), now)
            score = score_composite(signals, self.weights)
            entry = ScoredCandidate(content_id=candidate.item.id, score=score, signals=signals)
            keyed.append(((-score, -_created_ts(candidate), candidate.item.id), entry))

        keyed.sort(key=lambda pair: pair[0])
        return [entry for _, entry in keyed]


class RecommenderService:
    """Entry point for personalised, trending and following feeds."""

    def __init__(
        self,
        content_store: ContentStore,
        graph_store: SocialGraphStore,
        engagement_store: EngagementStore,
        weights: WeightPreset = WATCH_TIME_WEIGHTS,
        generator: CandidateGenerator | None = None,
    ):
        self._content = content_store
        self._graph = graph_store
        self.generator = generator or CandidateGenerator.from_stores(
            content_store, graph_store, engagement_store
        )
        self.context_builder = UserContextBuilder(graph_store, engagement_store)
        self.engine = RankingEngine(weights)

    async def get_recommended_feed(
        self, viewer_id: str, limit: int = DEFAULT_FEED_LIMIT
    ) -> list[ScoredCandidate]:
        """Return at most *limit* scored entries for *viewer_id*, best first."""
        if limit <= 0:
            return []

        candidates, context = await gather_fail_fast(
            self.generator.generate_candidates(viewer_id, limit * CANDIDATE_MULTIPLIER),
            self.context_builder.build_context(viewer_id),
        )

        stats = await self._content.get_engagement_stats([c.item.id for c in candidates])

        ranked = self.engine.rank(candidates, context, stats, datetime.now(timezone.utc))
        logger.info(
            "Ranked %d candidates for viewer %s, returning %d",
            len(ranked), viewer_id, min(limit, len(ranked)),
        )
        return ranked[:limit]

    async def get_trending_feed(
        self, viewer_id: str, limit: int = DEFAULT_LIST_FEED_LIMIT
    ) -> list[ContentItem]:
        """Public items from the trending window by velocity, excluding the viewer's own."""
        if limit <= 0:
            return []
        items = await self._content.list_trending(
            Visibility.PUBLIC, TRENDING_WINDOW_HOURS, limit
        )
        return own_items_removed(items, viewer_id)

    async def get_following_feed(
        self, viewer_id: str, limit: int = DEFAULT_LIST_FEED_LIMIT
    ) -> list[ContentItem]:
        """Newest public items by creators the viewer follows."""
        if limit <= 0:
            return []
        following = await self._graph.get_following(viewer_id)
        if not following:
            return []
        return await self._content.list_by_authors(following, Visibility.PUBLIC, limit)

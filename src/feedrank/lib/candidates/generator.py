"""Multi-source candidate generation.

Fresh, Trending and Followed are fetched concurrently.  Similar is only
consulted when those three, after de-duplication, fall short of the target.

Merge order is Fresh → Trending → Followed → Similar; an item keeps the tag of
the first source that produced it.  Items authored by the viewer are always
dropped.  Any failing query fails the whole call.
"""

import logging
import math

from ...models import Candidate, ContentItem
from ..fanout import gather_fail_fast
from ..stores import ContentStore, EngagementStore, SocialGraphStore
from .base import SourceResult, SourcingStrategy
from .followed import FollowedSource
from .fresh import FreshSource
from .similar import SimilarSource
from .trending import TrendingSource

logger = logging.getLogger(__name__)


class _CandidateMerger:
    """Accumulates candidates, dropping repeats and the viewer's own items."""

    def __init__(self, viewer_id: str):
        self._viewer_id = viewer_id
        self._seen: set[str] = set()
        self.candidates: list[Candidate] = []

    def add(self, result: SourceResult) -> None:
        for item in result.items:
            if item.id in self._seen or item.author_id == self._viewer_id:
                continue
            self._seen.add(item.id)
            self.candidates.append(Candidate(item=item, source=result.source))


class CandidateGenerator:
    """Merges the four sourcing strategies into one de-duplicated candidate set."""

    def __init__(
        self,
        fresh: SourcingStrategy,
        trending: SourcingStrategy,
        followed: SourcingStrategy,
        similar: SourcingStrategy,
    ):
        self._fresh = fresh
        self._trending = trending
        self._followed = followed
        self._similar = similar

    @classmethod
    def from_stores(
        cls,
        content_store: ContentStore,
        graph_store: SocialGraphStore,
        engagement_store: EngagementStore,
    ) -> "CandidateGenerator":
        return cls(
            fresh=FreshSource(content_store),
            trending=TrendingSource(content_store),
            followed=FollowedSource(content_store, graph_store),
            similar=SimilarSource(content_store, engagement_store),
        )

    async def generate_candidates(self, viewer_id: str, target_count: int) -> list[Candidate]:
        if target_count <= 0:
            return []

        per_source = math.ceil(target_count / 3)
        merger = _CandidateMerger(viewer_id)

        results = await gather_fail_fast(
            self._fresh.fetch(viewer_id, per_source),
            self._trending.fetch(viewer_id, per_source),
            self._followed.fetch(viewer_id, per_source),
        )
        for result in results:
            merger.add(result)

        # ---- Similar: top up only when the primary sources undershoot ----
        if len(merger.candidates) < target_count:
            similar = await self._similar.fetch(viewer_id, per_source)
            merger.add(similar)

        logger.debug(
            "Generated %d candidates for viewer %s (target %d)",
            len(merger.candidates), viewer_id, target_count,
        )
        return merger.candidates


def own_items_removed(items: list[ContentItem], viewer_id: str) -> list[ContentItem]:
    """Drop items authored by *viewer_id*, preserving order."""
    return [item for item in items if item.author_id != viewer_id]

"""Similar-creators candidate source.

Generates candidates from the creators behind the viewer's recent likes:

1. Read the viewer's ``RECENT_LIKES_LIMIT`` most recent likes.
2. Collect the distinct authors of those liked items.
3. Fetch the newest public items by those authors, excluding the liked items.
"""

import logging

from ...models import CandidateSource, Visibility
from ..stores import ContentStore, EngagementStore
from .base import SourceResult, SourcingStrategy

logger = logging.getLogger(__name__)

# How many recent likes to consider when picking creators.
RECENT_LIKES_LIMIT = 10


class SimilarSource(SourcingStrategy):
    """Candidates by creators the viewer recently liked.

    Pipeline:
        viewer_id → recent likes → liked authors → their other items
    """

    def __init__(
        self,
        content_store: ContentStore,
        engagement_store: EngagementStore,
        likes_limit: int = RECENT_LIKES_LIMIT,
    ):
        self._content = content_store
        self._engagement = engagement_store
        self._likes_limit = likes_limit

    @property
    def source(self) -> CandidateSource:
        return CandidateSource.SIMILAR

    async def fetch(self, viewer_id: str, limit: int) -> SourceResult:
        # 1. Recent likes
        likes = await self._engagement.get_recent_likes(viewer_id, self._likes_limit)

        if not likes:
            logger.debug("No likes found for viewer %s", viewer_id)
            return SourceResult(source=self.source, items=[])

        # 2. Distinct authors, in like order
        authors = list(dict.fromkeys(like.author_id for like in likes))
        liked_ids = [like.content_id for like in likes]

        # 3. Their other public items
        items = await self._content.list_by_authors_excluding(
            authors, liked_ids, Visibility.PUBLIC, limit
        )
        return SourceResult(source=self.source, items=items)

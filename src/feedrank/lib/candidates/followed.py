"""Followed-creators candidate source.

1. Read the viewer's follow set from the social graph.
2. Fetch the newest public items authored by any followed creator.

A viewer who follows nobody gets no candidates; the content query is skipped.
"""

import logging

from ...models import CandidateSource, Visibility
from ..stores import ContentStore, SocialGraphStore
from .base import SourceResult, SourcingStrategy

logger = logging.getLogger(__name__)


class FollowedSource(SourcingStrategy):
    def __init__(self, content_store: ContentStore, graph_store: SocialGraphStore):
        self._content = content_store
        self._graph = graph_store

    @property
    def source(self) -> CandidateSource:
        return CandidateSource.FOLLOWED

    async def fetch(self, viewer_id: str, limit: int) -> SourceResult:
        following = await self._graph.get_following(viewer_id)

        if not following:
            logger.debug("Viewer %s follows nobody; skipping followed source", viewer_id)
            return SourceResult(source=self.source, items=[])

        items = await self._content.list_by_authors(following, Visibility.PUBLIC, limit)
        return SourceResult(source=self.source, items=items)

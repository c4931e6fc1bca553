"""Trending candidate source.

Public items created within the last ``TRENDING_WINDOW_HOURS``, ordered by
:func:`~feedrank.lib.scoring.trending_velocity`:

    (likes*2 + comments*3 + tips*10 + views*0.1) / max(hours_since_creation, 1)
"""

from ...models import CandidateSource, Visibility
from ..stores import ContentStore
from .base import SourceResult, SourcingStrategy

TRENDING_WINDOW_HOURS = 24


class TrendingSource(SourcingStrategy):
    def __init__(self, content_store: ContentStore, window_hours: float = TRENDING_WINDOW_HOURS):
        self._content = content_store
        self._window_hours = window_hours

    @property
    def source(self) -> CandidateSource:
        return CandidateSource.TRENDING

    async def fetch(self, viewer_id: str, limit: int) -> SourceResult:
        items = await self._content.list_trending(
            Visibility.PUBLIC, self._window_hours, limit
        )
        return SourceResult(source=self.source, items=items)

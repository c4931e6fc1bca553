"""Fresh candidate source: the newest public items, identical for every viewer."""

from ...models import CandidateSource, Visibility
from ..stores import ContentStore
from .base import SourceResult, SourcingStrategy


class FreshSource(SourcingStrategy):
    """Returns the most recent public items.

    ``viewer_id`` is accepted for interface consistency but is not used.
    """

    def __init__(self, content_store: ContentStore):
        self._content = content_store

    @property
    def source(self) -> CandidateSource:
        return CandidateSource.FRESH

    async def fetch(self, viewer_id: str, limit: int) -> SourceResult:
        items = await self._content.list_recent(Visibility.PUBLIC, limit)
        return SourceResult(source=self.source, items=items)

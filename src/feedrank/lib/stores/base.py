"""Read-only contracts for the stores the ranking engine depends on.

The engine never writes.  Implementations raise ``StoreQueryError`` when the
underlying read fails and must not retry or return partial data.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ...models import ContentItem, EngagementStat, LikeRecord, TipRecord, Visibility


class StoreQueryError(Exception):
    """A collaborator read failed."""

    def __init__(self, store: str, operation: str, detail: str | None = None):
        self.store = store
        self.operation = operation
        self.detail = detail
        message = f"{store}.{operation} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ContentStore(ABC):
    """Queries over content items."""

    @abstractmethod
    async def list_recent(self, visibility: Visibility, limit: int) -> list[ContentItem]:
        """Items with *visibility*, newest first."""
        ...

    @abstractmethod
    async def list_trending(
        self, visibility: Visibility, since_hours: float, limit: int
    ) -> list[ContentItem]:
        """Items created within *since_hours*, highest trending velocity first."""
        ...

    @abstractmethod
    async def list_by_authors(
        self, author_ids: Iterable[str], visibility: Visibility, limit: int
    ) -> list[ContentItem]:
        """Items by any of *author_ids*, newest first."""
        ...

    @abstractmethod
    async def list_by_authors_excluding(
        self,
        author_ids: Iterable[str],
        exclude_ids: Iterable[str],
        visibility: Visibility,
        limit: int,
    ) -> list[ContentItem]:
        """Like ``list_by_authors`` but never returns an id in *exclude_ids*."""
        ...

    @abstractmethod
    async def get_engagement_stats(
        self, content_ids: Iterable[str]
    ) -> dict[str, EngagementStat]:
        """Batched watch statistics.  Ids without recorded views are absent."""
        ...


class SocialGraphStore(ABC):
    @abstractmethod
    async def get_following(self, viewer_id: str) -> list[str]:
        """Ids of every creator *viewer_id* follows."""
        ...


class EngagementStore(ABC):
    @abstractmethod
    async def get_recent_likes(self, viewer_id: str, limit: int) -> list[LikeRecord]:
        """The viewer's most recent likes, newest first."""
        ...

    @abstractmethod
    async def get_recent_tips(self, viewer_id: str, limit: int) -> list[TipRecord]:
        """The viewer's most recent tips, newest first."""
        ...

"""In-memory store implementations.

Used for tests and local runs without Elasticsearch.  Every query is recorded
in ``calls`` as ``(operation, args)`` so callers can assert on query shape.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from ...models import ContentItem, EngagementStat, LikeRecord, TipRecord, Visibility
from ..scoring import trending_velocity
from .base import ContentStore, EngagementStore, SocialGraphStore


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _aware(created_at: datetime | None) -> datetime:
    if created_at is None:
        return _EPOCH
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=timezone.utc)
    return created_at


def _newest_first(items: Iterable[ContentItem]) -> list[ContentItem]:
    return sorted(items, key=lambda item: _aware(item.created_at), reverse=True)


class InMemoryContentStore(ContentStore):
    def __init__(
        self,
        items: Iterable[ContentItem] = (),
        engagement_stats: dict[str, EngagementStat] | None = None,
    ):
        self.items = list(items)
        self.engagement_stats = dict(engagement_stats or {})
        self.calls: list[tuple[str, tuple]] = []

    def _visible(self, visibility: Visibility) -> list[ContentItem]:
        return [item for item in self.items if item.visibility == visibility]

    async def list_recent(self, visibility, limit):
        self.calls.append(("list_recent", (visibility, limit)))
        return _newest_first(self._visible(visibility))[:limit]

    async def list_trending(self, visibility, since_hours, limit):
        self.calls.append(("list_trending", (visibility, since_hours, limit)))
        now = datetime.now(timezone.utc)
        cutoff = now - timedelta(hours=since_hours)
        window = [
            item for item in self._visible(visibility)
            if item.created_at is not None and _aware(item.created_at) >= cutoff
        ]
        window.sort(key=lambda item: trending_velocity(item, now), reverse=True)
        return window[:limit]

    async def list_by_authors(self, author_ids, visibility, limit):
        authors = set(author_ids)
        self.calls.append(("list_by_authors", (authors, visibility, limit)))
        matches = [item for item in self._visible(visibility) if item.author_id in authors]
        return _newest_first(matches)[:limit]

    async def list_by_authors_excluding(self, author_ids, exclude_ids, visibility, limit):
        authors = set(author_ids)
        excluded = set(exclude_ids)
        self.calls.append(("list_by_authors_excluding", (authors, excluded, visibility, limit)))
        matches = [
            item for item in self._visible(visibility)
            if item.author_id in authors and item.id not in excluded
        ]
        return _newest_first(matches)[:limit]

    async def get_engagement_stats(self, content_ids):
        ids = list(content_ids)
        self.calls.append(("get_engagement_stats", (ids,)))
        return {cid: self.engagement_stats[cid] for cid in ids if cid in self.engagement_stats}


class InMemorySocialGraphStore(SocialGraphStore):
    def __init__(self, following: dict[str, list[str]] | None = None):
        self.following = dict(following or {})
        self.calls: list[tuple[str, tuple]] = []

    async def get_following(self, viewer_id):
        self.calls.append(("get_following", (viewer_id,)))
        return list(self.following.get(viewer_id, []))


class InMemoryEngagementStore(EngagementStore):
    """Likes and tips per viewer, stored newest first."""

    def __init__(
        self,
        likes: dict[str, list[LikeRecord]] | None = None,
        tips: dict[str, list[TipRecord]] | None = None,
    ):
        self.likes = dict(likes or {})
        self.tips = dict(tips or {})
        self.calls: list[tuple[str, tuple]] = []

    async def get_recent_likes(self, viewer_id, limit):
        self.calls.append(("get_recent_likes", (viewer_id, limit)))
        return list(self.likes.get(viewer_id, []))[:limit]

    async def get_recent_tips(self, viewer_id, limit):
        self.calls.append(("get_recent_tips", (viewer_id, limit)))
        return list(self.tips.get(viewer_id, []))[:limit]

"""Elasticsearch-backed store implementations.

Document layout per index:

* ``posts``: id, author_id, content, media_type, like_count, comment_count,
  tip_total, view_count, duration_seconds, created_at, visibility
* ``likes``: user_id, post_id, post_author_id, created_at
* ``follows``: follower_id, following_id
* ``tips``: from_user_id, post_id, post_author_id, amount, created_at
* ``post_engagements``: post_id, completion_percentage, watch_time_seconds
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import TypeVar

from pydantic import ValidationError

from ...models import ContentItem, EngagementStat, LikeRecord, TipRecord, Visibility
from ..elasticsearch import iter_sources, scan_sources, search
from ..scoring import trending_velocity
from .base import ContentStore, EngagementStore, SocialGraphStore, StoreQueryError

logger = logging.getLogger(__name__)

POSTS_INDEX = "posts"
LIKES_INDEX = "likes"
FOLLOWS_INDEX = "follows"
TIPS_INDEX = "tips"
ENGAGEMENTS_INDEX = "post_engagements"

FOLLOWS_PAGE_SIZE = 1000

TRENDING_PAGE_SIZE = 500
DEFAULT_TRENDING_POOL_SIZE = 10_000

# Fields needed to compute trending velocity.
VELOCITY_FIELDS = [
    "id",
    "author_id",
    "like_count",
    "comment_count",
    "tip_total",
    "view_count",
    "created_at",
]

T = TypeVar("T")


def content_item_from_source(src: dict) -> ContentItem:
    """Build a ``ContentItem`` from a ``posts`` document."""
    return ContentItem(
        id=src["id"],
        author_id=src["author_id"],
        text_content=src.get("content"),
        media_type=src.get("media_type") or "text",
        like_count=src.get("like_count") or 0,
        comment_count=src.get("comment_count") or 0,
        tip_total=src.get("tip_total") or "0",
        view_count=src.get("view_count") or 0,
        duration_seconds=src.get("duration_seconds"),
        created_at=src.get("created_at"),
        visibility=src.get("visibility") or "public",
    )


def parse_documents(
    store: str, operation: str, docs: Iterable[dict], build: Callable[[dict], T]
) -> list[T]:
    """Apply *build* to every document; malformed documents raise ``StoreQueryError``."""
    try:
        return [build(doc) for doc in docs]
    except (KeyError, ValidationError) as exc:
        logger.error("Malformed document in %s.%s: %s", store, operation, exc)
        raise StoreQueryError(store, operation, "malformed document") from exc


def _engagement_stat_from_bucket(bucket: dict) -> tuple[str, EngagementStat]:
    return bucket["key"], EngagementStat(
        avg_completion_percentage=(bucket.get("avg_completion") or {}).get("value") or 0.0,
        avg_watch_time_seconds=(bucket.get("avg_watch_time") or {}).get("value") or 0.0,
        sample_view_count=bucket.get("doc_count") or 0,
    )


def _visibility_filter(visibility: Visibility) -> dict:
    return {"term": {"visibility": Visibility(visibility).value}}


class EsContentStore(ContentStore):
    """Content queries against the ``posts`` and ``post_engagements`` indices."""

    store_name = "content"

    def __init__(self, es, trending_pool_size: int = DEFAULT_TRENDING_POOL_SIZE):
        self._es = es
        self._trending_pool_size = trending_pool_size

    async def _search_posts(self, operation: str, query: dict, limit: int, sort=None) -> list[ContentItem]:
        data = await search(
            self._es,
            store=self.store_name,
            operation=operation,
            index=POSTS_INDEX,
            query=query,
            size=limit,
            sort=sort,
        )
        return parse_documents(
            self.store_name, operation, iter_sources(data), content_item_from_source
        )

    async def list_recent(self, visibility: Visibility, limit: int) -> list[ContentItem]:
        query = {"bool": {"filter": [_visibility_filter(visibility)]}}
        return await self._search_posts(
            "list_recent", query, limit, sort=[{"created_at": "desc"}]
        )

    async def list_trending(
        self, visibility: Visibility, since_hours: float, limit: int
    ) -> list[ContentItem]:
        """Order the whole time window by velocity, then load the top *limit* posts.

        The window is paged with ``search_after`` reading only the counter
        fields.  At most ``trending_pool_size`` posts are scored; a warning is
        logged when the window is larger.
        """
        operation = "list_trending"
        query = {
            "bool": {
                "filter": [
                    _visibility_filter(visibility),
                    {"range": {"created_at": {"gte": f"now-{int(since_hours)}h"}}},
                ]
            }
        }
        sources, truncated = await scan_sources(
            self._es,
            store=self.store_name,
            operation=operation,
            index=POSTS_INDEX,
            query=query,
            sort=[{"created_at": "desc"}, {"id": "asc"}],
            page_size=TRENDING_PAGE_SIZE,
            max_hits=self._trending_pool_size,
            _source=VELOCITY_FIELDS,
        )
        if truncated:
            logger.warning(
                "Trending window over the last %sh exceeds %d posts; older posts were not scored",
                since_hours, self._trending_pool_size,
            )

        window = parse_documents(self.store_name, operation, sources, content_item_from_source)
        now = datetime.now(timezone.utc)
        window.sort(key=lambda item: trending_velocity(item, now), reverse=True)
        top_ids = [item.id for item in window[:limit]]
        if not top_ids:
            return []

        full = await self._search_posts(operation, {"terms": {"id": top_ids}}, len(top_ids))
        by_id = {item.id: item for item in full}
        return [by_id[post_id] for post_id in top_ids if post_id in by_id]

    async def list_by_authors(
        self, author_ids: Iterable[str], visibility: Visibility, limit: int
    ) -> list[ContentItem]:
        authors = list(author_ids)
        if not authors:
            return []
        query = {
            "bool": {
                "filter": [
                    _visibility_filter(visibility),
                    {"terms": {"author_id": authors}},
                ]
            }
        }
        return await self._search_posts(
            "list_by_authors", query, limit, sort=[{"created_at": "desc"}]
        )

    async def list_by_authors_excluding(
        self,
        author_ids: Iterable[str],
        exclude_ids: Iterable[str],
        visibility: Visibility,
        limit: int,
    ) -> list[ContentItem]:
        authors = list(author_ids)
        if not authors:
            return []
        query = {
            "bool": {
                "filter": [
                    _visibility_filter(visibility),
                    {"terms": {"author_id": authors}},
                ],
                "must_not": [{"terms": {"id": list(exclude_ids)}}],
            }
        }
        return await self._search_posts(
            "list_by_authors_excluding", query, limit, sort=[{"created_at": "desc"}]
        )

    async def get_engagement_stats(
        self, content_ids: Iterable[str]
    ) -> dict[str, EngagementStat]:
        """One aggregation query over all *content_ids*."""
        ids = list(content_ids)
        if not ids:
            return {}

        aggs = {
            "by_post": {
                "terms": {"field": "post_id", "size": len(ids)},
                "aggs": {
                    "avg_completion": {"avg": {"field": "completion_percentage"}},
                    "avg_watch_time": {"avg": {"field": "watch_time_seconds"}},
                },
            }
        }
        data = await search(
            self._es,
            store=self.store_name,
            operation="get_engagement_stats",
            index=ENGAGEMENTS_INDEX,
            query={"terms": {"post_id": ids}},
            size=0,
            aggs=aggs,
        )

        buckets = data.get("aggregations", {}).get("by_post", {}).get("buckets", [])
        parsed = parse_documents(
            self.store_name, "get_engagement_stats", buckets, _engagement_stat_from_bucket
        )
        return dict(parsed)


class EsSocialGraphStore(SocialGraphStore):
    store_name = "social_graph"

    def __init__(self, es):
        self._es = es

    async def get_following(self, viewer_id: str) -> list[str]:
        """Every creator *viewer_id* follows, read page by page."""
        sources, _ = await scan_sources(
            self._es,
            store=self.store_name,
            operation="get_following",
            index=FOLLOWS_INDEX,
            query={"bool": {"filter": [{"term": {"follower_id": viewer_id}}]}},
            sort=[{"following_id": "asc"}],
            page_size=FOLLOWS_PAGE_SIZE,
            _source=["following_id"],
        )
        return [src["following_id"] for src in sources if src.get("following_id")]


class EsEngagementStore(EngagementStore):
    store_name = "engagement"

    def __init__(self, es):
        self._es = es

    async def get_recent_likes(self, viewer_id: str, limit: int) -> list[LikeRecord]:
        data = await search(
            self._es,
            store=self.store_name,
            operation="get_recent_likes",
            index=LIKES_INDEX,
            query={"bool": {"filter": [{"term": {"user_id": viewer_id}}]}},
            size=limit,
            sort=[{"created_at": "desc"}],
            _source=["post_id", "post_author_id"],
        )
        docs = (
            src for src in iter_sources(data)
            if src.get("post_id") and src.get("post_author_id")
        )
        return parse_documents(
            self.store_name,
            "get_recent_likes",
            docs,
            lambda src: LikeRecord(content_id=src["post_id"], author_id=src["post_author_id"]),
        )

    async def get_recent_tips(self, viewer_id: str, limit: int) -> list[TipRecord]:
        data = await search(
            self._es,
            store=self.store_name,
            operation="get_recent_tips",
            index=TIPS_INDEX,
            query={"bool": {"filter": [{"term": {"from_user_id": viewer_id}}]}},
            size=limit,
            sort=[{"created_at": "desc"}],
            _source=["post_author_id", "amount"],
        )
        docs = (src for src in iter_sources(data) if src.get("post_author_id"))
        return parse_documents(
            self.store_name,
            "get_recent_tips",
            docs,
            lambda src: TipRecord(author_id=src["post_author_id"], amount=src.get("amount") or "0"),
        )

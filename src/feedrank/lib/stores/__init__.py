"""Read-only store contracts consumed by the ranking engine.

Concrete Elasticsearch implementations live in :mod:`.es`.
"""

from .base import ContentStore, EngagementStore, SocialGraphStore, StoreQueryError

__all__ = [
    "ContentStore",
    "EngagementStore",
    "SocialGraphStore",
    "StoreQueryError",
]

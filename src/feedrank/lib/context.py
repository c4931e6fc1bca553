"""Per-viewer context: liked items, followed creators and creator affinity.

Affinity points per interaction:
  like   = 1
  follow = 5
  tip    = amount × 2

The accumulator is not normalised here; see ``scoring.score_creator_affinity``.
"""

import logging
from collections import defaultdict

from ..models import UserContext
from .fanout import gather_fail_fast
from .stores import EngagementStore, SocialGraphStore

logger = logging.getLogger(__name__)

LIKE_POINTS = 1.0
FOLLOW_POINTS = 5.0
TIP_MULTIPLIER = 2.0

RECENT_LIKES_LIMIT = 100
RECENT_TIPS_LIMIT = 50


class UserContextBuilder:
    def __init__(self, graph_store: SocialGraphStore, engagement_store: EngagementStore):
        self._graph = graph_store
        self._engagement = engagement_store

    async def build_context(self, viewer_id: str) -> UserContext:
        """Read likes, follows and tips concurrently and fold them into a context.

        A viewer with no history yields empty sets and no affinities.
        """
        likes, following, tips = await gather_fail_fast(
            self._engagement.get_recent_likes(viewer_id, RECENT_LIKES_LIMIT),
            self._graph.get_following(viewer_id),
            self._engagement.get_recent_tips(viewer_id, RECENT_TIPS_LIMIT),
        )

        affinities: dict[str, float] = defaultdict(float)
        for like in likes:
            affinities[like.author_id] += LIKE_POINTS
        for creator_id in following:
            affinities[creator_id] += FOLLOW_POINTS
        for tip in tips:
            affinities[tip.author_id] += float(tip.amount) * TIP_MULTIPLIER

        logger.debug(
            "Context for viewer %s: %d likes, %d follows, %d tips",
            viewer_id, len(likes), len(following), len(tips),
        )
        return UserContext(
            liked_item_ids={like.content_id for like in likes},
            followed_creator_ids=set(following),
            creator_affinities=dict(affinities),
        )

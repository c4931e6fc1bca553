"""Candidate generation for the feed ranking engine.

Four sourcing strategies (fresh, trending, followed, similar) are merged by
:class:`CandidateGenerator` into a de-duplicated, source-tagged candidate set.
"""

from .base import SourceResult, SourcingStrategy
from .followed import FollowedSource
from .fresh import FreshSource
from .generator import CandidateGenerator
from .similar import SimilarSource
from .trending import TRENDING_WINDOW_HOURS, TrendingSource

__all__ = [
    "CandidateGenerator",
    "FollowedSource",
    "FreshSource",
    "SimilarSource",
    "SourceResult",
    "SourcingStrategy",
    "TRENDING_WINDOW_HOURS",
    "TrendingSource",
]

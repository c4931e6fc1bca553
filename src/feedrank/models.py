from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MediaType(str, Enum):
    TEXT = "text"
    PHOTO = "photo"
    VIDEO = "video"


class Visibility(str, Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class CandidateSource(str, Enum):
    """The sourcing strategy that first discovered a candidate."""

    FRESH = "fresh"
    TRENDING = "trending"
    FOLLOWED = "followed"
    SIMILAR = "similar"


class ContentItem(BaseModel):
    """A post as read from the content store."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Content id")
    author_id: str = Field(..., description="Id of the creator who posted it")
    text_content: str | None = Field(None, description="Post text content")
    media_type: MediaType = Field(MediaType.TEXT)
    like_count: int = Field(0, ge=0)
    comment_count: int = Field(0, ge=0)
    tip_total: Decimal = Field(Decimal("0"), ge=0)
    view_count: int = Field(0, ge=0)
    duration_seconds: float | None = Field(
        None, description="Video length in seconds (video only)"
    )
    created_at: datetime | None = None
    visibility: Visibility = Field(Visibility.PUBLIC)


class Candidate(BaseModel):
    """A content item under consideration, tagged with its source."""

    model_config = ConfigDict(frozen=True)

    item: ContentItem
    source: CandidateSource


class LikeRecord(BaseModel):
    content_id: str
    author_id: str


class TipRecord(BaseModel):
    author_id: str
    amount: Decimal = Field(Decimal("0"))


class UserContext(BaseModel):
    """Per-request view of a viewer's history.

    ``creator_affinities`` holds raw, un-normalised accumulator values.
    """

    liked_item_ids: set[str] = Field(default_factory=set)
    followed_creator_ids: set[str] = Field(default_factory=set)
    creator_affinities: dict[str, float] = Field(default_factory=dict)


class EngagementStat(BaseModel):
    """Aggregated watch statistics for one content item."""

    avg_completion_percentage: float = 0.0
    avg_watch_time_seconds: float = 0.0
    sample_view_count: int = 0


class SignalBreakdown(BaseModel):
    recency: float = Field(..., ge=0, le=1)
    engagement: float = Field(..., ge=0, le=1)
    creator_affinity: float = Field(..., ge=0, le=1)
    content_match: float = Field(..., ge=0, le=1)
    watch_time_quality: float = Field(..., ge=0, le=1)


class ScoredCandidate(BaseModel):
    """A ranked feed entry."""

    content_id: str
    score: float
    signals: SignalBreakdown

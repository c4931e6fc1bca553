"""Feed router – exposes the ranking engine via HTTP.

GET /feed/recommended
    Personalised feed ranked by the weighted signal model.

GET /feed/trending
    Public items from the last 24 h ordered by trending velocity.

GET /feed/following
    Newest public items by creators the viewer follows.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..dependencies import Recommender
from ..lib.stores import StoreQueryError
from ..models import ContentItem, ScoredCandidate
from ..security import verify_api_key

router = APIRouter(tags=["feed"], dependencies=[Depends(verify_api_key)])

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class RecommendedFeedResponse(BaseModel):
    items: list[ScoredCandidate]


class ContentFeedResponse(BaseModel):
    items: list[ContentItem]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/feed/recommended", response_model=RecommendedFeedResponse)
async def feed_recommended(
    recommender: Recommender,
    viewer_id: str = Query(..., min_length=1, description="Id of the requesting viewer"),
    limit: int = Query(20, ge=1, le=100),
) -> RecommendedFeedResponse:
    """Return the viewer's personalised feed, best first, with signal breakdowns."""
    try:
        items = await recommender.get_recommended_feed(viewer_id, limit)
    except StoreQueryError as exc:
        logger.exception("Recommended feed failed for viewer %s", viewer_id)
        raise HTTPException(status_code=502, detail="Feed ranking failed") from exc
    return RecommendedFeedResponse(items=items)


@router.get("/feed/trending", response_model=ContentFeedResponse)
async def feed_trending(
    recommender: Recommender,
    viewer_id: str = Query(..., min_length=1),
    limit: int = Query(50, ge=1, le=100),
) -> ContentFeedResponse:
    try:
        items = await recommender.get_trending_feed(viewer_id, limit)
    except StoreQueryError as exc:
        logger.exception("Trending feed failed for viewer %s", viewer_id)
        raise HTTPException(status_code=502, detail="Trending feed failed") from exc
    return ContentFeedResponse(items=items)


@router.get("/feed/following", response_model=ContentFeedResponse)
async def feed_following(
    recommender: Recommender,
    viewer_id: str = Query(..., min_length=1),
    limit: int = Query(50, ge=1, le=100),
) -> ContentFeedResponse:
    try:
        items = await recommender.get_following_feed(viewer_id, limit)
    except StoreQueryError as exc:
        logger.exception("Following feed failed for viewer %s", viewer_id)
        raise HTTPException(status_code=502, detail="Following feed failed") from exc
    return ContentFeedResponse(items=items)

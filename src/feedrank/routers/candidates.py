"""Candidates router – exposes candidate generation via HTTP.

POST /candidates/generate
    Run every sourcing strategy for a viewer and return the de-duplicated,
    source-tagged candidate set before scoring.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..dependencies import Recommender
from ..lib.stores import StoreQueryError
from ..models import Candidate
from ..security import verify_api_key

router = APIRouter(tags=["candidates"], dependencies=[Depends(verify_api_key)])

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class CandidateGenerateRequest(BaseModel):
    """Request body for the generate endpoint."""

    viewer_id: str = Field(..., min_length=1, description="Id of the requesting viewer")
    num_candidates: int = Field(60, ge=1, le=1000, description="Target candidate count")


class CandidateGenerateResponse(BaseModel):
    """Response body returning de-duplicated candidates from all sources."""

    candidates: list[Candidate]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/candidates/generate", response_model=CandidateGenerateResponse)
async def candidates_generate(
    payload: CandidateGenerateRequest,
    recommender: Recommender,
) -> CandidateGenerateResponse:
    """Run candidate generation and return candidates in merge order.

    The list may be shorter or longer than ``num_candidates``: every source
    is asked for a third of the target and nothing is truncated.
    """
    try:
        candidates = await recommender.generator.generate_candidates(
            payload.viewer_id, payload.num_candidates
        )
    except StoreQueryError as exc:
        logger.exception("Candidate generation failed for viewer %s", payload.viewer_id)
        raise HTTPException(status_code=502, detail="Candidate generation failed") from exc

    return CandidateGenerateResponse(candidates=candidates)

"""Health checks.

GET /health
    Liveness; always ok once the process serves requests.

GET /health/ready
    Readiness; 503 until the lifespan has wired the recommender.
"""

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str


@router.get("/health", response_model=HealthResponse, status_code=200)
async def healthcheck():
    return {"status": "ok"}


@router.get("/health/ready", response_model=HealthResponse)
async def readiness(request: Request):
    if getattr(request.app.state, "recommender", None) is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Recommender not initialised",
        )
    return {"status": "ready"}

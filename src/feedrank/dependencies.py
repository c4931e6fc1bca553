from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .lib.ranking import RecommenderService


def get_recommender(request: Request) -> RecommenderService:
    """The application-scoped service built in the FastAPI lifespan."""
    recommender = getattr(request.app.state, "recommender", None)
    if recommender is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Recommender not initialised",
        )
    return recommender


Recommender = Annotated[RecommenderService, Depends(get_recommender)]

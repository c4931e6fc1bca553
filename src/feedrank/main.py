import logging
from contextlib import asynccontextmanager

from elasticsearch import AsyncElasticsearch
from fastapi import Depends, FastAPI

from .config import Settings, load_settings
from .lib.ranking import RecommenderService
from .lib.scoring import WEIGHT_PRESETS
from .lib.stores.es import EsContentStore, EsEngagementStore, EsSocialGraphStore
from .routers import candidates, feed, health
from .security import verify_api_key

logger = logging.getLogger(__name__)


def build_recommender(es, settings: Settings) -> RecommenderService:
    """Wire the Elasticsearch stores into a ``RecommenderService``."""
    try:
        weights = WEIGHT_PRESETS[settings.weight_preset]
    except KeyError:
        raise ValueError(
            f"Unknown FEED_WEIGHT_PRESET {settings.weight_preset!r}; "
            f"expected one of {sorted(WEIGHT_PRESETS)}"
        ) from None
    return RecommenderService(
        content_store=EsContentStore(es, trending_pool_size=settings.trending_pool_size),
        graph_store=EsSocialGraphStore(es),
        engagement_store=EsEngagementStore(es),
        weights=weights,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    logging.getLogger("feedrank").setLevel(settings.log_level)
    es = AsyncElasticsearch(settings.elasticsearch_url, api_key=settings.elasticsearch_api_key)
    app.state.es = es
    app.state.recommender = build_recommender(es, settings)
    logger.info("Feed ranking service started (weights: %s)", settings.weight_preset)
    try:
        yield
    finally:
        await es.close()


app = FastAPI(
    title="Feedrank API",
    description="An API server for personalised feed ranking and candidate generation",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(feed.router)
app.include_router(candidates.router)


@app.get("/", dependencies=[Depends(verify_api_key)])
async def root():
    return {"message": "Feedrank API"}

"""Environment-driven settings.

Values are read when ``load_settings`` is called, after ``.env`` has been
loaded by the package ``__init__``.
"""

import os
from dataclasses import dataclass

DEFAULT_ELASTICSEARCH_URL = "http://localhost:9200"
DEFAULT_WEIGHT_PRESET = "watch_time"
DEFAULT_TRENDING_POOL_SIZE = 10_000
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    elasticsearch_url: str = DEFAULT_ELASTICSEARCH_URL
    elasticsearch_api_key: str | None = None
    weight_preset: str = DEFAULT_WEIGHT_PRESET
    trending_pool_size: int = DEFAULT_TRENDING_POOL_SIZE
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings() -> Settings:
    pool_size = os.environ.get("TRENDING_POOL_SIZE")
    return Settings(
        elasticsearch_url=os.environ.get("ELASTICSEARCH_URL", DEFAULT_ELASTICSEARCH_URL),
        elasticsearch_api_key=os.environ.get("ELASTICSEARCH_API_KEY") or None,
        weight_preset=os.environ.get("FEED_WEIGHT_PRESET", DEFAULT_WEIGHT_PRESET),
        trending_pool_size=int(pool_size) if pool_size else DEFAULT_TRENDING_POOL_SIZE,
        log_level=os.environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )

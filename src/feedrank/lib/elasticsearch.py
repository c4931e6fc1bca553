"""Shared Elasticsearch utilities.

Helpers for working with Elasticsearch responses that are used across the
Elasticsearch-backed stores.
"""

import logging

from elastic_transport import ObjectApiResponse, TransportError
from elasticsearch import ApiError

from .stores.base import StoreQueryError

logger = logging.getLogger(__name__)


def unwrap_es_response(resp, store: str = "elasticsearch", operation: str = "search") -> dict:
    """Unwrap an Elasticsearch response, handling both ObjectApiResponse and dict.

    Raises ``StoreQueryError`` if the response type is unexpected.
    """
    if isinstance(resp, ObjectApiResponse):
        return resp.body
    elif isinstance(resp, dict):
        return resp
    else:
        logger.error("Unexpected Elasticsearch response type: %s", type(resp))
        raise StoreQueryError(store, operation, "invalid Elasticsearch response")


async def search(es, *, store: str, operation: str, **kwargs) -> dict:
    """Run ``es.search(**kwargs)`` and return the unwrapped body.

    Client and transport failures surface as ``StoreQueryError`` so callers
    only need to handle one error type.
    """
    try:
        resp = await es.search(**kwargs)
    except (ApiError, TransportError) as exc:
        logger.error(
            "Elasticsearch query failed: %s.%s on index %s",
            store, operation, kwargs.get("index"),
        )
        raise StoreQueryError(store, operation, str(exc)) from exc
    return unwrap_es_response(resp, store, operation)


def iter_sources(data: dict):
    """Yield the ``_source`` document of every hit in a search body."""
    for hit in data.get("hits", {}).get("hits", []):
        yield hit.get("_source") or {}


async def scan_sources(
    es,
    *,
    store: str,
    operation: str,
    sort: list,
    page_size: int,
    max_hits: int | None = None,
    **kwargs,
) -> tuple[list[dict], bool]:
    """Page through every hit of a query with ``search_after``.

    *sort* must end in a unique field so pages never overlap.  Returns the
    ``_source`` documents and whether reading stopped at *max_hits* before the
    result set was exhausted.
    """
    sources: list[dict] = []
    search_after = None
    while True:
        size = page_size
        if max_hits is not None:
            size = min(page_size, max_hits - len(sources))
            if size <= 0:
                return sources, True

        params = dict(kwargs, sort=sort, size=size)
        if search_after is not None:
            params["search_after"] = search_after
        data = await search(es, store=store, operation=operation, **params)

        hits = data.get("hits", {}).get("hits", [])
        sources.extend(hit.get("_source") or {} for hit in hits)
        if len(hits) < size:
            return sources, False

        search_after = hits[-1].get("sort")
        if not search_after:
            raise StoreQueryError(store, operation, "hit without sort values")

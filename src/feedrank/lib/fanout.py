"""Concurrent fan-out of independent reads."""

import asyncio
from collections.abc import Awaitable
from typing import Any


async def gather_fail_fast(*aws: Awaitable[Any]) -> list[Any]:
    """Await all *aws* concurrently and return their results in order.

    The first failure is re-raised unchanged and every sibling that is still
    running gets cancelled, so a request never continues on partial data.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        raise

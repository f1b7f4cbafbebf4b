from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from app.db.session import dispose_engine

ResultT = TypeVar("ResultT")


async def _with_worker_engine(job: Awaitable[ResultT]) -> ResultT:
    # Each celery invocation owns its own event loop, so pooled asyncpg
    # connections from a previous loop must never be reused.
    await dispose_engine()
    try:
        return await job
    finally:
        await dispose_engine()


def run_async_job(job: Awaitable[ResultT]) -> ResultT:
    """Run a coroutine to completion from a synchronous celery task."""
    return asyncio.run(_with_worker_engine(job))

"""
Dashboard aggregate counts.

The four list endpoints are fetched concurrently. A failed request counts as
0; when the whole batch is cancelled (page teardown or timeout) every
pending count reads 0.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, Optional

from ..infra.exceptions import PlayproError, handle_async_errors
from ..infra.logging import get_logger
from .client import ApiSettings, BackendClient, unwrap
from .resources import ADMIN_BRANCHES, COACHES, PLAY_KIDS, SPORTS

logger = get_logger(__name__)

COUNT_ENDPOINTS: Dict[str, str] = {
    "play_kids": PLAY_KIDS,
    "coaches": COACHES,
    "sports": SPORTS,
    "branches": ADMIN_BRANCHES,
}


@dataclass(frozen=True)
class DashboardCounts:
    play_kids: int = 0
    coaches: int = 0
    sports: int = 0
    branches: int = 0


async def _count(client: BackendClient, endpoint: str) -> int:
    try:
        data = unwrap(await client.get(endpoint))
    except PlayproError as e:
        logger.warning(f"Count for {endpoint} failed: {e.message}")
        return 0
    return len(data) if isinstance(data, list) else 0


async def fetch_counts(client: BackendClient, cancel: Optional[asyncio.Event] = None) -> DashboardCounts:
    """Gather all counts; setting ``cancel`` aborts the outstanding requests."""
    tasks = {name: asyncio.ensure_future(_count(client, ep)) for name, ep in COUNT_ENDPOINTS.items()}
    waiter = asyncio.ensure_future(cancel.wait()) if cancel is not None else None
    try:
        pending = set(tasks.values())
        if waiter is not None:
            pending.add(waiter)
        while pending - {waiter}:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            if waiter is not None and waiter in done:
                logger.info("Dashboard count fetch cancelled")
                break
    finally:
        leftover = [t for t in tasks.values() if not t.done()]
        if waiter is not None and not waiter.done():
            leftover.append(waiter)
        for t in leftover:
            t.cancel()
        # cancelled requests must settle before the client session closes
        await asyncio.gather(*leftover, return_exceptions=True)

    values = {}
    for name, task in tasks.items():
        if task.done() and not task.cancelled():
            values[name] = task.result()
        else:
            values[name] = 0
    return DashboardCounts(**values)


@handle_async_errors(logger)
async def _load(settings: ApiSettings, timeout: float) -> DashboardCounts:
    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    handle = loop.call_later(timeout, cancel.set)
    try:
        async with BackendClient(settings) as client:
            return await fetch_counts(client, cancel)
    finally:
        handle.cancel()


def load_dashboard_counts(settings: ApiSettings, timeout: float = 10.0) -> DashboardCounts:
    """Blocking entry point for the dashboard page."""
    return asyncio.run(_load(settings, timeout))

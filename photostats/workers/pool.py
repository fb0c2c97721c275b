"""Worker pool statistics collaborators.

The report forwards whatever snapshot the pool exposes without inspecting
it.  A provider returns a JSON-like dict, or None when the pool has nothing
to report.  Failures are left to the caller, which substitutes ``null``.
"""

import logging
from collections.abc import Callable
from typing import Any, Protocol

import httpx

from photostats.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5


class WorkerPoolStatsProvider(Protocol):
    async def get_pool_stats(self) -> dict[str, Any] | None: ...


class StaticWorkerPoolStats:
    """Wrap an in-process callable that returns the pool's stats snapshot."""

    def __init__(self, snapshot: Callable[[], dict[str, Any] | None]) -> None:
        self._snapshot = snapshot

    async def get_pool_stats(self) -> dict[str, Any] | None:
        return self._snapshot()


class HttpWorkerPoolStats:
    """Fetch the stats snapshot from a worker pool's HTTP endpoint."""

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.url = url
        self.timeout = timeout

    async def get_pool_stats(self) -> dict[str, Any] | None:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(self.url, headers={"Accept": "application/json"})
            _ = resp.raise_for_status()
            body = resp.json()
        if not isinstance(body, dict):
            logger.warning("Worker pool stats at %s is not a JSON object; ignoring", self.url)
            return None
        return body


def provider_from_settings() -> WorkerPoolStatsProvider | None:
    """Build the configured provider, or None if no worker pool is configured."""
    settings = get_settings()
    if not settings.worker_pool_url:
        return None
    return HttpWorkerPoolStats(settings.worker_pool_url, timeout=settings.probe_timeout_seconds)

"""Diagnostics report assembly.

Host probes (OS label, memory, uptime) and the worker pool lookup run
concurrently, each bounded by the probe timeout and wrapped so that a
failure contributes a safe default instead of aborting the report.  Record
store queries are the report's primary data: their failures propagate and
no partial report is returned.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from photostats.config import get_settings
from photostats.observability.metrics import (
    PROBE_FAILURES_TOTAL,
    REPORT_ASSEMBLY_DURATION,
    REPORTS_TOTAL,
)
from photostats.probes.containment import ContainmentDetector
from photostats.probes.memory import MemoryProbe
from photostats.probes.os_identifier import UNKNOWN_LABEL, OSIdentifier
from photostats.probes.uptime import process_uptime
from photostats.report.models import DiagnosticsReport, MemoryInfo, StorageStats, TrendPoint, WindowCounts
from photostats.report.trends import TrendSeriesBuilder, trend_window_start
from photostats.report.windows import StorageStatsAggregator, TimeWindowCounter
from photostats.store.records import RecordStore
from photostats.workers.pool import WorkerPoolStatsProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DiagnosticsReportAssembler:
    """Build a DiagnosticsReport from an injected record store and optional worker pool."""

    def __init__(
        self,
        store: RecordStore,
        worker_pool: WorkerPoolStatsProvider | None = None,
        *,
        os_identifier: OSIdentifier | None = None,
        memory_probe: MemoryProbe | None = None,
        uptime: Callable[[], float] = process_uptime,
        probe_timeout: float | None = None,
    ) -> None:
        if os_identifier is None or memory_probe is None:
            detector = ContainmentDetector()
            os_identifier = os_identifier or OSIdentifier(detector)
            memory_probe = memory_probe or MemoryProbe(detector)
        self.store = store
        self.worker_pool = worker_pool
        self.os_identifier = os_identifier
        self.memory_probe = memory_probe
        self.uptime = uptime
        self.probe_timeout = probe_timeout if probe_timeout is not None else get_settings().probe_timeout_seconds
        self.window_counter = TimeWindowCounter(store)
        self.storage_aggregator = StorageStatsAggregator(store)
        self.trend_builder = TrendSeriesBuilder()

    # -----------------------------------------------------------------------
    # Fault-isolated probes
    # -----------------------------------------------------------------------

    async def _guarded(self, name: str, call: Awaitable[T], default: T) -> T:
        """Await *call* within the probe timeout, returning *default* on any failure."""
        try:
            return await asyncio.wait_for(call, timeout=self.probe_timeout)
        except TimeoutError:
            logger.warning("Probe %s timed out after %.1fs", name, self.probe_timeout)
        except Exception as exc:
            logger.warning("Probe %s failed: %s", name, exc)
        PROBE_FAILURES_TOTAL.labels(probe=name).inc()
        return default

    async def _worker_pool_stats(self) -> dict[str, Any] | None:
        if self.worker_pool is None:
            return None
        snapshot = await self.worker_pool.get_pool_stats()
        if snapshot is not None and not isinstance(snapshot, dict):
            logger.warning("Worker pool returned %s, expected an object", type(snapshot).__name__)
            PROBE_FAILURES_TOTAL.labels(probe="worker_pool").inc()
            return None
        return snapshot

    # -----------------------------------------------------------------------
    # Record store (fatal on failure)
    # -----------------------------------------------------------------------

    def _query_store(self, now: datetime) -> tuple[WindowCounts, StorageStats, tuple[TrendPoint, ...]]:
        photos = self.window_counter.counts(now)
        storage = self.storage_aggregator.aggregate()
        raw_trend = self.store.daily_counts(trend_window_start(now))
        trends = self.trend_builder.build(raw_trend, now)
        return photos, storage, trends

    # -----------------------------------------------------------------------
    # Assembly
    # -----------------------------------------------------------------------

    async def assemble(self, now: datetime | None = None) -> DiagnosticsReport:
        """Run every probe and query, returning one immutable report.

        Raises:
            RecordStoreError: If any record store query fails.
        """
        now = now or datetime.now(UTC)
        start = time.monotonic()

        try:
            store_task = asyncio.to_thread(self._query_store, now)
            running_on, memory, uptime, worker_pool, store_result = await asyncio.gather(
                self._guarded("os", asyncio.to_thread(self.os_identifier.identify), UNKNOWN_LABEL),
                self._guarded("memory", asyncio.to_thread(self.memory_probe.probe), MemoryInfo(used=0, total=0)),
                self._guarded("uptime", asyncio.to_thread(self.uptime), 0.0),
                self._guarded("worker_pool", self._worker_pool_stats(), None),
                store_task,
            )
        except Exception:
            REPORTS_TOTAL.labels(status="error").inc()
            REPORT_ASSEMBLY_DURATION.observe(time.monotonic() - start)
            raise

        photos, storage, trends = store_result
        report = DiagnosticsReport(
            uptime=uptime or 0.0,
            running_on=running_on,
            memory=memory,
            photos=photos,
            worker_pool=worker_pool,
            storage=storage,
            trends=trends,
            timestamp=datetime.now(UTC).isoformat(),
        )

        REPORTS_TOTAL.labels(status="success").inc()
        REPORT_ASSEMBLY_DURATION.observe(time.monotonic() - start)
        return report

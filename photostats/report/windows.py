"""Photo counts over fixed calendar windows, and storage size aggregates.

Window boundaries are anchored to the same "now" (UTC):

- today: start of the current day
- this week: start of the day 7 days before today (a rolling window, not an
  ISO week)
- this month: start of the current month
- total: no boundary

Each count is an independent read.  The store is not locked between them, so
under concurrent uploads the four numbers are a best-effort snapshot.
"""

from datetime import UTC, datetime, timedelta

from photostats.report.models import StorageStats, WindowCounts
from photostats.store.records import RecordStore

WEEK_LOOKBACK_DAYS = 7


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def window_boundaries(now: datetime) -> dict[str, datetime]:
    """Return the today / this_week / this_month boundaries for *now*."""
    today = start_of_day(as_utc(now))
    return {
        "today": today,
        "this_week": today - timedelta(days=WEEK_LOOKBACK_DAYS),
        "this_month": today.replace(day=1),
    }


class TimeWindowCounter:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def count(self, boundary: datetime | None) -> int:
        """Count records taken at or after *boundary* (all records if None)."""
        if boundary is None:
            return self.store.count_all()
        return self.store.count_since(boundary)

    def counts(self, now: datetime) -> WindowCounts:
        bounds = window_boundaries(now)
        return WindowCounts(
            total=self.count(None),
            today=self.count(bounds["today"]),
            this_week=self.count(bounds["this_week"]),
            this_month=self.count(bounds["this_month"]),
        )


class StorageStatsAggregator:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def aggregate(self) -> StorageStats:
        total_size, average_size, max_size = self.store.size_stats()
        return StorageStats(
            total_size=total_size or 0,
            average_size=average_size or 0,
            max_size=max_size or 0,
        )

"""Dense 7-day upload trend from sparse per-date counts.

The grouped store query only returns dates that have at least one photo, so
days without activity are missing from its result.  The builder walks every
calendar day in the window and fills those gaps with zero.
"""

from collections.abc import Mapping
from datetime import date, datetime, timedelta

from photostats.report.models import TrendPoint
from photostats.report.windows import as_utc, start_of_day

TREND_DAYS = 7


def trend_window_start(now: datetime) -> datetime:
    """Start of the first day in the trend window (``now - 6 days``, midnight)."""
    return start_of_day(as_utc(now)) - timedelta(days=TREND_DAYS - 1)


def trend_dates(now: datetime) -> list[date]:
    """The calendar dates of the window, oldest first."""
    first = trend_window_start(now).date()
    return [first + timedelta(days=offset) for offset in range(TREND_DAYS)]


class TrendSeriesBuilder:
    def build(self, raw_counts: Mapping[date | str, int], now: datetime) -> tuple[TrendPoint, ...]:
        """Return one point per day in the window, most recent first.

        *raw_counts* keys may be ``date`` objects or ``YYYY-MM-DD`` strings.
        Keys outside the window are ignored.
        """
        lookup: dict[date, int] = {}
        for key, count in raw_counts.items():
            if isinstance(key, datetime):
                day = key.date()
            elif isinstance(key, date):
                day = key
            else:
                day = date.fromisoformat(str(key))
            lookup[day] = lookup.get(day, 0) + int(count)

        ascending = [TrendPoint(date=day, count=lookup.get(day, 0)) for day in trend_dates(now)]
        return tuple(reversed(ascending))

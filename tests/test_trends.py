"""Unit tests for trend series gap-filling and window boundaries: no I/O."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from photostats.report.models import TrendPoint
from photostats.report.trends import TREND_DAYS, TrendSeriesBuilder, trend_dates, trend_window_start
from photostats.report.windows import start_of_day, window_boundaries


def _series(points: tuple[TrendPoint, ...]) -> list[tuple[str, int]]:
    return [(p.date.isoformat(), p.count) for p in points]


class TestTrendSeriesBuilder:
    def test_gap_filled_example(self) -> None:
        now = datetime(2024, 1, 3, 15, 30, tzinfo=UTC)
        points = TrendSeriesBuilder().build({"2024-01-01": 3, "2024-01-03": 1}, now)

        assert _series(points) == [
            ("2024-01-03", 1),
            ("2024-01-02", 0),
            ("2024-01-01", 3),
            ("2023-12-31", 0),
            ("2023-12-30", 0),
            ("2023-12-29", 0),
            ("2023-12-28", 0),
        ]

    def test_empty_input_yields_seven_zeros(self) -> None:
        now = datetime(2024, 6, 15, tzinfo=UTC)
        points = TrendSeriesBuilder().build({}, now)

        assert len(points) == TREND_DAYS
        assert all(p.count == 0 for p in points)

    @pytest.mark.parametrize(
        "now",
        [
            datetime(2024, 1, 1, 0, 0, tzinfo=UTC),
            datetime(2024, 2, 29, 23, 59, 59, tzinfo=UTC),
            datetime(2024, 3, 3, 12, tzinfo=UTC),
            datetime(2023, 12, 31, 6, tzinfo=UTC),
        ],
    )
    def test_shape_invariants(self, now: datetime) -> None:
        points = TrendSeriesBuilder().build({}, now)

        assert len(points) == 7
        assert points[0].date == now.date()
        for newer, older in zip(points, points[1:], strict=False):
            assert newer.date - older.date == timedelta(days=1)
        assert len({p.date for p in points}) == 7

    def test_counts_preserved_for_dates_in_window(self) -> None:
        now = datetime(2024, 5, 10, tzinfo=UTC)
        raw = {"2024-05-04": 2, "2024-05-07": 9, "2024-05-10": 4}
        points = TrendSeriesBuilder().build(raw, now)
        by_date = {p.date.isoformat(): p.count for p in points}

        for day, count in raw.items():
            assert by_date[day] == count
        assert sum(by_date.values()) == 15

    def test_dates_outside_window_ignored(self) -> None:
        now = datetime(2024, 5, 10, tzinfo=UTC)
        points = TrendSeriesBuilder().build({"2024-05-03": 50, "2024-05-11": 60}, now)

        assert all(p.count == 0 for p in points)

    def test_accepts_date_and_datetime_keys(self) -> None:
        now = datetime(2024, 5, 10, tzinfo=UTC)
        raw = {date(2024, 5, 9): 2, datetime(2024, 5, 8, 13, tzinfo=UTC): 5}
        by_date = {p.date: p.count for p in TrendSeriesBuilder().build(raw, now)}

        assert by_date[date(2024, 5, 9)] == 2
        assert by_date[date(2024, 5, 8)] == 5

    def test_naive_now_treated_as_utc(self) -> None:
        points = TrendSeriesBuilder().build({}, datetime(2024, 1, 3, 8))
        assert points[0].date == date(2024, 1, 3)

    def test_aware_now_converted_to_utc(self) -> None:
        # 08:00 at +10:00 is 22:00 UTC on the 2nd
        now = datetime(2024, 1, 3, 8, tzinfo=timezone(timedelta(hours=10)))
        points = TrendSeriesBuilder().build({"2024-01-02": 4}, now)

        assert points[0].date == date(2024, 1, 2)
        assert points[0].count == 4


class TestTrendWindow:
    def test_window_start_is_midnight_six_days_back(self) -> None:
        now = datetime(2024, 1, 3, 15, 30, tzinfo=UTC)
        assert trend_window_start(now) == datetime(2023, 12, 28, tzinfo=UTC)

    def test_dates_ascending(self) -> None:
        days = trend_dates(datetime(2024, 1, 3, tzinfo=UTC))
        assert days[0] == date(2023, 12, 28)
        assert days[-1] == date(2024, 1, 3)
        assert days == sorted(days)


class TestWindowBoundaries:
    def test_boundaries(self) -> None:
        now = datetime(2024, 3, 15, 10, 45, 12, tzinfo=UTC)
        bounds = window_boundaries(now)

        assert bounds["today"] == datetime(2024, 3, 15, tzinfo=UTC)
        assert bounds["this_week"] == datetime(2024, 3, 8, tzinfo=UTC)
        assert bounds["this_month"] == datetime(2024, 3, 1, tzinfo=UTC)

    def test_rolling_week_crosses_month_start(self) -> None:
        bounds = window_boundaries(datetime(2024, 3, 3, tzinfo=UTC))
        assert bounds["this_week"] == datetime(2024, 2, 25, tzinfo=UTC)
        assert bounds["this_week"] < bounds["this_month"]

    def test_aware_now_boundaries_are_utc_midnights(self) -> None:
        now = datetime(2024, 3, 1, 5, 0, tzinfo=timezone(timedelta(hours=9)))
        bounds = window_boundaries(now)

        assert bounds["today"] == datetime(2024, 2, 29, tzinfo=UTC)
        assert bounds["today"].utcoffset() == timedelta(0)
        assert bounds["this_month"] == datetime(2024, 2, 1, tzinfo=UTC)

    def test_start_of_day(self) -> None:
        assert start_of_day(datetime(2024, 3, 15, 23, 59, 59, 999, tzinfo=UTC)) == datetime(2024, 3, 15, tzinfo=UTC)

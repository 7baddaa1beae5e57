"""Tests for release statistics aggregation."""

from datetime import UTC, datetime, timedelta

import pytest

from releasestats.aggregate import EmptyBucketError, aggregate, round_half_up, round_two
from releasestats.grouping import published_releases
from releasestats.models import ReleaseRecord
from tests.conftest import make_release

MONDAY = datetime(2024, 1, 1, 10, 0, tzinfo=UTC)
SATURDAY = datetime(2024, 1, 6, 10, 0, tzinfo=UTC)
NEXT_MONDAY = datetime(2024, 1, 8, 10, 0, tzinfo=UTC)


@pytest.fixture
def week_bucket() -> list[ReleaseRecord]:
    """Monday, Saturday and the following Monday, deliberately unordered."""
    return [
        make_release("@seed-design/react@1.2.0", NEXT_MONDAY, release_id=3),
        make_release("@seed-design/react@1.0.0", MONDAY, release_id=1),
        make_release("@seed-design/react@1.1.0-rc.0", SATURDAY, release_id=2, is_prerelease=True),
    ]


class TestAggregate:
    """Tests for aggregate."""

    def test_week_example(self, week_bucket: list[ReleaseRecord], now: datetime) -> None:
        """Test counts, bounds and ratios for a week-long bucket."""
        summary = aggregate(week_bucket, now, name="@seed-design/react")

        assert summary.name == "@seed-design/react"
        assert summary.total_releases == 3
        assert summary.weekend_releases == 1
        assert summary.weekday_releases == 2
        assert summary.weekend_ratio == 33.33
        assert summary.prerelease_releases == 1
        assert summary.prerelease_ratio == 33.33
        assert summary.release_period_days == 7
        assert summary.first_release_date == MONDAY
        assert summary.latest_release_date == NEXT_MONDAY
        assert summary.latest_version == "1.2.0"

    def test_interval_conventions(self, week_bucket: list[ReleaseRecord], now: datetime) -> None:
        """Test both interval figures are computed independently."""
        summary = aggregate(week_bucket, now)

        # Jan 1-5 and Jan 8
        assert summary.business_days == 6
        assert summary.avg_release_interval_days == 2.0
        # Mon -> Sat spans Tue-Fri (4), Sat -> Mon spans Mon (1)
        assert summary.avg_weekday_gap_days == 2.5

    def test_windowed_counts(self, week_bucket: list[ReleaseRecord], now: datetime) -> None:
        """Test windows are measured from now, not from the latest release."""
        summary = aggregate(week_bucket, now)

        assert summary.last_day_releases == 1
        assert summary.last_week_releases == 2
        assert summary.last_month_releases == 3
        assert summary.last_year_releases == 3

        later = aggregate(week_bucket, now + timedelta(days=400))
        assert later.last_year_releases == 0

    def test_single_release(self, now: datetime) -> None:
        """Test a one-release bucket has no period and no gaps."""
        summary = aggregate([make_release("@stackflow/core@1.0.0", SATURDAY)], now)

        assert summary.release_period_days == 0
        assert summary.business_days == 0
        assert summary.avg_release_interval_days == 0.0
        assert summary.avg_weekday_gap_days == 0.0
        assert summary.weekend_ratio == 100.0

    def test_release_period_ignores_time_of_day(self, now: datetime) -> None:
        """Test the period counts calendar days, not elapsed 24h spans."""
        monday_evening = datetime(2024, 1, 1, 18, 0, tzinfo=UTC)
        next_monday_morning = datetime(2024, 1, 8, 9, 0, tzinfo=UTC)
        bucket = [
            make_release("@stackflow/core@1.0.0", monday_evening, release_id=1),
            make_release("@stackflow/core@1.1.0", next_monday_morning, release_id=2),
        ]
        summary = aggregate(bucket, now)

        assert summary.release_period_days == 7
        assert summary.business_days == 6

    def test_empty_bucket_raises(self, now: datetime) -> None:
        """Test an empty bucket is an explicit error."""
        with pytest.raises(EmptyBucketError):
            aggregate([], now)

    def test_only_unpublished_raises(self, now: datetime) -> None:
        """Test drafts alone do not form an aggregatable bucket."""
        with pytest.raises(EmptyBucketError):
            aggregate([make_release("@stackflow/core@1.0.0", None)], now)

    def test_unconventional_tags_leave_version_empty(
        self, sample_records: list[ReleaseRecord], now: datetime
    ) -> None:
        """Test repository buckets aggregate releases whatever their tag."""
        records = published_releases(sample_records)
        summary = aggregate(records, now, name="seed-design")

        assert summary.total_releases == 4
        assert summary.latest_version == "1.1.0"

    def test_idempotent(self, week_bucket: list[ReleaseRecord], now: datetime) -> None:
        """Test aggregating twice yields equal summaries."""
        assert aggregate(week_bucket, now) == aggregate(list(reversed(week_bucket)), now)

    def test_counts_and_ratios_are_consistent(self, now: datetime) -> None:
        """Test weekday + weekend == total and ratios stay within 0-100."""
        records = [
            make_release(
                f"@stackflow/core@1.0.{i}",
                MONDAY + timedelta(hours=17 * i),
                release_id=i,
                is_prerelease=i % 3 == 0,
            )
            for i in range(40)
        ]
        for size in (1, 2, 7, 40):
            summary = aggregate(records[:size], now)
            assert summary.weekday_releases + summary.weekend_releases == summary.total_releases
            assert 0 <= summary.weekend_ratio <= 100
            assert 0 <= summary.prerelease_ratio <= 100


class TestRoundHalfUp:
    """Tests for round_half_up."""

    def test_halves_round_away_from_zero(self) -> None:
        """Test .xx5 rounds up rather than to even."""
        assert round_half_up(1, 8) == 0.13
        assert round_half_up(5, 200) == 0.03

    def test_repeating_fraction(self) -> None:
        """Test 100/3 percent."""
        assert round_half_up(100, 3) == 33.33
        assert round_half_up(200, 3) == 66.67

    def test_round_two_rounds_float_halves_up(self) -> None:
        """Test float means ending in 5 round away from zero, unlike round()."""
        assert round_two(12.625) == 12.63
        assert round_two(0.125) == 0.13
        assert round_two(87.37000000000001) == 87.37

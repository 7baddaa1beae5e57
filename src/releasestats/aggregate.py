"""Release cadence statistics for one bucket of releases."""

from collections.abc import Sequence
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from releasestats.models import ReleaseRecord, StatsSummary
from releasestats.tags import parse_tag
from releasestats.windows import classify, count_business_days, to_utc

TWO_PLACES = Decimal("0.01")


class EmptyBucketError(ValueError):
    """Raised when a bucket holds no published release to aggregate."""


def round_half_up(numerator: int, denominator: int) -> float:
    """Divide and round to 2 decimals, halves away from zero.

    Args:
        numerator: Dividend.
        denominator: Divisor, must be non-zero.

    Returns:
        Rounded quotient.
    """
    return round_two(Decimal(numerator) / Decimal(denominator))


def round_two(value: float | Decimal) -> float:
    """Round to 2 decimals, halves away from zero.

    Floats are rounded by their shortest decimal repr, so 12.625 becomes 12.63.
    """
    return float(Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def _weekday_gaps(timestamps: Sequence[datetime]) -> list[int]:
    """Weekdays elapsed between each consecutive pair, excluding the start day."""
    return [
        count_business_days(earlier + timedelta(days=1), later)
        for earlier, later in zip(timestamps, timestamps[1:])
    ]


def aggregate(bucket: Sequence[ReleaseRecord], now: datetime, name: str = "") -> StatsSummary:
    """Compute release cadence statistics for a bucket of releases.

    The bucket may come in any order; it is sorted by publish time first.
    Releases without a publish timestamp are ignored.

    ``avg_release_interval_days`` is business days over release count (the
    figure charts use). ``avg_weekday_gap_days`` is the mean weekday gap
    between consecutive releases and is reported separately.

    Args:
        bucket: Releases of one repository or one package.
        now: Reference time for the last day/week/month/year counts.
        name: Repository or package name to label the summary with.

    Returns:
        StatsSummary for the bucket.

    Raises:
        EmptyBucketError: If no release in the bucket has been published.
    """
    releases = sorted(
        (r for r in bucket if r.published_at is not None),
        key=lambda r: to_utc(r.published_at),
    )
    if not releases:
        raise EmptyBucketError(f"No published releases to aggregate for {name or 'bucket'}")

    total = len(releases)
    timestamps = [to_utc(r.published_at) for r in releases]
    first, latest = timestamps[0], timestamps[-1]
    windows = [classify(now, ts) for ts in timestamps]

    weekend = sum(1 for w in windows if w.is_weekend)
    prerelease = sum(1 for r in releases if r.is_prerelease)
    business_days = count_business_days(first, latest)

    gaps = _weekday_gaps(timestamps)
    avg_gap = round_half_up(sum(gaps), len(gaps)) if gaps else 0.0

    latest_key = parse_tag(releases[-1].tag_name)

    return StatsSummary(
        name=name,
        total_releases=total,
        weekday_releases=total - weekend,
        weekend_releases=weekend,
        prerelease_releases=prerelease,
        weekend_ratio=round_half_up(100 * weekend, total),
        prerelease_ratio=round_half_up(100 * prerelease, total),
        first_release_date=first,
        latest_release_date=latest,
        latest_version=latest_key.version if latest_key else "",
        release_period_days=(latest.date() - first.date()).days,
        business_days=business_days,
        avg_release_interval_days=round_half_up(business_days, total),
        avg_weekday_gap_days=avg_gap,
        last_day_releases=sum(1 for w in windows if w.in_last_day),
        last_week_releases=sum(1 for w in windows if w.in_last_week),
        last_month_releases=sum(1 for w in windows if w.in_last_month),
        last_year_releases=sum(1 for w in windows if w.in_last_year),
    )

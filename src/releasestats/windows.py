"""Calendar window classification for release timestamps.

All timestamps are compared in UTC. Naive datetimes are assumed to already
be UTC.
"""

from datetime import UTC, date, datetime, timedelta

from releasestats.models import TimeWindows

LAST_DAY = timedelta(days=1)
LAST_WEEK = timedelta(days=7)
LAST_MONTH = timedelta(days=30)
LAST_YEAR = timedelta(days=365)


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to an aware UTC instant."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_weekend_day(day: date) -> bool:
    """Saturday or Sunday."""
    return day.weekday() >= 5


def _within(now: datetime, published_at: datetime, span: timedelta) -> bool:
    return now - span <= published_at <= now


def classify(now: datetime, published_at: datetime) -> TimeWindows:
    """Classify a release against fixed windows ending at ``now``.

    Args:
        now: Reference time of the aggregation run.
        published_at: Release publish time.

    Returns:
        TimeWindows with weekend flag and last day/week/month/year membership.
    """
    now = to_utc(now)
    published_at = to_utc(published_at)
    return TimeWindows(
        is_weekend=is_weekend_day(published_at.date()),
        in_last_day=_within(now, published_at, LAST_DAY),
        in_last_week=_within(now, published_at, LAST_WEEK),
        in_last_month=_within(now, published_at, LAST_MONTH),
        in_last_year=_within(now, published_at, LAST_YEAR),
    )


def count_business_days(start: datetime, end: datetime) -> int:
    """Count weekdays in the inclusive calendar-day range [start, end].

    Args:
        start: Earlier timestamp.
        end: Later timestamp.

    Returns:
        Number of Monday-Friday days, 0 if ``end`` falls before ``start``.
    """
    first = to_utc(start).date()
    last = to_utc(end).date()
    if last < first:
        return 0

    total_days = (last - first).days + 1
    full_weeks, remainder = divmod(total_days, 7)
    count = full_weeks * 5
    for offset in range(remainder):
        if not is_weekend_day(first + timedelta(days=full_weeks * 7 + offset)):
            count += 1
    return count

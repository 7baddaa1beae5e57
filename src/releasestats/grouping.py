"""Partitioning of release records into aggregation buckets."""

from collections.abc import Iterable

from releasestats.models import ReleaseRecord
from releasestats.tags import parse_tag


def published_releases(records: Iterable[ReleaseRecord]) -> list[ReleaseRecord]:
    """Repository-level bucket: every record with a publish timestamp."""
    return [r for r in records if r.published_at is not None]


def group_releases(records: Iterable[ReleaseRecord]) -> dict[str, list[ReleaseRecord]]:
    """Group published releases by package name parsed from their tags.

    Records without a publish timestamp or with a tag that doesn't follow
    the package convention are dropped. Every qualifying release is kept,
    so a package appears once per release.

    Args:
        records: Release records of one or more repositories.

    Returns:
        Mapping of package name to its releases, in input order.
    """
    buckets: dict[str, list[ReleaseRecord]] = {}
    for record in published_releases(records):
        key = parse_tag(record.tag_name)
        if key is None:
            continue
        buckets.setdefault(key.package_name, []).append(record)
    return buckets

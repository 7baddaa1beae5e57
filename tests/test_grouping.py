"""Tests for release grouping."""

from datetime import UTC, datetime

from releasestats.grouping import group_releases, published_releases
from releasestats.models import ReleaseRecord
from tests.conftest import make_release


class TestGroupReleases:
    """Tests for group_releases."""

    def test_groups_by_package_name(self, sample_records: list[ReleaseRecord]) -> None:
        """Test releases are bucketed by parsed package name."""
        buckets = group_releases(sample_records)

        assert set(buckets) == {"@seed-design/react", "@seed-design/css"}
        assert [r.release_id for r in buckets["@seed-design/react"]] == [1, 3]
        assert [r.release_id for r in buckets["@seed-design/css"]] == [2]

    def test_drops_unpublished_and_unparseable(self, sample_records: list[ReleaseRecord]) -> None:
        """Test drafts and non-package tags never reach a bucket."""
        grouped_ids = {r.release_id for b in group_releases(sample_records).values() for r in b}

        assert 4 not in grouped_ids  # draft
        assert 5 not in grouped_ids  # "v2024.01"

    def test_keeps_repeated_releases(self) -> None:
        """Test the same tag released twice counts twice."""
        published = datetime(2024, 1, 2, tzinfo=UTC)
        records = [
            make_release("@stackflow/core@1.0.0", published, release_id=1),
            make_release("@stackflow/core@1.0.0", published, release_id=2),
        ]

        assert len(group_releases(records)["@stackflow/core"]) == 2

    def test_input_order_does_not_change_membership(
        self, sample_records: list[ReleaseRecord]
    ) -> None:
        """Test reversing the input yields the same buckets."""
        forward = group_releases(sample_records)
        backward = group_releases(list(reversed(sample_records)))

        assert {k: sorted(r.release_id for r in v) for k, v in forward.items()} == {
            k: sorted(r.release_id for r in v) for k, v in backward.items()
        }

    def test_empty_input(self) -> None:
        """Test no records yields no buckets."""
        assert group_releases([]) == {}


def test_published_releases_keeps_unconventional_tags(
    sample_records: list[ReleaseRecord],
) -> None:
    """Test the repository bucket drops only unpublished releases."""
    assert [r.release_id for r in published_releases(sample_records)] == [1, 2, 3, 5]

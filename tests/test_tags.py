"""Tests for tag parsing."""

import pytest

from releasestats.models import PackageKey
from releasestats.tags import format_tag, parse_tag


class TestParseTag:
    """Tests for parse_tag."""

    def test_scoped_package(self) -> None:
        """Test scoped tag yields the full package name and version."""
        assert parse_tag("@daangn/seed-design@2.1.0") == PackageKey(
            package_name="@daangn/seed-design", version="2.1.0"
        )

    def test_unscoped_package(self) -> None:
        """Test single-segment tag convention."""
        assert parse_tag("@stackflow@1.0.0") == PackageKey("@stackflow", "1.0.0")

    def test_prerelease_version(self) -> None:
        """Test prerelease suffixes stay part of the version."""
        key = parse_tag("@seed-design/css@0.1.0-beta.1+build.5")
        assert key is not None
        assert key.version == "0.1.0-beta.1+build.5"

    @pytest.mark.parametrize(
        "tag",
        [
            "v1.0.0",
            "",
            "seed-design@1.0.0",
            "@seed-design/react",
            "@seed-design/react@",
            "@a/b/c@1.0.0",
            "@seed-design/react@1.0.0@extra",
        ],
    )
    def test_unmatched_tags_return_none(self, tag: str) -> None:
        """Test tags outside the package convention are skipped."""
        assert parse_tag(tag) is None

    @pytest.mark.parametrize(
        "key",
        [
            PackageKey("@daangn/seed-design", "2.1.0"),
            PackageKey("@karrotframe", "0.0.1-alpha.3"),
        ],
    )
    def test_format_then_parse_recovers_key(self, key: PackageKey) -> None:
        """Test formatting a key as a tag and parsing it back."""
        assert parse_tag(format_tag(key)) == key

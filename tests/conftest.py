"""Shared test fixtures."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from releasestats.models import ReleaseRecord
from releasestats.storage import ReportStorage

NOW = datetime(2024, 1, 8, 12, 0, tzinfo=UTC)


def make_release(
    tag_name: str,
    published_at: datetime | None,
    repository: str = "seed-design",
    release_id: int = 1,
    is_prerelease: bool = False,
    author_name: str | None = "alice",
) -> ReleaseRecord:
    """Build a release record with sensible defaults."""
    return ReleaseRecord(
        repository=repository,
        release_id=release_id,
        tag_name=tag_name,
        published_at=published_at,
        is_draft=published_at is None,
        is_prerelease=is_prerelease,
        author_name=author_name,
    )


@pytest.fixture
def now() -> datetime:
    """Reference aggregation time (Monday 2024-01-08 12:00 UTC)."""
    return NOW


@pytest.fixture
def sample_records() -> list[ReleaseRecord]:
    """Releases of two packages plus a draft and an unconventional tag."""
    return [
        make_release(
            "@seed-design/react@1.0.0",
            datetime(2024, 1, 1, 10, 0, tzinfo=UTC),  # Monday
            release_id=1,
        ),
        make_release(
            "@seed-design/css@0.1.0-beta.1",
            datetime(2024, 1, 6, 10, 0, tzinfo=UTC),  # Saturday
            release_id=2,
            is_prerelease=True,
            author_name="bob",
        ),
        make_release(
            "@seed-design/react@1.1.0",
            datetime(2024, 1, 8, 10, 0, tzinfo=UTC),  # Monday
            release_id=3,
        ),
        make_release("@seed-design/react@1.2.0", None, release_id=4),
        make_release(
            "v2024.01",
            datetime(2024, 1, 3, 9, 0, tzinfo=UTC),  # Wednesday
            release_id=5,
            author_name=None,
        ),
    ]


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Temporary directory for test data files."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def storage(temp_data_dir: Path) -> ReportStorage:
    """Report storage rooted in the temporary data directory."""
    return ReportStorage(temp_data_dir)


def release_payload(
    release_id: int,
    tag_name: str,
    published_at: str | None = "2024-01-01T10:00:00Z",
    login: str | None = "alice",
    prerelease: bool = False,
) -> dict:
    """GitHub API release object with the fields the client reads."""
    return {
        "id": release_id,
        "tag_name": tag_name,
        "name": tag_name,
        "html_url": f"https://github.com/daangn/seed-design/releases/tag/{tag_name}",
        "draft": published_at is None,
        "prerelease": prerelease,
        "created_at": "2024-01-01T09:00:00Z",
        "published_at": published_at,
        "target_commitish": "main",
        "author": {"login": login, "html_url": f"https://github.com/{login}"} if login else None,
        "assets": [{"download_count": 3}, {"download_count": 4}],
    }


@pytest.fixture
def populated_storage(
    storage: ReportStorage, sample_records: list[ReleaseRecord], now: datetime
) -> ReportStorage:
    """Storage with reports generated from two repositories."""
    from releasestats.collector import build_report, write_report

    other_repo = [
        make_release(
            "@stackflow/core@1.0.0",
            datetime(2023, 12, 30, 8, 0, tzinfo=UTC),  # Saturday
            repository="stackflow",
            release_id=10,
            author_name="bob",
        ),
    ]
    report = build_report({"seed-design": sample_records, "stackflow": other_repo}, now)
    write_report(report, storage)
    return storage

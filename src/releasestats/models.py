"""Data models for releasestats."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Literal


@dataclass(frozen=True)
class ReleaseRecord:
    """Single GitHub release, validated at ingestion time.

    Attributes:
        repository: Repository name (e.g., "seed-design").
        release_id: GitHub release id.
        tag_name: Raw tag (e.g., "@seed-design/react@1.2.3").
        published_at: When the release was published (UTC). None for drafts.
        is_draft: Whether the release is a draft.
        is_prerelease: Whether the release is marked as a prerelease.
        author_name: Login of the release author, if known.
        release_name: Release title (may be empty).
        html_url: Release page URL.
        created_at: When the release object was created (UTC).
        target_branch: Target commitish of the release.
        asset_count: Number of uploaded assets.
        download_count: Sum of asset download counts.
    """

    repository: str
    release_id: int
    tag_name: str
    published_at: datetime | None = None
    is_draft: bool = False
    is_prerelease: bool = False
    author_name: str | None = None
    release_name: str = ""
    html_url: str = ""
    created_at: datetime | None = None
    target_branch: str = ""
    asset_count: int = 0
    download_count: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for DataFrame creation.

        Returns:
            Dictionary representation of the record.
        """
        return asdict(self)


@dataclass(frozen=True)
class PackageKey:
    """Package name and version parsed from a release tag."""

    package_name: str
    version: str


@dataclass(frozen=True)
class TimeWindows:
    """Calendar classification of one release relative to a reference time."""

    is_weekend: bool
    in_last_day: bool
    in_last_week: bool
    in_last_month: bool
    in_last_year: bool


@dataclass(frozen=True)
class StatsSummary:
    """Release statistics for one bucket (whole repository or one package).

    Attributes:
        name: Repository or package name the bucket was built for.
        total_releases: Number of published releases.
        weekday_releases: Releases published Monday to Friday (UTC).
        weekend_releases: Releases published on Saturday or Sunday (UTC).
        prerelease_releases: Releases flagged as prerelease.
        weekend_ratio: Weekend share of releases in percent.
        prerelease_ratio: Prerelease share of releases in percent.
        first_release_date: Earliest publish time.
        latest_release_date: Latest publish time.
        latest_version: Version of the latest release ("" if tags don't parse).
        release_period_days: Calendar days (UTC) between first and latest release.
        business_days: Weekdays in the inclusive first..latest day range.
        avg_release_interval_days: business_days / total_releases.
        avg_weekday_gap_days: Mean weekday gap between consecutive releases.
        last_day_releases: Releases in the last day.
        last_week_releases: Releases in the last 7 days.
        last_month_releases: Releases in the last 30 days.
        last_year_releases: Releases in the last 365 days.
    """

    name: str
    total_releases: int
    weekday_releases: int
    weekend_releases: int
    prerelease_releases: int
    weekend_ratio: float
    prerelease_ratio: float
    first_release_date: datetime
    latest_release_date: datetime
    latest_version: str
    release_period_days: int
    business_days: int
    avg_release_interval_days: float
    avg_weekday_gap_days: float
    last_day_releases: int
    last_week_releases: int
    last_month_releases: int
    last_year_releases: int

    def to_dict(self) -> dict:
        """Convert to dictionary for DataFrame creation.

        Returns:
            Dictionary representation of the summary.
        """
        return asdict(self)


ChartType = Literal["bar", "line", "pie"]


@dataclass
class ChartDataset:
    """One series of a chart."""

    label: str
    data: list[float]
    backgroundColor: str | list[str] | None = None
    borderColor: str | list[str] | None = None
    borderWidth: int | None = None
    tension: float | None = None

    def to_dict(self) -> dict:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass
class ChartPayload:
    """Chart-ready payload served to the dashboard frontend.

    Attributes:
        id: Stable chart identifier used in URLs.
        title: Chart title.
        type: Chart kind ("bar", "line" or "pie").
        description: What the chart shows.
        insight: How to read the chart.
        labels: Category labels on the x axis (or pie slices).
        datasets: Series plotted against the labels.
    """

    id: str
    title: str
    type: ChartType
    description: str
    insight: str
    labels: list[str] = field(default_factory=list)
    datasets: list[ChartDataset] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to the JSON shape consumed by chart renderers.

        Returns:
            Dictionary with labels and datasets nested under "data".
        """
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "description": self.description,
            "insight": self.insight,
            "data": {
                "labels": self.labels,
                "datasets": [d.to_dict() for d in self.datasets],
            },
        }


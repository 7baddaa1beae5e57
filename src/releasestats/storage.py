"""CSV report storage for release statistics.

Each report is a flat CSV with a header row of human-readable labels. The
internal column names below map one-to-one onto those labels.
"""

from datetime import datetime
from pathlib import Path

import polars as pl

from releasestats.models import ReleaseRecord, StatsSummary

RELEASE_STATS_FILE = "release-stats.csv"
PACKAGE_STATS_FILE = "package-stats.csv"
RAW_RELEASES_FILE = "raw-releases.csv"

STATS_SCHEMA = {
    "name": pl.Utf8,
    "total_releases": pl.Int64,
    "weekday_releases": pl.Int64,
    "weekend_releases": pl.Int64,
    "prerelease_releases": pl.Int64,
    "weekend_ratio": pl.Float64,
    "prerelease_ratio": pl.Float64,
    "first_release_date": pl.Utf8,
    "latest_release_date": pl.Utf8,
    "latest_version": pl.Utf8,
    "release_period_days": pl.Int64,
    "business_days": pl.Int64,
    "avg_release_interval_days": pl.Float64,
    "avg_weekday_gap_days": pl.Float64,
    "last_day_releases": pl.Int64,
    "last_week_releases": pl.Int64,
    "last_month_releases": pl.Int64,
    "last_year_releases": pl.Int64,
}

RAW_RELEASES_SCHEMA = {
    "repository": pl.Utf8,
    "release_id": pl.Int64,
    "tag_name": pl.Utf8,
    "release_name": pl.Utf8,
    "html_url": pl.Utf8,
    "is_draft": pl.Boolean,
    "is_prerelease": pl.Boolean,
    "created_at": pl.Utf8,
    "published_at": pl.Utf8,
    "author_name": pl.Utf8,
    "target_branch": pl.Utf8,
    "asset_count": pl.Int64,
    "download_count": pl.Int64,
}

_STATS_LABELS = {
    "total_releases": "Total Releases",
    "weekday_releases": "Weekday Releases",
    "weekend_releases": "Weekend Releases",
    "prerelease_releases": "Prereleases",
    "weekend_ratio": "Weekend Release Ratio (%)",
    "prerelease_ratio": "Prerelease Ratio (%)",
    "first_release_date": "First Release Date",
    "latest_release_date": "Latest Release Date",
    "latest_version": "Latest Version",
    "release_period_days": "Release Period (days)",
    "business_days": "Business Days",
    "avg_release_interval_days": "Avg Release Interval (business days)",
    "avg_weekday_gap_days": "Avg Gap Between Releases (business days)",
    "last_day_releases": "Releases Last Day",
    "last_week_releases": "Releases Last Week",
    "last_month_releases": "Releases Last Month",
    "last_year_releases": "Releases Last Year",
}

RELEASE_STATS_LABELS = {"name": "Repository", **_STATS_LABELS}
PACKAGE_STATS_LABELS = {"name": "Package", **_STATS_LABELS}

RAW_RELEASES_LABELS = {
    "repository": "Repository",
    "release_id": "Release ID",
    "tag_name": "Tag",
    "release_name": "Release Name",
    "html_url": "Release URL",
    "is_draft": "Draft",
    "is_prerelease": "Prerelease",
    "created_at": "Created At",
    "published_at": "Published At",
    "author_name": "Author",
    "target_branch": "Target Branch",
    "asset_count": "Asset Count",
    "download_count": "Download Count",
}


class ReportReadError(Exception):
    """Raised when a report file is missing or cannot be parsed."""


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _row(data: dict) -> dict:
    return {
        key: _isoformat(value) if isinstance(value, datetime) else value
        for key, value in data.items()
    }


class ReportStorage:
    """Reads and writes the three CSV reports in a data directory.

    Attributes:
        data_dir: Directory holding the report files.
    """

    def __init__(self, data_dir: Path):
        """Initialize storage with the report directory.

        Args:
            data_dir: Directory for the CSV reports.
        """
        self.data_dir = data_dir

    @property
    def release_stats_path(self) -> Path:
        return self.data_dir / RELEASE_STATS_FILE

    @property
    def package_stats_path(self) -> Path:
        return self.data_dir / PACKAGE_STATS_FILE

    @property
    def raw_releases_path(self) -> Path:
        return self.data_dir / RAW_RELEASES_FILE

    def _write(self, df: pl.DataFrame, labels: dict[str, str], path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.rename(labels).write_csv(path)

    def _read(self, path: Path, labels: dict[str, str], schema: dict) -> pl.DataFrame:
        """Load a report and map its labels back to column names.

        Raises:
            ReportReadError: If the file is missing, malformed, or lacks columns.
        """
        try:
            df = pl.read_csv(path, infer_schema_length=0)
        except (OSError, pl.exceptions.PolarsError) as e:
            raise ReportReadError(f"Cannot read report {path}: {e}") from e

        missing = [label for label in labels.values() if label not in df.columns]
        if missing:
            raise ReportReadError(f"Report {path} is missing columns: {', '.join(missing)}")

        df = df.select(list(labels.values())).rename({v: k for k, v in labels.items()})
        casts = []
        for name, dtype in schema.items():
            if dtype == pl.Boolean:
                casts.append((pl.col(name).str.to_lowercase() == "true").alias(name))
            else:
                casts.append(pl.col(name).cast(dtype))
        try:
            return df.with_columns(casts)
        except pl.exceptions.PolarsError as e:
            raise ReportReadError(f"Report {path} has malformed values: {e}") from e

    def write_release_stats(self, summaries: list[StatsSummary]) -> Path:
        """Write repository-level statistics, one row per repository."""
        df = pl.DataFrame([_row(s.to_dict()) for s in summaries], schema=STATS_SCHEMA)
        self._write(df, RELEASE_STATS_LABELS, self.release_stats_path)
        return self.release_stats_path

    def write_package_stats(self, summaries: list[StatsSummary]) -> Path:
        """Write package-level statistics, one row per package."""
        df = pl.DataFrame([_row(s.to_dict()) for s in summaries], schema=STATS_SCHEMA)
        self._write(df, PACKAGE_STATS_LABELS, self.package_stats_path)
        return self.package_stats_path

    def write_raw_releases(self, records: list[ReleaseRecord]) -> Path:
        """Write every fetched release, one row per release."""
        df = pl.DataFrame([_row(r.to_dict()) for r in records], schema=RAW_RELEASES_SCHEMA)
        self._write(df, RAW_RELEASES_LABELS, self.raw_releases_path)
        return self.raw_releases_path

    def read_release_stats(self) -> pl.DataFrame:
        """Load repository-level statistics."""
        return self._read(self.release_stats_path, RELEASE_STATS_LABELS, STATS_SCHEMA)

    def read_package_stats(self) -> pl.DataFrame:
        """Load package-level statistics."""
        return self._read(self.package_stats_path, PACKAGE_STATS_LABELS, STATS_SCHEMA)

    def read_raw_releases(self) -> pl.DataFrame:
        """Load raw release rows."""
        return self._read(self.raw_releases_path, RAW_RELEASES_LABELS, RAW_RELEASES_SCHEMA)

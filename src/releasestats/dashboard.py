"""Chart payloads built from the CSV reports."""

from collections.abc import Callable
from datetime import datetime

import polars as pl

from releasestats.aggregate import round_two
from releasestats.models import ChartDataset, ChartPayload
from releasestats.storage import ReportStorage
from releasestats.windows import to_utc

TOP_N = 10


class ReportCache:
    """Lazily loaded report data, kept for the lifetime of the process.

    Each report is read on first access and never reloaded. The files are
    regenerated by the batch collector, so a restart picks up new data.
    A load that fails is not cached and will be retried on the next access.

    Attributes:
        storage: Storage the reports are read from.
    """

    def __init__(self, storage: ReportStorage):
        self.storage = storage
        self._release_stats: pl.DataFrame | None = None
        self._package_stats: pl.DataFrame | None = None
        self._raw_releases: pl.DataFrame | None = None

    @property
    def release_stats(self) -> pl.DataFrame:
        if self._release_stats is None:
            self._release_stats = self.storage.read_release_stats()
        return self._release_stats

    @property
    def package_stats(self) -> pl.DataFrame:
        if self._package_stats is None:
            self._package_stats = self.storage.read_package_stats()
        return self._package_stats

    @property
    def raw_releases(self) -> pl.DataFrame:
        if self._raw_releases is None:
            self._raw_releases = self.storage.read_raw_releases()
        return self._raw_releases


def _parse_month(value: str | None) -> str | None:
    if not value:
        return None
    try:
        return to_utc(datetime.fromisoformat(value)).strftime("%Y-%m")
    except ValueError:
        return None


class DashboardService:
    """Builds dashboard chart payloads on demand.

    Attributes:
        cache: Report data the charts are derived from.
    """

    def __init__(self, cache: ReportCache):
        self.cache = cache
        self._builders: dict[str, Callable[[], ChartPayload]] = {
            "package-releases": self.package_releases_chart,
            "release-cycle": self.release_cycle_chart,
            "release-types": self.release_types_chart,
            "monthly-releases": self.monthly_releases_chart,
            "top-authors": self.top_authors_chart,
        }

    def list_charts(self) -> list[ChartPayload]:
        """Build every chart.

        Raises:
            ReportReadError: If a report cannot be loaded.
        """
        return [build() for build in self._builders.values()]

    def get_chart(self, chart_id: str) -> ChartPayload | None:
        """Build a single chart, or return None for an unknown id.

        Raises:
            ReportReadError: If a report cannot be loaded.
        """
        build = self._builders.get(chart_id)
        return build() if build else None

    def package_releases_chart(self) -> ChartPayload:
        """Top packages by number of releases."""
        top = (
            self.cache.package_stats.sort("total_releases", descending=True, maintain_order=True)
            .head(TOP_N)
        )
        return ChartPayload(
            id="package-releases",
            title="Releases per Package",
            type="bar",
            description=f"Total releases of the {TOP_N} most frequently released packages.",
            insight=(
                "Packages with many releases are actively developed and maintained; "
                "packages with few releases change less often."
            ),
            labels=top["name"].to_list(),
            datasets=[
                ChartDataset(
                    label="Releases",
                    data=top["total_releases"].to_list(),
                    backgroundColor="rgba(59, 130, 246, 0.5)",
                    borderColor="rgb(59, 130, 246)",
                    borderWidth=1,
                )
            ],
        )

    def release_cycle_chart(self) -> ChartPayload:
        """Average release interval of every package that has one."""
        packages = self.cache.package_stats.filter(pl.col("avg_release_interval_days") > 0)

        insight = "Shorter intervals mean faster feedback; longer ones favour stability."
        if not packages.is_empty():
            slowest = packages.row(packages["avg_release_interval_days"].arg_max(), named=True)
            insight += (
                f" {slowest['name']} has the longest average interval "
                f"({slowest['avg_release_interval_days']} business days)."
            )

        return ChartPayload(
            id="release-cycle",
            title="Release Interval by Package",
            type="bar",
            description="Average business days between releases for each package.",
            insight=insight,
            labels=packages["name"].to_list(),
            datasets=[
                ChartDataset(
                    label="Avg release interval (business days)",
                    data=packages["avg_release_interval_days"].to_list(),
                    backgroundColor="rgba(16, 185, 129, 0.5)",
                    borderColor="rgb(16, 185, 129)",
                    borderWidth=1,
                )
            ],
        )

    def release_types_chart(self) -> ChartPayload:
        """Prerelease, weekend and regular release shares averaged over repositories."""
        repos = self.cache.release_stats
        if repos.is_empty():
            prerelease = weekend = regular = 0.0
        else:
            prerelease = round_two(repos["prerelease_ratio"].mean())
            weekend = round_two(repos["weekend_ratio"].mean())
            regular = round_two(100 - prerelease - weekend)

        return ChartPayload(
            id="release-types",
            title="Release Types",
            type="pie",
            description="Share of prereleases, weekend releases and regular releases.",
            insight=(
                "A high prerelease share points to experimental or beta delivery; "
                "a high weekend share shows releases happening outside working days."
            ),
            labels=["Prerelease", "Weekend release", "Regular release"],
            datasets=[
                ChartDataset(
                    label="Share (%)",
                    data=[prerelease, weekend, regular],
                    backgroundColor=[
                        "rgba(239, 68, 68, 0.5)",
                        "rgba(245, 158, 11, 0.5)",
                        "rgba(59, 130, 246, 0.5)",
                    ],
                    borderColor=["rgb(239, 68, 68)", "rgb(245, 158, 11)", "rgb(59, 130, 246)"],
                    borderWidth=1,
                )
            ],
        )

    def monthly_releases_chart(self) -> ChartPayload:
        """Releases per calendar month across all repositories."""
        months = [_parse_month(v) for v in self.cache.raw_releases["published_at"].to_list()]
        counts = (
            pl.DataFrame({"month": [m for m in months if m]}, schema={"month": pl.Utf8})
            .group_by("month")
            .agg(pl.len().alias("releases"))
            .sort("month")
        )

        return ChartPayload(
            id="monthly-releases",
            title="Monthly Release Trend",
            type="line",
            description="Number of releases published each month.",
            insight=(
                "Spikes and dips hint at major events such as large features, "
                "refactors or holiday seasons."
            ),
            labels=counts["month"].to_list(),
            datasets=[
                ChartDataset(
                    label="Releases",
                    data=counts["releases"].to_list(),
                    backgroundColor="rgba(139, 92, 246, 0.5)",
                    borderColor="rgb(139, 92, 246)",
                    borderWidth=2,
                    tension=0.4,
                )
            ],
        )

    def top_authors_chart(self) -> ChartPayload:
        """Authors who published the most releases."""
        top = (
            self.cache.raw_releases.filter(pl.col("author_name").is_not_null())
            .group_by("author_name", maintain_order=True)
            .agg(pl.len().alias("releases"))
            .sort("releases", descending=True, maintain_order=True)
            .head(TOP_N)
        )

        return ChartPayload(
            id="top-authors",
            title=f"Top {TOP_N} Release Authors",
            type="bar",
            description="Contributors who published the most releases.",
            insight=(
                "If one person publishes most releases, spreading release knowledge "
                "across the team may be worth it."
            ),
            labels=top["author_name"].to_list(),
            datasets=[
                ChartDataset(
                    label="Releases",
                    data=top["releases"].to_list(),
                    backgroundColor="rgba(236, 72, 153, 0.5)",
                    borderColor="rgb(236, 72, 153)",
                    borderWidth=1,
                )
            ],
        )

"""Release collection and report generation."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from rich.console import Console

from releasestats.aggregate import EmptyBucketError, aggregate
from releasestats.config import RepoConfig, Settings
from releasestats.github_client import GitHubReleasesClient
from releasestats.grouping import group_releases, published_releases
from releasestats.ingest import ingest_releases
from releasestats.models import ReleaseRecord, StatsSummary
from releasestats.storage import ReportStorage

console = Console()


@dataclass
class ReleaseReport:
    """Statistics computed in one collection run.

    Attributes:
        repositories: One summary per repository with published releases.
        packages: One summary per package across all repositories.
        releases: Every validated release, published or not.
    """

    repositories: list[StatsSummary] = field(default_factory=list)
    packages: list[StatsSummary] = field(default_factory=list)
    releases: list[ReleaseRecord] = field(default_factory=list)


async def fetch_repo_releases(
    client: GitHubReleasesClient,
    repo: RepoConfig,
) -> list[ReleaseRecord]:
    """Fetch and validate all releases of one repository.

    Args:
        client: Initialized GitHub client.
        repo: Repository configuration.

    Returns:
        Validated release records.
    """
    items = await client.get_releases(repo.owner, repo.name)
    result = ingest_releases(repo.name, items)

    for reason in result.rejected:
        console.print(f"  [yellow]Skipped malformed {reason}[/yellow]")
    console.print(f"  [green]Fetched {len(result.records)} releases[/green]")
    return result.records


def build_report(
    releases_by_repo: dict[str, list[ReleaseRecord]],
    now: datetime,
) -> ReleaseReport:
    """Aggregate repository and package statistics.

    Buckets without a published release are skipped rather than aggregated.

    Args:
        releases_by_repo: Validated releases keyed by repository name.
        now: Reference time for windowed counts.

    Returns:
        ReleaseReport with repository, package and raw release data.
    """
    report = ReleaseReport()

    for repo_name, records in releases_by_repo.items():
        report.releases.extend(records)
        try:
            report.repositories.append(aggregate(published_releases(records), now, repo_name))
        except EmptyBucketError:
            console.print(f"  [dim]{repo_name}: no published releases, skipped[/dim]")

    for package_name, bucket in group_releases(report.releases).items():
        report.packages.append(aggregate(bucket, now, package_name))

    return report


def write_report(report: ReleaseReport, storage: ReportStorage) -> None:
    """Write the three CSV reports."""
    for path in (
        storage.write_release_stats(report.repositories),
        storage.write_package_stats(report.packages),
        storage.write_raw_releases(report.releases),
    ):
        console.print(f"[green]Wrote {path}[/green]")


async def collect_all(
    settings: Settings,
    repos: list[RepoConfig] | None = None,
    dry_run: bool = False,
    now: datetime | None = None,
) -> ReleaseReport | None:
    """Collect releases for all configured repositories and write reports.

    API failures are not caught here; they abort the run.

    Args:
        settings: Application settings.
        repos: Specific repos to collect (default: all configured).
        dry_run: If True, show what would be collected without writing.
        now: Reference time for windowed counts (default: current UTC time).

    Returns:
        The computed report, or None when nothing was collected.
    """
    if repos is None:
        repos = settings.load_repos()

    if not repos:
        console.print("[yellow]No repositories configured[/yellow]")
        return None

    console.print(f"\n[bold]Collecting releases for {len(repos)} repositories[/bold]\n")

    if dry_run:
        for repo in repos:
            console.print(f"  Would collect: {repo.full_name}")
        return None

    if not settings.github_token:
        console.print("[yellow]RELEASESTATS_GITHUB_TOKEN not set, using anonymous access[/yellow]")

    releases_by_repo: dict[str, list[ReleaseRecord]] = {}
    async with GitHubReleasesClient(settings.github_token) as client:
        for repo in repos:
            console.print(f"[cyan]{repo.full_name}[/cyan]")
            releases_by_repo[repo.name] = await fetch_repo_releases(client, repo)

    report = build_report(releases_by_repo, now or datetime.now(UTC))
    console.print(
        f"\n[bold]{len(report.repositories)} repositories, "
        f"{len(report.packages)} packages, {len(report.releases)} releases[/bold]"
    )
    write_report(report, ReportStorage(settings.data_dir))
    return report

"""Command-line interface for releasestats."""

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from releasestats.collector import collect_all
from releasestats.config import get_settings
from releasestats.dashboard import DashboardService, ReportCache
from releasestats.github_client import GitHubAPIError
from releasestats.storage import ReportReadError, ReportStorage

console = Console()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Release cadence statistics for GitHub repositories."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command()
@click.option("--repo", "-r", multiple=True, help="Specific repo(s) to collect")
@click.option("--dry-run", is_flag=True, help="Show what would be collected")
@click.pass_context
def collect(ctx: click.Context, repo: tuple[str, ...], dry_run: bool) -> None:
    """Fetch releases from GitHub and write the CSV reports.

    Examples:
        releasestats collect                  # All repos
        releasestats collect -r seed-design   # Single repo
        releasestats collect --dry-run        # Preview only
    """
    settings = get_settings()
    repos = None

    if repo:
        # Filter to specific repos
        all_repos = settings.load_repos()
        repos = [r for r in all_repos if r.name in repo]
        if not repos:
            console.print(f"[red]No matching repos found for: {repo}[/red]")
            return

    try:
        asyncio.run(collect_all(settings, repos=repos, dry_run=dry_run))
    except GitHubAPIError as e:
        console.print(f"[red]Collection aborted: {e}[/red]")
        if ctx.obj["verbose"]:
            console.print_exception()
        ctx.exit(1)


@main.command()
@click.option("--packages", "-p", is_flag=True, help="Show package statistics")
@click.pass_context
def show(ctx: click.Context, packages: bool) -> None:
    """Display release statistics in terminal.

    Examples:
        releasestats show                 # Per repository
        releasestats show -p              # Per package
    """
    settings = get_settings()
    storage = ReportStorage(settings.data_dir)

    try:
        df = storage.read_package_stats() if packages else storage.read_release_stats()
    except ReportReadError as e:
        console.print(f"[yellow]{e}. Run 'releasestats collect' first.[/yellow]")
        return

    if df.is_empty():
        console.print("[yellow]No data found. Run 'releasestats collect' first.[/yellow]")
        return

    table = Table(title="Package Releases" if packages else "Repository Releases")
    table.add_column("Package" if packages else "Repository", style="cyan")
    table.add_column("Releases", justify="right")
    table.add_column("Weekend %", justify="right")
    table.add_column("Prerelease %", justify="right")
    table.add_column("Avg Interval", justify="right")
    table.add_column("Last 30d", justify="right")
    table.add_column("Latest", justify="right")

    for row in df.sort("total_releases", descending=True).iter_rows(named=True):
        table.add_row(
            row["name"],
            str(row["total_releases"]),
            f"{row['weekend_ratio']:.2f}",
            f"{row['prerelease_ratio']:.2f}",
            f"{row['avg_release_interval_days']:.2f}",
            str(row["last_month_releases"]),
            (row["latest_release_date"] or "")[:10],
        )

    console.print(table)


@main.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["html", "json"]),
    default="html",
)
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.pass_context
def report(ctx: click.Context, output_format: str, output: str | None) -> None:
    """Render dashboard charts from the CSV reports.

    Examples:
        releasestats report                          # HTML dashboard
        releasestats report -f json -o charts.json   # Chart payloads as JSON
    """
    settings = get_settings()
    service = DashboardService(ReportCache(ReportStorage(settings.data_dir)))

    try:
        charts = service.list_charts()
    except ReportReadError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)

    if output_format == "json":
        output_path = Path(output or "reports/charts.json")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps([c.to_dict() for c in charts], indent=2))
        console.print(f"[green]Exported to {output_path}[/green]")

    else:
        from releasestats.report import generate_dashboard

        output_path = output or "reports/dashboard.html"
        generate_dashboard(charts, output_path)
        console.print(f"[green]Generated dashboard at {output_path}[/green]")


@main.command()
@click.option("--host", help="Bind address (default from settings)")
@click.option("--port", type=int, help="Port (default from settings)")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Serve chart payloads over HTTP."""
    import uvicorn

    from releasestats.server import create_app_from_storage

    settings = get_settings()
    app = create_app_from_storage(ReportStorage(settings.data_dir))
    uvicorn.run(app, host=host or settings.host, port=port or settings.port)


@main.command("list")
@click.pass_context
def list_repos(ctx: click.Context) -> None:
    """List configured repositories."""
    settings = get_settings()
    repos = settings.load_repos()

    if not repos:
        console.print("[yellow]No repositories configured in config/repos.yaml[/yellow]")
        return

    table = Table(title="Configured Repositories")
    table.add_column("Owner", style="cyan")
    table.add_column("Repository", style="green")

    for repo in repos:
        table.add_row(repo.owner, repo.name)

    console.print(table)


if __name__ == "__main__":
    main()

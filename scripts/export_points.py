#!/usr/bin/env python3
"""Export all-time proposer points to an ``account,points`` CSV file."""

from argparse import ArgumentParser
from asyncio import run
from datetime import UTC, date, datetime, time
from pathlib import Path

from rich.console import Console
from rich.table import Table

from voirewards.data.health.blacklist import resolve_blacklist
from voirewards.data.health.points import accumulate_points, points_csv, points_horizon
from voirewards.data.health.report import HealthArchive
from voirewards.data.health.snapshot import find_snapshot, snapshot_date
from voirewards.helpers.config import load_settings
from voirewards.helpers.constants import POINTS_EPOCH_START
from voirewards.helpers.http import UpstreamError, create_http_client
from voirewards.helpers.parsers import (
    format_distance_to_now,
    iter_weeks,
    parse_iso_date,
    truncate_address,
)
from voirewards.helpers.progress import track_progress


async def main(output: Path, today: date, top: int) -> int:
    console = Console()
    settings = load_settings()

    async with create_http_client() as client:
        try:
            blacklist = await resolve_blacklist(
                client,
                settings.ballast_url,
                settings.blacklist_path,
                settings.api_key_path,
            )
        except UpstreamError as e:
            console.print(f"[red]Error fetching blacklist: {e}[/red]")
            return 1

    archive = HealthArchive(settings.health_dir, settings.health_blacklist_path)
    weeks = len(list(iter_weeks(POINTS_EPOCH_START, points_horizon(today))))

    latest = find_snapshot(settings.health_dir, points_horizon(today))
    if latest is None:
        console.print(f"[yellow]No health snapshots in {settings.health_dir}[/yellow]")
    else:
        taken = datetime.combine(snapshot_date(latest) or today, time(), tzinfo=UTC)
        age = format_distance_to_now(taken, datetime.now(UTC))
        console.print(f"Latest snapshot: [cyan]{latest.name}[/cyan] ({age})")

    with track_progress("Counting weekly points", total=weeks, console=console) as (
        progress,
        task,
    ):
        points = accumulate_points(
            archive,
            blacklist,
            today,
            on_week=lambda _week: progress.update(task, advance=1),
        )

    output.write_text(points_csv(points.items()))

    table = Table(title=f"Top {top} accounts")
    table.add_column("Account", style="cyan")
    table.add_column("Points", justify="right", style="green")
    for account, total in sorted(points.items(), key=lambda item: -item[1])[:top]:
        table.add_row(truncate_address(account), f"{total:,.4f}")

    console.print(table)
    console.print(f"\n[bold green]✓ Wrote {len(points):,} accounts to {output}[/bold green]")
    return 0


if __name__ == "__main__":
    parser = ArgumentParser(description="Export all-time proposer points to CSV")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("points.csv"),
        help="CSV file to write (default: points.csv)",
    )
    parser.add_argument(
        "--date",
        type=parse_iso_date,
        default=None,
        help="Count points as of this YYYY-MM-DD day (default: today, UTC)",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="Accounts shown in the summary table (default: 10)",
    )
    args = parser.parse_args()

    raise SystemExit(
        run(main(args.output, args.date or datetime.now(UTC).date(), args.top))
    )

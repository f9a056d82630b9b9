"""Proposer point allocation from weekly health reports.

Each week a wallet earns points from at most one node: the node with the
fewest competing addresses among those scoring above the healthy threshold.
The node's single point is split evenly across its non-excluded addresses.
"""

from collections.abc import Callable, Iterable, Sequence
from datetime import date, timedelta

from voirewards.data.health.models import AddressNode, WeekPoints
from voirewards.data.health.report import HealthArchive
from voirewards.helpers.constants import HEALTHY_SCORE, POINTS_EPOCH_START
from voirewards.helpers.parsers import iter_weeks, previous_week_label


def points_horizon(today: date) -> date:
    """Last week date included in point accumulation."""
    return today + timedelta(days=1)


def week_points(entries: Sequence[AddressNode]) -> WeekPoints:
    """Points one wallet earns from its nodes in a single week.

    Args:
        entries: The wallet's node entries from one weekly report

    Returns:
        WeekPoints: ``1 / divisor`` of the first eligible node by ascending
        divisor and that node's score, or zeros when no node is eligible
    """
    for entry in sorted(entries, key=lambda e: e.health_divisor):
        if entry.health_excluded or entry.health_divisor <= 0:
            continue
        if entry.health_score > HEALTHY_SCORE:
            return WeekPoints(
                points=1.0 / entry.health_divisor, health=entry.health_score
            )
    return WeekPoints()


def accumulate_points(
    archive: HealthArchive,
    blacklist: Iterable[str],
    today: date,
    start: date = POINTS_EPOCH_START,
    on_week: Callable[[date], None] | None = None,
) -> dict[str, float]:
    """Total points per address from ``start`` through tomorrow.

    Args:
        archive: Snapshot source
        blacklist: Addresses excluded from every report
        today: Current date
        start: First week date
        on_week: Optional callback invoked after each week is counted

    Returns:
        dict[str, float]: Points per address, in first-seen order
    """
    blocked = list(blacklist)
    totals: dict[str, float] = {}

    for week in iter_weeks(start, points_horizon(today)):
        report = archive.report_for(week, blocked)
        for address, entries in report.addresses.items():
            totals[address] = totals.get(address, 0.0) + week_points(entries).points
        if on_week is not None:
            on_week(week)

    return totals


def wallet_points(
    archive: HealthArchive,
    blacklist: Iterable[str],
    wallet: str,
    today: date,
    start: date = POINTS_EPOCH_START,
) -> dict[str, WeekPoints]:
    """Per-week points for one wallet.

    Weeks are keyed by the Monday-Sunday range the snapshot covers; weeks in
    which the wallet is absent from the report are omitted.
    """
    blocked = list(blacklist)
    weeks: dict[str, WeekPoints] = {}

    for week in iter_weeks(start, points_horizon(today)):
        report = archive.report_for(week, blocked)
        if wallet in report.addresses:
            weeks[previous_week_label(week)] = week_points(report.addresses[wallet])

    return weeks


def points_csv(rows: Iterable[tuple[str, float]]) -> str:
    """``account,points`` CSV, points printed with 14 significant digits."""
    lines = ["account,points"]
    lines.extend(f"{account},{points:.14g}" for account, points in rows)
    return "\n".join(lines) + "\n"


__all__ = [
    "accumulate_points",
    "points_csv",
    "points_horizon",
    "wallet_points",
    "week_points",
]

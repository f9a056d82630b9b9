"""Weekly node health report.

Turns the node rows of one snapshot into an address -> nodes index with
health flags, applying the reward blacklist and the health-only blacklist.
"""

from collections.abc import Iterable
from datetime import date
from pathlib import Path

from voirewards.data.health.blacklist import load_health_blacklist
from voirewards.data.health.models import AddressNode, NodeRecord, WeeklyHealth
from voirewards.data.health.snapshot import find_snapshot, load_snapshot
from voirewards.helpers.constants import (
    ALGOD_MIN_VERSION,
    HEALTHY_SCORE,
    QUALIFY_HOURS,
    VERSION_CUTOFF_DATE,
)
from voirewards.helpers.logging import get_logger
from voirewards.helpers.parsers import compare_versions


logger = get_logger(__name__)


def meets_min_version(version: str | None) -> bool:
    return compare_versions(version, ALGOD_MIN_VERSION) >= 0


def is_node_healthy(node: NodeRecord, day: date) -> bool:
    """Score gate, plus the version gate for snapshots after the cutoff."""
    if node.score < HEALTHY_SCORE:
        return False
    return day <= VERSION_CUTOFF_DATE or meets_min_version(node.ver)


def build_weekly_report(
    nodes: Iterable[NodeRecord],
    blacklist: Iterable[str],
    health_blacklist: Iterable[str],
    day: date,
) -> WeeklyHealth:
    """Build the health report for one snapshot.

    Args:
        nodes: Node rows from the snapshot
        blacklist: Addresses removed from every node
        health_blacklist: Addresses kept but never counted healthy
        day: Date the report is requested for

    Returns:
        WeeklyHealth: Address index and node counts
    """
    blocked = set(blacklist)
    health_blocked = set(health_blacklist)
    report = WeeklyHealth()

    for node in nodes:
        addresses = [address for address in node.addresses if address not in blocked]
        health_exclude = {address for address in addresses if address in health_blocked}

        healthy = is_node_healthy(node, day)
        report.total_node_count += 1
        if healthy:
            report.healthy_node_count += 1
            if int(node.hours) >= QUALIFY_HOURS:
                report.qualify_node_count += 1

        excluded_count = sum(1 for address in addresses if address in health_exclude)
        if (
            len(addresses) <= excluded_count
            and node.score >= HEALTHY_SCORE
            and meets_min_version(node.ver)
        ):
            report.empty_node_count += 1

        divisor = len(addresses) - excluded_count

        for address in addresses:
            excluded = address in health_exclude
            report.addresses.setdefault(address, []).append(
                AddressNode(
                    node_host=node.host,
                    node_name=node.name,
                    health_score=node.score,
                    health_divisor=divisor,
                    health_hours=node.hours,
                    ver=node.ver,
                    is_healthy=healthy and not excluded,
                    health_excluded=excluded,
                )
            )

    return report


class HealthArchive:
    """Weekly reports backed by a directory of snapshot files.

    Parsed snapshots are memoised per instance, so walking many weeks that
    resolve to the same file reads it once. Create one archive per request.
    """

    def __init__(self, directory: Path, health_blacklist_path: Path) -> None:
        """Initialize the archive.

        Args:
            directory: Directory holding ``health_week_*.json`` files
            health_blacklist_path: Health-only blacklist file
        """
        self.directory = directory
        self.health_blacklist_path = health_blacklist_path
        self._snapshots: dict[Path, list[NodeRecord]] = {}
        self._health_blacklist: list[str] | None = None

    @property
    def health_blacklist(self) -> list[str]:
        if self._health_blacklist is None:
            self._health_blacklist = load_health_blacklist(self.health_blacklist_path)
        return self._health_blacklist

    def nodes_for(self, day: date) -> list[NodeRecord]:
        """Node rows of the newest snapshot dated on or before ``day``."""
        path = find_snapshot(self.directory, day)
        if path is None:
            logger.debug("No health snapshot on or before %s", day)
            return []

        if path not in self._snapshots:
            self._snapshots[path] = load_snapshot(path)
        return self._snapshots[path]

    def report_for(self, day: date, blacklist: Iterable[str]) -> WeeklyHealth:
        """Health report for ``day``; empty when no snapshot is available."""
        return build_weekly_report(
            self.nodes_for(day), blacklist, self.health_blacklist, day
        )


__all__ = [
    "HealthArchive",
    "build_weekly_report",
    "is_node_healthy",
    "meets_min_version",
]

"""Tests for the weekly node health report."""

from datetime import date
from pathlib import Path

from tests.factories import node, write_snapshot_file
from voirewards.data.health.models import NodeRecord
from voirewards.data.health.report import (
    HealthArchive,
    build_weekly_report,
    is_node_healthy,
    meets_min_version,
)


AFTER_CUTOFF = date(2024, 5, 20)
BEFORE_CUTOFF = date(2024, 1, 1)


def record(
    score: float,
    addresses: list[str],
    hours: float = 168,
    ver: str | None = "3.23.0",
) -> NodeRecord:
    return NodeRecord.model_validate(node("n", score, addresses, hours=hours, ver=ver))


class TestNodeHealth:
    """Tests for the health gates."""

    def test_meets_min_version(self) -> None:
        """Test the minimum version is inclusive."""
        assert meets_min_version("3.22.1")
        assert meets_min_version("3.23.0")
        assert not meets_min_version("3.22.0")
        assert not meets_min_version(None)

    def test_score_gate(self) -> None:
        """Test scores below 5.0 are unhealthy and 5.0 is healthy."""
        assert is_node_healthy(record(5.0, ["A"]), AFTER_CUTOFF)
        assert not is_node_healthy(record(4.99, ["A"]), AFTER_CUTOFF)

    def test_version_gate_after_cutoff(self) -> None:
        """Test old software is never healthy after the cutoff."""
        old = record(9.0, ["A"], ver="3.21.0")

        assert not is_node_healthy(old, AFTER_CUTOFF)
        assert is_node_healthy(old, BEFORE_CUTOFF)
        assert is_node_healthy(old, date(2024, 1, 8))


class TestBuildWeeklyReport:
    """Tests for build_weekly_report."""

    def test_divisor_and_counts(self) -> None:
        """Test divisors and node counters."""
        nodes = [
            record(6.0, ["A", "B", "C", "D"], hours=168),
            record(7.0, ["E"], hours=100),
            record(4.0, ["F"], hours=500),
        ]

        report = build_weekly_report(nodes, [], [], AFTER_CUTOFF)

        assert report.addresses["A"][0].health_divisor == 4
        assert report.addresses["A"][0].is_healthy
        assert report.addresses["F"][0].is_healthy is False
        assert report.total_node_count == 3
        assert report.healthy_node_count == 2
        assert report.qualify_node_count == 1
        assert report.empty_node_count == 0

    def test_blacklisted_addresses_removed(self) -> None:
        """Test blacklisted addresses never appear and do not count in divisors."""
        report = build_weekly_report(
            [record(6.0, ["A", "BOT", "B"])], ["BOT"], [], AFTER_CUTOFF
        )

        assert "BOT" not in report.addresses
        assert report.addresses["A"][0].health_divisor == 2

    def test_health_blacklisted_addresses_kept_unhealthy(self) -> None:
        """Test health-only blacklisted addresses stay indexed but are never healthy."""
        report = build_weekly_report(
            [record(9.0, ["A", "H"])], [], ["H"], AFTER_CUTOFF
        )

        assert report.addresses["H"][0].is_healthy is False
        assert report.addresses["H"][0].health_excluded is True
        assert report.addresses["A"][0].is_healthy is True
        assert report.addresses["A"][0].health_divisor == 1

    def test_empty_node_counted(self) -> None:
        """Test a healthy node with only excluded addresses is counted empty."""
        nodes = [
            record(6.0, ["H"]),
            record(6.0, ["BOT"]),
            record(6.0, [], ver="3.20.0"),
        ]

        report = build_weekly_report(nodes, ["BOT"], ["H"], AFTER_CUTOFF)

        assert report.empty_node_count == 2
        assert report.addresses["H"][0].health_divisor == 0

    def test_address_on_many_nodes(self) -> None:
        """Test an address lists every node it runs on."""
        report = build_weekly_report(
            [record(6.0, ["A"]), record(8.0, ["A", "B"])], [], [], AFTER_CUTOFF
        )

        assert [n.health_score for n in report.nodes_for("A")] == [6.0, 8.0]
        assert report.nodes_for("missing") == []

    def test_excluded_flag_not_serialized(self) -> None:
        """Test the internal exclusion flag is not part of the payload."""
        report = build_weekly_report([record(6.0, ["H"])], [], ["H"], AFTER_CUTOFF)

        payload = report.model_dump(mode="json")

        assert "health_excluded" not in payload["addresses"]["H"][0]
        assert payload["addresses"]["H"][0]["is_healthy"] is False


class TestHealthArchive:
    """Tests for HealthArchive."""

    def test_report_for_uses_latest_snapshot(self, health_dir: Path, tmp_path: Path) -> None:
        """Test reports come from the newest snapshot on or before the day."""
        write_snapshot_file(health_dir, date(2024, 5, 6), [node("old", 6.0, ["A"])])
        write_snapshot_file(health_dir, date(2024, 5, 13), [node("new", 6.0, ["B"])])
        health_blacklist = tmp_path / "blacklist_health.csv"
        health_blacklist.write_text("B\n")

        archive = HealthArchive(health_dir, health_blacklist)

        assert list(archive.report_for(date(2024, 5, 10), []).addresses) == ["A"]
        report = archive.report_for(date(2024, 5, 14), [])
        assert report.addresses["B"][0].is_healthy is False

    def test_no_snapshot_gives_empty_report(self, health_dir: Path, tmp_path: Path) -> None:
        """Test a day before any snapshot yields an empty report."""
        archive = HealthArchive(health_dir, tmp_path / "missing.csv")

        report = archive.report_for(date(2024, 5, 6), [])

        assert report.addresses == {}
        assert report.total_node_count == 0

    def test_same_inputs_same_report(self, health_dir: Path, tmp_path: Path) -> None:
        """Test re-running for the same date and snapshot is deterministic."""
        write_snapshot_file(
            health_dir,
            date(2024, 5, 6),
            [node("n1", 6.0, ["A", "B"]), node("n2", 4.0, ["C"])],
        )

        first = HealthArchive(health_dir, tmp_path / "none.csv").report_for(
            date(2024, 5, 7), ["C"]
        )
        second = HealthArchive(health_dir, tmp_path / "none.csv").report_for(
            date(2024, 5, 7), ["C"]
        )

        assert first.model_dump() == second.model_dump()

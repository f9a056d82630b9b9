"""Weekly health snapshot files.

Snapshots are written by an external collector as
``health_week_YYYYMMDD.json`` with a columnar layout::

    {
        "meta": [{"name": "host"}, {"name": "name"}, {"name": "score"}, ...],
        "data": [["node-1.example", "node-1", 6.2, ["ADDR..."], 168, "3.23.0"]]
    }

Column positions come from ``meta`` and are never assumed.
"""

import json
from datetime import date
from pathlib import Path

from typing import Any

from pydantic import ValidationError

from voirewards.data.health.models import NodeRecord
from voirewards.helpers.constants import MIN_SNAPSHOT_BYTES, SNAPSHOT_GLOB
from voirewards.helpers.logging import get_logger
from voirewards.helpers.parsers import parse_compact_date


logger = get_logger(__name__)

SNAPSHOT_FIELDS = ("host", "name", "score", "addresses", "hours", "ver")


def snapshot_date(path: Path) -> date | None:
    """Date embedded in the last eight characters of the file stem."""
    try:
        return parse_compact_date(path.stem[-8:])
    except ValueError:
        return None


def find_snapshot(
    directory: Path, target: date, min_bytes: int = MIN_SNAPSHOT_BYTES
) -> Path | None:
    """Find the newest usable snapshot dated on or before ``target``.

    Args:
        directory: Directory holding the snapshot files
        target: Latest acceptable snapshot date
        min_bytes: Files at or below this size are skipped as corrupt

    Returns:
        Path | None: The snapshot file, or None if none qualifies
    """
    if not directory.is_dir():
        logger.warning("Health snapshot directory %s does not exist", directory)
        return None

    candidates: list[tuple[date, Path]] = []
    for path in directory.glob(SNAPSHOT_GLOB):
        file_date = snapshot_date(path)
        if file_date is None:
            continue
        try:
            size = path.stat().st_size
        except OSError:
            continue
        if size <= min_bytes:
            logger.debug("Skipping undersized snapshot %s (%d bytes)", path, size)
            continue
        candidates.append((file_date, path))

    candidates.sort(key=lambda item: item[0], reverse=True)

    for file_date, path in candidates:
        if file_date <= target:
            return path

    return None


def _column_positions(meta: list[Any]) -> dict[str, int]:
    positions: dict[str, int] = {}
    for index, column in enumerate(meta):
        if isinstance(column, dict) and "name" in column:
            positions[str(column["name"])] = index
    return positions


def parse_snapshot(payload: Any) -> list[NodeRecord]:
    """Turn a decoded snapshot into node records.

    Rows that cannot be validated are skipped.
    """
    if not isinstance(payload, dict):
        return []

    meta = payload.get("meta")
    rows = payload.get("data")
    if not isinstance(meta, list) or not isinstance(rows, list):
        return []

    positions = _column_positions(meta)
    nodes: list[NodeRecord] = []

    for row in rows:
        if not isinstance(row, list):
            continue

        values = {
            field: row[positions[field]]
            for field in SNAPSHOT_FIELDS
            if field in positions and positions[field] < len(row)
            and row[positions[field]] is not None
        }

        try:
            nodes.append(NodeRecord.model_validate(values))
        except ValidationError as e:
            logger.debug("Skipping malformed snapshot row %s: %s", values.get("host"), e)

    return nodes


def load_snapshot(path: Path) -> list[NodeRecord]:
    """Load node records from a snapshot file.

    Unreadable or malformed files yield an empty list.
    """
    try:
        payload = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        logger.warning("Unable to read health snapshot %s: %s", path, e)
        return []

    return parse_snapshot(payload)


__all__ = [
    "SNAPSHOT_FIELDS",
    "find_snapshot",
    "load_snapshot",
    "parse_snapshot",
    "snapshot_date",
]

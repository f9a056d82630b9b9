"""Proposer statistics endpoint.

A single ``/proposers`` route dispatches on the ``action`` query parameter.
Requests missing a required parameter, or naming an unknown action, get the
default error payload with status 200.
"""

import asyncio
from datetime import date, datetime, timedelta
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from voirewards.api.dependencies import (
    get_archive,
    get_http_client,
    get_now,
    get_session,
    get_settings,
)
from voirewards.data.blocks import queries
from voirewards.data.blocks.models import ProposerStats, Statistics, WalletDetails
from voirewards.data.health.blacklist import resolve_blacklist
from voirewards.data.health.models import WeeklyHealth
from voirewards.data.health.points import (
    accumulate_points,
    points_csv,
    wallet_points,
)
from voirewards.data.health.report import HealthArchive
from voirewards.helpers.config import Settings
from voirewards.helpers.constants import (
    ALGOD_MIN_VERSION,
    DEFAULT_LOOKBACK_DAYS,
    POINTS_EPOCH_START,
)
from voirewards.helpers.logging import get_logger
from voirewards.helpers.parsers import parse_iso_date, week_bounds


logger = get_logger(__name__)

router = APIRouter(tags=["Proposers"])


def default_payload(action: str) -> dict[str, Any]:
    return {"success": False, "error": f"Unspecified Error or Unknown Action: {action}"}


def proposals_range(
    start: str | None, end: str | None, today: date
) -> tuple[date, date]:
    """Requested day range, defaulting to the last 30 days through today.

    Raises:
        ValueError: If a bound is not a ``YYYY-MM-DD`` date
    """
    first = parse_iso_date(start) if start else today - timedelta(days=DEFAULT_LOOKBACK_DAYS)
    last = parse_iso_date(end) if end else today
    return first, last


def build_statistics_rows(
    counts: list[tuple[str, int]],
    blacklist: list[str],
    points: dict[str, float],
    health: WeeklyHealth,
) -> list[ProposerStats]:
    """Block counts joined with current nodes and all-time points.

    Proposers with blocks come first, in query order; addresses that earned
    points without proposing follow with a block count of 0.
    """
    blocked = set(blacklist)
    rows: list[ProposerStats] = []
    seen: set[str] = set()

    for proposer, block_count in counts:
        if proposer in blocked:
            continue
        seen.add(proposer)
        rows.append(
            ProposerStats(
                proposer=proposer,
                block_count=block_count,
                nodes=health.nodes_for(proposer),
                points=points.get(proposer, 0.0),
            )
        )

    for address, total in points.items():
        if address in seen:
            continue
        rows.append(
            ProposerStats(
                proposer=address,
                block_count=0,
                nodes=health.nodes_for(address),
                points=total,
            )
        )

    return rows


def _points_and_health(
    archive: HealthArchive, blacklist: list[str], today: date
) -> tuple[dict[str, float], WeeklyHealth]:
    return accumulate_points(archive, blacklist, today), archive.report_for(
        today, blacklist
    )


async def _block_summary(
    session: AsyncSession, today: date
) -> tuple[list[tuple[str, int]], datetime | None, int | None]:
    counts = await queries.block_counts(
        session,
        queries.day_start(POINTS_EPOCH_START),
        queries.day_end(today),
    )
    max_timestamp = await queries.latest_timestamp(session)
    height = await queries.block_height(session)
    return counts, max_timestamp, height


async def statistics(
    session: AsyncSession,
    archive: HealthArchive,
    blacklist: list[str],
    now: datetime,
) -> Statistics:
    """Proposer leaderboard from the start of the points program to today."""
    today = now.date()

    # Snapshot parsing is blocking file work; run it beside the queries
    (points, health), (counts, max_timestamp, height) = await asyncio.gather(
        asyncio.to_thread(_points_and_health, archive, blacklist, today),
        _block_summary(session, today),
    )

    return Statistics(
        data=build_statistics_rows(counts, blacklist, points, health),
        max_timestamp=max_timestamp,
        block_height=height,
        total_node_count=health.total_node_count,
        healthy_node_count=health.healthy_node_count,
        qualify_node_count=health.qualify_node_count,
        minimum_algod=ALGOD_MIN_VERSION,
    )


async def wallet_details(
    session: AsyncSession,
    archive: HealthArchive,
    blacklist: list[str],
    wallet: str,
    now: datetime,
) -> WalletDetails:
    """Current nodes of ``wallet`` and its blocks in the current UTC week."""
    today = now.date()
    health = await asyncio.to_thread(
        archive.report_for, today + timedelta(days=1), blacklist
    )

    monday, sunday = week_bounds(today)
    week_start = queries.day_start(monday)
    week_end = queries.day_end(sunday)

    return WalletDetails(
        data=health.nodes_for(wallet),
        total_node_count=health.total_node_count,
        healthy_node_count=health.healthy_node_count,
        empty_node_count=health.empty_node_count,
        qualify_node_count=health.qualify_node_count,
        total_blocks=await queries.count_wallet_blocks(
            session, wallet, week_start, week_end
        ),
        first_block=await queries.first_block_since(session, week_start),
        last_block=await queries.last_block_until(session, week_end),
    )


@router.api_route("/proposers", methods=["GET", "POST"])
async def proposers(
    action: str = Query("statistics"),
    wallet: str | None = Query(None),
    start: str | None = Query(None),
    end: str | None = Query(None),
    format: str | None = Query(None),  # noqa: A002
    blacklist: str | None = Query(None),
    x_api_key: str | None = Header(None),
    session: AsyncSession = Depends(get_session),
    archive: HealthArchive = Depends(get_archive),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> Response:
    """Proposer statistics, health, proposals and points by ``action``."""

    async def current_blacklist() -> list[str]:
        return await resolve_blacklist(
            client,
            settings.ballast_url,
            settings.blacklist_path,
            settings.api_key_path,
            override=blacklist,
            api_key=x_api_key,
        )

    today = now.date()

    if action == "blacklist":
        return JSONResponse(await current_blacklist())

    if action == "health":
        blocked = await current_blacklist()
        report = await asyncio.to_thread(
            archive.report_for, today + timedelta(days=1), blocked
        )
        return JSONResponse(report.model_dump(mode="json"))

    if action == "proposals" and wallet is not None:
        try:
            first, last = proposals_range(start, end, today)
        except ValueError as e:
            logger.debug("Rejected proposals range: %s", e)
            return JSONResponse(default_payload(action))
        return JSONResponse(await queries.proposals_by_day(session, wallet, first, last))

    if action == "walletPoints" and wallet is not None:
        blocked = await current_blacklist()
        weeks = await asyncio.to_thread(wallet_points, archive, blocked, wallet, today)
        return JSONResponse(
            {label: week.model_dump() for label, week in weeks.items()}
        )

    if action == "walletDetails" and wallet is not None:
        blocked = await current_blacklist()
        details = await wallet_details(session, archive, blocked, wallet, now)
        return JSONResponse(details.model_dump(mode="json"))

    if action == "statistics":
        blocked = await current_blacklist()
        stats = await statistics(session, archive, blocked, now)
        if format and format.lower() == "csv":
            csv_rows = ((row.proposer, row.points) for row in stats.data)
            return Response(points_csv(csv_rows), media_type="text/csv")
        return JSONResponse(stats.model_dump(mode="json"))

    return JSONResponse(default_payload(action))


__all__ = [
    "build_statistics_rows",
    "default_payload",
    "proposals_range",
    "router",
    "statistics",
    "wallet_details",
]

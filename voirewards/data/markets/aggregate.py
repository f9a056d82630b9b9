"""Market aggregates and circulating supply."""

from collections.abc import Sequence

from typing import Any

import httpx

from voirewards.data.markets.models import CirculatingSupply, MarketAggregates, MarketRow
from voirewards.helpers.http import handle_http_errors


def sort_by_volume(rows: Sequence[MarketRow]) -> list[MarketRow]:
    """Markets ordered by 24h volume, highest first."""
    return sorted(rows, key=lambda row: row.volume_24h or 0.0, reverse=True)


def aggregate_markets(rows: Sequence[MarketRow]) -> MarketAggregates:
    """Total volume, total TVL and the volume-weighted average price.

    Example:
        Two markets priced 1.0 and 2.0 with volumes 100 and 300 have a
        weighted average price of 1.75.
    """
    total_volume = sum(row.volume_24h or 0.0 for row in rows)
    total_tvl = sum(row.tvl or 0.0 for row in rows)

    weighted = 0.0
    if total_volume:
        weighted = sum(
            row.price * ((row.volume_24h or 0.0) / total_volume) for row in rows
        )

    return MarketAggregates(
        total_volume=total_volume,
        total_tvl=total_tvl,
        weighted_average_price=weighted,
    )


def _as_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@handle_http_errors(default_return=CirculatingSupply())
async def fetch_circulating_supply(
    client: httpx.AsyncClient, url: str
) -> CirculatingSupply:
    """Fetch circulating supply figures; empty figures on failure."""
    response = await client.get(url)
    response.raise_for_status()
    data = response.json()
    if not isinstance(data, dict):
        return CirculatingSupply()

    return CirculatingSupply(
        circulating_supply=_as_float(data.get("circulatingSupply")),
        percent_distributed=_as_float(data.get("percentDistributed")),
    )


__all__ = [
    "aggregate_markets",
    "fetch_circulating_supply",
    "sort_by_volume",
]

"""Site data endpoints: price, reward estimates, quests and markets."""

import asyncio
from datetime import datetime

from typing import Any

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voirewards.api.dependencies import (
    get_http_client,
    get_now,
    get_price_service,
    get_session,
    get_settings,
)
from voirewards.data.markets.aggregate import (
    aggregate_markets,
    fetch_circulating_supply,
    sort_by_volume,
)
from voirewards.data.markets.models import CirculatingSupply, token_variants
from voirewards.data.markets.queries import latest_markets, price_history
from voirewards.data.price.ticker import PriceService
from voirewards.data.quests import queries as quest_queries
from voirewards.data.quests.models import QuestTotals, RewardEstimate
from voirewards.data.quests.partners import PARTNER_LOOKUPS
from voirewards.data.quests.rewards import estimate_reward
from voirewards.data.rewards.estimates import calculate_rewards, current_epoch
from voirewards.helpers.config import Settings
from voirewards.helpers.constants import REWARDS_EPOCH_START
from voirewards.helpers.http import fetch_json
from voirewards.helpers.logging import get_logger
from voirewards.helpers.parsers import format_units


logger = get_logger(__name__)

router = APIRouter(prefix="/api")


@router.get("/price", tags=["Price"])
async def get_price(
    service: PriceService = Depends(get_price_service),
    now: datetime = Depends(get_now),
) -> dict[str, Any]:
    """Token price, cached for five minutes."""
    quote = await service.get_price(now)
    return quote.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.get("/rewards/estimate", tags=["Rewards"])
def get_reward_estimate(
    balance: float = Query(..., description="Online balance in atomic units"),
    online_money: float = Query(..., description="Total online stake in atomic units"),
    reward_per_block: float = Query(..., description="Reward per proposed block"),
) -> dict[str, Any]:
    """Expected block proposals and rewards for a staked balance."""
    try:
        calculations = calculate_rewards(balance, online_money, reward_per_block)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return {**calculations.model_dump(), "balance_formatted": format_units(balance)}


@router.get("/epochs", tags=["Rewards"])
async def get_epochs(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> dict[str, Any]:
    """Epoch reward details from the upstream feed."""
    data = await fetch_json(client, settings.epochs_url)
    if not isinstance(data, dict):
        raise HTTPException(status_code=500, detail="Failed to fetch epoch data")

    data.setdefault("current_epoch", current_epoch(now, REWARDS_EPOCH_START) + 1)
    return data


@router.get("/phase2", tags=["Quests"])
async def get_phase2_estimate(
    wallet: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
) -> dict[str, Any]:
    """Estimated quest reward for a wallet."""
    if not wallet:
        raise HTTPException(status_code=400, detail="Missing required parameter: wallet")

    try:
        progress = await quest_queries.get_wallet_quests(session, wallet)
        if progress is None:
            raise HTTPException(status_code=404, detail="Wallet not found")
        quests = await quest_queries.get_active_quests(session)
        totals = await quest_queries.get_quest_totals(session)
    except SQLAlchemyError as e:
        logger.exception("Error calculating estimated reward")
        raise HTTPException(
            status_code=500,
            detail="An error occurred while calculating the estimated reward",
        ) from e

    estimate = estimate_reward(
        progress, quests, totals or QuestTotals(total_points_tokens=0, total_quest_points=0)
    )
    return RewardEstimate(wallet=wallet, estimated_reward=estimate).model_dump(
        by_alias=True
    )


@router.get("/eligibility", tags=["Quests"])
async def get_eligibility(
    wallet: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
) -> dict[str, bool]:
    if not wallet:
        raise HTTPException(status_code=400, detail="Wallet address is required")

    try:
        eligible = await quest_queries.is_eligible(session, wallet)
    except SQLAlchemyError as e:
        logger.exception("Error checking eligibility")
        raise HTTPException(status_code=500, detail="Internal server error") from e

    return {"isEligible": eligible}


@router.get("/leaderboard", tags=["Quests"])
async def get_leaderboard(
    session: AsyncSession = Depends(get_session),
) -> dict[str, Any]:
    try:
        leaderboard = await quest_queries.get_leaderboard(session)
    except SQLAlchemyError as e:
        logger.exception("Error fetching leaderboard")
        raise HTTPException(
            status_code=500, detail="Failed to fetch leaderboard data"
        ) from e

    return leaderboard.model_dump(mode="json")


@router.get("/quests", tags=["Quests"])
async def get_partner_quests(
    project: str | None = Query(None),
    wallet: str | None = Query(None),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> dict[str, Any]:
    """Partner project quest data, passed through as returned."""
    if not project or not wallet:
        return {"error": "Missing required parameters"}

    lookup = PARTNER_LOOKUPS.get(project)
    if lookup is not None:
        data = await lookup(client, wallet)
        if data is not None:
            return data

    return {"error": "Invalid project"}


@router.get("/markets", tags=["Markets"])
async def get_markets(
    token: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Latest market snapshot per trading pair with aggregates."""
    variants = token_variants(token) if token else None

    try:
        rows, supply = await asyncio.gather(
            latest_markets(session, variants),
            fetch_circulating_supply(client, settings.circulating_supply_url),
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching market data")
        raise HTTPException(status_code=500, detail="Failed to fetch market data") from e

    rows = sort_by_volume(rows)
    aggregates = aggregate_markets(rows)
    supply = supply or CirculatingSupply()

    return {
        "marketData": [row.model_dump(mode="json") for row in rows],
        "aggregates": {
            "totalVolume": aggregates.total_volume,
            "totalTvl": aggregates.total_tvl,
            "weightedAveragePrice": aggregates.weighted_average_price,
        },
        "circulatingSupply": {
            "circulatingSupply": supply.circulating_supply,
            "percentDistributed": supply.percent_distributed,
        },
    }


@router.get("/price-history", tags=["Markets"])
async def get_price_history(
    period: str = Query("24h"),
    trading_pair_id: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> list[dict[str, Any]]:
    """Snapshot prices over a period, averaged across pairs unless one is given."""
    pair_id: int | None = None
    if trading_pair_id and trading_pair_id != "null":
        try:
            pair_id = int(trading_pair_id)
        except ValueError as e:
            raise HTTPException(status_code=400, detail="Invalid trading_pair_id") from e

    try:
        points = await price_history(session, period, now, pair_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except SQLAlchemyError as e:
        logger.exception("Error fetching price history")
        raise HTTPException(
            status_code=500, detail="Failed to fetch price history"
        ) from e

    return [point.model_dump(mode="json") for point in points]


__all__ = ["router"]

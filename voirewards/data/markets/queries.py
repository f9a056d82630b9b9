"""Market snapshot queries."""

from datetime import datetime, timedelta

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from voirewards.data.blocks.queries import to_naive_utc
from voirewards.data.markets.db import MarketSnapshotDB, TradingPairDB
from voirewards.data.markets.models import MarketRow, PricePoint, canonical_pair


PRICE_HISTORY_PERIODS: dict[str, timedelta | None] = {
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "all": None,
}


async def latest_snapshot_time(session: AsyncSession) -> datetime | None:
    return (await session.execute(select(func.max(MarketSnapshotDB.timestamp)))).scalar()


async def latest_markets(
    session: AsyncSession, token_variants: list[str] | None = None
) -> list[MarketRow]:
    """Every trading pair's snapshot at the latest snapshot time.

    Args:
        session: Database session
        token_variants: Optional symbols; keeps pairs whose base or quote
            token is one of them

    Returns:
        list[MarketRow]: Unsorted market rows
    """
    latest = await latest_snapshot_time(session)
    if latest is None:
        return []

    stmt = (
        select(TradingPairDB, MarketSnapshotDB)
        .join(MarketSnapshotDB, MarketSnapshotDB.trading_pair_id == TradingPairDB.id)
        .where(MarketSnapshotDB.timestamp == latest)
    )
    if token_variants:
        stmt = stmt.where(
            or_(
                TradingPairDB.base_token.in_(token_variants),
                TradingPairDB.quote_token.in_(token_variants),
            )
        )

    rows: list[MarketRow] = []
    for pair, snapshot in (await session.execute(stmt)).all():
        rows.append(
            MarketRow(
                trading_pair_id=pair.id,
                exchange=pair.exchange.name,
                pair=f"{pair.base_token}/{pair.quote_token}",
                base_pair=canonical_pair(f"{pair.base_token}/{pair.quote_token}"),
                type=pair.exchange.type,
                network=pair.exchange.network,
                pool_url=pair.pool_url,
                price=snapshot.price,
                volume_24h=snapshot.volume_24h,
                tvl=snapshot.tvl,
                high_24h=snapshot.high_24h,
                low_24h=snapshot.low_24h,
                price_change_24h=snapshot.price_change_24h,
                price_change_percentage_24h=snapshot.price_change_percentage_24h,
                last_updated=snapshot.timestamp,
            )
        )
    return rows


async def price_history(
    session: AsyncSession,
    period: str,
    now: datetime,
    trading_pair_id: int | None = None,
) -> list[PricePoint]:
    """Price points over ``period``.

    With a trading pair the pair's own prices are returned; without one,
    prices of all pairs are averaged per snapshot time.

    Raises:
        ValueError: If ``period`` is not one of PRICE_HISTORY_PERIODS
    """
    if period not in PRICE_HISTORY_PERIODS:
        msg = f"Invalid period: {period}. Use one of {', '.join(PRICE_HISTORY_PERIODS)}"
        raise ValueError(msg)

    stmt = select(
        MarketSnapshotDB.timestamp, func.avg(MarketSnapshotDB.price).label("value")
    )
    window = PRICE_HISTORY_PERIODS[period]
    if window is not None:
        stmt = stmt.where(MarketSnapshotDB.timestamp >= to_naive_utc(now) - window)
    if trading_pair_id is not None:
        stmt = stmt.where(MarketSnapshotDB.trading_pair_id == trading_pair_id)
    stmt = stmt.group_by(MarketSnapshotDB.timestamp).order_by(MarketSnapshotDB.timestamp)

    return [
        PricePoint(time=timestamp, value=float(value))
        for timestamp, value in (await session.execute(stmt)).all()
    ]


__all__ = [
    "PRICE_HISTORY_PERIODS",
    "latest_markets",
    "latest_snapshot_time",
    "price_history",
]

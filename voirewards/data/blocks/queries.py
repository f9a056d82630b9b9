"""Block queries backing the proposer endpoints.

Timestamps are stored as naive UTC datetimes; aware datetimes passed in are
converted to UTC first.
"""

from collections.abc import Sequence
from datetime import UTC, date, datetime, time

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from voirewards.data.blocks.db import BlockDB
from voirewards.data.blocks.models import Block
from voirewards.helpers.parsers import iter_days


def to_naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(UTC).replace(tzinfo=None)


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def day_end(day: date) -> datetime:
    """Last whole second of ``day``."""
    return datetime.combine(day, time(23, 59, 59))


async def store_blocks(session: AsyncSession, blocks: Sequence[Block]) -> None:
    """Insert or replace blocks by block number."""
    for block in blocks:
        await session.merge(
            BlockDB(
                block=block.block,
                proposer=block.proposer,
                timestamp=to_naive_utc(block.timestamp),
            )
        )
    await session.commit()


async def proposals_by_day(
    session: AsyncSession, wallet: str, start: date, end: date
) -> dict[str, list[int]]:
    """Blocks proposed by ``wallet`` grouped by UTC day.

    Args:
        session: Database session
        wallet: Proposer address
        start: First day (from 00:00:00)
        end: Last day (through 23:59:59)

    Returns:
        dict[str, list[int]]: ``YYYY-MM-DD`` -> block numbers, newest first.
        Every day of the range is present; days are ordered newest first.
    """
    stmt = (
        select(BlockDB.block, BlockDB.timestamp)
        .where(
            BlockDB.proposer == wallet,
            BlockDB.timestamp >= day_start(start),
            BlockDB.timestamp <= day_end(end),
        )
        .order_by(BlockDB.timestamp.desc())
    )
    result = await session.execute(stmt)

    grouped: dict[str, list[int]] = {day.isoformat(): [] for day in iter_days(start, end)}
    for block, timestamp in result:
        grouped.setdefault(timestamp.date().isoformat(), []).append(block)

    return dict(sorted(grouped.items(), reverse=True))


async def block_counts(
    session: AsyncSession, start: datetime, end: datetime
) -> list[tuple[str, int]]:
    """Blocks per proposer within ``[start, end]``."""
    stmt = (
        select(BlockDB.proposer, func.count().label("block_count"))
        .where(
            BlockDB.timestamp >= to_naive_utc(start),
            BlockDB.timestamp <= to_naive_utc(end),
        )
        .group_by(BlockDB.proposer)
        .order_by(BlockDB.proposer)
    )
    result = await session.execute(stmt)
    return [(proposer, int(count)) for proposer, count in result]


async def count_wallet_blocks(
    session: AsyncSession, wallet: str, start: datetime, end: datetime
) -> int:
    """Blocks proposed by ``wallet`` within ``[start, end]``."""
    stmt = (
        select(func.count())
        .select_from(BlockDB)
        .where(
            BlockDB.proposer == wallet,
            BlockDB.timestamp >= to_naive_utc(start),
            BlockDB.timestamp <= to_naive_utc(end),
        )
    )
    return int((await session.execute(stmt)).scalar() or 0)


async def first_block_since(session: AsyncSession, moment: datetime) -> int | None:
    """First block at or after ``moment``."""
    stmt = (
        select(BlockDB.block)
        .where(BlockDB.timestamp >= to_naive_utc(moment))
        .order_by(BlockDB.timestamp.asc())
        .limit(1)
    )
    return (await session.execute(stmt)).scalar()


async def last_block_until(session: AsyncSession, moment: datetime) -> int | None:
    """Last block at or before ``moment``."""
    stmt = (
        select(BlockDB.block)
        .where(BlockDB.timestamp <= to_naive_utc(moment))
        .order_by(BlockDB.timestamp.desc())
        .limit(1)
    )
    return (await session.execute(stmt)).scalar()


async def latest_timestamp(session: AsyncSession) -> datetime | None:
    return (await session.execute(select(func.max(BlockDB.timestamp)))).scalar()


async def block_height(session: AsyncSession) -> int | None:
    return (await session.execute(select(func.max(BlockDB.block)))).scalar()


__all__ = [
    "block_counts",
    "block_height",
    "count_wallet_blocks",
    "day_end",
    "day_start",
    "first_block_since",
    "last_block_until",
    "latest_timestamp",
    "proposals_by_day",
    "store_blocks",
    "to_naive_utc",
]

"""Quest, eligibility and leaderboard queries."""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from voirewards.data.quests.db import (
    AddressDB,
    LeaderboardDB,
    LeaderboardSumDB,
    Phase2CountsDB,
    Phase2DB,
    QuestDB,
)
from voirewards.data.quests.models import (
    Leaderboard,
    LeaderboardRank,
    Quest,
    QuestTotals,
    WalletQuests,
)
from voirewards.helpers.constants import LEADERBOARD_LIMIT


async def get_wallet_quests(session: AsyncSession, wallet: str) -> WalletQuests | None:
    row = await session.get(Phase2DB, wallet)
    return WalletQuests.model_validate(row) if row else None


async def get_active_quests(session: AsyncSession) -> list[Quest]:
    """Quests whose status is unset or anything but inactive."""
    stmt = select(QuestDB).where(
        or_(QuestDB.status.is_(None), QuestDB.status != "inactive")
    )
    result = await session.execute(stmt)
    return [Quest.model_validate(row) for row in result.scalars()]


async def get_quest_totals(session: AsyncSession) -> QuestTotals | None:
    row = (await session.execute(select(Phase2CountsDB).limit(1))).scalar()
    return QuestTotals.model_validate(row) if row else None


async def is_eligible(session: AsyncSession, wallet: str) -> bool:
    """Whether ``wallet`` is connected to a site account."""
    stmt = (
        select(func.count())
        .select_from(AddressDB)
        .where(AddressDB.address == wallet, AddressDB.disconnected.is_(False))
    )
    return bool((await session.execute(stmt)).scalar())


async def get_leaderboard(
    session: AsyncSession, limit: int = LEADERBOARD_LIMIT
) -> Leaderboard:
    """Top ranks, the number of ranked wallets and the points total."""
    ranks_stmt = select(LeaderboardDB).order_by(LeaderboardDB.row_number).limit(limit)
    ranks = [
        LeaderboardRank.model_validate(row)
        for row in (await session.execute(ranks_stmt)).scalars()
    ]

    count_stmt = select(func.count()).select_from(LeaderboardDB)
    total_accounts = int((await session.execute(count_stmt)).scalar() or 0)

    sum_stmt = select(LeaderboardSumDB.total_points).limit(1)
    total_points = (await session.execute(sum_stmt)).scalar() or 0.0

    return Leaderboard(
        ranks=ranks, total_accounts=total_accounts, total_points=float(total_points)
    )


__all__ = [
    "get_active_quests",
    "get_leaderboard",
    "get_quest_totals",
    "get_wallet_quests",
    "is_eligible",
]

"""Quest reward estimation."""

from collections.abc import Iterable
from typing import Any

from voirewards.data.quests.models import Quest, QuestTotals, WalletQuests
from voirewards.helpers.constants import (
    ESTIMATED_REWARD_CAP,
    HUMAN_MULTIPLIER,
    HUMAN_ROLES,
    POINTS_TOKEN_REWARD_POOL,
    QUEST_REWARD_POOL,
    RANK_MULTIPLIER,
    RANK_ROLES,
)
from voirewards.helpers.parsers import micro_to_units


def role_multipliers(roles: Iterable[str] | None) -> tuple[float, float]:
    """Multipliers earned from discord roles.

    Returns:
        tuple[float, float]: (discord, human). Each rank role multiplies the
        discord multiplier; a verified-human role sets the human multiplier.
    """
    discord = 1.0
    human = 1.0
    for role in roles or ():
        if role in HUMAN_ROLES:
            human = HUMAN_MULTIPLIER
        elif role in RANK_ROLES:
            discord *= RANK_MULTIPLIER
    return discord, human


def quest_points(quest_data: dict[str, Any] | None, quests: Iterable[Quest]) -> float:
    """Completions times reward, summed over active quests."""
    if not quest_data:
        return 0.0

    rewards = {quest.id: quest.reward for quest in quests if quest.is_active}
    total = 0.0
    for quest_id, completions in quest_data.items():
        if not completions:
            continue
        try:
            reward = rewards.get(int(quest_id), 0.0)
            total += float(completions) * reward
        except (TypeError, ValueError):
            continue
    return total


def estimate_reward(
    wallet: WalletQuests, quests: Iterable[Quest], totals: QuestTotals
) -> float:
    """Estimate a wallet's share of the quest and points-token pools.

    Args:
        wallet: The wallet's quest progress
        quests: Quest definitions
        totals: System-wide totals

    Returns:
        float: Estimated tokens, capped at ESTIMATED_REWARD_CAP
    """
    points = quest_points(wallet.quest_data, quests)
    discord, human = role_multipliers(wallet.discord_roles)

    quest_rate = (
        QUEST_REWARD_POOL / totals.total_quest_points
        if totals.total_quest_points
        else 0.0
    )
    system_points = micro_to_units(totals.total_points_tokens)
    points_rate = POINTS_TOKEN_REWARD_POOL / system_points if system_points else 0.0

    estimate = points * discord * human * quest_rate + (
        micro_to_units(wallet.points_tokens) * points_rate
    )
    return min(estimate, ESTIMATED_REWARD_CAP)


__all__ = ["estimate_reward", "quest_points", "role_multipliers"]

"""Staking reward extrapolation and epoch arithmetic."""

import math
from datetime import datetime

from pydantic import BaseModel

from voirewards.helpers.constants import SECONDS_PER_BLOCK, SECONDS_PER_DAY


class RewardCalculations(BaseModel):
    """Expected blocks and rewards for an online balance."""

    expected_blocks_per_day: float
    expected_blocks_per_week: float
    expected_blocks_per_month: float
    estimated_rewards_per_day: float
    estimated_rewards_per_week: float
    estimated_rewards_per_month: float
    average_block_time: float


def calculate_rewards(
    balance: float, online_money: float, reward_per_block: float
) -> RewardCalculations:
    """Extrapolate block proposals and rewards from stake share.

    A balance proposes a share of blocks equal to its share of the online
    stake; months are 30 days.

    Args:
        balance: Online balance of the account
        online_money: Total online stake, same unit as ``balance``
        reward_per_block: Reward paid per proposed block

    Returns:
        RewardCalculations: Per-period expectations and the average time in
        seconds between the account's blocks

    Raises:
        ValueError: If ``balance`` or ``online_money`` is not positive
    """
    if online_money <= 0:
        msg = "online_money must be positive"
        raise ValueError(msg)
    if balance <= 0:
        msg = "balance must be positive"
        raise ValueError(msg)

    blocks_per_day = SECONDS_PER_DAY / SECONDS_PER_BLOCK
    expected_per_day = (balance / online_money) * blocks_per_day
    expected_per_week = expected_per_day * 7
    expected_per_month = expected_per_day * 30

    return RewardCalculations(
        expected_blocks_per_day=expected_per_day,
        expected_blocks_per_week=expected_per_week,
        expected_blocks_per_month=expected_per_month,
        estimated_rewards_per_day=expected_per_day * reward_per_block,
        estimated_rewards_per_week=expected_per_week * reward_per_block,
        estimated_rewards_per_month=expected_per_month * reward_per_block,
        average_block_time=SECONDS_PER_DAY / expected_per_day,
    )


def current_epoch(now: datetime, start: datetime) -> int:
    """Whole weeks elapsed since ``start``."""
    elapsed_days = (now - start).total_seconds() / SECONDS_PER_DAY
    return math.floor(elapsed_days / 7)


__all__ = ["RewardCalculations", "calculate_rewards", "current_epoch"]

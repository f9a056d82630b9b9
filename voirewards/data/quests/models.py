"""Pydantic models for quests and the leaderboard."""

from datetime import datetime

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Quest(BaseModel):
    """Quest definition."""

    id: int
    name: str | None = None
    reward: float = 0.0
    status: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_active(self) -> bool:
        return self.status != "inactive"


class WalletQuests(BaseModel):
    """A wallet's quest progress."""

    address: str
    quest_data: dict[str, Any] | None = None
    discord_roles: list[str] | None = None
    points_tokens: float = 0.0

    model_config = ConfigDict(from_attributes=True)


class QuestTotals(BaseModel):
    """System-wide totals used to derive reward rates."""

    total_points_tokens: float
    total_quest_points: float

    model_config = ConfigDict(from_attributes=True)


class RewardEstimate(BaseModel):
    """Estimated quest reward for a wallet."""

    wallet: str
    estimated_reward: float = Field(..., serialization_alias="estimatedReward")


class LeaderboardRank(BaseModel):
    """One leaderboard row."""

    wallet: str
    row_number: int
    total: float
    last_modified: datetime | None = None
    project_counts: dict[str, Any] | None = None

    model_config = ConfigDict(from_attributes=True)


class Leaderboard(BaseModel):
    ranks: list[LeaderboardRank]
    total_accounts: int
    total_points: float


__all__ = [
    "Leaderboard",
    "LeaderboardRank",
    "Quest",
    "QuestTotals",
    "RewardEstimate",
    "WalletQuests",
]

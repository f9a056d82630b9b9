"""Database models for quest tracking, eligibility and the leaderboard."""

from datetime import datetime

from typing import Any

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from voirewards.helpers.db import Base


class Phase2DB(Base):
    """Per-wallet quest completions and discord roles."""

    __tablename__ = "vr_phase2"

    address: Mapped[str] = mapped_column(String(58), primary_key=True)
    quest_data: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True, doc="Quest id -> completion count"
    )
    discord_roles: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    points_tokens: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0, doc="Atomic units"
    )


class QuestDB(Base):
    """Quest definition."""

    __tablename__ = "vr_quests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reward: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str | None] = mapped_column(String(32), nullable=True)


class Phase2CountsDB(Base):
    """System-wide quest totals."""

    __tablename__ = "vr_phase2_counts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    total_points_tokens: Mapped[float] = mapped_column(
        Float, nullable=False, doc="Atomic units"
    )
    total_quest_points: Mapped[float] = mapped_column(Float, nullable=False)


class AddressDB(Base):
    """Wallet connected to a site account."""

    __tablename__ = "addresses"

    address: Mapped[str] = mapped_column(String(58), primary_key=True)
    disconnected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class LeaderboardDB(Base):
    """Ranked quest completion counts per wallet."""

    __tablename__ = "leaderboard"

    wallet: Mapped[str] = mapped_column(String(58), primary_key=True)
    row_number: Mapped[int] = mapped_column(BigInteger, index=True)
    total: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    last_modified: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    project_counts: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True, doc="Project -> completed quests"
    )


class LeaderboardSumDB(Base):
    """Total points across the leaderboard."""

    __tablename__ = "leaderboard_sum"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    total_points: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

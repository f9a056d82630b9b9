"""Database models for blocks."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from voirewards.helpers.db import Base


class BlockDB(Base):
    """Proposed block database model."""

    __tablename__ = "blocks"

    block: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    proposer: Mapped[str] = mapped_column(String(58), index=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, index=True)  # UTC

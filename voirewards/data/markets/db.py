"""Database models for exchange market snapshots."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from voirewards.helpers.db import Base


class ExchangeDB(Base):
    """Exchange or DEX listing the token."""

    __tablename__ = "exchanges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)  # CEX / DEX
    network: Mapped[str] = mapped_column(String(64), nullable=False)


class TradingPairDB(Base):
    """Trading pair on an exchange."""

    __tablename__ = "trading_pairs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    exchange_id: Mapped[int] = mapped_column(ForeignKey("exchanges.id"), index=True)
    base_token: Mapped[str] = mapped_column(String(32), nullable=False)
    quote_token: Mapped[str] = mapped_column(String(32), nullable=False)
    contract_address: Mapped[str | None] = mapped_column(String(128), nullable=True)
    pool_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    exchange: Mapped[ExchangeDB] = relationship(lazy="joined")


class MarketSnapshotDB(Base):
    """Point-in-time market data for a trading pair."""

    __tablename__ = "market_snapshots"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    trading_pair_id: Mapped[int] = mapped_column(
        ForeignKey("trading_pairs.id"), index=True
    )
    price: Mapped[float] = mapped_column(Float, nullable=False)
    volume_24h: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tvl: Mapped[float | None] = mapped_column(Float, nullable=True)
    high_24h: Mapped[float | None] = mapped_column(Float, nullable=True)
    low_24h: Mapped[float | None] = mapped_column(Float, nullable=True)
    price_change_24h: Mapped[float | None] = mapped_column(Float, nullable=True)
    price_change_percentage_24h: Mapped[float | None] = mapped_column(
        Float, nullable=True
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime, index=True)  # UTC

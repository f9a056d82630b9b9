"""Pydantic models for proposed blocks and proposer statistics."""

# Pydantic needs this at runtime to validate the datetime field
from datetime import datetime

from pydantic import BaseModel, Field

from voirewards.data.health.models import AddressNode


class Block(BaseModel):
    """Proposed block."""

    block: int
    proposer: str
    timestamp: datetime


class ProposerStats(BaseModel):
    """One leaderboard row of the statistics action."""

    proposer: str
    block_count: int
    nodes: list[AddressNode] = Field(default_factory=list)
    points: float = 0.0


class Statistics(BaseModel):
    """Response of the statistics action."""

    data: list[ProposerStats]
    max_timestamp: datetime | None
    block_height: int | None
    total_node_count: int
    healthy_node_count: int
    qualify_node_count: int
    minimum_algod: str


class WalletDetails(BaseModel):
    """Response of the walletDetails action."""

    data: list[AddressNode]
    total_node_count: int
    healthy_node_count: int
    empty_node_count: int
    qualify_node_count: int
    total_blocks: int
    first_block: int | None
    last_block: int | None


__all__ = [
    "Block",
    "ProposerStats",
    "Statistics",
    "WalletDetails",
]

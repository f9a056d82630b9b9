"""Pydantic models for node health data."""

from pydantic import BaseModel, ConfigDict, Field


class NodeRecord(BaseModel):
    """One node row from a weekly health snapshot."""

    host: str | None = None
    name: str | None = None
    score: float = 0.0
    addresses: list[str] = Field(default_factory=list)
    hours: float = 0
    ver: str | None = None

    model_config = ConfigDict(extra="ignore")


class AddressNode(BaseModel):
    """A node as seen from one of its proposer addresses."""

    node_host: str | None
    node_name: str | None
    health_score: float
    health_divisor: int = Field(
        ..., description="Addresses sharing the node's points, excluding health-only blacklist"
    )
    health_hours: float
    ver: str | None
    is_healthy: bool
    health_excluded: bool = Field(default=False, exclude=True)


class WeeklyHealth(BaseModel):
    """Health report for one weekly snapshot."""

    addresses: dict[str, list[AddressNode]] = Field(default_factory=dict)
    total_node_count: int = 0
    healthy_node_count: int = 0
    empty_node_count: int = 0
    qualify_node_count: int = 0

    def nodes_for(self, address: str) -> list[AddressNode]:
        return self.addresses.get(address, [])


class WeekPoints(BaseModel):
    """Points a wallet earned for one week."""

    points: float = 0.0
    health: float = 0.0


__all__ = [
    "AddressNode",
    "NodeRecord",
    "WeekPoints",
    "WeeklyHealth",
]

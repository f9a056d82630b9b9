"""Fixtures for API tests: a seeded SQLite file and stubbed upstream services."""

from collections.abc import Generator
from datetime import UTC, date, datetime
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from tests.factories import UpstreamStub, node, write_snapshot_file
from voirewards.api.app import create_app
from voirewards.api.dependencies import get_now
from voirewards.data.blocks.db import BlockDB
from voirewards.data.markets.db import ExchangeDB, MarketSnapshotDB, TradingPairDB
from voirewards.data.quests.db import (
    AddressDB,
    LeaderboardDB,
    LeaderboardSumDB,
    Phase2CountsDB,
    Phase2DB,
    QuestDB,
)
from voirewards.helpers.config import Settings
from voirewards.helpers.db import Base


NOW = datetime(2024, 5, 22, 12, 0, tzinfo=UTC)
"""Wednesday; the current week runs 2024-05-20 to 2024-05-26"""

BALLAST_URL = "https://ballast.test/v0/consensus/ballast"
TICKER_URL = "https://ticker.test/api/v2/market/ticker"
EPOCHS_URL = "https://epochs.test/proposers/index.php?action=epoch-detail"
SUPPLY_URL = "https://supply.test/api/circulating-supply"


def seed_database(path: Path) -> None:
    """Create every table and insert blocks, quests and markets."""
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        session.add_all(
            [
                BlockDB(block=100, proposer="ADDR_A", timestamp=datetime(2024, 5, 19, 23, 0)),
                BlockDB(block=101, proposer="ADDR_A", timestamp=datetime(2024, 5, 20, 10, 0)),
                BlockDB(block=102, proposer="BOT1", timestamp=datetime(2024, 5, 20, 11, 0)),
                BlockDB(block=103, proposer="ADDR_A", timestamp=datetime(2024, 5, 21, 9, 30)),
                BlockDB(block=104, proposer="ADDR_Z", timestamp=datetime(2024, 5, 22, 8, 0)),
                Phase2DB(
                    address="ADDR_A",
                    quest_data={"1": 2, "2": 1},
                    discord_roles=["Phase 2", "Recruit"],
                    points_tokens=5_000_000,
                ),
                QuestDB(id=1, name="Stake", reward=100.0, status="active"),
                QuestDB(id=2, name="Swap", reward=50.0, status=None),
                Phase2CountsDB(
                    id=1, total_points_tokens=1_000_000_000, total_quest_points=99_000_000
                ),
                AddressDB(address="ADDR_A", disconnected=False),
                LeaderboardDB(wallet="ADDR_A", row_number=1, total=12.0),
                LeaderboardDB(wallet="ADDR_B", row_number=2, total=5.0),
                LeaderboardSumDB(id=1, total_points=17.0),
                ExchangeDB(id=1, name="Humble", type="DEX", network="Voi"),
                TradingPairDB(id=1, exchange_id=1, base_token="aVOI", quote_token="aUSDC"),
                TradingPairDB(id=2, exchange_id=1, base_token="UNIT", quote_token="aVOI"),
                MarketSnapshotDB(
                    trading_pair_id=1,
                    price=1.0,
                    volume_24h=100.0,
                    tvl=10.0,
                    timestamp=datetime(2024, 5, 22, 11, 0),
                ),
                MarketSnapshotDB(
                    trading_pair_id=2,
                    price=2.0,
                    volume_24h=300.0,
                    tvl=20.0,
                    timestamp=datetime(2024, 5, 22, 11, 0),
                ),
            ]
        )
        session.commit()

    engine.dispose()


def seed_snapshots(directory: Path) -> None:
    """Three identical weekly snapshots from the start of the points program."""
    nodes = [
        node("n1", 6.0, ["ADDR_A", "ADDR_B", "ADDR_C", "ADDR_D", "BOT1"]),
        node("n2", 4.0, ["ADDR_E"], hours=200),
        node("n3", 7.0, ["ADDR_F", "ADDR_H"], hours=100),
    ]
    for day in (date(2024, 5, 6), date(2024, 5, 13), date(2024, 5, 20)):
        write_snapshot_file(directory, day, nodes)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    health_blacklist = tmp_path / "blacklist_health.csv"
    health_blacklist.write_text("ADDR_H\n")
    api_key = tmp_path / "api.key"
    api_key.write_text("secret\n")

    health_dir = tmp_path / "history"
    seed_snapshots(health_dir)

    return Settings(
        health_dir=health_dir,
        blacklist_path=tmp_path / "blacklist.csv",
        health_blacklist_path=health_blacklist,
        api_key_path=api_key,
        ballast_url=BALLAST_URL,
        price_ticker_url=TICKER_URL,
        epochs_url=EPOCHS_URL,
        circulating_supply_url=SUPPLY_URL,
        cors_origins=["*"],
    )


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def client(
    tmp_path: Path, settings: Settings, upstream: UpstreamStub
) -> Generator[TestClient]:
    """Test client with the clock pinned to NOW."""
    database = tmp_path / "proposers.db"
    seed_database(database)

    app = create_app(
        settings,
        database_url=f"sqlite+aiosqlite:///{database}",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)),
    )
    app.dependency_overrides[get_now] = lambda: NOW

    with TestClient(app) as test_client:
        yield test_client

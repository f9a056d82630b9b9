"""Tests for block queries on an in-memory database."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from voirewards.data.blocks.models import Block
from voirewards.data.blocks.queries import (
    block_counts,
    block_height,
    count_wallet_blocks,
    day_end,
    day_start,
    first_block_since,
    last_block_until,
    latest_timestamp,
    proposals_by_day,
    store_blocks,
    to_naive_utc,
)


BLOCKS = [
    Block(block=100, proposer="A", timestamp=datetime(2024, 5, 19, 23, 0)),
    Block(block=101, proposer="A", timestamp=datetime(2024, 5, 20, 10, 0)),
    Block(block=102, proposer="B", timestamp=datetime(2024, 5, 20, 11, 0)),
    Block(block=103, proposer="A", timestamp=datetime(2024, 5, 21, 9, 30)),
    Block(block=104, proposer="C", timestamp=datetime(2024, 5, 22, 8, 0)),
]


@pytest_asyncio.fixture
async def seeded(db_session: AsyncSession) -> AsyncSession:
    await store_blocks(db_session, BLOCKS)
    return db_session


class TestTimeHelpers:
    """Tests for timestamp normalisation."""

    def test_to_naive_utc(self) -> None:
        """Test aware datetimes are converted to naive UTC."""
        aware = datetime(2024, 5, 20, 12, 0, tzinfo=timezone(timedelta(hours=2)))

        assert to_naive_utc(aware) == datetime(2024, 5, 20, 10, 0)
        assert to_naive_utc(datetime(2024, 5, 20)) == datetime(2024, 5, 20)

    def test_day_bounds(self) -> None:
        """Test days run from midnight to the last whole second."""
        assert day_start(date(2024, 5, 20)) == datetime(2024, 5, 20, 0, 0, 0)
        assert day_end(date(2024, 5, 20)) == datetime(2024, 5, 20, 23, 59, 59)


class TestProposalsByDay:
    """Tests for proposals_by_day."""

    @pytest.mark.asyncio
    async def test_groups_newest_first(self, seeded: AsyncSession) -> None:
        """Test blocks are grouped per day, newest days and blocks first."""
        result = await proposals_by_day(seeded, "A", date(2024, 5, 18), date(2024, 5, 21))

        assert list(result) == ["2024-05-21", "2024-05-20", "2024-05-19", "2024-05-18"]
        assert result["2024-05-21"] == [103]
        assert result["2024-05-20"] == [101]
        assert result["2024-05-19"] == [100]
        assert result["2024-05-18"] == []

    @pytest.mark.asyncio
    async def test_range_excludes_outside_days(self, seeded: AsyncSession) -> None:
        """Test blocks outside the requested days are left out."""
        result = await proposals_by_day(seeded, "A", date(2024, 5, 20), date(2024, 5, 20))

        assert result == {"2024-05-20": [101]}


class TestAggregates:
    """Tests for counting and boundary queries."""

    @pytest.mark.asyncio
    async def test_block_counts(self, seeded: AsyncSession) -> None:
        """Test counts per proposer within the window, ordered by proposer."""
        counts = await block_counts(
            seeded, datetime(2024, 5, 20, tzinfo=UTC), datetime(2024, 5, 22, 23, 59, 59)
        )

        assert counts == [("A", 2), ("B", 1), ("C", 1)]

    @pytest.mark.asyncio
    async def test_wallet_week(self, seeded: AsyncSession) -> None:
        """Test the weekly block count and the window's first and last block."""
        start = day_start(date(2024, 5, 20))
        end = day_end(date(2024, 5, 26))

        assert await count_wallet_blocks(seeded, "A", start, end) == 2
        assert await count_wallet_blocks(seeded, "Z", start, end) == 0
        assert await first_block_since(seeded, start) == 101
        assert await last_block_until(seeded, end) == 104

    @pytest.mark.asyncio
    async def test_latest(self, seeded: AsyncSession) -> None:
        """Test newest timestamp and highest block."""
        assert await latest_timestamp(seeded) == datetime(2024, 5, 22, 8, 0)
        assert await block_height(seeded) == 104

    @pytest.mark.asyncio
    async def test_empty_table(self, db_session: AsyncSession) -> None:
        """Test aggregates on an empty table."""
        assert await latest_timestamp(db_session) is None
        assert await block_height(db_session) is None
        assert await first_block_since(db_session, datetime(2024, 5, 20)) is None

    @pytest.mark.asyncio
    async def test_store_blocks_replaces(self, seeded: AsyncSession) -> None:
        """Test storing a known block number replaces it."""
        await store_blocks(
            seeded, [Block(block=104, proposer="D", timestamp=datetime(2024, 5, 22, 8, 0))]
        )

        counts = await block_counts(
            seeded, datetime(2024, 5, 22), datetime(2024, 5, 22, 23, 59, 59)
        )
        assert counts == [("D", 1)]

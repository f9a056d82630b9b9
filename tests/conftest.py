"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

# Register every table on Base.metadata
import voirewards.data.blocks.db  # noqa: F401
import voirewards.data.markets.db  # noqa: F401
import voirewards.data.quests.db  # noqa: F401
from voirewards.helpers.db import Base, create_session_factory


@pytest.fixture
def health_dir(tmp_path: Path) -> Path:
    """Empty snapshot directory."""
    directory = tmp_path / "history"
    directory.mkdir()
    return directory


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession]:
    """Session on a fresh in-memory SQLite database."""
    engine = create_async_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session

    await engine.dispose()

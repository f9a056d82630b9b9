"""FastAPI dependencies resolving shared state from the running app."""

from collections.abc import AsyncIterator
from datetime import UTC, datetime

import httpx
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from voirewards.data.health.report import HealthArchive
from voirewards.data.price.ticker import PriceService
from voirewards.helpers.config import Settings
from voirewards.helpers.db import session_scope


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """One database session per request."""
    async with session_scope(request.app.state.session_factory) as session:
        yield session


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_price_service(request: Request) -> PriceService:
    return request.app.state.price_service


def get_archive(request: Request) -> HealthArchive:
    """A fresh snapshot archive, so memoised files never outlive the request."""
    settings: Settings = request.app.state.settings
    return HealthArchive(settings.health_dir, settings.health_blacklist_path)


def get_now() -> datetime:
    """Current UTC time; overridden in tests to pin the clock."""
    return datetime.now(UTC)


__all__ = [
    "get_archive",
    "get_http_client",
    "get_now",
    "get_price_service",
    "get_session",
    "get_settings",
]

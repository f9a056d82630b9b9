"""Token price from an exchange ticker, cached for a fixed time."""

from datetime import datetime

import httpx
from pydantic import BaseModel, ConfigDict, Field

from voirewards.helpers.cache import TimedValue
from voirewards.helpers.http import UpstreamError, fetch_required_json
from voirewards.helpers.logging import get_logger


logger = get_logger(__name__)


class PriceQuote(BaseModel):
    """Price payload returned to clients."""

    price: float
    last_updated: datetime = Field(..., serialization_alias="lastUpdated")
    is_stale: bool | None = Field(default=None, serialization_alias="isStale")
    error: str | None = None

    model_config = ConfigDict(populate_by_name=True)


def parse_ticker(payload: object) -> float:
    """Extract the last traded price from ``{"data": [{"last": "..."}]}``.

    Raises:
        UpstreamError: If the payload has no usable price
    """
    try:
        price = float(payload["data"][0]["last"])  # type: ignore[index]
    except (KeyError, IndexError, TypeError, ValueError) as e:
        msg = "Invalid price data from ticker"
        raise UpstreamError(msg) from e

    if price <= 0:
        msg = "Invalid price data from ticker"
        raise UpstreamError(msg)
    return price


class PriceService:
    """Serves the token price, refetching once the cached value expires.

    When a refetch fails the last known price is served and flagged stale;
    with no price ever fetched the quote is 0 with an error message.
    """

    def __init__(
        self, client: httpx.AsyncClient, url: str, cache: TimedValue[float]
    ) -> None:
        """Initialize the service.

        Args:
            client: HTTP client instance
            url: Exchange ticker URL
            cache: Cache holding the last fetched price
        """
        self.client = client
        self.url = url
        self.cache = cache

    async def get_price(self, now: datetime) -> PriceQuote:
        cached = self.cache.get(now)
        if cached is not None and self.cache.fetched_at is not None:
            return PriceQuote(price=cached, last_updated=self.cache.fetched_at)

        try:
            price = parse_ticker(await fetch_required_json(self.client, self.url))
        except UpstreamError as e:
            logger.warning("Error fetching token price: %s", e)
            stale = self.cache.stale()
            if stale is not None:
                value, fetched_at = stale
                return PriceQuote(price=value, last_updated=fetched_at, is_stale=True)
            return PriceQuote(
                price=0, last_updated=now, error="Failed to fetch price"
            )

        self.cache.set(price, now)
        return PriceQuote(price=price, last_updated=now)


__all__ = ["PriceQuote", "PriceService", "parse_ticker"]

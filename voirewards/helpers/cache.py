"""Single-value cache with an explicit expiry."""

from datetime import datetime, timedelta

from typing import Generic, TypeVar


T = TypeVar("T")


class TimedValue(Generic[T]):
    """Holds one value and the time it was stored.

    The owner passes the current time on every call, so expiry is fully
    determined by the caller and there is no hidden clock.

    Example:
        ```python
        from datetime import UTC, datetime
        from voirewards.helpers.cache import TimedValue

        cache: TimedValue[float] = TimedValue(ttl_seconds=300)
        now = datetime.now(UTC)
        if (price := cache.get(now)) is None:
            price = await fetch_price()
            cache.set(price, now)
        ```
    """

    def __init__(self, ttl_seconds: float) -> None:
        """Initialize an empty cache.

        Args:
            ttl_seconds: How long a stored value stays fresh
        """
        self.ttl = timedelta(seconds=ttl_seconds)
        self.value: T | None = None
        self.fetched_at: datetime | None = None

    def set(self, value: T, now: datetime) -> None:
        self.value = value
        self.fetched_at = now

    def is_fresh(self, now: datetime) -> bool:
        if self.value is None or self.fetched_at is None:
            return False
        return now - self.fetched_at < self.ttl

    def get(self, now: datetime) -> T | None:
        """Return the value while it is fresh, else None."""
        return self.value if self.is_fresh(now) else None

    def stale(self) -> tuple[T, datetime] | None:
        """Return the last stored value and its timestamp, fresh or not."""
        if self.value is None or self.fetched_at is None:
            return None
        return self.value, self.fetched_at


__all__ = ["TimedValue"]

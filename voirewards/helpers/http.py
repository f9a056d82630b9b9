"""HTTP client utilities and helpers."""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from functools import wraps

from typing import Any, ParamSpec, TypeVar

import httpx

from voirewards.helpers.constants import DEFAULT_TIMEOUT
from voirewards.helpers.logging import get_logger


logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


class UpstreamError(Exception):
    """A required upstream service failed or returned an unusable body."""


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT, **kwargs: Any
) -> httpx.AsyncClient:
    """Create a configured httpx AsyncClient.

    Args:
        timeout: Default timeout in seconds (default: DEFAULT_TIMEOUT)
        **kwargs: Additional httpx.AsyncClient kwargs

    Returns:
        Configured AsyncClient instance

    Example:
        ```python
        from voirewards.helpers.http import create_http_client

        async with create_http_client(timeout=60.0) as client:
            response = await client.get("https://example.com")
        ```
    """
    return httpx.AsyncClient(timeout=timeout, follow_redirects=True, **kwargs)


def handle_http_errors(
    default_return: T | None = None,
    *,
    log_errors: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T | None]]]:
    """Decorator to handle HTTP errors gracefully.

    Args:
        default_return: Value to return on error (default: None)
        log_errors: Whether to log errors (default: True)

    Returns:
        Decorated function that catches httpx.HTTPError and returns default_return

    Example:
        ```python
        from voirewards.helpers.http import handle_http_errors

        @handle_http_errors(default_return=[])
        async def fetch_data(client: httpx.AsyncClient, url: str) -> list[dict]:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()

        # If request fails, returns [] instead of raising
        ```
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T | None]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T | None:
            try:
                return await func(*args, **kwargs)
            except httpx.HTTPStatusError as e:
                if log_errors:
                    if e.response.status_code == 404:
                        logger.debug("%s returned 404", func.__name__)
                    else:
                        logger.warning(
                            "%s HTTP error: %s %s",
                            func.__name__,
                            e.response.status_code,
                            e.response.text[:100] if e.response.text else "",
                        )
                return default_return
            except httpx.HTTPError as e:
                if log_errors:
                    logger.warning("%s HTTP error: %s", func.__name__, e)
                return default_return
            except ValueError as e:
                # Covers undecodable JSON bodies
                if log_errors:
                    logger.warning("%s invalid response: %s", func.__name__, e)
                return default_return

        return wrapper

    return decorator


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    timeout: float | None = None,
    raise_for_status: bool = True,
) -> dict[str, Any] | list[Any] | None:
    """Fetch JSON data from a URL.

    Args:
        client: HTTP client instance
        url: URL to fetch
        timeout: Optional timeout override
        raise_for_status: Whether to treat HTTP error statuses as failures

    Returns:
        Parsed JSON data or None on error
    """
    try:
        if timeout is None:
            response = await client.get(url)
        else:
            response = await client.get(url, timeout=timeout)
        if raise_for_status:
            response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            logger.debug("URL not found: %s", url)
        else:
            logger.warning("HTTP error fetching %s: %s", url, e)
        return None
    except httpx.HTTPError as e:
        logger.warning("HTTP error fetching %s: %s", url, e)
        return None
    except ValueError as e:
        logger.warning("Invalid JSON from %s: %s", url, e)
        return None


async def fetch_required_json(
    client: httpx.AsyncClient, url: str
) -> dict[str, Any] | list[Any]:
    """Fetch JSON data that the caller cannot do without.

    Args:
        client: HTTP client instance
        url: URL to fetch

    Returns:
        Parsed JSON data

    Raises:
        UpstreamError: On transport errors, error statuses or undecodable bodies
    """
    try:
        response = await client.get(url)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        msg = f"HTTP error! Status: {e.response.status_code}"
        raise UpstreamError(msg) from e
    except httpx.HTTPError as e:
        msg = f"HTTP error fetching {url}: {e}"
        raise UpstreamError(msg) from e
    except ValueError as e:
        msg = f"Invalid JSON from {url}"
        raise UpstreamError(msg) from e


@asynccontextmanager
async def log_and_suppress_errors(
    operation_name: str,
    *,
    log_level: str = "warning",
    suppress: bool = True,
) -> AsyncIterator[None]:
    """Context manager to log and optionally suppress errors.

    Args:
        operation_name: Description of the operation for logging
        log_level: Logging level ("debug", "info", "warning", "error")
        suppress: If True, suppress exceptions; if False, re-raise after logging

    Yields:
        None
    """
    try:
        yield
    except Exception as e:
        log_method = getattr(logger, log_level, logger.warning)
        log_method("%s failed: %s", operation_name, e)

        if not suppress:
            raise


__all__ = [
    "UpstreamError",
    "create_http_client",
    "fetch_json",
    "fetch_required_json",
    "handle_http_errors",
    "log_and_suppress_errors",
]

"""Reward blacklists: upstream ballast accounts plus local override files."""

import asyncio
import csv
import hmac
from pathlib import Path

import httpx

from voirewards.helpers.http import UpstreamError, fetch_required_json
from voirewards.helpers.logging import get_logger


logger = get_logger(__name__)


async def fetch_ballast(client: httpx.AsyncClient, url: str) -> list[str]:
    """Fetch ballast and bot accounts from the analytics endpoint.

    Args:
        client: HTTP client instance
        url: Ballast endpoint returning ``{"bparts": {...}, "bots": {...}}``

    Returns:
        list[str]: Block-participation accounts followed by bot accounts

    Raises:
        UpstreamError: If the endpoint fails or the body is malformed
    """
    data = await fetch_required_json(client, url)

    if not isinstance(data, dict):
        msg = "Malformed ballast response: expected an object"
        raise UpstreamError(msg)

    bparts = data.get("bparts")
    bots = data.get("bots")
    if not isinstance(bparts, dict) or not isinstance(bots, dict):
        msg = "Malformed ballast response: missing bparts or bots"
        raise UpstreamError(msg)

    return [*bparts.keys(), *bots.keys()]


def read_address_file(path: Path) -> list[str]:
    """Read addresses from the first column of a CSV file.

    Blank entries are skipped; a missing file is an empty list.
    """
    if not path.exists():
        return []

    addresses: list[str] = []
    with path.open(newline="") as f:
        for row in csv.reader(f):
            if row and row[0].strip():
                addresses.append(row[0].strip())
    return addresses


def write_address_file(path: Path, addresses: list[str]) -> None:
    """Replace ``path`` with one address per line."""
    path.write_text("".join(f"{address}\n" for address in addresses))


def parse_override(override: str) -> list[str]:
    """Split a comma separated blacklist parameter."""
    return [address.strip() for address in override.split(",") if address.strip()]


def api_key_matches(api_key: str | None, key_path: Path) -> bool:
    """Check a request key against the key stored in ``key_path``."""
    if not api_key or not key_path.exists():
        return False

    expected = key_path.read_text(encoding="utf-8").strip()
    if not expected:
        return False
    return hmac.compare_digest(api_key.strip().encode(), expected.encode())


async def resolve_blacklist(
    client: httpx.AsyncClient,
    ballast_url: str,
    blacklist_path: Path,
    api_key_path: Path,
    *,
    override: str | None = None,
    api_key: str | None = None,
) -> list[str]:
    """Build the blacklist for a request.

    Upstream ballast accounts are always included. A request-supplied
    override is used instead of the local blacklist file, and replaces that
    file when the request carries the configured API key.

    Args:
        client: HTTP client instance
        ballast_url: Ballast endpoint
        blacklist_path: Local blacklist file
        api_key_path: File holding the key that authorizes file updates
        override: Optional comma separated addresses from the request
        api_key: Optional key from the request headers

    Returns:
        list[str]: Blacklisted addresses

    Raises:
        UpstreamError: If the ballast endpoint fails
    """
    addresses = await fetch_ballast(client, ballast_url)

    if override is not None:
        extra = parse_override(override)
        if await asyncio.to_thread(api_key_matches, api_key, api_key_path):
            await asyncio.to_thread(write_address_file, blacklist_path, extra)
            logger.info("Replaced %s with %d addresses", blacklist_path, len(extra))
        return [*addresses, *extra]

    local = await asyncio.to_thread(read_address_file, blacklist_path)
    return [*addresses, *local]


def load_health_blacklist(path: Path) -> list[str]:
    """Addresses kept in reports but never counted healthy."""
    return read_address_file(path)


__all__ = [
    "api_key_matches",
    "fetch_ballast",
    "load_health_blacklist",
    "parse_override",
    "read_address_file",
    "resolve_blacklist",
    "write_address_file",
]

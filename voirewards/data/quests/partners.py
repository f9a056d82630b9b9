"""Partner project quest lookups."""

from typing import Any

import httpx

from voirewards.helpers.constants import ALGOLEAGUES_URL
from voirewards.helpers.http import fetch_json


async def fetch_algoleagues(
    client: httpx.AsyncClient, wallet: str, base_url: str = ALGOLEAGUES_URL
) -> dict[str, Any] | None:
    """Quest points reported by Algoleagues for ``wallet``.

    Returns:
        dict | None: The partner payload, or None on failure or when the
        partner reports an error
    """
    data = await fetch_json(client, f"{base_url}/{wallet}")
    if not isinstance(data, dict) or data.get("error"):
        return None
    return data


PARTNER_LOOKUPS = {
    "Algoleagues": fetch_algoleagues,
}
"""Project name -> lookup coroutine"""


__all__ = ["PARTNER_LOOKUPS", "fetch_algoleagues"]

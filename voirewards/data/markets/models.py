"""Pydantic models and token equivalences for market data."""

from datetime import datetime

from pydantic import BaseModel


class Token(BaseModel):
    symbol: str
    name: str
    equivalents: list[str]


TOKENS: dict[str, Token] = {
    "VOI": Token(symbol="VOI", name="VOI", equivalents=["VOI", "aVOI"]),
    "ALGO": Token(symbol="ALGO", name="Algorand", equivalents=["ALGO", "aALGO"]),
    "USD": Token(symbol="USD", name="US Dollar", equivalents=["USDT", "USDC", "aUSDC"]),
    "UNIT": Token(symbol="UNIT", name="Unit", equivalents=["UNIT", "aUNIT"]),
}
"""Known tokens and the wrapped/bridged symbols that trade as them"""


def token_variants(symbol: str) -> list[str] | None:
    """Symbols equivalent to ``symbol``, or None for an unknown token."""
    token = TOKENS.get(symbol.upper())
    return list(token.equivalents) if token else None


def canonical_pair(pair: str) -> str:
    """Map a ``BASE/QUOTE`` pair onto canonical symbols, e.g. aVOI/USDC -> VOI/USD."""
    base, _, quote = pair.partition("/")
    base_token = next((t for t in TOKENS.values() if base in t.equivalents), None)
    quote_token = next((t for t in TOKENS.values() if quote in t.equivalents), None)

    if not base_token or not quote_token:
        return pair
    return f"{base_token.symbol}/{quote_token.symbol}"


class MarketRow(BaseModel):
    """Latest snapshot of one trading pair."""

    trading_pair_id: int
    exchange: str
    pair: str
    base_pair: str
    type: str
    network: str
    pool_url: str | None = None
    price: float
    volume_24h: float | None = None
    tvl: float | None = None
    high_24h: float | None = None
    low_24h: float | None = None
    price_change_24h: float | None = None
    price_change_percentage_24h: float | None = None
    last_updated: datetime


class MarketAggregates(BaseModel):
    total_volume: float
    total_tvl: float
    weighted_average_price: float


class CirculatingSupply(BaseModel):
    circulating_supply: float | None = None
    percent_distributed: float | None = None


class PricePoint(BaseModel):
    time: datetime
    value: float


__all__ = [
    "TOKENS",
    "CirculatingSupply",
    "MarketAggregates",
    "MarketRow",
    "PricePoint",
    "Token",
    "canonical_pair",
    "token_variants",
]

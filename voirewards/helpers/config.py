"""Configuration management and environment variable utilities."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from voirewards.helpers.constants import (
    DEFAULT_BALLAST_URL,
    DEFAULT_CIRCULATING_SUPPLY_URL,
    DEFAULT_EPOCHS_URL,
    DEFAULT_PRICE_TICKER_URL,
)


# Load environment variables from .env file
load_dotenv()


def get_required_env(key: str) -> str:
    """Get a required environment variable.

    Args:
        key: Environment variable name

    Returns:
        Environment variable value

    Raises:
        ValueError: If the environment variable is not set

    Example:
        ```python
        from voirewards.helpers.config import get_required_env

        db_name = get_required_env("POSTGRE_DB")
        ```
    """
    value = os.getenv(key)
    if not value:
        msg = f"{key} environment variable is not set"
        raise ValueError(msg)
    return value


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_required_url(
    key: str, url: str | None = None, description: str | None = None
) -> str:
    """Get a URL from an explicit parameter or the environment.

    Args:
        key: Environment variable name
        url: Optional URL to use directly
        description: Human readable name used in the error message

    Returns:
        The URL

    Raises:
        ValueError: If no URL is given and the env var is not set
    """
    if url:
        return url

    env_url = os.getenv(key)
    if not env_url:
        msg = f"{description or key} must be provided or set in {key}"
        raise ValueError(msg)

    return env_url


def get_health_dir() -> Path:
    """Directory holding the weekly ``health_week_*.json`` snapshots."""
    return Path(os.getenv("HEALTH_DIR", "/app/proposers/history"))


def get_blacklist_path() -> Path:
    """Local blacklist override file."""
    return Path(os.getenv("BLACKLIST_FILE", "blacklist.csv"))


def get_health_blacklist_path() -> Path:
    """Blacklist of addresses that are kept but never counted healthy."""
    return Path(os.getenv("HEALTH_BLACKLIST_FILE", "blacklist_health.csv"))


def get_api_key_path() -> Path:
    """File holding the key that authorizes blacklist file updates."""
    return Path(os.getenv("API_KEY_FILE", "/db/api.key"))


def get_ballast_url() -> str:
    return os.getenv("BALLAST_URL", DEFAULT_BALLAST_URL)


def get_price_ticker_url() -> str:
    return os.getenv("PRICE_TICKER_URL", DEFAULT_PRICE_TICKER_URL)


def get_epochs_url() -> str:
    return os.getenv("EPOCHS_URL", DEFAULT_EPOCHS_URL)


def get_circulating_supply_url() -> str:
    return os.getenv("CIRCULATING_SUPPLY_URL", DEFAULT_CIRCULATING_SUPPLY_URL)


def get_cors_origins() -> list[str]:
    """Allowed CORS origins from the comma separated CORS_ORIGINS variable."""
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings(BaseModel):
    """Runtime settings of the API, resolved once at startup."""

    health_dir: Path
    blacklist_path: Path
    health_blacklist_path: Path
    api_key_path: Path
    ballast_url: str
    price_ticker_url: str
    epochs_url: str
    circulating_supply_url: str
    cors_origins: list[str]
    host: str = "0.0.0.0"
    port: int = 8000


def load_settings() -> Settings:
    """Build Settings from the environment."""
    return Settings(
        health_dir=get_health_dir(),
        blacklist_path=get_blacklist_path(),
        health_blacklist_path=get_health_blacklist_path(),
        api_key_path=get_api_key_path(),
        ballast_url=get_ballast_url(),
        price_ticker_url=get_price_ticker_url(),
        epochs_url=get_epochs_url(),
        circulating_supply_url=get_circulating_supply_url(),
        cors_origins=get_cors_origins(),
        host=get_optional_env("HOST", "0.0.0.0") or "0.0.0.0",
        port=int(get_optional_env("PORT", "8000") or "8000"),
    )


__all__ = [
    "Settings",
    "load_settings",
    "get_api_key_path",
    "get_ballast_url",
    "get_blacklist_path",
    "get_circulating_supply_url",
    "get_cors_origins",
    "get_epochs_url",
    "get_health_blacklist_path",
    "get_health_dir",
    "get_optional_env",
    "get_price_ticker_url",
    "get_required_env",
    "get_required_url",
]

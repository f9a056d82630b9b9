"""Common configuration constants used across the application."""

from datetime import UTC, date, datetime

# HTTP and Network Constants
DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds"""

EXTENDED_TIMEOUT = 60.0
"""Extended timeout for slow endpoints"""

# Upstream endpoints
DEFAULT_BALLAST_URL = "https://analytics.testnet.voi.nodly.io/v0/consensus/ballast"
"""Curated list of ballast and bot accounts excluded from rewards"""

DEFAULT_PRICE_TICKER_URL = (
    "https://www.mexc.com/open/api/v2/market/ticker?symbol=VOI_USDT"
)
"""Exchange ticker used for the token price"""

DEFAULT_EPOCHS_URL = (
    "https://api.voirewards.com/proposers/index_main_3.php?action=epoch-detail"
)
"""Epoch reward detail feed"""

DEFAULT_CIRCULATING_SUPPLY_URL = (
    "https://circulating.voi.network/api/circulating-supply"
)
"""Circulating supply feed"""

ALGOLEAGUES_URL = "https://4wjjj4w7u5.execute-api.us-east-1.amazonaws.com/default/addr"
"""Partner quest points lookup, suffixed with the wallet address"""

# Node health
ALGOD_MIN_VERSION = "3.22.1"
"""Minimum node software version counted as healthy after the cutoff"""

VERSION_CUTOFF_DATE = date(2024, 1, 8)
"""Snapshots dated after this day enforce ALGOD_MIN_VERSION"""

HEALTHY_SCORE = 5.0
"""Minimum health score for a healthy node"""

QUALIFY_HOURS = 168
"""Uptime hours (one week) required for a healthy node to qualify"""

MIN_SNAPSHOT_BYTES = 1024
"""Snapshot files at or below this size are treated as corrupt"""

SNAPSHOT_GLOB = "health_week_*.json"
"""File name pattern of weekly health snapshots"""

POINTS_EPOCH_START = date(2024, 5, 6)
"""First Monday of the points program"""

REWARDS_EPOCH_START = datetime(2024, 10, 30, tzinfo=UTC)
"""Start of the first weekly staking rewards epoch"""

# Proposals
DEFAULT_LOOKBACK_DAYS = 30
"""Default proposals window when no range is requested"""

# Price cache
PRICE_CACHE_SECONDS = 300.0
"""Time a fetched price stays fresh"""

# Units and chain parameters
MICRO_UNITS = 1_000_000
"""Atomic units per whole token"""

SECONDS_PER_BLOCK = 2.8
"""Average block time in seconds"""

SECONDS_PER_DAY = 24 * 60 * 60

AVERAGE_MONTH_DAYS = 30.44
"""Days per month when formatting lockup durations"""

# Quest rewards
HUMAN_ROLES = ("Phase 2", "Phase 2-Manual")
"""Discord roles that mark a verified human"""

HUMAN_MULTIPLIER = 10.0

RANK_ROLES = (
    "Recruit",
    "Apprentice",
    "Cadet",
    "Seaman",
    "Midshipman",
    "Petty Officer",
    "Ensign",
    "Sub-Lieutenant",
    "Lieutenant",
    "Lieutenant-Commander",
    "Commander",
    "Captain",
    "Commodore",
    "Rear-Admiral",
    "Vice-Admiral",
    "Admiral",
    "Fleet-Admiral",
    "Senior Chief",
    "Master Chief",
    "Grand Voiager",
)
"""Discord rank roles, each worth RANK_MULTIPLIER"""

RANK_MULTIPLIER = 1.1

QUEST_REWARD_POOL = 99_000_000
"""Tokens distributed across all quest points"""

POINTS_TOKEN_REWARD_POOL = 1_000_000
"""Tokens distributed across all points tokens"""

ESTIMATED_REWARD_CAP = 50_000
"""Upper bound of a single wallet's estimated quest reward"""

LEADERBOARD_LIMIT = 100


__all__ = [
    "ALGOD_MIN_VERSION",
    "ALGOLEAGUES_URL",
    "AVERAGE_MONTH_DAYS",
    "DEFAULT_BALLAST_URL",
    "DEFAULT_CIRCULATING_SUPPLY_URL",
    "DEFAULT_EPOCHS_URL",
    "DEFAULT_LOOKBACK_DAYS",
    "DEFAULT_PRICE_TICKER_URL",
    "DEFAULT_TIMEOUT",
    "ESTIMATED_REWARD_CAP",
    "EXTENDED_TIMEOUT",
    "HEALTHY_SCORE",
    "HUMAN_MULTIPLIER",
    "HUMAN_ROLES",
    "LEADERBOARD_LIMIT",
    "MICRO_UNITS",
    "MIN_SNAPSHOT_BYTES",
    "POINTS_EPOCH_START",
    "POINTS_TOKEN_REWARD_POOL",
    "PRICE_CACHE_SECONDS",
    "QUALIFY_HOURS",
    "QUEST_REWARD_POOL",
    "RANK_MULTIPLIER",
    "RANK_ROLES",
    "REWARDS_EPOCH_START",
    "SECONDS_PER_BLOCK",
    "SECONDS_PER_DAY",
    "SNAPSHOT_GLOB",
    "VERSION_CUTOFF_DATE",
]

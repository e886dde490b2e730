"""
Centralized configuration for the Huay lottery service.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


DB_PATH = os.getenv("DB_PATH", "huay.db")
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = _parse_bool("DEBUG", False)

# Admin HTTP endpoints are disabled unless a token is configured
ADMIN_API_TOKEN: str | None = os.getenv("ADMIN_API_TOKEN") or None

# Affiliate commission (fraction of wagered amount)
AFFILIATE_LEVEL1_RATE = _parse_float("AFFILIATE_LEVEL1_RATE", 0.10)
AFFILIATE_LEVEL2_RATE = _parse_float("AFFILIATE_LEVEL2_RATE", 0.05)

# Bet placement
MIN_BET_AMOUNT = _parse_float("MIN_BET_AMOUNT", 1.0)
MAX_BET_ITEMS = _parse_int("MAX_BET_ITEMS", 100)

# Settlement: a draw stuck in 'processing' longer than this may be re-claimed
SETTLEMENT_STALE_SECONDS = _parse_int("SETTLEMENT_STALE_SECONDS", 900)  # 15 minutes

# Draw dates and schedule windows are evaluated in this zone
LOTTERY_TIMEZONE = os.getenv("LOTTERY_TIMEZONE", "Asia/Bangkok")

# Notification sink (Discord webhook). Unset disables notifications.
NOTIFY_WEBHOOK_URL: str | None = os.getenv("NOTIFY_WEBHOOK_URL") or None
NOTIFY_USERNAME = os.getenv("NOTIFY_USERNAME", "Huay Back Office")

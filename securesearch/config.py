"""Settings from environment (optionally a .env file). Cryptographic parameters are not configurable."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Hex key for the CLI when --key is not given. Never written anywhere by this package.
KEY_HEX = os.environ.get("SECURESEARCH_KEY", "")

INDEX_PATH = Path(os.environ.get("SECURESEARCH_INDEX_PATH", "securesearch_index.db"))
INDEX_BACKEND = os.environ.get("SECURESEARCH_INDEX_BACKEND", "sqlite").strip().lower()

# Rainbow table cost floor: one month (30.4375 days) of single-thread work
RAINBOW_MIN_SECONDS = os.environ.get("SECURESEARCH_RAINBOW_MIN_SECONDS", "2629800")

LOG_LEVEL = os.environ.get("SECURESEARCH_LOG_LEVEL", "WARNING").upper()


def rainbow_min_seconds() -> int:
    """RAINBOW_MIN_SECONDS as a positive int. Raises ValueError if malformed."""
    try:
        value = int(RAINBOW_MIN_SECONDS)
    except (TypeError, ValueError):
        raise ValueError("SECURESEARCH_RAINBOW_MIN_SECONDS must be an integer") from None
    if value <= 0:
        raise ValueError("SECURESEARCH_RAINBOW_MIN_SECONDS must be positive")
    return value


def log_level() -> int:
    """LOG_LEVEL as a logging level number. Raises ValueError if unknown."""
    level = logging.getLevelName(LOG_LEVEL)
    if not isinstance(level, int):
        raise ValueError(f"unknown SECURESEARCH_LOG_LEVEL: {LOG_LEVEL!r}")
    return level

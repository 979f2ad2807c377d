"""
Configuration for Cardwise.
Values come from environment variables with sensible defaults.
"""

import os
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


class Config:
    """Global configuration for Cardwise."""

    # Paths
    DATA_DIR = Path(os.getenv("CARDWISE_DATA_DIR", str(Path.home() / ".cardwise")))
    DB_PATH = Path(os.getenv("CARDWISE_DB_PATH", str(DATA_DIR / "cardwise.db")))

    # Logging
    LOG_LEVEL = os.getenv("CARDWISE_LOG_LEVEL", "WARNING").upper()

    # Bulk import
    MIN_QUESTION_LENGTH = _env_int("CARDWISE_MIN_QUESTION_LENGTH", 10)

    # Study modes
    DEFAULT_QUESTIONS_PER_SESSION = _env_int("CARDWISE_DEFAULT_QUESTIONS_PER_SESSION", 20)
    MATCH_GAME_PAIRS = _env_int("CARDWISE_MATCH_GAME_PAIRS", 6)
    QUIZ_PROGRESS_TTL_HOURS = _env_int("CARDWISE_QUIZ_PROGRESS_TTL_HOURS", 24)

    @classmethod
    def ensure_dirs(cls):
        """Create data directories if they don't exist."""
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)
        cls.DB_PATH.parent.mkdir(parents=True, exist_ok=True)

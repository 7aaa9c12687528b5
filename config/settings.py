"""Load settings from environment. Handles are supplied by the client per request; env only configures infrastructure."""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parents[1] / ".env")


def _str(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _int(key: str, default: int = 0) -> int:
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default


def _float(key: str, default: float = 0.0) -> float:
    try:
        return float(os.environ.get(key, str(default)))
    except ValueError:
        return default


def _list(key: str, default: str = "") -> list[str]:
    return [part.strip() for part in _str(key, default).split(",") if part.strip()]


class Settings:
    # MongoDB
    MONGODB_URI: str = _str("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB: str = _str("MONGODB_DB", "cf_quest")

    # Daily XP rolls over at midnight in this timezone
    USER_TIMEZONE: str = _str("USER_TIMEZONE", "UTC")

    # Codeforces API. The public API asks for at most one call every 2 seconds.
    CODEFORCES_API_BASE: str = _str("CODEFORCES_API_BASE", "https://codeforces.com/api")
    CODEFORCES_MIN_INTERVAL: float = _float("CODEFORCES_MIN_INTERVAL", 2.0)
    CODEFORCES_TIMEOUT: int = _int("CODEFORCES_TIMEOUT", 15)

    # HTTP
    CORS_ORIGINS: list[str] = _list("CORS_ORIGINS", "*")
    PORT: int = _int("PORT", 5000)

    # Logging
    LOG_LEVEL: str = _str("LOG_LEVEL", "INFO")


settings = Settings()

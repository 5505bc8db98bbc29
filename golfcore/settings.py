import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Settings:
    database_url: str
    golf_api_key: str
    default_handicap_pct: int
    log_level: str


def _normalize_database_url(value: Optional[str]) -> str:
    if not value or not value.strip():
        return "postgresql://localhost/golfcore"
    normalized = value.strip()
    if normalized.startswith("postgres://"):
        return "postgresql://" + normalized[len("postgres://"):]
    return normalized


def _int_from_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def load_settings() -> Settings:
    return Settings(
        database_url=_normalize_database_url(os.getenv("DATABASE_URL")),
        golf_api_key=os.getenv("GOLF_API_KEY", ""),
        default_handicap_pct=_int_from_env("DEFAULT_HANDICAP_PCT", 100),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )

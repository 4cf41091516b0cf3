import math
import re
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: Any) -> float:
    """Convert a duration to seconds.

    Accepts plain numbers (already seconds) and Go-style duration strings
    such as "500ms", "10s" or "1m30s".
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip()
    try:
        return float(text)
    except ValueError:
        pass

    if not text or _DURATION_PART.sub("", text):
        raise ValueError(f"invalid duration: {value!r}")

    return sum(float(amount) * _DURATION_UNITS[unit] for amount, unit in _DURATION_PART.findall(text))


class Settings(BaseSettings):
    """Runtime configuration, read from environment variables or a .env file."""

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    read_timeout: float = 10.0
    write_timeout: float = 10.0
    shutdown_timeout: float = 30.0
    environment: str = "development"
    geoip_db_path: str = Field(default="data/GeoLite2-Country.mmdb", min_length=1)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    @field_validator("read_timeout", "write_timeout", "shutdown_timeout", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> float:
        seconds = parse_duration(value)
        if not math.isfinite(seconds) or seconds <= 0:
            raise ValueError("timeouts must be positive")
        return seconds

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()

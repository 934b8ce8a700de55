"""Application configuration via Pydantic Settings.

Values come from the environment or a ``.env`` file in the working
directory. Settings are read once at application startup; changing the
environment afterwards has no effect on a running process.
"""

import logging
import math
from typing import Any, Optional

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_SOIL_CACHE_TTL_MS = 60 * 60 * 1000
DEFAULT_FACILITIES_CACHE_TTL_MS = 15 * 60 * 1000
DEFAULT_CACHE_MAX_ENTRIES = 1024
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 10.0
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:3001,http://localhost:5173"


class Settings(BaseSettings):
    """Application settings.

    Each field is read from the upper-cased environment variable of the same
    name (``soil_cache_ttl_ms`` from ``SOIL_CACHE_TTL_MS``). A numeric value
    that is malformed or negative is logged and replaced by the default.
    """

    # Geodata caches
    soil_cache_ttl_ms: float = DEFAULT_SOIL_CACHE_TTL_MS
    facilities_cache_ttl_ms: float = DEFAULT_FACILITIES_CACHE_TTL_MS
    geodata_cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES  # 0 disables the LRU bound
    redis_url: Optional[str] = None

    # Providers
    upstream_timeout_seconds: float = DEFAULT_UPSTREAM_TIMEOUT_SECONDS
    openweather_api_key: Optional[str] = None

    # App
    log_level: str = "INFO"
    cors_origins: str = DEFAULT_CORS_ORIGINS  # comma-separated

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    @field_validator(
        "soil_cache_ttl_ms",
        "facilities_cache_ttl_ms",
        "geodata_cache_max_entries",
        "upstream_timeout_seconds",
        mode="before",
    )
    @classmethod
    def _number_or_default(cls, value: Any, info: ValidationInfo) -> Any:
        default = cls.model_fields[info.field_name].default
        try:
            number = float(value)
        except (TypeError, ValueError):
            logger.warning(f"[CONFIG] Ignoring non-numeric {info.field_name}={value!r}, using {default}")
            return default
        if not math.isfinite(number) or number < 0:
            logger.warning(f"[CONFIG] Ignoring invalid {info.field_name}={value!r}, using {default}")
            return default
        if info.field_name == "geodata_cache_max_entries":
            return int(number)
        return number

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @property
    def soil_cache_ttl_seconds(self) -> float:
        return self.soil_cache_ttl_ms / 1000

    @property
    def facilities_cache_ttl_seconds(self) -> float:
        return self.facilities_cache_ttl_ms / 1000

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

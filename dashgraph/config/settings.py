"""
Engine settings and configuration management
Uses Pydantic Settings for environment variable handling and validation
"""

from functools import lru_cache
from typing import ClassVar, FrozenSet, Optional

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings with environment variable support (DASHGRAPH_ prefix)"""

    # Logging
    log_level: str = Field(default="INFO", description="Root log level for structlog output")
    json_logs: bool = Field(default=False, description="Render log lines as JSON instead of console text")

    # Time bucketing
    month_bucket_format: str = Field(
        default="%Y-%m",
        description="strftime format used to build the canonical time-bucket key"
    )
    bucket_timezone: str = Field(
        default="UTC",
        description="Timezone naive timestamps are interpreted in (pytz zone name)"
    )

    # Statistics
    aggregate_precision: int = Field(
        default=1,
        ge=0,
        description="Decimal places kept when averaging non-additive metrics"
    )
    change_precision: int = Field(
        default=2,
        ge=0,
        description="Decimal places in the formatted percent change"
    )

    # Export
    export_flatten_mode: str = Field(
        default="path",
        description="Key scheme for flattened export rows: 'path' (full dotted path) or 'parent' (legacy)"
    )

    model_config = SettingsConfigDict(
        env_prefix="DASHGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    FLATTEN_MODES: ClassVar[FrozenSet[str]] = frozenset(["path", "parent"])

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("bucket_timezone")
    @classmethod
    def validate_bucket_timezone(cls, v):
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"Unknown timezone: {v}") from exc
        return v

    @field_validator("export_flatten_mode")
    @classmethod
    def validate_export_flatten_mode(cls, v):
        mode = v.lower()
        if mode not in cls.FLATTEN_MODES:
            raise ValueError(f"Export flatten mode must be one of {sorted(cls.FLATTEN_MODES)}")
        return mode

    @property
    def tzinfo(self):
        """pytz timezone object for bucket_timezone"""
        return pytz.timezone(self.bucket_timezone)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached engine settings
    Uses lru_cache to avoid reading environment variables multiple times
    """
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache. Used primarily for testing.
    After calling this, the next call to get_settings() will
    create a new Settings instance with fresh environment variables.
    """
    get_settings.cache_clear()


def resolve_settings(settings: Optional[Settings] = None) -> Settings:
    """Return the explicit settings object, or the cached process-wide one."""
    return settings if settings is not None else get_settings()

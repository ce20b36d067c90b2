"""
Configuration settings for the RFQ Capacity Planner.

Uses pydantic-settings for environment variable management with validation.
Supports multi-environment deployments (development, staging, production).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 5432
    name: str = "rfq_capacity"
    user: str = "postgres"
    password: SecretStr = SecretStr("postgres")
    pool_size: int = 10
    max_overflow: int = 5

    @property
    def async_url(self) -> str:
        """Construct async database URL."""
        return (
            f"postgresql+asyncpg://{self.user}:"
            f"{self.password.get_secret_value()}@"
            f"{self.host}:{self.port}/{self.name}"
        )


class CapacitySettings(BaseSettings):
    """Capacity/load analysis settings."""

    model_config = SettingsConfigDict(env_prefix="CAPACITY_")

    horizon_weeks: int = 12
    max_horizon_weeks: int = 104
    average_window_weeks: int = 7

    default_weekly_capacity: float = 160.0
    corporate_weekly_capacity: float = 40.0
    corporate_plant_prefix: str = "CORPORATE"
    unknown_division: str = "UNKNOWN"

    # Lifecycle status listed by the load table
    active_status: str = "PROPOSAL"

    # Milestones bounding the load spreading window
    spread_start_stage: str = "PIN"
    spread_end_stage: str = "EOQ"

    warning_threshold_pct: float = 80.0
    over_capacity_threshold_pct: float = 100.0


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "RFQ Capacity Planner"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 2

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Sub-configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    capacity: CapacitySettings = Field(default_factory=CapacitySettings)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()


# Convenience export
settings = get_settings()

"""Application configuration with environment variable validation."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cranksmith.core.enums import BikeType, SpeedUnit

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Calculator defaults (cadence is fixed at 90 RPM and not configurable)
    default_speed_unit: SpeedUnit = Field(
        default=SpeedUnit.KMH, validation_alias="DEFAULT_SPEED_UNIT"
    )
    default_bike_type: BikeType = Field(
        default=BikeType.ROAD, validation_alias="DEFAULT_BIKE_TYPE"
    )

    # CORS
    allowed_origins: list[str] | str = Field(
        default=["http://localhost:3000"],
        validation_alias="ALLOWED_ORIGINS",
    )

    # Rate limiting
    rate_limit_requests: int = Field(default=10, validation_alias="RATE_LIMIT_REQUESTS")
    rate_limit_period: int = Field(default=60, validation_alias="RATE_LIMIT_PERIOD")

    @property
    def cors_origins(self) -> list[str]:
        """Parse ALLOWED_ORIGINS from comma-separated string or return list."""
        if isinstance(self.allowed_origins, str):
            return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return self.allowed_origins

    @property
    def rate_limit(self) -> str:
        """Rate limit in slowapi notation, e.g. '10/60 seconds'."""
        return f"{self.rate_limit_requests}/{self.rate_limit_period} seconds"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()

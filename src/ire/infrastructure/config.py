"""Runtime settings, read from ``IRE_*`` environment variables or a ``.env`` file."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ire.domain.model.value_objects import ForecastMethod


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="IRE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    data_dir: Path = Path("data")

    # Concurrency
    max_conflict_retries: int = Field(default=5, ge=1)
    lock_timeout_seconds: float = Field(default=2.0, gt=0)
    retry_backoff_seconds: float = Field(default=0.01, ge=0)

    # Alerts
    alert_frequency_hours: int = Field(default=24, ge=0)

    # Forecasting
    forecast_window_days: int = Field(default=90, ge=1)
    forecast_horizon_days: int = Field(default=30, ge=1)
    forecast_method: ForecastMethod = ForecastMethod.MOVING_AVERAGE
    lead_time_days: int = Field(default=7, ge=0)

    # Logging
    log_level: str = "INFO"
    log_json: bool = False


def get_settings() -> Settings:
    return Settings()

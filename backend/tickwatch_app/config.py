"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TICKWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Symbols to replay when --symbols is not given; empty = every symbol
    symbols: list[str] = []
    # Strategy kinds to evaluate
    strategies: list[str] = ["scalping", "intraday", "pump"]

    # Retention
    history_size: int = 200  # ticks kept per symbol
    cvd_max_length: int = 100  # CVD points kept per symbol
    snapshot_max_age_seconds: float = 60.0
    snapshot_purge_interval_seconds: float = 10.0

    # Indicator periods
    rsi_period: int = 14
    bollinger_period: int = 20
    bollinger_std: float = 2.0
    volume_period: int = 20
    volume_spike_threshold: float = 2.0

    # Strategy condition overrides (YAML)
    conditions_file: str = "conditions.yaml"

    # Signal sink
    signal_log_size: int = 1000
    signal_log_file: str = ""  # JSON lines; empty = in-memory only

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from apex_core.models.config import AnalysisConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Market
    symbols: list[str] = ["AAPL", "TSLA", "MSFT", "NVDA", "GOOGL"]
    timeframes: list[str] = ["1d", "4h", "1h", "15m"]
    history_length: int = 200
    base_price: float = 100.0

    # Signal scoring
    rsi_period: int = 14
    sma_period: int = 50
    ema_period: int = 20

    # MACD
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9

    # Timeframe analyzer SMA pair
    fast_sma_period: int = 20
    slow_sma_period: int = 50

    # Simulated quote feed
    feed_interval: float = 2.0  # Seconds between ticks
    feed_noise: float = 0.001  # Max relative move per tick is half of this
    feed_seed: int | None = None
    feed_max_volume_delta: int = 0

    # Logging
    log_level: str = "INFO"

    def analysis_config(self) -> AnalysisConfig:
        """Build the core analysis periods from these settings."""
        return AnalysisConfig(
            rsi_period=self.rsi_period,
            sma_period=self.sma_period,
            ema_period=self.ema_period,
            macd_fast=self.macd_fast,
            macd_slow=self.macd_slow,
            macd_signal=self.macd_signal,
            fast_sma_period=self.fast_sma_period,
            slow_sma_period=self.slow_sma_period,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

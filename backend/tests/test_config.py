"""Tests for application settings."""

import pytest

from apex_app.config import Settings, get_settings
from apex_core.errors import InvalidParameterError
from apex_core.models import AnalysisConfig


class TestSettings:
    """Tests for Settings defaults and overrides."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.timeframes == ["1d", "4h", "1h", "15m"]
        assert settings.feed_interval == 2.0
        assert settings.feed_noise == 0.001
        assert settings.feed_seed is None
        assert settings.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FEED_INTERVAL", "0.5")
        monkeypatch.setenv("FEED_SEED", "42")
        monkeypatch.setenv("SYMBOLS", '["AAPL", "MSFT"]')

        settings = Settings(_env_file=None)

        assert settings.feed_interval == 0.5
        assert settings.feed_seed == 42
        assert settings.symbols == ["AAPL", "MSFT"]

    def test_analysis_config(self):
        settings = Settings(_env_file=None, rsi_period=7, macd_fast=5, macd_slow=35)
        config = settings.analysis_config()

        assert isinstance(config, AnalysisConfig)
        assert config.rsi_period == 7
        assert config.macd_fast == 5
        assert config.macd_slow == 35
        assert config.sma_period == 50
        assert config.fast_sma_period == 20

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()

    def test_invalid_macd_periods_rejected(self):
        settings = Settings(_env_file=None, macd_fast=26, macd_slow=12)

        with pytest.raises(InvalidParameterError):
            settings.analysis_config()


class TestAnalysisConfig:
    """Tests for AnalysisConfig validation."""

    def test_defaults_valid(self):
        config = AnalysisConfig()
        assert config.macd_fast < config.macd_slow

    def test_fast_not_below_slow_raises(self):
        with pytest.raises(InvalidParameterError):
            AnalysisConfig(macd_fast=26, macd_slow=12)

        with pytest.raises(InvalidParameterError):
            AnalysisConfig(macd_fast=12, macd_slow=12)

    @pytest.mark.parametrize(
        "field",
        ["rsi_period", "sma_period", "ema_period", "macd_signal",
         "fast_sma_period", "slow_sma_period"],
    )
    def test_non_positive_period_raises(self, field):
        with pytest.raises(InvalidParameterError):
            AnalysisConfig(**{field: 0})

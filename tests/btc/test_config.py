"""Tests for DashboardSettings."""

import os
from unittest.mock import patch

from app.btc.config import DashboardSettings


class TestDashboardSettings:
    """Tests for DashboardSettings.from_env."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = DashboardSettings.from_env()

        assert settings.backend_url == "http://localhost:3000"
        assert settings.push_url == ""
        assert settings.poll_interval == 5.0
        assert settings.fetch_timeout == 5.0
        assert settings.base_price == 86300.0
        assert settings.log_level == "INFO"
        assert settings.port == 8000

    def test_backend_url_trailing_slash_stripped(self):
        with patch.dict(os.environ, {"BTC_BACKEND_URL": " http://prices:3000/ "}, clear=True):
            settings = DashboardSettings.from_env()

        assert settings.backend_url == "http://prices:3000"

    def test_push_url_whitespace_is_empty(self):
        with patch.dict(os.environ, {"BTC_PUSH_URL": "   "}, clear=True):
            settings = DashboardSettings.from_env()

        assert settings.push_url == ""

    def test_numeric_overrides(self):
        env = {"BTC_POLL_INTERVAL": "2.5", "BTC_FETCH_TIMEOUT": "1", "BTC_BASE_PRICE": "60000", "PORT": "9000"}
        with patch.dict(os.environ, env, clear=True):
            settings = DashboardSettings.from_env()

        assert settings.poll_interval == 2.5
        assert settings.fetch_timeout == 1.0
        assert settings.base_price == 60000.0
        assert settings.port == 9000

    def test_invalid_numbers_fall_back(self):
        """Test that garbage or non-positive values keep the defaults."""
        with patch.dict(os.environ, {"BTC_POLL_INTERVAL": "fast", "BTC_FETCH_TIMEOUT": "-1"}, clear=True):
            settings = DashboardSettings.from_env()

        assert settings.poll_interval == 5.0
        assert settings.fetch_timeout == 5.0

    def test_log_level_uppercased(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True):
            settings = DashboardSettings.from_env()

        assert settings.log_level == "DEBUG"

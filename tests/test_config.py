"""Unit tests for the configuration module."""

import pytest
from unittest.mock import patch

from chatfront.config import AppConfig, ConfigurationError, get_config, validate_config


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_includes_variable_name(self):
        """Test that ConfigurationError includes the variable name."""
        error = ConfigurationError("TEST_VAR")
        assert "TEST_VAR" in str(error)
        assert error.variable_name == "TEST_VAR"

    def test_custom_message(self):
        """Test ConfigurationError with custom message."""
        error = ConfigurationError("TEST_VAR", "custom message")
        assert str(error) == "TEST_VAR: custom message"


class TestAppConfigFromEnv:
    """Tests for loading AppConfig from the environment."""

    @patch.dict("os.environ", {}, clear=True)
    def test_defaults(self):
        """Test that every variable has a default."""
        config = AppConfig.from_env()

        assert config.upstream_base_url == "http://localhost:4550"
        assert config.upstream_timeout == 30.0
        assert config.session_max_age == 14400
        assert config.cookie_secure is False
        assert config.app_env == "development"
        assert config.dev_mode is True
        assert config.log_level == "INFO"
        assert config.app_url == "http://localhost:3100"

    @patch.dict("os.environ", {"UPSTREAM_BASE_URL": "https://api.example.com/"}, clear=True)
    def test_trailing_slash_is_stripped(self):
        assert AppConfig.from_env().upstream_base_url == "https://api.example.com"

    @patch.dict("os.environ", {"UPSTREAM_BASE_URL": "ftp://api.example.com"}, clear=True)
    def test_base_url_must_be_http(self):
        with pytest.raises(ConfigurationError) as exc_info:
            AppConfig.from_env()
        assert exc_info.value.variable_name == "UPSTREAM_BASE_URL"

    @patch.dict("os.environ", {"UPSTREAM_TIMEOUT_SECONDS": "0"}, clear=True)
    def test_zero_timeout_disables_timeout(self):
        assert AppConfig.from_env().upstream_timeout is None

    @patch.dict("os.environ", {"UPSTREAM_TIMEOUT_SECONDS": "2.5"}, clear=True)
    def test_fractional_timeout(self):
        assert AppConfig.from_env().upstream_timeout == 2.5

    @pytest.mark.parametrize("value", ["-1", "soon"])
    def test_invalid_timeout(self, value):
        with patch.dict("os.environ", {"UPSTREAM_TIMEOUT_SECONDS": value}, clear=True):
            with pytest.raises(ConfigurationError) as exc_info:
                AppConfig.from_env()
        assert exc_info.value.variable_name == "UPSTREAM_TIMEOUT_SECONDS"

    @pytest.mark.parametrize("value", ["0", "-5", "an hour"])
    def test_invalid_session_max_age(self, value):
        with patch.dict("os.environ", {"SESSION_MAX_AGE_SECONDS": value}, clear=True):
            with pytest.raises(ConfigurationError) as exc_info:
                AppConfig.from_env()
        assert exc_info.value.variable_name == "SESSION_MAX_AGE_SECONDS"

    @patch.dict("os.environ", {"COOKIE_SECURE": "True", "APP_ENV": "Production", "LOG_LEVEL": "debug"}, clear=True)
    def test_flags_are_normalized(self):
        config = AppConfig.from_env()

        assert config.cookie_secure is True
        assert config.app_env == "production"
        assert config.dev_mode is False
        assert config.log_level == "DEBUG"


class TestGetConfig:
    """Tests for the cached accessor."""

    def test_is_cached(self):
        assert get_config() is get_config()

    def test_validate_config(self):
        assert validate_config() is True

    def test_validate_config_raises_on_bad_value(self, monkeypatch):
        monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "-3")
        get_config.cache_clear()

        with pytest.raises(ConfigurationError):
            validate_config()

"""Configuration module with environment variable validation.

This module provides configuration management for the chat front-end,
loading settings from environment variables and validating their values.
"""

import os
from dataclasses import dataclass
from typing import Optional
from functools import lru_cache


class ConfigurationError(Exception):
    """Raised when a configuration variable is missing or invalid."""

    def __init__(self, variable_name: str, message: Optional[str] = None):
        self.variable_name = variable_name
        if message:
            super().__init__(f"{variable_name}: {message}")
        else:
            super().__init__(f"Required environment variable '{variable_name}' is missing or empty")


@dataclass(frozen=True)
class AppConfig:
    """Application configuration loaded from environment variables.

    Attributes:
        upstream_base_url: Base URL of the authentication/chat backend
        upstream_timeout: Seconds to wait on an upstream call (None disables)
        session_max_age: Idle lifetime of a local session in seconds
        cookie_secure: Whether to set the Secure flag on the session cookie
        app_env: Deployment environment name ("development" shows error details)
        log_level: Log level for the application logger
        app_url: Public URL of this front-end
    """

    upstream_base_url: str = "http://localhost:4550"
    upstream_timeout: Optional[float] = 30.0
    session_max_age: int = 60 * 60 * 4
    cookie_secure: bool = False
    app_env: str = "development"
    log_level: str = "INFO"
    app_url: str = "http://localhost:3100"

    @property
    def dev_mode(self) -> bool:
        return self.app_env == "development"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables.

        Returns:
            AppConfig instance with values from environment

        Raises:
            ConfigurationError: If a variable is present but invalid
        """
        values = {}

        base_url = os.environ.get("UPSTREAM_BASE_URL", "http://localhost:4550").strip()
        if not base_url:
            raise ConfigurationError("UPSTREAM_BASE_URL")
        if not base_url.startswith(("http://", "https://")):
            raise ConfigurationError("UPSTREAM_BASE_URL", "must start with http:// or https://")
        values["upstream_base_url"] = base_url.rstrip("/")

        raw_timeout = os.environ.get("UPSTREAM_TIMEOUT_SECONDS", "30").strip()
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError("UPSTREAM_TIMEOUT_SECONDS", "must be a number")
        if timeout < 0:
            raise ConfigurationError("UPSTREAM_TIMEOUT_SECONDS", "must not be negative")
        # 0 means wait indefinitely
        values["upstream_timeout"] = timeout or None

        raw_max_age = os.environ.get("SESSION_MAX_AGE_SECONDS", str(60 * 60 * 4)).strip()
        try:
            max_age = int(raw_max_age)
        except ValueError:
            raise ConfigurationError("SESSION_MAX_AGE_SECONDS", "must be an integer")
        if max_age <= 0:
            raise ConfigurationError("SESSION_MAX_AGE_SECONDS", "must be positive")
        values["session_max_age"] = max_age

        cookie_secure = os.environ.get("COOKIE_SECURE", "false").strip().lower()
        values["cookie_secure"] = cookie_secure in ("true", "1", "yes")

        values["app_env"] = os.environ.get("APP_ENV", "development").strip().lower() or "development"
        values["log_level"] = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
        values["app_url"] = os.environ.get("APP_URL", "http://localhost:3100").strip()

        return cls(**values)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the application configuration (cached).

    Returns:
        AppConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    return AppConfig.from_env()


def validate_config() -> bool:
    """Validate that the configuration loads.

    Returns:
        True if configuration is valid

    Raises:
        ConfigurationError: If configuration is invalid
    """
    get_config()
    return True

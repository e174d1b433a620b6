"""
Configuration management utilities.

This module reads the front-desk settings from environment variables with
type conversion, validates the backend and store URLs, and configures
logging for the package.
"""

import logging
import logging.config
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar, Union
from urllib.parse import urlparse

from ..exceptions import ConfigurationException

T = TypeVar("T")

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_SESSION_FILE = "~/.vet_frontdesk/session.json"
DEFAULT_STORE_URL = "sqlite+aiosqlite:///:memory:"
DEFAULT_NOTICE_SECONDS = 3.0

_TRUE_VALUES = ("true", "1", "yes", "on", "enabled")


class ConfigError(ConfigurationException):
    """Raised when a setting is missing or malformed."""


class LogLevel(Enum):
    """Enumeration for log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentConfig:
    """Utility class for handling environment variables with type conversion."""

    @staticmethod
    def _convert(
        key: str,
        converter: Callable[[str], T],
        type_name: str,
        default: Optional[T],
        required: bool,
    ) -> Optional[T]:
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(
                    f"Required environment variable '{key}' is not set", config_key=key
                )
            return default

        try:
            return converter(value)
        except ValueError:
            raise ConfigError(
                f"Environment variable '{key}' must be {type_name}, got: {value}",
                config_key=key,
                config_value=value,
            )

    @staticmethod
    def get_str(
        key: str, default: Optional[str] = None, required: bool = False
    ) -> Optional[str]:
        """
        Get a string environment variable.

        Raises:
            ConfigError: If required variable is missing
        """
        return EnvironmentConfig._convert(key, str, "a string", default, required)

    @staticmethod
    def get_int(
        key: str, default: Optional[int] = None, required: bool = False
    ) -> Optional[int]:
        """
        Get an integer environment variable.

        Raises:
            ConfigError: If required variable is missing or invalid
        """
        return EnvironmentConfig._convert(key, int, "an integer", default, required)

    @staticmethod
    def get_float(
        key: str, default: Optional[float] = None, required: bool = False
    ) -> Optional[float]:
        """
        Get a float environment variable.

        Raises:
            ConfigError: If required variable is missing or invalid
        """
        return EnvironmentConfig._convert(key, float, "a float", default, required)

    @staticmethod
    def get_bool(
        key: str, default: Optional[bool] = None, required: bool = False
    ) -> Optional[bool]:
        """
        Get a boolean environment variable.

        Values such as ``true``, ``1``, ``yes`` and ``on`` are truthy;
        anything else is false.
        """
        return EnvironmentConfig._convert(
            key,
            lambda raw: raw.strip().lower() in _TRUE_VALUES,
            "a boolean",
            default,
            required,
        )


def validate_api_url(url: str) -> str:
    """
    Validate the backend base URL and return it without a trailing slash.

    Raises:
        ConfigError: If the URL is empty or not http(s)
    """
    if not url:
        raise ConfigError("API base URL cannot be empty", config_key="api_url")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ConfigError(
            f"API base URL must use http:// or https://, got: '{parsed.scheme or url}'",
            config_key="api_url",
        )
    if not parsed.netloc:
        raise ConfigError("API base URL must include a host", config_key="api_url")

    return url.rstrip("/")


def validate_store_url(url: str) -> str:
    """
    Validate the local store URL.

    Only async SQLite drivers are supported for the in-memory entity store.
    """
    if not url:
        raise ConfigError("Store URL cannot be empty", config_key="store_url")

    scheme = urlparse(url).scheme
    if scheme != "sqlite+aiosqlite":
        raise ConfigError(
            f"Unsupported store driver '{scheme}'. Supported: sqlite+aiosqlite",
            config_key="store_url",
        )
    return url


@dataclass
class FrontdeskSettings:
    """Runtime settings for the front-desk client."""

    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    session_file: Path = Path(DEFAULT_SESSION_FILE).expanduser()
    store_url: str = DEFAULT_STORE_URL
    log_level: LogLevel = LogLevel.INFO
    notice_seconds: float = DEFAULT_NOTICE_SECONDS

    def __post_init__(self) -> None:
        self.api_url = validate_api_url(self.api_url)
        self.store_url = validate_store_url(self.store_url)
        if self.timeout <= 0:
            raise ConfigError("Request timeout must be positive", config_key="timeout")
        if self.notice_seconds <= 0:
            raise ConfigError(
                "Notice duration must be positive", config_key="notice_seconds"
            )

    @classmethod
    def from_environment(cls) -> "FrontdeskSettings":
        """
        Build settings from ``VET_FRONTDESK_*`` environment variables.

        Raises:
            ConfigError: If a variable is malformed
        """
        level_name = EnvironmentConfig.get_str("VET_FRONTDESK_LOG_LEVEL", "INFO")
        try:
            log_level = LogLevel((level_name or "INFO").upper())
        except ValueError:
            raise ConfigError(
                f"Unknown log level: {level_name}",
                config_key="VET_FRONTDESK_LOG_LEVEL",
                config_value=level_name,
            ) from None

        session_file = EnvironmentConfig.get_str(
            "VET_FRONTDESK_SESSION_FILE", DEFAULT_SESSION_FILE
        )

        return cls(
            api_url=EnvironmentConfig.get_str("VET_FRONTDESK_API_URL", DEFAULT_API_URL)
            or DEFAULT_API_URL,
            timeout=EnvironmentConfig.get_float(
                "VET_FRONTDESK_TIMEOUT", DEFAULT_TIMEOUT_SECONDS
            ),
            session_file=Path(session_file or DEFAULT_SESSION_FILE).expanduser(),
            store_url=EnvironmentConfig.get_str(
                "VET_FRONTDESK_STORE_URL", DEFAULT_STORE_URL
            )
            or DEFAULT_STORE_URL,
            log_level=log_level,
            notice_seconds=EnvironmentConfig.get_float(
                "VET_FRONTDESK_NOTICE_SECONDS", DEFAULT_NOTICE_SECONDS
            ),
        )


class LoggingConfigurator:
    """Utility class for configuring logging."""

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def configure_basic_logging(
        level: Union[str, LogLevel] = LogLevel.INFO,
        format_string: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> None:
        """
        Configure basic logging for the application.

        Args:
            level: Logging level
            format_string: Custom format string
            log_file: Optional log file path
        """
        if isinstance(level, LogLevel):
            level = level.value

        basic_config_args: Dict[str, Any] = {
            "level": level,
            "format": format_string or LoggingConfigurator.DEFAULT_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
        if log_file:
            basic_config_args["filename"] = log_file
            basic_config_args["filemode"] = "a"

        logging.basicConfig(**basic_config_args)

    @staticmethod
    def configure_structured_logging(
        config_dict: Optional[Dict[str, Any]] = None,
        level: Union[str, LogLevel] = LogLevel.INFO,
    ) -> None:
        """
        Configure logging with ``dictConfig``.

        Args:
            config_dict: Logging configuration dictionary; a console setup
                for the ``vet_frontdesk`` logger is used when omitted
            level: Level for the ``vet_frontdesk`` logger in the default setup
        """
        if config_dict:
            logging.config.dictConfig(config_dict)
            return

        if isinstance(level, LogLevel):
            level = level.value

        default_config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": LoggingConfigurator.DEFAULT_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "standard",
                    "stream": "ext://sys.stderr",
                }
            },
            "loggers": {
                "vet_frontdesk": {
                    "level": level,
                    "handlers": ["console"],
                    "propagate": False,
                }
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }
        logging.config.dictConfig(default_config)

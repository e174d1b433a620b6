"""
Utility functions and helper modules.

This module provides configuration and logging setup, datetime helpers,
form validation, search filtering and banner notices.
"""

from .config import (
    ConfigError,
    EnvironmentConfig,
    FrontdeskSettings,
    LoggingConfigurator,
    LogLevel,
    validate_api_url,
    validate_store_url,
)
from .datetime_utils import (
    DayOfWeek,
    format_display_date,
    format_wire_date,
    format_wire_time,
    get_current_local,
    get_current_utc,
    is_weekend,
    parse_wire_date,
    parse_wire_time,
    today,
    week_dates,
)
from .filtering import filter_by_term, matches_term, normalize_term
from .notices import Notice, NoticeBoard, NoticeKind
from .validation import (
    REQUIRED_FIELDS_MESSAGE,
    FieldError,
    ValidationResult,
    is_blank,
    parse_amount,
    parse_decimal,
    require_fields,
    sanitize_string,
    validate_email,
    validate_phone,
)

__all__ = [
    # Configuration
    "ConfigError",
    "EnvironmentConfig",
    "FrontdeskSettings",
    "LoggingConfigurator",
    "LogLevel",
    "validate_api_url",
    "validate_store_url",
    # DateTime utilities
    "DayOfWeek",
    "format_display_date",
    "format_wire_date",
    "format_wire_time",
    "get_current_local",
    "get_current_utc",
    "is_weekend",
    "parse_wire_date",
    "parse_wire_time",
    "today",
    "week_dates",
    # Filtering
    "filter_by_term",
    "matches_term",
    "normalize_term",
    # Notices
    "Notice",
    "NoticeBoard",
    "NoticeKind",
    # Validation
    "REQUIRED_FIELDS_MESSAGE",
    "FieldError",
    "ValidationResult",
    "is_blank",
    "parse_amount",
    "parse_decimal",
    "require_fields",
    "sanitize_string",
    "validate_email",
    "validate_phone",
]

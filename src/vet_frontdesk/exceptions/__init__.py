"""
Custom exceptions for the vet-frontdesk package.

This module defines the exception hierarchy used across the front-desk client.
"""

from .core_exceptions import (
    CannotDeactivateError,
    CannotDeleteError,
    ConfigurationException,
    ConflictException,
    FrontdeskException,
    IllegalTransitionError,
    InvalidAmountError,
    InvoiceAlreadyExistsError,
    NetworkException,
    NotAuthorizedError,
    SchemaValidationException,
    SelfDeletionError,
    SlotTakenError,
    StoreException,
    ValidationException,
    create_error_response,
    format_validation_errors,
    log_exception_context,
    user_message,
)

__all__ = [
    # Exception classes
    "FrontdeskException",
    "ValidationException",
    "SchemaValidationException",
    "InvalidAmountError",
    "NetworkException",
    "ConflictException",
    "SlotTakenError",
    "CannotDeactivateError",
    "CannotDeleteError",
    "SelfDeletionError",
    "InvoiceAlreadyExistsError",
    "IllegalTransitionError",
    "NotAuthorizedError",
    "StoreException",
    "ConfigurationException",
    # Utility functions
    "format_validation_errors",
    "user_message",
    "create_error_response",
    "log_exception_context",
]

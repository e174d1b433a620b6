"""
Core exceptions for the vet-frontdesk package.

This module defines the exception hierarchy used throughout the front-desk
client: validation failures caught before any request is sent, network
failures, business-rule conflicts and client-side authorization refusals.
"""

import logging
import time
import traceback
from datetime import date, time as dt_time
from typing import Any, Dict, List, Optional


class FrontdeskException(Exception):
    """
    Base exception class for all vet-frontdesk exceptions.

    Provides a consistent interface for error handling across the package.
    """

    # Localized text shown when the exception carries no usable message
    fallback_message = "Ocurrió un error inesperado"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": time.time(),
        }

    def get_debug_info(self) -> Dict[str, Any]:
        """
        Get detailed debug information for the exception.

        Returns:
            Dictionary with debug information including traceback
        """
        debug_info = self.to_dict()
        formatted = traceback.format_exc()
        debug_info.update(
            {
                "traceback": (
                    formatted if formatted.strip() != "NoneType: None" else None
                ),
                "module": self.__class__.__module__,
                "class_name": self.__class__.__name__,
            }
        )
        return debug_info

    def log_error(
        self, logger: Optional[logging.Logger] = None, level: int = logging.ERROR
    ) -> None:
        """
        Log the exception with appropriate level and context.

        Args:
            logger: Logger instance to use (creates default if None)
            level: Logging level to use
        """
        if logger is None:
            logger = logging.getLogger(__name__)

        log_data = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

        logger.log(
            level,
            f"Exception occurred: {self.message}",
            extra={"exception_data": log_data},
        )

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationException(FrontdeskException):
    """Raised when a required field is missing or invalid, before any request."""

    fallback_message = "Datos inválidos"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        validation_errors: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize validation exception.

        Args:
            message: Error message
            field: Field that failed validation
            value: Value that failed validation
            validation_errors: Detailed validation errors
        """
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details,
        )
        self.field = field


class SchemaValidationException(ValidationException):
    """Raised when a Pydantic schema rejects form or response data."""

    def __init__(
        self,
        message: str = "Schema validation failed",
        schema_name: Optional[str] = None,
        validation_errors: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize schema validation exception.

        Args:
            message: Error message
            schema_name: Name of the schema that failed validation
            validation_errors: Formatted Pydantic validation errors
        """
        super().__init__(message=message, validation_errors=validation_errors)
        self.error_code = "SCHEMA_VALIDATION_ERROR"
        if schema_name:
            self.details["schema_name"] = schema_name


class InvalidAmountError(ValidationException):
    """Raised when a monetary amount is negative or not a finite number."""

    def __init__(self, amount: Any, message: str = "El monto debe ser un número no negativo"):
        super().__init__(message=message, field="amount", value=amount)
        self.error_code = "INVALID_AMOUNT"


class NetworkException(FrontdeskException):
    """Raised when a request fails or the backend answers with a non-2xx status."""

    fallback_message = "Error en la solicitud"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        server_detail: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize network exception.

        Args:
            message: Error message; defaults to the server detail or fallback text
            status_code: HTTP status code, None for transport failures
            url: Requested URL
            server_detail: The ``detail`` field of the error body, verbatim
            original_error: Underlying transport exception
        """
        details: Dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if url:
            details["url"] = url
        if original_error is not None:
            details["original_error"] = str(original_error)

        super().__init__(
            message=message or server_detail or self.fallback_message,
            error_code="NETWORK_ERROR",
            details=details,
        )
        self.status_code = status_code
        self.url = url
        self.server_detail = server_detail
        self.original_error = original_error


class ConflictException(FrontdeskException):
    """Raised when an action violates a business rule."""

    fallback_message = "La operación no está permitida"

    def __init__(
        self,
        message: str = "Business rule violated",
        rule_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        server_detail: Optional[str] = None,
    ):
        """
        Initialize conflict exception.

        Args:
            message: Error message
            rule_name: Name of the business rule that failed
            context: Additional context about the failure
            server_detail: Verbatim ``detail`` when the backend raised the conflict
        """
        details: Dict[str, Any] = {}
        if rule_name:
            details["rule_name"] = rule_name
        if context:
            details["context"] = context

        super().__init__(
            message=server_detail or message,
            error_code="CONFLICT_ERROR",
            details=details,
        )
        self.rule_name = rule_name
        self.server_detail = server_detail


class SlotTakenError(ConflictException):
    """Raised when a (date, time) slot is already held by a non-cancelled appointment."""

    def __init__(
        self,
        scheduled_date: date,
        scheduled_time: dt_time,
        server_detail: Optional[str] = None,
    ):
        super().__init__(
            message=(
                f"El horario {scheduled_time.strftime('%H:%M')} del "
                f"{scheduled_date.isoformat()} ya está ocupado"
            ),
            rule_name="slot_taken",
            context={
                "date": scheduled_date.isoformat(),
                "time": scheduled_time.strftime("%H:%M"),
            },
            server_detail=server_detail,
        )
        self.error_code = "SLOT_TAKEN"
        self.scheduled_date = scheduled_date
        self.scheduled_time = scheduled_time


class CannotDeactivateError(ConflictException):
    """Raised when deactivating a client that still owns active pets."""

    def __init__(self, client_id: Any, active_pets: Optional[List[str]] = None):
        super().__init__(
            message="No se puede desactivar un cliente que tiene mascotas activas",
            rule_name="client_has_active_pets",
            context={"client_id": client_id, "active_pets": active_pets or []},
        )
        self.error_code = "CANNOT_DEACTIVATE"


class CannotDeleteError(ConflictException):
    """Raised when deleting a client that still owns pets."""

    def __init__(self, client_id: Any, pets: Optional[List[str]] = None):
        super().__init__(
            message="No se puede eliminar un cliente que tiene mascotas registradas",
            rule_name="client_has_pets",
            context={"client_id": client_id, "pets": pets or []},
        )
        self.error_code = "CANNOT_DELETE"


class SelfDeletionError(ConflictException):
    """Raised when the logged-in user tries to delete their own account."""

    def __init__(self, user_id: Any):
        super().__init__(
            message="No puedes eliminar tu propio usuario",
            rule_name="self_deletion",
            context={"user_id": user_id},
        )
        self.error_code = "SELF_DELETION"


class InvoiceAlreadyExistsError(ConflictException):
    """Raised when a consultation already has an invoice."""

    def __init__(self, consultation_id: Any, invoice_number: Optional[str] = None):
        super().__init__(
            message="La consulta ya tiene una factura generada",
            rule_name="one_invoice_per_consultation",
            context={
                "consultation_id": consultation_id,
                "invoice_number": invoice_number,
            },
        )
        self.error_code = "INVOICE_ALREADY_EXISTS"


class IllegalTransitionError(ConflictException):
    """Raised when a status change is not allowed by the entity lifecycle."""

    def __init__(self, entity: str, from_state: str, to_state: str):
        super().__init__(
            message=f"No se puede cambiar {entity} de '{from_state}' a '{to_state}'",
            rule_name="status_transition",
            context={"entity": entity, "from": from_state, "to": to_state},
        )
        self.error_code = "ILLEGAL_TRANSITION"
        self.entity = entity
        self.from_state = from_state
        self.to_state = to_state


class NotAuthorizedError(FrontdeskException):
    """Raised when the current role lacks permission for a page or action."""

    fallback_message = "Acceso restringido"

    def __init__(
        self,
        message: str = "Acceso restringido",
        role: Optional[str] = None,
        permission: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        details: Dict[str, Any] = {}
        if role:
            details["role"] = role
        if permission:
            details["permission"] = permission
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(
            message=message,
            error_code="NOT_AUTHORIZED",
            details=details,
        )
        self.role = role
        self.permission = permission


class StoreException(FrontdeskException):
    """Raised when the local entity store fails."""

    fallback_message = "Error al cargar los datos"

    def __init__(
        self,
        message: str = "Local store operation failed",
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if original_error is not None:
            details["original_error"] = str(original_error)

        super().__init__(message=message, error_code="STORE_ERROR", details=details)
        self.original_error = original_error


class ConfigurationException(FrontdeskException):
    """Base exception for configuration-related errors."""

    fallback_message = "Configuración inválida"

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
    ):
        """
        Initialize configuration exception.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            config_value: Configuration value (will be sanitized)
        """
        details: Dict[str, Any] = {}
        if config_key:
            details["config_key"] = config_key
        if config_value:
            details["config_value"] = self._sanitize_config_value(
                config_key, config_value
            )

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )

    @staticmethod
    def _sanitize_config_value(key: Optional[str], value: str) -> str:
        """Sanitize configuration values to avoid exposing secrets."""
        if not key:
            return "[REDACTED]"

        sensitive_keys = ["password", "secret", "key", "token", "credential"]
        if any(sensitive in key.lower() for sensitive in sensitive_keys):
            return "[REDACTED]"

        return value


# Utility functions for exception handling and error formatting


def format_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Format Pydantic validation errors into a user-friendly structure.

    Args:
        errors: List of Pydantic validation errors

    Returns:
        Dictionary mapping field names to lists of error messages
    """
    formatted_errors: Dict[str, List[str]] = {}

    for error in errors:
        field_path = ".".join(str(loc) for loc in error.get("loc", []))
        if not field_path:
            field_path = "root"

        message = error.get("msg", "Validation error")
        error_type = error.get("type", "unknown")

        if error_type == "value_error":
            formatted_message = message
        elif error_type == "missing":
            formatted_message = "Este campo es requerido"
        else:
            formatted_message = f"{message} (type: {error_type})"

        formatted_errors.setdefault(field_path, []).append(formatted_message)

    return formatted_errors


def user_message(exception: BaseException) -> str:
    """
    Text to show the user for a failed action.

    The exception's own message (which carries the server ``detail`` for
    network and conflict errors) wins; otherwise the localized fallback for
    the exception family is used.
    """
    if isinstance(exception, FrontdeskException):
        return exception.message or exception.fallback_message
    return FrontdeskException.fallback_message


def create_error_response(
    exception: FrontdeskException,
    include_debug: bool = False,
) -> Dict[str, Any]:
    """
    Create a standardized error response from an exception.

    Args:
        exception: The exception to format
        include_debug: Whether to include debug information

    Returns:
        Standardized error response dictionary
    """
    response: Dict[str, Any] = {
        "success": False,
        "error": {
            "type": exception.__class__.__name__,
            "code": exception.error_code,
            "message": user_message(exception),
        },
    }

    if exception.details:
        response["error"]["details"] = exception.details

    if include_debug:
        debug_info = exception.get_debug_info()
        response["debug"] = {
            "timestamp": debug_info["timestamp"],
            "module": debug_info["module"],
            "class_name": debug_info["class_name"],
        }

    return response


def log_exception_context(
    exception: Exception,
    context: Dict[str, Any],
    logger: Optional[logging.Logger] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception with additional context information.

    Args:
        exception: The exception to log
        context: Additional context information
        logger: Logger instance to use
        level: Logging level
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if isinstance(exception, FrontdeskException):
        log_data = exception.to_dict()
        log_data["context"] = context
        logger.log(
            level,
            f"Exception with context: {exception.message}",
            extra={"exception_data": log_data},
        )
    else:
        logger.log(
            level,
            f"Unexpected exception: {exception}",
            extra={
                "exception_type": exception.__class__.__name__,
                "exception_message": str(exception),
                "context": context,
            },
        )

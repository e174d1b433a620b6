"""
Validation and data processing utilities for front-desk forms.

This module provides the required-field checks run before any request is
sent, string sanitisation, contact-data validation and exact decimal
parsing for money and measurements.
"""

import re
import unicodedata
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, TypeVar, Union

from ..exceptions import InvalidAmountError, ValidationException

T = TypeVar("T")

REQUIRED_FIELDS_MESSAGE = "Todos los campos son requeridos"

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PHONE_PATTERN = re.compile(r"^\+?[0-9][0-9\s\-]{6,18}[0-9]$")


class FieldError:
    """A single field-level problem found while validating a form."""

    def __init__(self, message: str, field: Optional[str] = None, code: Optional[str] = None):
        self.message = message
        self.field = field
        self.code = code

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "field": self.field, "code": self.code}


class ValidationResult(Generic[T]):
    """Result of a validation operation."""

    def __init__(self, value: Optional[T] = None, errors: Optional[List[FieldError]] = None):
        self.value = value
        self.errors = errors or []
        self.is_valid = len(self.errors) == 0

    def add_error(self, error: FieldError) -> None:
        """Add an error to the result."""
        self.errors.append(error)
        self.is_valid = False

    def raise_for_errors(self) -> Optional[T]:
        """
        Return the validated value or raise the first error.

        Raises:
            ValidationException: If any error was collected
        """
        if self.is_valid:
            return self.value
        first = self.errors[0]
        raise ValidationException(
            message=first.message,
            field=first.field,
            validation_errors={
                error.field or "root": error.message for error in self.errors
            },
        )


def sanitize_string(value: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize a string by normalizing unicode and trimming whitespace.

    Args:
        value: The string to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    normalized = unicodedata.normalize("NFKC", value)
    sanitized = re.sub(r"\s+", " ", normalized.strip())

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length].rstrip()

    return sanitized


def is_blank(value: Any) -> bool:
    """A value counts as blank when it is None or only whitespace."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_fields(
    values: Mapping[str, Any],
    required: Iterable[str],
    message: str = REQUIRED_FIELDS_MESSAGE,
) -> None:
    """
    Check that every required form field has a value.

    Args:
        values: Form values by field name
        required: Names that must be non-blank
        message: Error text shown to the user

    Raises:
        ValidationException: Naming the first missing field
    """
    missing = [name for name in required if is_blank(values.get(name))]
    if missing:
        raise ValidationException(
            message=message,
            field=missing[0],
            validation_errors={name: "Este campo es requerido" for name in missing},
        )


def validate_email(email: Optional[str]) -> ValidationResult[str]:
    """
    Validate an email address.

    Returns:
        ValidationResult with the lower-cased email or errors
    """
    result = ValidationResult[str]()

    if is_blank(email):
        result.add_error(FieldError("El correo es requerido", "correo", "required"))
        return result

    sanitized_email = sanitize_string(email or "").lower()

    if not EMAIL_PATTERN.match(sanitized_email) or len(sanitized_email) > 254:
        result.add_error(
            FieldError("Formato de correo inválido", "correo", "invalid_format")
        )
        return result

    result.value = sanitized_email
    return result


def validate_phone(phone: Optional[str]) -> ValidationResult[str]:
    """Validate a phone number; digits, spaces, dashes and a leading ``+``."""
    result = ValidationResult[str]()

    if is_blank(phone):
        result.add_error(FieldError("El teléfono es requerido", "telefono", "required"))
        return result

    sanitized = sanitize_string(phone or "")
    if not PHONE_PATTERN.match(sanitized):
        result.add_error(
            FieldError("Formato de teléfono inválido", "telefono", "invalid_format")
        )
        return result

    result.value = sanitized
    return result


def parse_decimal(value: Union[str, int, float, Decimal, None]) -> Optional[Decimal]:
    """
    Convert a wire or form value into an exact Decimal.

    Floats are converted through their shortest ``repr`` so ``0.1`` becomes
    ``Decimal("0.1")`` and not the binary expansion.

    Raises:
        ValueError: If the value is not numeric
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValueError("Boolean is not a numeric amount")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a numeric value: {value!r}")


def parse_amount(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Parse a monetary amount that must be a finite, non-negative number.

    Raises:
        InvalidAmountError: If the amount is missing, negative or not finite
    """
    try:
        amount = parse_decimal(value)
    except ValueError:
        raise InvalidAmountError(value)

    if amount is None or not amount.is_finite() or amount < 0:
        raise InvalidAmountError(value)
    return amount

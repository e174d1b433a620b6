"""
Shared Pydantic configuration for the backend wire format.

The backend speaks Spanish field names; schemas expose the Python names used
by the models and map them with aliases. Incoming records are parsed
leniently (unknown fields ignored, numbers accepted as strings), outgoing
payloads are dumped by alias.
"""

from datetime import date, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ..exceptions import SchemaValidationException, format_validation_errors
from ..utils.datetime_utils import (
    format_wire_date,
    format_wire_time,
    parse_wire_date,
    parse_wire_time,
)
from ..utils.validation import parse_decimal

CENTS = Decimal("0.01")

W = TypeVar("W", bound="WireModel")


def money_to_wire(value: Optional[Decimal]) -> Optional[str]:
    """Serialize a money amount as a string with two decimals."""
    if value is None:
        return None
    return str(value.quantize(CENTS, rounding=ROUND_HALF_UP))


def decimal_from_wire(value: Any) -> Any:
    """Before-validator turning JSON numbers into exact Decimals."""
    if isinstance(value, (int, float, str, Decimal)) and not isinstance(value, bool):
        return parse_decimal(value)
    return value


def date_from_wire(value: Any) -> Any:
    if isinstance(value, str):
        return parse_wire_date(value)
    return value


def time_from_wire(value: Any) -> Any:
    if isinstance(value, (str, time)):
        return parse_wire_time(value)
    return value


def date_to_wire(value: Optional[date]) -> Optional[str]:
    return format_wire_date(value) if value is not None else None


def time_to_wire(value: Optional[time]) -> Optional[str]:
    return format_wire_time(value) if value is not None else None


class WireModel(BaseModel):
    """Base schema for records exchanged with the backend."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        validate_assignment=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @classmethod
    def parse(cls: Type[W], data: Any) -> W:
        """
        Validate backend or form data.

        Raises:
            SchemaValidationException: With field-level messages
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SchemaValidationException(
                message=f"Datos inválidos en {cls.__name__}",
                schema_name=cls.__name__,
                validation_errors=format_validation_errors(e.errors()),
            ) from e

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the backend, with Spanish names and unset fields left out."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

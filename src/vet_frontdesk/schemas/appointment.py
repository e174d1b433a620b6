"""
Appointment Pydantic schemas for the backend wire format.

This module contains the appointment record, the booking form, the status
update body and the slot-availability answer. Dates travel as ``YYYY-MM-DD``
and slot times as ``HH:MM``.
"""

from datetime import date, time
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_serializer, field_validator

from ..models.appointment import Appointment, AppointmentStatus
from .base import WireModel, date_from_wire, date_to_wire, time_from_wire, time_to_wire

REASON_MAX_LENGTH = 2000


class AppointmentRecord(WireModel):
    """An appointment as returned by ``/citas/``."""

    id: int
    pet_id: int = Field(..., alias="mascota_id")
    veterinarian_id: int = Field(
        ...,
        alias="veterinario_id",
        validation_alias=AliasChoices("veterinario_id", "usuario_id"),
    )
    scheduled_date: date = Field(
        ..., alias="fecha", validation_alias=AliasChoices("fecha", "fechaCita")
    )
    scheduled_time: time = Field(
        ..., alias="hora", validation_alias=AliasChoices("hora", "horaCita")
    )
    reason: str = Field("", alias="motivo")
    status: AppointmentStatus = Field(AppointmentStatus.SCHEDULED, alias="estado")

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return date_from_wire(v)

    @field_validator("scheduled_time", mode="before")
    @classmethod
    def parse_time(cls, v: Any) -> Any:
        return time_from_wire(v)

    @field_validator("reason", mode="before")
    @classmethod
    def none_reason_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_serializer("scheduled_date", when_used="json")
    def serialize_date(self, v: date) -> str:
        return date_to_wire(v)

    @field_serializer("scheduled_time", when_used="json")
    def serialize_time(self, v: time) -> str:
        return time_to_wire(v)

    def to_model(self) -> Appointment:
        return Appointment(**self.model_dump())


class AppointmentCreate(WireModel):
    """Booking body sent to ``POST /citas/``."""

    pet_id: int = Field(..., alias="mascota_id", gt=0)
    veterinarian_id: int = Field(..., alias="veterinario_id", gt=0)
    scheduled_date: date = Field(..., alias="fecha")
    scheduled_time: time = Field(..., alias="hora")
    reason: str = Field(
        ..., alias="motivo", min_length=1, max_length=REASON_MAX_LENGTH
    )
    status: AppointmentStatus = Field(AppointmentStatus.SCHEDULED, alias="estado")

    @field_validator("status")
    @classmethod
    def validate_initial_status(cls, v: AppointmentStatus) -> AppointmentStatus:
        """New appointments always start scheduled."""
        if v != AppointmentStatus.SCHEDULED:
            raise ValueError("New appointments must be created as 'Agendada'")
        return v

    @field_serializer("scheduled_date", when_used="json")
    def serialize_date(self, v: date) -> str:
        return date_to_wire(v)

    @field_serializer("scheduled_time", when_used="json")
    def serialize_time(self, v: time) -> str:
        return time_to_wire(v)

    @classmethod
    def from_model(cls, appointment: Appointment) -> "AppointmentCreate":
        """
        Raises:
            SchemaValidationException: If the appointment breaks a wire limit
        """
        return cls.parse(
            dict(
                pet_id=appointment.pet_id,
                veterinarian_id=appointment.veterinarian_id,
                scheduled_date=appointment.scheduled_date,
                scheduled_time=appointment.scheduled_time,
                reason=appointment.reason,
                status=appointment.status,
            )
        )


class AppointmentStatusUpdate(WireModel):
    """Body of ``PATCH /citas/{id}/``."""

    status: AppointmentStatus = Field(..., alias="estado")


class SlotAvailability(WireModel):
    """One entry of ``/citas/horarios-disponibles/``."""

    slot_date: date = Field(..., alias="fecha")
    slot_time: time = Field(..., alias="hora")
    available: bool = Field(..., alias="disponible")

    @field_validator("slot_date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return date_from_wire(v)

    @field_validator("slot_time", mode="before")
    @classmethod
    def parse_time(cls, v: Any) -> Any:
        return time_from_wire(v)

    @field_serializer("slot_date", when_used="json")
    def serialize_date(self, v: date) -> str:
        return date_to_wire(v)

    @field_serializer("slot_time", when_used="json")
    def serialize_time(self, v: time) -> str:
        return time_to_wire(v)


class SlotCheck(WireModel):
    """Answer of ``/citas/validar-horario/``."""

    available: bool = Field(..., alias="disponible")
    reason: Optional[str] = Field(None, alias="razon")

"""
Treatment Pydantic schemas for the backend wire format (``/tratamientos/``).
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import Field, field_serializer, field_validator, model_validator

from ..models.treatment import Treatment, TreatmentKind, TreatmentStatus
from .base import WireModel, date_from_wire, date_to_wire, decimal_from_wire, money_to_wire


class TreatmentRecord(WireModel):
    """A treatment as returned by ``/tratamientos/``."""

    id: int
    pet_id: int = Field(..., alias="mascota_id")
    veterinarian_id: int = Field(..., alias="veterinario_id")
    name: str = Field(..., alias="nombre")
    description: str = Field("", alias="descripcion")
    kind: TreatmentKind = Field(TreatmentKind.OTHER, alias="tipo")
    start_date: date = Field(..., alias="fecha_inicio")
    end_date: Optional[date] = Field(None, alias="fecha_fin")
    dose: Optional[str] = Field(None, alias="dosis")
    frequency: Optional[str] = Field(None, alias="frecuencia")
    cost: Decimal = Field(Decimal("0"), alias="costo", ge=0)
    status: TreatmentStatus = Field(TreatmentStatus.ACTIVE, alias="estado")
    notes: Optional[str] = Field(None, alias="observaciones")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return date_from_wire(v)

    @field_validator("cost", mode="before")
    @classmethod
    def parse_cost(cls, v: Any) -> Any:
        return decimal_from_wire(v)

    @field_validator("description", mode="before")
    @classmethod
    def none_text_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("dose", "frequency", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_serializer("start_date", "end_date", when_used="json")
    def serialize_dates(self, v: Optional[date]) -> Optional[str]:
        return date_to_wire(v)

    @field_serializer("cost", when_used="json")
    def serialize_cost(self, v: Decimal) -> Optional[str]:
        return money_to_wire(v)

    def to_model(self) -> Treatment:
        return Treatment(**self.model_dump())


class TreatmentCreate(WireModel):
    """
    Form data for prescribing a treatment.

    Pet, veterinarian, name, description, type, start date, cost and status
    are required; the end date, dose, frequency and notes are optional and
    left out of the body when blank.
    """

    pet_id: int = Field(..., alias="mascota_id", gt=0)
    veterinarian_id: int = Field(..., alias="veterinario_id", gt=0)
    name: str = Field(..., alias="nombre", min_length=1, max_length=200)
    description: str = Field(..., alias="descripcion", min_length=1)
    kind: TreatmentKind = Field(TreatmentKind.MEDICATION, alias="tipo")
    start_date: date = Field(..., alias="fecha_inicio")
    end_date: Optional[date] = Field(None, alias="fecha_fin")
    dose: Optional[str] = Field(None, alias="dosis", max_length=100)
    frequency: Optional[str] = Field(None, alias="frecuencia", max_length=100)
    cost: Decimal = Field(Decimal("0"), alias="costo", ge=0)
    status: TreatmentStatus = Field(TreatmentStatus.ACTIVE, alias="estado")
    notes: Optional[str] = Field(None, alias="observaciones")

    @field_validator("end_date", "dose", "frequency", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("cost", mode="before")
    @classmethod
    def parse_cost(cls, v: Any) -> Any:
        return decimal_from_wire(v)

    @field_validator("cost")
    @classmethod
    def cost_is_finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("El costo debe ser un número finito")
        return v

    @model_validator(mode="after")
    def validate_dates(self) -> "TreatmentCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("La fecha de fin no puede ser anterior a la de inicio")
        return self

    @field_serializer("start_date", "end_date", when_used="json")
    def serialize_dates(self, v: Optional[date]) -> Optional[str]:
        return date_to_wire(v)

    @field_serializer("cost", when_used="json")
    def serialize_cost(self, v: Decimal) -> Optional[str]:
        return money_to_wire(v)


class TreatmentUpdate(TreatmentCreate):
    """Form data for editing a treatment; same fields as creation."""

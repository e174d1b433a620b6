"""
Consultation Pydantic schemas for the backend wire format.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_serializer, field_validator

from ..models.consultation import Consultation, ConsultationStatus
from .base import WireModel, date_from_wire, date_to_wire, decimal_from_wire, money_to_wire


class ConsultationRecord(WireModel):
    """A consultation as returned by ``/consultas/``."""

    id: int
    pet_id: int = Field(..., alias="mascota_id")
    veterinarian_id: int = Field(..., alias="veterinario_id")
    consulted_on: date = Field(
        ...,
        alias="fecha_consulta",
        validation_alias=AliasChoices("fecha_consulta", "fecha"),
    )
    reason: str = Field("", alias="motivo")
    diagnosis: str = Field("", alias="diagnostico")
    treatment: str = Field("", alias="tratamiento")
    medications: Optional[str] = Field(None, alias="medicamentos")
    observations: Optional[str] = Field(None, alias="observaciones")
    cost: Decimal = Field(Decimal("0"), alias="costo", ge=0)
    weight_kg: Optional[Decimal] = Field(None, alias="peso")
    temperature_c: Optional[Decimal] = Field(None, alias="temperatura")
    status: ConsultationStatus = Field(ConsultationStatus.COMPLETED, alias="estado")

    @field_validator("consulted_on", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return date_from_wire(v)

    @field_validator("cost", "weight_kg", "temperature_c", mode="before")
    @classmethod
    def parse_decimals(cls, v: Any) -> Any:
        return decimal_from_wire(v)

    @field_validator("reason", "diagnosis", "treatment", mode="before")
    @classmethod
    def none_text_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_serializer("consulted_on", when_used="json")
    def serialize_date(self, v: date) -> str:
        return date_to_wire(v)

    @field_serializer("cost", when_used="json")
    def serialize_cost(self, v: Decimal) -> Optional[str]:
        return money_to_wire(v)

    def to_model(self) -> Consultation:
        return Consultation(**self.model_dump())


class ConsultationCreate(WireModel):
    """Form data for recording a consultation."""

    pet_id: int = Field(..., alias="mascota_id", gt=0)
    veterinarian_id: int = Field(..., alias="veterinario_id", gt=0)
    consulted_on: date = Field(..., alias="fecha_consulta")
    reason: str = Field(..., alias="motivo", min_length=1)
    diagnosis: str = Field(..., alias="diagnostico", min_length=1)
    treatment: str = Field(..., alias="tratamiento", min_length=1)
    medications: Optional[str] = Field(None, alias="medicamentos")
    observations: Optional[str] = Field(None, alias="observaciones")
    cost: Decimal = Field(..., alias="costo", ge=0)
    weight_kg: Optional[Decimal] = Field(None, alias="peso", gt=0)
    temperature_c: Optional[Decimal] = Field(None, alias="temperatura", gt=0)
    status: ConsultationStatus = Field(ConsultationStatus.COMPLETED, alias="estado")

    @field_validator("cost", "weight_kg", "temperature_c", mode="before")
    @classmethod
    def parse_decimals(cls, v: Any) -> Any:
        return decimal_from_wire(v)

    @field_validator("cost")
    @classmethod
    def cost_is_finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("El costo debe ser un número finito")
        return v

    @field_serializer("consulted_on", when_used="json")
    def serialize_date(self, v: date) -> str:
        return date_to_wire(v)

    @field_serializer("cost", when_used="json")
    def serialize_cost(self, v: Decimal) -> Optional[str]:
        return money_to_wire(v)

    @field_serializer("weight_kg", "temperature_c", when_used="json")
    def serialize_measurement(self, v: Optional[Decimal]) -> Optional[str]:
        return str(v) if v is not None else None

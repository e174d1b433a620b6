"""
Pet Pydantic schemas for the backend wire format.
"""

from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator

from ..models.pet import Pet, PetSex, PetStatus
from .base import WireModel


class PetRecord(WireModel):
    """A pet as returned by ``/mascotas/mascotas/``."""

    id: int
    name: str = Field(..., alias="nombre")
    species: str = Field(..., alias="especie")
    breed: Optional[str] = Field(None, alias="raza")
    age_years: Optional[int] = Field(None, alias="edad", ge=0)
    sex: Optional[PetSex] = Field(None, alias="sexo")
    owner_id: int = Field(
        ...,
        alias="usuario",
        validation_alias=AliasChoices("usuario", "usuario_id", "cliente_id"),
    )
    status: PetStatus = Field(PetStatus.ACTIVE, alias="estado")
    notes: Optional[str] = Field(None, alias="observaciones")

    @field_validator("owner_id", mode="before")
    @classmethod
    def owner_from_nested(cls, v: Any) -> Any:
        """Some endpoints nest the owner object instead of sending its id."""
        if isinstance(v, dict):
            return v.get("id")
        return v

    @field_validator("sex", "breed", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_model(self) -> Pet:
        return Pet(**self.model_dump())


class PetCreate(WireModel):
    """Form data for registering a pet."""

    name: str = Field(..., alias="nombre", min_length=1, max_length=100)
    species: str = Field(..., alias="especie", min_length=1, max_length=50)
    breed: Optional[str] = Field(None, alias="raza", max_length=100)
    age_years: Optional[int] = Field(None, alias="edad", ge=0, le=60)
    sex: PetSex = Field(..., alias="sexo")
    owner_id: int = Field(..., alias="usuario", gt=0)
    status: PetStatus = Field(PetStatus.ACTIVE, alias="estado")
    notes: Optional[str] = Field(None, alias="observaciones")


class PetUpdate(PetCreate):
    """Form data for editing a pet."""

"""
User and client Pydantic schemas for the backend wire format.

Clients (``/clientes/``) and system users (``/usuarios/``) share one record
schema; client records carry no role and default to ``Cliente``.
"""

from datetime import date
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, EmailStr, Field, field_serializer, field_validator

from ..models.user import User, UserRole, UserStatus
from .base import WireModel, date_from_wire, date_to_wire

MIN_PASSWORD_LENGTH = 6


class UserRecord(WireModel):
    """A client or user as returned by the backend."""

    id: int = Field(..., description="Backend id")
    first_name: str = Field(..., alias="nombre", description="First name")
    last_name: str = Field("", alias="apellido", description="Last name")
    email: Optional[str] = Field(None, alias="correo", description="Login email")
    phone: Optional[str] = Field(None, alias="telefono")
    address: Optional[str] = Field(None, alias="direccion")
    role: UserRole = Field(
        UserRole.CLIENT,
        alias="rol_nombre",
        validation_alias=AliasChoices("rol_nombre", "rol", "role"),
    )
    status: UserStatus = Field(UserStatus.ACTIVE, alias="estado")
    registered_on: Optional[date] = Field(None, alias="fecha_registro")
    pet_count: int = Field(0, alias="mascotas_count", ge=0)
    pet_names: Optional[str] = Field(None, alias="mascotas_names")

    @field_validator("email", "phone", "address", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("registered_on", mode="before")
    @classmethod
    def parse_registered_on(cls, v: Any) -> Any:
        return date_from_wire(v)

    @field_validator("pet_count", mode="before")
    @classmethod
    def none_count_is_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("pet_names", mode="before")
    @classmethod
    def join_pet_names(cls, v: Union[None, str, List[str]]) -> Optional[str]:
        """The backend sends pet names either joined or as a list."""
        if isinstance(v, list):
            names = [str(name).strip() for name in v if str(name).strip()]
            return ", ".join(names) or None
        return v

    @field_serializer("registered_on", when_used="json")
    def serialize_registered_on(self, v: Optional[date]) -> Optional[str]:
        return date_to_wire(v)

    def to_model(self) -> User:
        return User(**self.model_dump())


class ClientCreate(WireModel):
    """Form data for registering a client."""

    first_name: str = Field(..., alias="nombre", min_length=1, max_length=100)
    last_name: str = Field(..., alias="apellido", min_length=1, max_length=100)
    phone: str = Field(..., alias="telefono", min_length=1, max_length=30)
    address: Optional[str] = Field(None, alias="direccion")
    email: Optional[EmailStr] = Field(None, alias="correo")
    status: UserStatus = Field(UserStatus.ACTIVE, alias="estado")

    @field_validator("email", "address", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class ClientUpdate(ClientCreate):
    """Form data for editing a client; same fields as creation."""


class ClientStatusUpdate(WireModel):
    status: UserStatus = Field(..., alias="estado")


class UserCreate(WireModel):
    """Form data for creating a system user."""

    first_name: str = Field(..., alias="nombre", min_length=1, max_length=100)
    last_name: str = Field(..., alias="apellido", min_length=1, max_length=100)
    email: EmailStr = Field(..., alias="correo")
    password: str = Field(
        ..., alias="contrasena", min_length=MIN_PASSWORD_LENGTH, repr=False
    )
    phone: Optional[str] = Field(None, alias="telefono")
    address: Optional[str] = Field(None, alias="direccion")
    role: UserRole = Field(..., alias="rol_nombre")
    status: UserStatus = Field(UserStatus.ACTIVE, alias="estado")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserUpdate(WireModel):
    """
    Form data for editing a system user.

    The password is only sent when the administrator typed a new one.
    """

    first_name: str = Field(..., alias="nombre", min_length=1, max_length=100)
    last_name: str = Field(..., alias="apellido", min_length=1, max_length=100)
    email: EmailStr = Field(..., alias="correo")
    password: Optional[str] = Field(
        None, alias="contrasena", min_length=MIN_PASSWORD_LENGTH, repr=False
    )
    phone: Optional[str] = Field(None, alias="telefono")
    address: Optional[str] = Field(None, alias="direccion")
    role: UserRole = Field(..., alias="rol_nombre")
    status: UserStatus = Field(UserStatus.ACTIVE, alias="estado")

    @field_validator("password", mode="before")
    @classmethod
    def blank_password_is_unchanged(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class DeletionCheck(WireModel):
    """Answer of ``/clientes/{id}/validar-eliminacion/``."""

    allowed: bool = Field(..., alias="puede_eliminar")
    reason: Optional[str] = Field(None, alias="razon")


class DeactivationCheck(WireModel):
    """Answer of ``/clientes/{id}/validar-desactivacion/``."""

    allowed: bool = Field(..., alias="puede_desactivar")
    reason: Optional[str] = Field(None, alias="razon")

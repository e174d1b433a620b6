"""
Authentication Pydantic schemas.
"""

from typing import Any, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from ..models.user import UserRole
from .base import WireModel
from .user import MIN_PASSWORD_LENGTH, UserRecord

PASSWORD_MISMATCH_MESSAGE = "Las contraseñas no coinciden"


class LoginRequest(WireModel):
    """Body of ``POST /auth/login/``."""

    email: str = Field(..., alias="correo", min_length=1)
    password: str = Field(..., alias="contrasena", min_length=1, repr=False)


class LoginResponse(WireModel):
    """Answer of ``POST /auth/login/``."""

    access_token: str = Field(..., min_length=1, repr=False)
    user: UserRecord = Field(..., alias="usuario")


class ClientRegistration(WireModel):
    """
    Body of ``POST /auth/register/``, the self-registration of a pet owner.

    The confirmation is checked locally and never sent. Accounts created this
    way always get the ``Cliente`` role.
    """

    first_name: str = Field(..., alias="nombre", min_length=1, max_length=100)
    last_name: str = Field(..., alias="apellido", min_length=1, max_length=100)
    email: EmailStr = Field(..., alias="correo")
    phone: Optional[str] = Field(None, alias="telefono", max_length=30)
    address: Optional[str] = Field(None, alias="direccion")
    password: str = Field(
        ..., alias="contrasena", min_length=MIN_PASSWORD_LENGTH, repr=False
    )
    password_confirmation: str = Field(
        ..., alias="confirmar_contrasena", repr=False, exclude=True
    )
    role: UserRole = Field(UserRole.CLIENT, alias="rol_nombre")

    @field_validator("phone", "address", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("role")
    @classmethod
    def only_clients(cls, v: UserRole) -> UserRole:
        if v != UserRole.CLIENT:
            raise ValueError("El registro solo crea cuentas de cliente")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "ClientRegistration":
        if self.password != self.password_confirmation:
            raise ValueError(PASSWORD_MISMATCH_MESSAGE)
        return self


class StoredSession(WireModel):
    """Session persisted between application runs."""

    token: str = Field(..., min_length=1, repr=False)
    user: UserRecord = Field(..., alias="usuario")

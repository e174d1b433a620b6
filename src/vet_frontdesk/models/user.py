"""
User model for the vet-frontdesk package.

Clients and clinic staff share one record type: a role separates
administrators, veterinarians and secretaries from pet owners, and a client
may or may not have login credentials.
"""

import enum
from datetime import date
from typing import Optional

from sqlalchemy import Date, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class UserRole(enum.Enum):
    """Enumeration of user roles in the clinic system."""

    ADMINISTRATOR = "Administrador"
    VETERINARIAN = "Veterinario"
    SECRETARY = "Secretaria"
    CLIENT = "Cliente"


class UserStatus(enum.Enum):
    """Enumeration of user account statuses."""

    ACTIVE = "Activo"
    INACTIVE = "Inactivo"
    SUSPENDED = "Suspendido"


STAFF_ROLES = frozenset(
    {UserRole.ADMINISTRATOR, UserRole.VETERINARIAN, UserRole.SECRETARY}
)


class User(BaseModel):
    """
    A client or a member of the clinic staff.

    Pet counts and names are the denormalised summary the backend sends with
    the client list; the authoritative pet data lives in the pets table.
    """

    __tablename__ = "users"

    def __init__(self, **kwargs):
        """Initialize User with default values."""
        if "role" not in kwargs:
            kwargs["role"] = UserRole.CLIENT
        if "status" not in kwargs:
            kwargs["status"] = UserStatus.ACTIVE
        if "pet_count" not in kwargs:
            kwargs["pet_count"] = 0
        super().__init__(**kwargs)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)

    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        comment="Login email; clients without system access have none",
    )

    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole),
        nullable=False,
        default=UserRole.CLIENT,
        index=True,
    )

    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus),
        nullable=False,
        default=UserStatus.ACTIVE,
        index=True,
    )

    registered_on: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    pet_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    pet_names: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation of the User model."""
        return f"<User(id={self.id}, name='{self.full_name}', role='{self.role.value}')>"

    @property
    def full_name(self) -> str:
        """Get the user's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_veterinarian(self) -> bool:
        return self.role == UserRole.VETERINARIAN

    @property
    def has_login(self) -> bool:
        """Clients with an email address can sign in to the system."""
        return bool(self.email and self.email.strip())

    def activate(self) -> None:
        self.status = UserStatus.ACTIVE

    def deactivate(self) -> None:
        self.status = UserStatus.INACTIVE

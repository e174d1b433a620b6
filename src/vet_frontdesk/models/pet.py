"""
Pet model for the vet-frontdesk package.
"""

import enum
from typing import Optional

from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class PetStatus(enum.Enum):
    """Enumeration of pet record statuses."""

    ACTIVE = "Activo"
    INACTIVE = "Inactivo"


class PetSex(enum.Enum):
    """Enumeration of pet sexes as the clinic records them."""

    MALE = "M"
    FEMALE = "H"


class Pet(BaseModel):
    """A pet belonging to exactly one client."""

    __tablename__ = "pets"

    def __init__(self, **kwargs):
        """Initialize Pet with default values."""
        if "status" not in kwargs:
            kwargs["status"] = PetStatus.ACTIVE
        super().__init__(**kwargs)

    owner_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Backend id of the owning client",
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    species: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    breed: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    age_years: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    sex: Mapped[Optional[PetSex]] = mapped_column(Enum(PetSex), nullable=True)

    status: Mapped[PetStatus] = mapped_column(
        Enum(PetStatus),
        nullable=False,
        default=PetStatus.ACTIVE,
        index=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation of the Pet model."""
        return f"<Pet(id={self.id}, name='{self.name}', owner_id={self.owner_id})>"

    @property
    def is_active(self) -> bool:
        return self.status == PetStatus.ACTIVE

    def activate(self) -> None:
        self.status = PetStatus.ACTIVE

    def deactivate(self) -> None:
        self.status = PetStatus.INACTIVE

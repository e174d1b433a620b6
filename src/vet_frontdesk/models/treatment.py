"""
Treatment model for the vet-frontdesk package.

A treatment is a course of care prescribed for a pet by a veterinarian:
medication, therapy, surgery, vaccination or a follow-up control.
"""

import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .types import ExactDecimal


class TreatmentKind(enum.Enum):
    """Enumeration of treatment types."""

    MEDICATION = "Medicamento"
    THERAPY = "Terapia"
    SURGERY = "Cirugía"
    VACCINATION = "Vacunación"
    CONTROL = "Control"
    OTHER = "Otro"


class TreatmentStatus(enum.Enum):
    """Enumeration of treatment statuses."""

    ACTIVE = "Activo"
    COMPLETED = "Completado"
    CANCELLED = "Cancelado"
    PENDING = "Pendiente"


# Dosage frequencies offered by the treatment form
FREQUENCIES = (
    "Una vez al día",
    "Cada 12 horas",
    "Cada 8 horas",
    "Cada 6 horas",
    "Una vez por semana",
    "Cada 15 días",
    "Una vez al mes",
    "Según necesidad",
)


class Treatment(BaseModel):
    """Treatment prescribed for a pet."""

    __tablename__ = "treatments"

    def __init__(self, **kwargs):
        """Initialize Treatment with default values."""
        if "kind" not in kwargs:
            kwargs["kind"] = TreatmentKind.MEDICATION
        if "status" not in kwargs:
            kwargs["status"] = TreatmentStatus.ACTIVE
        if "cost" not in kwargs:
            kwargs["cost"] = Decimal("0")
        super().__init__(**kwargs)

    pet_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    veterinarian_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    kind: Mapped[TreatmentKind] = mapped_column(
        Enum(TreatmentKind), nullable=False, default=TreatmentKind.MEDICATION
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    dose: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    frequency: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    cost: Mapped[Decimal] = mapped_column(
        ExactDecimal, nullable=False, default=Decimal("0")
    )

    status: Mapped[TreatmentStatus] = mapped_column(
        Enum(TreatmentStatus),
        nullable=False,
        default=TreatmentStatus.ACTIVE,
        index=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation of the Treatment model."""
        return (
            f"<Treatment(id={self.id}, pet_id={self.pet_id}, name='{self.name}', "
            f"status='{self.status.value}')>"
        )

    @property
    def is_active(self) -> bool:
        return self.status == TreatmentStatus.ACTIVE

"""
Consultation model for the vet-frontdesk package.

A consultation is the clinical record of a visit. Completed consultations
are the source of invoices.
"""

import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Enum, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .types import ExactDecimal


class ConsultationStatus(enum.Enum):
    """Enumeration of consultation statuses."""

    COMPLETED = "Completada"
    PENDING = "Pendiente"
    CANCELLED = "Cancelada"


class Consultation(BaseModel):
    """Medical consultation of a pet by a veterinarian."""

    __tablename__ = "consultations"

    def __init__(self, **kwargs):
        """Initialize Consultation with default values."""
        if "status" not in kwargs:
            kwargs["status"] = ConsultationStatus.COMPLETED
        if "cost" not in kwargs:
            kwargs["cost"] = Decimal("0")
        super().__init__(**kwargs)

    pet_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    veterinarian_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    consulted_on: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")

    diagnosis: Mapped[str] = mapped_column(Text, nullable=False, default="")

    treatment: Mapped[str] = mapped_column(Text, nullable=False, default="")

    medications: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    observations: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    cost: Mapped[Decimal] = mapped_column(
        ExactDecimal,
        nullable=False,
        default=Decimal("0"),
        comment="Consultation cost; becomes the invoice subtotal",
    )

    weight_kg: Mapped[Optional[Decimal]] = mapped_column(ExactDecimal, nullable=True)

    temperature_c: Mapped[Optional[Decimal]] = mapped_column(
        ExactDecimal, nullable=True
    )

    status: Mapped[ConsultationStatus] = mapped_column(
        Enum(ConsultationStatus),
        nullable=False,
        default=ConsultationStatus.COMPLETED,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation of the Consultation model."""
        return (
            f"<Consultation(id={self.id}, pet_id={self.pet_id}, "
            f"date='{self.consulted_on}', status='{self.status.value}')>"
        )

    @property
    def is_completed(self) -> bool:
        """Only completed consultations can be invoiced."""
        return self.status == ConsultationStatus.COMPLETED

"""
Appointment model for the vet-frontdesk package.

This module contains the Appointment SQLAlchemy model and its status
lifecycle. An appointment is booked on a calendar day at one of the fixed
slot times and is either still scheduled, completed or cancelled.
"""

import enum
from datetime import date, time
from typing import Optional

from sqlalchemy import Date, Enum, Index, Integer, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .lifecycle import Lifecycle


class AppointmentStatus(enum.Enum):
    """Enumeration of appointment statuses."""

    SCHEDULED = "Agendada"
    COMPLETED = "Completada"
    CANCELLED = "Cancelada"


APPOINTMENT_LIFECYCLE: Lifecycle[AppointmentStatus] = Lifecycle(
    entity="la cita",
    initial=AppointmentStatus.SCHEDULED,
    transitions={
        AppointmentStatus.SCHEDULED: {
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
        },
        AppointmentStatus.COMPLETED: set(),
        AppointmentStatus.CANCELLED: set(),
    },
)


class Appointment(BaseModel):
    """
    Appointment booked for a pet with a veterinarian.

    A non-cancelled appointment holds its (date, time) slot; cancelling it
    frees the slot for a new booking.
    """

    __tablename__ = "appointments"

    def __init__(self, **kwargs):
        """Initialize Appointment with default values."""
        if "status" not in kwargs:
            kwargs["status"] = APPOINTMENT_LIFECYCLE.initial
        super().__init__(**kwargs)

    pet_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Backend id of the pet",
    )

    veterinarian_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Backend id of the assigned veterinarian",
    )

    scheduled_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Calendar day of the appointment",
    )

    scheduled_time: Mapped[time] = mapped_column(
        Time,
        nullable=False,
        comment="Slot time of day",
    )

    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
        index=True,
    )

    __table_args__ = (
        Index("idx_appointments_slot", "scheduled_date", "scheduled_time"),
    )

    def __repr__(self) -> str:
        """String representation of the Appointment model."""
        return (
            f"<Appointment(id={self.id}, pet_id={self.pet_id}, "
            f"date='{self.scheduled_date}', time='{self.scheduled_time}', "
            f"status='{self.status.value}')>"
        )

    @property
    def holds_slot(self) -> bool:
        """Every appointment except a cancelled one keeps its slot taken."""
        return self.status != AppointmentStatus.CANCELLED

    @property
    def is_scheduled(self) -> bool:
        return self.status == AppointmentStatus.SCHEDULED

    @property
    def is_completed(self) -> bool:
        return self.status == AppointmentStatus.COMPLETED

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED

    def occupies(
        self, day: date, slot: time, veterinarian_id: Optional[int] = None
    ) -> bool:
        """
        Check whether this appointment blocks ``slot`` on ``day``.

        Args:
            day: Calendar day being booked
            slot: Slot time being booked
            veterinarian_id: Only count appointments of this veterinarian;
                None means the whole clinic shares one schedule
        """
        if not self.holds_slot:
            return False
        if veterinarian_id is not None and self.veterinarian_id != veterinarian_id:
            return False
        return self.scheduled_date == day and self.scheduled_time == slot

    def can_transition_to(self, status: AppointmentStatus) -> bool:
        return APPOINTMENT_LIFECYCLE.can_transition(self.status, status)

    def transition_to(self, status: AppointmentStatus) -> None:
        """
        Move the appointment to a new status.

        Raises:
            IllegalTransitionError: If the move is not allowed
        """
        APPOINTMENT_LIFECYCLE.check(self.status, status)
        self.status = status

    def complete(self) -> None:
        self.transition_to(AppointmentStatus.COMPLETED)

    def cancel(self) -> None:
        self.transition_to(AppointmentStatus.CANCELLED)

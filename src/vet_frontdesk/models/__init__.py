"""
SQLAlchemy models for the local entity store.

The store keeps per-session copies of the records owned by the clinic
backend, so primary keys are the backend's ids.
"""

from .appointment import APPOINTMENT_LIFECYCLE, Appointment, AppointmentStatus
from .base import Base, BaseModel
from .consultation import Consultation, ConsultationStatus
from .invoice import (
    INVOICE_LIFECYCLE,
    Invoice,
    InvoiceStatus,
    PaymentMethod,
    append_note,
)
from .lifecycle import Lifecycle
from .pet import Pet, PetSex, PetStatus
from .treatment import FREQUENCIES, Treatment, TreatmentKind, TreatmentStatus
from .types import ExactDecimal
from .user import STAFF_ROLES, User, UserRole, UserStatus

__all__ = [
    # Base classes
    "Base",
    "BaseModel",
    "ExactDecimal",
    "Lifecycle",
    # Models
    "User",
    "Pet",
    "Appointment",
    "Consultation",
    "Invoice",
    "Treatment",
    # Enums
    "UserRole",
    "UserStatus",
    "PetStatus",
    "PetSex",
    "AppointmentStatus",
    "ConsultationStatus",
    "InvoiceStatus",
    "PaymentMethod",
    "TreatmentKind",
    "TreatmentStatus",
    # Lifecycles and helpers
    "STAFF_ROLES",
    "APPOINTMENT_LIFECYCLE",
    "INVOICE_LIFECYCLE",
    "append_note",
    "FREQUENCIES",
]

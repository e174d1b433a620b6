"""
Pydantic schemas for the clinic backend wire format and the list views.
"""

from .appointment import (
    AppointmentCreate,
    AppointmentRecord,
    AppointmentStatusUpdate,
    SlotAvailability,
    SlotCheck,
)
from .auth import ClientRegistration, LoginRequest, LoginResponse, StoredSession
from .base import WireModel, money_to_wire
from .consultation import ConsultationCreate, ConsultationRecord
from .invoice import (
    BillingStatistics,
    InvoiceCreate,
    InvoiceRecord,
    InvoiceVoid,
    MonthlyTotal,
    PaymentRegistration,
    PdfLink,
    VoidCheck,
)
from .pet import PetCreate, PetRecord, PetUpdate
from .treatment import TreatmentCreate, TreatmentRecord, TreatmentUpdate
from .user import (
    ClientCreate,
    ClientStatusUpdate,
    ClientUpdate,
    DeactivationCheck,
    DeletionCheck,
    UserCreate,
    UserRecord,
    UserUpdate,
)
from .views import (
    MISSING,
    AppointmentView,
    BillingSummary,
    ConsultationView,
    InvoiceView,
    PendingInvoiceView,
    TreatmentSummary,
    TreatmentView,
)

__all__ = [
    # Base
    "WireModel",
    "money_to_wire",
    # Users and clients
    "UserRecord",
    "ClientCreate",
    "ClientUpdate",
    "ClientStatusUpdate",
    "UserCreate",
    "UserUpdate",
    "DeletionCheck",
    "DeactivationCheck",
    # Pets
    "PetRecord",
    "PetCreate",
    "PetUpdate",
    # Appointments
    "AppointmentRecord",
    "AppointmentCreate",
    "AppointmentStatusUpdate",
    "SlotAvailability",
    "SlotCheck",
    # Consultations
    "ConsultationRecord",
    "ConsultationCreate",
    # Invoices
    "InvoiceRecord",
    "InvoiceCreate",
    "PaymentRegistration",
    "InvoiceVoid",
    "VoidCheck",
    "MonthlyTotal",
    "BillingStatistics",
    "PdfLink",
    # Treatments
    "TreatmentRecord",
    "TreatmentCreate",
    "TreatmentUpdate",
    # Auth
    "LoginRequest",
    "LoginResponse",
    "ClientRegistration",
    "StoredSession",
    # Views
    "MISSING",
    "AppointmentView",
    "ConsultationView",
    "InvoiceView",
    "PendingInvoiceView",
    "TreatmentView",
    "TreatmentSummary",
    "BillingSummary",
]

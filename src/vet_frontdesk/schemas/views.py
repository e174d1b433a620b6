"""
Denormalised view records for the list screens.

Each view is built once per query by joining the loaded collections, so
screens never look names up across lists themselves. A reference that is
not loaded shows as ``N/A``.
"""

from datetime import date, time
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.appointment import AppointmentStatus
from ..models.consultation import ConsultationStatus
from ..models.invoice import InvoiceStatus, PaymentMethod
from ..models.treatment import TreatmentKind, TreatmentStatus

MISSING = "N/A"


class ViewRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


class AppointmentView(ViewRecord):
    """An appointment with pet, owner and veterinarian names."""

    id: int
    scheduled_date: date
    scheduled_time: time
    reason: str
    status: AppointmentStatus
    pet_id: int
    pet_name: str = MISSING
    owner_name: str = MISSING
    veterinarian_id: int
    veterinarian_name: str = MISSING


class ConsultationView(ViewRecord):
    """A consultation with pet, species, owner and veterinarian names."""

    id: int
    consulted_on: date
    reason: str
    diagnosis: str
    treatment: str
    cost: Decimal
    status: ConsultationStatus
    pet_id: int
    pet_name: str = MISSING
    species: str = MISSING
    owner_id: Optional[int] = None
    owner_name: str = MISSING
    veterinarian_id: int
    veterinarian_name: str = MISSING


class InvoiceView(ViewRecord):
    """An invoice with the client name and the status to display."""

    id: int
    invoice_number: str
    issue_date: date
    due_date: date
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: InvoiceStatus
    display_status: InvoiceStatus
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[date] = None
    client_id: int
    client_name: str = MISSING
    consultation_id: int


class PendingInvoiceView(ViewRecord):
    """A completed consultation that has no invoice yet, with its totals."""

    consultation: ConsultationView
    subtotal: Decimal
    tax: Decimal
    total: Decimal


class BillingSummary(ViewRecord):
    """Billing figures computed from the loaded invoices."""

    total_invoiced: Decimal = Field(Decimal("0.00"))
    total_paid: Decimal = Field(Decimal("0.00"))
    total_pending: Decimal = Field(Decimal("0.00"))
    overdue_count: int = 0
    invoice_count: int = 0


class TreatmentView(ViewRecord):
    """A treatment with pet and veterinarian names."""

    id: int
    name: str
    description: str
    kind: TreatmentKind
    status: TreatmentStatus
    start_date: date
    end_date: Optional[date] = None
    dose: Optional[str] = None
    frequency: Optional[str] = None
    cost: Decimal
    pet_id: int
    pet_name: str = MISSING
    veterinarian_id: int
    veterinarian_name: str = MISSING


class TreatmentSummary(ViewRecord):
    """Treatment counts per status and their summed cost."""

    active_count: int = 0
    completed_count: int = 0
    pending_count: int = 0
    total_cost: Decimal = Field(Decimal("0.00"))

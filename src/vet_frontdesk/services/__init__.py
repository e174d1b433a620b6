"""
Front-desk workflows and the rules behind them.
"""

from .billing import (
    PAYMENT_TERM_DAYS,
    TAX_RATE,
    BillingService,
    InvoiceTotals,
    build_invoice,
    compute_totals,
    due_date_for,
    format_money,
    is_overdue,
    next_invoice_number,
)
from .booking import BookingService, prepare_booking
from .clients import ClientService, ensure_can_deactivate, ensure_can_delete
from .slots import (
    WEEKDAY_SLOTS,
    WEEKEND_SLOTS,
    available_slots,
    is_template_slot,
    slot_availability,
    slot_template,
    taken_slots,
    week_overview,
)
from .treatments import TreatmentService
from .users import UserService

__all__ = [
    # Slots
    "WEEKDAY_SLOTS",
    "WEEKEND_SLOTS",
    "slot_template",
    "is_template_slot",
    "taken_slots",
    "available_slots",
    "slot_availability",
    "week_overview",
    # Booking
    "prepare_booking",
    "BookingService",
    # Billing
    "TAX_RATE",
    "PAYMENT_TERM_DAYS",
    "InvoiceTotals",
    "compute_totals",
    "due_date_for",
    "is_overdue",
    "format_money",
    "next_invoice_number",
    "build_invoice",
    "BillingService",
    # Clients
    "ensure_can_deactivate",
    "ensure_can_delete",
    "ClientService",
    # Users
    "UserService",
    # Treatments
    "TreatmentService",
]

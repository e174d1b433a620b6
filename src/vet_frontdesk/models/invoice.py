"""
Invoice model for the vet-frontdesk package.

This module contains the Invoice SQLAlchemy model, payment methods and the
invoice status lifecycle. Overdue is never stored by this client: it is
derived from the due date of a pending invoice.
"""

import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .lifecycle import Lifecycle
from .types import ExactDecimal


class InvoiceStatus(enum.Enum):
    """Enumeration of invoice statuses."""

    PENDING = "Pendiente"
    PAID = "Pagada"
    OVERDUE = "Vencida"
    VOIDED = "Anulada"


class PaymentMethod(enum.Enum):
    """Enumeration of accepted payment methods."""

    CASH = "Efectivo"
    CARD = "Tarjeta"
    TRANSFER = "Transferencia"
    CHECK = "Cheque"


# A backend may persist Vencida; it settles the same way as Pendiente.
INVOICE_LIFECYCLE: Lifecycle[InvoiceStatus] = Lifecycle(
    entity="la factura",
    initial=InvoiceStatus.PENDING,
    transitions={
        InvoiceStatus.PENDING: {InvoiceStatus.PAID, InvoiceStatus.VOIDED},
        InvoiceStatus.OVERDUE: {InvoiceStatus.PAID, InvoiceStatus.VOIDED},
        InvoiceStatus.PAID: set(),
        InvoiceStatus.VOIDED: set(),
    },
)


def append_note(existing: Optional[str], note: Optional[str]) -> Optional[str]:
    """Append a note on its own line, keeping earlier observations."""
    if not note or not note.strip():
        return existing
    if not existing:
        return note.strip()
    return f"{existing}\n{note.strip()}"


class Invoice(BaseModel):
    """
    Invoice generated from exactly one completed consultation.

    Totals are exact decimals: ``total == subtotal + tax``.
    """

    __tablename__ = "invoices"

    def __init__(self, **kwargs):
        """Initialize Invoice with default values."""
        if "status" not in kwargs:
            kwargs["status"] = INVOICE_LIFECYCLE.initial
        super().__init__(**kwargs)

    client_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    consultation_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Source consultation; one invoice per consultation",
    )

    invoice_number: Mapped[str] = mapped_column(String(30), nullable=False, index=True)

    issue_date: Mapped[date] = mapped_column(Date, nullable=False)

    due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    subtotal: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)

    tax: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)

    total: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)

    status: Mapped[InvoiceStatus] = mapped_column(
        Enum(InvoiceStatus),
        nullable=False,
        default=InvoiceStatus.PENDING,
        index=True,
    )

    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        Enum(PaymentMethod), nullable=True
    )

    payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation of the Invoice model."""
        return (
            f"<Invoice(id={self.id}, number='{self.invoice_number}', "
            f"total={self.total}, status='{self.status.value}')>"
        )

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID

    @property
    def is_voided(self) -> bool:
        return self.status == InvoiceStatus.VOIDED

    @property
    def is_open(self) -> bool:
        """Pending (or backend-marked overdue) invoices still await payment."""
        return self.status in (InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)

    def is_overdue(self, today: date) -> bool:
        """Check whether an unpaid invoice is past its due date."""
        return self.is_open and self.due_date < today

    def display_status(self, today: date) -> InvoiceStatus:
        """Status to show, with Vencida derived for open invoices past due."""
        if self.is_overdue(today):
            return InvoiceStatus.OVERDUE
        return self.status

    def can_transition_to(self, status: InvoiceStatus) -> bool:
        return INVOICE_LIFECYCLE.can_transition(self.status, status)

    def register_payment(
        self, method: PaymentMethod, paid_on: date, note: Optional[str] = None
    ) -> None:
        """
        Mark the invoice paid.

        Raises:
            IllegalTransitionError: If the invoice is already paid or voided
        """
        INVOICE_LIFECYCLE.check(self.status, InvoiceStatus.PAID)
        self.status = InvoiceStatus.PAID
        self.payment_method = method
        self.payment_date = paid_on
        self.notes = append_note(self.notes, note)

    def void(self, reason: Optional[str] = None) -> None:
        """
        Void the invoice, keeping the reason in its notes.

        Raises:
            IllegalTransitionError: If the invoice is already paid or voided
        """
        INVOICE_LIFECYCLE.check(self.status, InvoiceStatus.VOIDED)
        self.status = InvoiceStatus.VOIDED
        self.notes = append_note(
            self.notes, f"Anulada: {reason.strip()}" if reason and reason.strip() else None
        )

"""
Invoice totals and invoice workflows.

Money is handled as ``Decimal`` end to end. ``compute_totals`` keeps the
exact product of the cost and the tax rate; amounts are rounded half-up to
cents only when an invoice is built or a figure is displayed.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, List, Optional, Union

from ..api.consultations import ConsultationsApi
from ..api.invoices import InvoicesApi
from ..api.sequencing import RequestSequencer
from ..auth import AuthSession
from ..database.store import EntityStore
from ..exceptions import ConflictException, InvoiceAlreadyExistsError, ValidationException
from ..models.consultation import Consultation
from ..models.invoice import INVOICE_LIFECYCLE, Invoice, InvoiceStatus, PaymentMethod
from ..models.pet import Pet
from ..permissions import Permission, require_permission
from ..schemas.invoice import InvoiceCreate, InvoiceVoid, PaymentRegistration
from ..schemas.views import BillingSummary, PendingInvoiceView
from ..utils.datetime_utils import today as current_day
from ..utils.validation import parse_amount

logger = logging.getLogger(__name__)

TAX_RATE = Decimal("0.13")
PAYMENT_TERM_DAYS = 30
CENTS = Decimal("0.01")
INVOICE_PREFIX = "FAC"

_INVOICE_NUMBER = re.compile(r"^FAC-(\d{8})-(\d+)$")


@dataclass(frozen=True)
class InvoiceTotals:
    """Subtotal, tax and total of one invoice."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def rounded(self) -> "InvoiceTotals":
        """
        Totals rounded half-up to cents.

        The total is recomputed from the rounded parts so that
        ``total == subtotal + tax`` still holds.
        """
        subtotal = self.subtotal.quantize(CENTS, rounding=ROUND_HALF_UP)
        tax = self.tax.quantize(CENTS, rounding=ROUND_HALF_UP)
        return InvoiceTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


def compute_totals(cost: Union[Decimal, int, str, float, None]) -> InvoiceTotals:
    """
    Derive invoice totals from a consultation cost.

    Args:
        cost: Consultation cost; floats are read through their decimal text

    Returns:
        Exact totals: ``subtotal = cost``, ``tax = cost * 0.13``,
        ``total = subtotal + tax``

    Raises:
        InvalidAmountError: If the cost is missing, negative or not finite
    """
    subtotal = parse_amount(cost)
    tax = subtotal * TAX_RATE
    return InvoiceTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


def due_date_for(issue_date: date) -> date:
    return issue_date + timedelta(days=PAYMENT_TERM_DAYS)


def is_overdue(invoice: Invoice, today: date) -> bool:
    """An open invoice whose due date has passed."""
    return invoice.is_overdue(today)


def format_money(amount: Optional[Decimal]) -> str:
    """Display an amount with two decimals, e.g. ``$226.00``."""
    if amount is None:
        return "$0.00"
    return f"${amount.quantize(CENTS, rounding=ROUND_HALF_UP)}"


def next_invoice_number(issue_date: date, invoices: Iterable[Invoice]) -> str:
    """
    Next free invoice number for ``issue_date``.

    Numbers look like ``FAC-20250115-0003``: the issue date and a sequence
    one higher than the highest already used for that date.
    """
    day = issue_date.strftime("%Y%m%d")
    highest = 0
    for invoice in invoices:
        match = _INVOICE_NUMBER.match(invoice.invoice_number or "")
        if match and match.group(1) == day:
            highest = max(highest, int(match.group(2)))
    return f"{INVOICE_PREFIX}-{day}-{highest + 1:04d}"


def build_invoice(
    consultation: Consultation,
    client_id: Optional[int],
    issue_date: date,
    existing_invoices: Iterable[Invoice],
) -> Invoice:
    """
    Build the invoice for a completed consultation.

    Args:
        consultation: Source consultation
        client_id: Client billed, normally the pet owner
        issue_date: Issue date; the due date is 30 days later
        existing_invoices: Invoices currently known, used for the
            one-invoice-per-consultation rule and the number sequence

    Returns:
        A new, unsaved invoice in ``Pendiente`` status

    Raises:
        ValidationException: If no client is given
        ConflictException: If the consultation is not completed
        InvoiceAlreadyExistsError: If an invoice already references the consultation
        InvalidAmountError: If the consultation cost is negative
    """
    existing_invoices = list(existing_invoices)

    if client_id is None:
        raise ValidationException(
            message="La consulta no tiene un cliente asociado", field="cliente_id"
        )
    if not consultation.is_completed:
        raise ConflictException(
            message="Solo se pueden facturar consultas completadas",
            rule_name="consultation_not_completed",
            context={
                "consultation_id": consultation.id,
                "status": consultation.status.value,
            },
        )

    for invoice in existing_invoices:
        if invoice.consultation_id == consultation.id:
            raise InvoiceAlreadyExistsError(consultation.id, invoice.invoice_number)

    totals = compute_totals(consultation.cost).rounded()
    return Invoice(
        client_id=client_id,
        consultation_id=consultation.id,
        invoice_number=next_invoice_number(issue_date, existing_invoices),
        issue_date=issue_date,
        due_date=due_date_for(issue_date),
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        status=INVOICE_LIFECYCLE.initial,
    )


class BillingService:
    """Invoice workflows over the backend and the entity store."""

    def __init__(
        self,
        api: InvoicesApi,
        store: EntityStore,
        session: AuthSession,
        consultations_api: Optional[ConsultationsApi] = None,
        clock: Callable[[], date] = current_day,
        sequencer: Optional[RequestSequencer] = None,
    ):
        self.api = api
        self.store = store
        self.session = session
        self.consultations_api = consultations_api
        self.clock = clock
        self.sequencer = sequencer or RequestSequencer()

    async def refresh(self) -> List[Invoice]:
        """Reload every invoice from the backend into the store."""
        applied, records = await self.sequencer.run("invoices", self.api.list())
        if applied:
            await self.store.replace_invoices(record.to_model() for record in records)
        return await self.store.list_invoices()

    async def refresh_consultations(self) -> List[Consultation]:
        if self.consultations_api is None:
            return await self.store.list_consultations()
        applied, records = await self.sequencer.run(
            "consultations", self.consultations_api.list()
        )
        if applied:
            await self.store.replace_consultations(
                record.to_model() for record in records
            )
        return await self.store.list_consultations()

    async def pending_invoice_views(self) -> List[PendingInvoiceView]:
        """Completed consultations without an invoice, with the totals to bill."""
        awaiting = await self.store.consultations_awaiting_invoice()
        views = await self.store.consultation_views(only=[c.id for c in awaiting])
        pending = []
        for view in views:
            totals = compute_totals(view.cost).rounded()
            pending.append(
                PendingInvoiceView(
                    consultation=view,
                    subtotal=totals.subtotal,
                    tax=totals.tax,
                    total=totals.total,
                )
            )
        return pending

    async def _client_for(self, consultation: Consultation) -> Optional[int]:
        pet = await self.store.get(Pet, consultation.pet_id)
        return pet.owner_id if pet is not None else None

    async def generate_from_consultation(
        self,
        consultation_id: int,
        client_id: Optional[int] = None,
        issue_date: Optional[date] = None,
    ) -> Invoice:
        """
        Create the invoice of a completed consultation.

        Args:
            consultation_id: Consultation to bill
            client_id: Client billed; defaults to the owner of the consultation's pet
            issue_date: Defaults to today

        Raises:
            NotAuthorizedError: Before any request, if the role may not bill
            ValidationException: If the consultation is not loaded
            InvoiceAlreadyExistsError: If the consultation is already invoiced
            ConflictException: If the backend rejects the invoice
        """
        require_permission(self.session, Permission.MANAGE_INVOICES)
        consultation = await self.store.get(Consultation, consultation_id)
        if consultation is None:
            raise ValidationException(
                message="La consulta seleccionada no existe",
                field="consulta_id",
                value=consultation_id,
            )
        if client_id is None:
            client_id = await self._client_for(consultation)

        invoice = build_invoice(
            consultation,
            client_id,
            issue_date or self.clock(),
            await self.store.list_invoices(),
        )
        record = await self.api.create(InvoiceCreate.from_model(invoice))
        logger.info(
            f"Generated invoice {record.invoice_number} for consultation {consultation_id}"
        )
        await self.refresh()
        return record.to_model()

    async def _current(self, invoice_id: int) -> Invoice:
        invoice = await self.store.get(Invoice, invoice_id)
        if invoice is None:
            invoice = (await self.api.get(invoice_id)).to_model()
        return invoice

    async def register_payment(
        self,
        invoice_id: int,
        method: Optional[PaymentMethod],
        note: Optional[str] = None,
    ) -> Invoice:
        """
        Mark an invoice paid.

        Raises:
            ValidationException: If no payment method is given
            IllegalTransitionError: If the invoice is already paid or voided
        """
        require_permission(self.session, Permission.MANAGE_INVOICES)
        if method is None:
            raise ValidationException(
                message="Debe seleccionar un método de pago", field="metodo_pago"
            )
        invoice = await self._current(invoice_id)
        INVOICE_LIFECYCLE.check(invoice.status, InvoiceStatus.PAID)

        record = await self.api.register_payment(
            invoice_id, PaymentRegistration(payment_method=method, notes=note)
        )
        logger.info(f"Registered {method.value} payment for invoice {invoice_id}")
        await self.refresh()
        return record.to_model()

    async def void(self, invoice_id: int, reason: Optional[str] = None) -> Invoice:
        """
        Void an invoice.

        Raises:
            IllegalTransitionError: If the invoice is already paid or voided
        """
        require_permission(self.session, Permission.MANAGE_INVOICES)
        invoice = await self._current(invoice_id)
        INVOICE_LIFECYCLE.check(invoice.status, InvoiceStatus.VOIDED)

        record = await self.api.void(invoice_id, InvoiceVoid(reason=reason))
        logger.info(f"Voided invoice {invoice_id}")
        await self.refresh()
        return record.to_model()

    async def summary(self, today: Optional[date] = None) -> BillingSummary:
        return await self.store.billing_summary(today or self.clock())

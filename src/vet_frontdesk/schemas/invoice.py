"""
Invoice Pydantic schemas for the backend wire format.

This module contains the invoice record, the generation body, the payment
and void bodies and the backend billing statistics. Money always travels as
a two-decimal string when sent and is parsed into exact ``Decimal`` values
when received.
"""

from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import Field, field_serializer, field_validator, model_validator

from ..models.invoice import Invoice, InvoiceStatus, PaymentMethod
from .base import WireModel, date_from_wire, date_to_wire, decimal_from_wire, money_to_wire


class InvoiceRecord(WireModel):
    """An invoice as returned by ``/facturas/``."""

    id: int
    client_id: int = Field(..., alias="cliente_id")
    consultation_id: int = Field(..., alias="consulta_id")
    invoice_number: str = Field(..., alias="numero_factura", min_length=1)
    issue_date: date = Field(..., alias="fecha_emision")
    due_date: date = Field(..., alias="fecha_vencimiento")
    subtotal: Decimal = Field(..., ge=0)
    tax: Decimal = Field(..., alias="iva", ge=0)
    total: Decimal = Field(..., ge=0)
    status: InvoiceStatus = Field(InvoiceStatus.PENDING, alias="estado")
    payment_method: Optional[PaymentMethod] = Field(None, alias="metodo_pago")
    payment_date: Optional[date] = Field(None, alias="fecha_pago")
    notes: Optional[str] = Field(None, alias="observaciones")

    @field_validator("issue_date", "due_date", "payment_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> Any:
        return date_from_wire(v)

    @field_validator("subtotal", "tax", "total", mode="before")
    @classmethod
    def parse_money(cls, v: Any) -> Any:
        return decimal_from_wire(v)

    @field_validator("payment_method", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_serializer("issue_date", "due_date", "payment_date", when_used="json")
    def serialize_dates(self, v: Optional[date]) -> Optional[str]:
        return date_to_wire(v)

    @field_serializer("subtotal", "tax", "total", when_used="json")
    def serialize_money(self, v: Decimal) -> Optional[str]:
        return money_to_wire(v)

    def to_model(self) -> Invoice:
        return Invoice(**self.model_dump())


class InvoiceCreate(WireModel):
    """
    Body of ``POST /facturas/``.

    The figures are computed locally from the consultation; the backend stays
    the authority and may recompute them.
    """

    consultation_id: int = Field(..., alias="consulta_id", gt=0)
    client_id: int = Field(..., alias="cliente_id", gt=0)
    invoice_number: str = Field(..., alias="numero_factura", min_length=1)
    issue_date: date = Field(..., alias="fecha_emision")
    due_date: date = Field(..., alias="fecha_vencimiento")
    subtotal: Decimal = Field(..., ge=0)
    tax: Decimal = Field(..., alias="iva", ge=0)
    total: Decimal = Field(..., ge=0)
    status: InvoiceStatus = Field(InvoiceStatus.PENDING, alias="estado")
    notes: Optional[str] = Field(None, alias="observaciones")

    @model_validator(mode="after")
    def validate_totals(self) -> "InvoiceCreate":
        if self.total != self.subtotal + self.tax:
            raise ValueError("El total debe ser igual al subtotal más el IVA")
        if self.due_date < self.issue_date:
            raise ValueError("La fecha de vencimiento no puede ser anterior a la emisión")
        return self

    @field_serializer("issue_date", "due_date", when_used="json")
    def serialize_dates(self, v: date) -> str:
        return date_to_wire(v)

    @field_serializer("subtotal", "tax", "total", when_used="json")
    def serialize_money(self, v: Decimal) -> Optional[str]:
        return money_to_wire(v)

    @classmethod
    def from_model(cls, invoice: Invoice) -> "InvoiceCreate":
        """
        Raises:
            SchemaValidationException: If the totals or dates are inconsistent
        """
        return cls.parse(
            dict(
                consultation_id=invoice.consultation_id,
                client_id=invoice.client_id,
                invoice_number=invoice.invoice_number,
                issue_date=invoice.issue_date,
                due_date=invoice.due_date,
                subtotal=invoice.subtotal,
                tax=invoice.tax,
                total=invoice.total,
                status=invoice.status,
                notes=invoice.notes,
            )
        )


class PaymentRegistration(WireModel):
    """Body of ``PATCH /facturas/{id}/registrar-pago/``."""

    payment_method: PaymentMethod = Field(..., alias="metodo_pago")
    notes: Optional[str] = Field(None, alias="observaciones")


class InvoiceVoid(WireModel):
    """Body of ``PATCH /facturas/{id}/anular/``."""

    reason: Optional[str] = Field(None, alias="motivo")


class VoidCheck(WireModel):
    """Answer of ``/facturas/{id}/validar-anulacion/``."""

    allowed: bool = Field(..., alias="puede_anular")
    reason: Optional[str] = Field(None, alias="razon")


class MonthlyTotal(WireModel):
    month: str = Field(..., alias="mes")
    total: Decimal

    @field_validator("total", mode="before")
    @classmethod
    def parse_money(cls, v: Any) -> Any:
        return decimal_from_wire(v)


class BillingStatistics(WireModel):
    """Answer of ``/facturas/estadisticas/``."""

    total_invoiced: Decimal = Field(Decimal("0"), alias="total_facturado")
    total_paid: Decimal = Field(Decimal("0"), alias="total_pagado")
    total_pending: Decimal = Field(Decimal("0"), alias="total_pendiente")
    overdue_count: int = Field(0, alias="facturas_vencidas")
    by_month: List[MonthlyTotal] = Field(default_factory=list, alias="facturas_por_mes")

    @field_validator("total_invoiced", "total_paid", "total_pending", mode="before")
    @classmethod
    def parse_money(cls, v: Any) -> Any:
        return decimal_from_wire(v)


class PdfLink(WireModel):
    """Answer of ``/facturas/{id}/generar-pdf/``."""

    url: str = Field(..., alias="pdf_url")

"""
Invoice endpoints (``/facturas/``).
"""

from typing import List

from ..schemas.consultation import ConsultationRecord
from ..schemas.invoice import (
    BillingStatistics,
    InvoiceCreate,
    InvoiceRecord,
    InvoiceVoid,
    PaymentRegistration,
    PdfLink,
    VoidCheck,
)
from .client import ApiClient, parse_many, parse_one


class InvoicesApi:
    BASE = "/facturas/"

    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self) -> List[InvoiceRecord]:
        return parse_many(InvoiceRecord, await self.client.get(self.BASE))

    async def get(self, invoice_id: int) -> InvoiceRecord:
        return parse_one(InvoiceRecord, await self.client.get(f"{self.BASE}{invoice_id}/"))

    async def create(self, data: InvoiceCreate) -> InvoiceRecord:
        return parse_one(InvoiceRecord, await self.client.post(self.BASE, data.to_payload()))

    async def delete(self, invoice_id: int) -> None:
        await self.client.delete(f"{self.BASE}{invoice_id}/")

    async def register_payment(
        self, invoice_id: int, data: PaymentRegistration
    ) -> InvoiceRecord:
        return parse_one(
            InvoiceRecord,
            await self.client.patch(
                f"{self.BASE}{invoice_id}/registrar-pago/", data.to_payload()
            ),
        )

    async def void(self, invoice_id: int, data: InvoiceVoid) -> InvoiceRecord:
        return parse_one(
            InvoiceRecord,
            await self.client.patch(f"{self.BASE}{invoice_id}/anular/", data.to_payload()),
        )

    async def check_void(self, invoice_id: int) -> VoidCheck:
        return parse_one(
            VoidCheck, await self.client.get(f"{self.BASE}{invoice_id}/validar-anulacion/")
        )

    async def pending_consultations(self) -> List[ConsultationRecord]:
        """Completed consultations the backend has not invoiced yet."""
        return parse_many(
            ConsultationRecord, await self.client.get(f"{self.BASE}consultas-pendientes/")
        )

    async def statistics(self) -> BillingStatistics:
        return parse_one(
            BillingStatistics, await self.client.get(f"{self.BASE}estadisticas/")
        )

    async def pdf_url(self, invoice_id: int) -> str:
        return parse_one(
            PdfLink, await self.client.get(f"{self.BASE}{invoice_id}/generar-pdf/")
        ).url

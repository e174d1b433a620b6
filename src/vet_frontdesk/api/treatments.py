"""
Treatment endpoints (``/tratamientos/``).
"""

from typing import List

from ..schemas.treatment import TreatmentCreate, TreatmentRecord, TreatmentUpdate
from .client import ApiClient, parse_many, parse_one


class TreatmentsApi:
    BASE = "/tratamientos/"

    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self) -> List[TreatmentRecord]:
        return parse_many(TreatmentRecord, await self.client.get(self.BASE))

    async def get(self, treatment_id: int) -> TreatmentRecord:
        return parse_one(
            TreatmentRecord, await self.client.get(f"{self.BASE}{treatment_id}/")
        )

    async def create(self, data: TreatmentCreate) -> TreatmentRecord:
        return parse_one(
            TreatmentRecord, await self.client.post(self.BASE, data.to_payload())
        )

    async def update(self, treatment_id: int, data: TreatmentUpdate) -> TreatmentRecord:
        return parse_one(
            TreatmentRecord,
            await self.client.put(f"{self.BASE}{treatment_id}/", data.to_payload()),
        )

    async def delete(self, treatment_id: int) -> None:
        await self.client.delete(f"{self.BASE}{treatment_id}/")

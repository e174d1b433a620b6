"""
Consultation endpoints (``/consultas/``).
"""

from typing import Any, Dict, List

from ..schemas.consultation import ConsultationCreate, ConsultationRecord
from ..schemas.pet import PetRecord
from .client import ApiClient, parse_many, parse_one


class ConsultationsApi:
    BASE = "/consultas/"

    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self) -> List[ConsultationRecord]:
        return parse_many(ConsultationRecord, await self.client.get(self.BASE))

    async def get(self, consultation_id: int) -> ConsultationRecord:
        return parse_one(
            ConsultationRecord, await self.client.get(f"{self.BASE}{consultation_id}/")
        )

    async def create(self, data: ConsultationCreate) -> ConsultationRecord:
        return parse_one(
            ConsultationRecord, await self.client.post(self.BASE, data.to_payload())
        )

    async def update(
        self, consultation_id: int, data: ConsultationCreate
    ) -> ConsultationRecord:
        return parse_one(
            ConsultationRecord,
            await self.client.put(f"{self.BASE}{consultation_id}/", data.to_payload()),
        )

    async def delete(self, consultation_id: int) -> None:
        await self.client.delete(f"{self.BASE}{consultation_id}/")

    async def by_pet(self, pet_id: int) -> List[ConsultationRecord]:
        """Medical history of one pet."""
        return parse_many(
            ConsultationRecord, await self.client.get(f"{self.BASE}por-mascota/{pet_id}/")
        )

    async def pets_with_history(self) -> List[PetRecord]:
        return parse_many(
            PetRecord, await self.client.get(f"{self.BASE}mascotas-con-historial/")
        )

    async def statistics(self) -> Dict[str, Any]:
        return await self.client.get(f"{self.BASE}estadisticas/") or {}

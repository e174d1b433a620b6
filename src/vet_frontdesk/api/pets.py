"""
Pet endpoints (``/mascotas/mascotas/``).
"""

from typing import Any, Dict, List, Optional

from ..schemas.pet import PetCreate, PetRecord, PetUpdate
from .client import ApiClient, parse_many, parse_one


class PetsApi:
    BASE = "/mascotas/mascotas/"

    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self, search: Optional[str] = None) -> List[PetRecord]:
        params = {"search": search} if search else None
        return parse_many(PetRecord, await self.client.get(self.BASE, params=params))

    async def get(self, pet_id: int) -> PetRecord:
        return parse_one(PetRecord, await self.client.get(f"{self.BASE}{pet_id}/"))

    async def by_client(self, client_id: int) -> List[PetRecord]:
        payload = await self.client.get(
            f"{self.BASE}por-cliente/", params={"cliente_id": client_id}
        )
        return parse_many(PetRecord, payload)

    async def create(self, data: PetCreate) -> PetRecord:
        return parse_one(PetRecord, await self.client.post(self.BASE, data.to_payload()))

    async def update(self, pet_id: int, data: PetUpdate) -> PetRecord:
        return parse_one(
            PetRecord, await self.client.put(f"{self.BASE}{pet_id}/", data.to_payload())
        )

    async def activate(self, pet_id: int) -> Optional[PetRecord]:
        payload = await self.client.post(f"{self.BASE}{pet_id}/activar/")
        return parse_one(PetRecord, payload) if payload else None

    async def deactivate(self, pet_id: int) -> Optional[PetRecord]:
        payload = await self.client.post(f"{self.BASE}{pet_id}/desactivar/")
        return parse_one(PetRecord, payload) if payload else None

    async def delete(self, pet_id: int) -> None:
        await self.client.delete(f"{self.BASE}{pet_id}/")

    async def species(self) -> List[str]:
        """Species names known to the backend."""
        payload = await self.client.get(f"{self.BASE}especies/") or []
        names = []
        for item in payload:
            if isinstance(item, dict):
                item = item.get("nombre") or item.get("especie")
            if item:
                names.append(str(item))
        return names

    async def statistics(self) -> Dict[str, Any]:
        return await self.client.get(f"{self.BASE}estadisticas/") or {}

"""
Client endpoints (``/clientes/``).
"""

from typing import List, Optional

from ..models.user import UserStatus
from ..schemas.user import (
    ClientCreate,
    ClientStatusUpdate,
    ClientUpdate,
    DeactivationCheck,
    DeletionCheck,
    UserRecord,
)
from .client import ApiClient, parse_many, parse_one


class ClientsApi:
    BASE = "/clientes/"

    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self, search: Optional[str] = None) -> List[UserRecord]:
        params = {"search": search} if search else None
        return parse_many(UserRecord, await self.client.get(self.BASE, params=params))

    async def get(self, client_id: int) -> UserRecord:
        return parse_one(UserRecord, await self.client.get(f"{self.BASE}{client_id}/"))

    async def create(self, data: ClientCreate) -> UserRecord:
        return parse_one(UserRecord, await self.client.post(self.BASE, data.to_payload()))

    async def update(self, client_id: int, data: ClientUpdate) -> UserRecord:
        return parse_one(
            UserRecord,
            await self.client.put(f"{self.BASE}{client_id}/", data.to_payload()),
        )

    async def set_status(self, client_id: int, status: UserStatus) -> UserRecord:
        body = ClientStatusUpdate(status=status).to_payload()
        return parse_one(
            UserRecord, await self.client.patch(f"{self.BASE}{client_id}/", body)
        )

    async def delete(self, client_id: int) -> None:
        await self.client.delete(f"{self.BASE}{client_id}/")

    async def check_deletion(self, client_id: int) -> DeletionCheck:
        return parse_one(
            DeletionCheck,
            await self.client.get(f"{self.BASE}{client_id}/validar-eliminacion/"),
        )

    async def check_deactivation(self, client_id: int) -> DeactivationCheck:
        return parse_one(
            DeactivationCheck,
            await self.client.get(f"{self.BASE}{client_id}/validar-desactivacion/"),
        )

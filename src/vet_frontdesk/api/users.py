"""
System user endpoints (``/usuarios/``), login and self-registration
(``/auth/``).
"""

from typing import List, Optional

from ..models.user import UserRole
from ..schemas.auth import ClientRegistration, LoginRequest, LoginResponse
from ..schemas.user import UserCreate, UserRecord, UserUpdate
from .client import ApiClient, parse_many, parse_one


class UsersApi:
    BASE = "/usuarios/"

    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self, role: Optional[UserRole] = None) -> List[UserRecord]:
        params = {"rol": role.value} if role is not None else None
        return parse_many(UserRecord, await self.client.get(self.BASE, params=params))

    async def get(self, user_id: int) -> UserRecord:
        return parse_one(UserRecord, await self.client.get(f"{self.BASE}{user_id}/"))

    async def create(self, data: UserCreate) -> UserRecord:
        return parse_one(UserRecord, await self.client.post(self.BASE, data.to_payload()))

    async def update(self, user_id: int, data: UserUpdate) -> UserRecord:
        return parse_one(
            UserRecord, await self.client.put(f"{self.BASE}{user_id}/", data.to_payload())
        )

    async def delete(self, user_id: int) -> None:
        await self.client.delete(f"{self.BASE}{user_id}/")


class AuthApi:
    LOGIN = "/auth/login/"
    REGISTER = "/auth/register/"

    def __init__(self, client: ApiClient):
        self.client = client

    async def login(self, email: str, password: str) -> LoginResponse:
        body = LoginRequest(email=email, password=password).to_payload()
        return parse_one(LoginResponse, await self.client.post(self.LOGIN, body))

    async def register(self, data: ClientRegistration) -> UserRecord:
        """Create a pet-owner account; the backend answers with the new user."""
        return parse_one(
            UserRecord, await self.client.post(self.REGISTER, data.to_payload())
        )

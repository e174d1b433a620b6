"""
Client and pet status workflows.

A client cannot be deactivated while one of their pets is active, and cannot
be deleted while they own any pet at all. The guards reload the client's pets
from the backend first, so they hold even when the pet list was never
loaded. The backend may still refuse with a 409 and its own detail.
"""

import logging
from typing import Iterable, List, Optional

from ..api.clients import ClientsApi
from ..api.pets import PetsApi
from ..api.sequencing import RequestSequencer
from ..auth import AuthSession
from ..database.store import EntityStore
from ..exceptions import CannotDeactivateError, CannotDeleteError, ConflictException
from ..models.pet import Pet
from ..models.user import User, UserStatus
from ..permissions import Permission, require_permission

logger = logging.getLogger(__name__)


def _owned(client_id: int, pets: Iterable[Pet]) -> List[Pet]:
    return [pet for pet in pets if pet.owner_id == client_id]


def ensure_can_deactivate(client_id: int, pets: Iterable[Pet]) -> None:
    """
    Raises:
        CannotDeactivateError: If the client owns an active pet
    """
    active = [pet.name for pet in _owned(client_id, pets) if pet.is_active]
    if active:
        raise CannotDeactivateError(client_id, active_pets=active)


def ensure_can_delete(client_id: int, pets: Iterable[Pet]) -> None:
    """
    Raises:
        CannotDeleteError: If the client owns any pet, active or not
    """
    owned = [pet.name for pet in _owned(client_id, pets)]
    if owned:
        raise CannotDeleteError(client_id, pets=owned)


class ClientService:
    """Client and pet workflows over the backend and the entity store."""

    def __init__(
        self,
        api: ClientsApi,
        pets_api: PetsApi,
        store: EntityStore,
        session: AuthSession,
        confirm_with_backend: bool = False,
        sequencer: Optional[RequestSequencer] = None,
    ):
        """
        Args:
            api: Client endpoints
            pets_api: Pet endpoints
            store: Entity store holding the loaded clients and pets
            session: Logged-in session, checked before every change
            confirm_with_backend: Also ask the backend validation endpoints
                before deactivating or deleting
            sequencer: Shared generation counters; a private one by default
        """
        self.api = api
        self.pets_api = pets_api
        self.store = store
        self.session = session
        self.confirm_with_backend = confirm_with_backend
        self.sequencer = sequencer or RequestSequencer()

    async def refresh(self) -> List[User]:
        applied, records = await self.sequencer.run("clients", self.api.list())
        if applied:
            await self.store.replace_clients(record.to_model() for record in records)
        return await self.store.list_clients()

    async def refresh_pets(self) -> List[Pet]:
        applied, records = await self.sequencer.run("pets", self.pets_api.list())
        if applied:
            await self.store.replace_pets(record.to_model() for record in records)
        return await self.store.list_pets()

    async def _current(self, client_id: int) -> User:
        client = await self.store.get(User, client_id)
        if client is None:
            client = (await self.api.get(client_id)).to_model()
        return client

    async def _pets_of(self, client_id: int) -> List[Pet]:
        """The client's pets as the backend knows them now."""
        return [record.to_model() for record in await self.pets_api.by_client(client_id)]

    async def set_status(self, client_id: int, status: UserStatus) -> User:
        """
        Activate or deactivate a client.

        Raises:
            NotAuthorizedError: Before any request, if the role may not manage clients
            CannotDeactivateError: Before the change is sent, if an owned pet is active
            ConflictException: If the backend refuses the change
        """
        require_permission(self.session, Permission.MANAGE_CLIENTS)
        if status != UserStatus.ACTIVE:
            ensure_can_deactivate(client_id, await self._pets_of(client_id))
            if self.confirm_with_backend:
                check = await self.api.check_deactivation(client_id)
                if not check.allowed:
                    raise ConflictException(
                        message=CannotDeactivateError(client_id).message,
                        rule_name="client_has_active_pets",
                        server_detail=check.reason,
                    )

        record = await self.api.set_status(client_id, status)
        logger.info(f"Client {client_id} set to {status.value}")
        await self.refresh()
        return record.to_model()

    async def toggle_status(self, client_id: int) -> User:
        client = await self._current(client_id)
        target = UserStatus.INACTIVE if client.is_active else UserStatus.ACTIVE
        return await self.set_status(client_id, target)

    async def deactivate(self, client_id: int) -> User:
        return await self.set_status(client_id, UserStatus.INACTIVE)

    async def activate(self, client_id: int) -> User:
        return await self.set_status(client_id, UserStatus.ACTIVE)

    async def delete(self, client_id: int) -> None:
        """
        Delete a client.

        Raises:
            NotAuthorizedError: Before any request, if the role may not manage clients
            CannotDeleteError: Before the deletion is sent, if the client owns pets
        """
        require_permission(self.session, Permission.MANAGE_CLIENTS)
        ensure_can_delete(client_id, await self._pets_of(client_id))
        if self.confirm_with_backend:
            check = await self.api.check_deletion(client_id)
            if not check.allowed:
                raise ConflictException(
                    message=CannotDeleteError(client_id).message,
                    rule_name="client_has_pets",
                    server_detail=check.reason,
                )

        await self.api.delete(client_id)
        logger.info(f"Deleted client {client_id}")
        await self.refresh()

    # Pets

    async def set_pet_active(self, pet_id: int, active: bool) -> Optional[Pet]:
        require_permission(self.session, Permission.MANAGE_PETS)
        if active:
            record = await self.pets_api.activate(pet_id)
        else:
            record = await self.pets_api.deactivate(pet_id)
        await self.refresh_pets()
        if record is not None:
            return record.to_model()
        return await self.store.get(Pet, pet_id)

    async def deactivate_pet(self, pet_id: int) -> Optional[Pet]:
        return await self.set_pet_active(pet_id, False)

    async def activate_pet(self, pet_id: int) -> Optional[Pet]:
        return await self.set_pet_active(pet_id, True)

    async def delete_pet(self, pet_id: int) -> None:
        require_permission(self.session, Permission.MANAGE_PETS)
        await self.pets_api.delete(pet_id)
        logger.info(f"Deleted pet {pet_id}")
        await self.refresh_pets()

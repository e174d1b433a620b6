"""
System user administration.
"""

import logging
from typing import List, Optional

from ..api.sequencing import RequestSequencer
from ..api.users import UsersApi
from ..auth import AuthSession
from ..database.store import EntityStore
from ..models.user import User, UserRole
from ..permissions import Permission, ensure_not_self, require_permission
from ..schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """User workflows, gated on the ``manage_users`` permission."""

    def __init__(
        self,
        api: UsersApi,
        store: EntityStore,
        session: AuthSession,
        sequencer: Optional[RequestSequencer] = None,
    ):
        self.api = api
        self.store = store
        self.session = session
        self.sequencer = sequencer or RequestSequencer()

    async def refresh(self, role: Optional[UserRole] = None) -> List[User]:
        """Reload users, or only the users of ``role``, into the store."""
        operation = f"users:{role.value}" if role is not None else "users"
        applied, records = await self.sequencer.run(operation, self.api.list(role))
        if applied:
            await self.store.replace_users(
                (record.to_model() for record in records),
                roles=[role] if role is not None else None,
            )
        return await self.store.list_users(role)

    async def create(self, data: UserCreate) -> User:
        require_permission(self.session, Permission.MANAGE_USERS)
        record = await self.api.create(data)
        await self.refresh()
        return record.to_model()

    async def update(self, user_id: int, data: UserUpdate) -> User:
        require_permission(self.session, Permission.MANAGE_USERS)
        record = await self.api.update(user_id, data)
        await self.refresh()
        return record.to_model()

    async def delete(self, user_id: int) -> None:
        """
        Raises:
            NotAuthorizedError: If the session may not manage users
            SelfDeletionError: Before any request, for the logged-in user
        """
        require_permission(self.session, Permission.MANAGE_USERS)
        ensure_not_self(self.session, user_id)
        await self.api.delete(user_id)
        logger.info(f"Deleted user {user_id}")
        await self.refresh()

"""
Session context for the logged-in user.

``AuthSession`` holds the bearer token and the current user. It is created
once at startup, restored from the persisted session file, passed to the
API client as its token source and cleared on logout.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from .api.users import AuthApi
from .exceptions import NotAuthorizedError, SchemaValidationException, ValidationException
from .models.user import UserRole, UserStatus
from .schemas.auth import ClientRegistration, StoredSession
from .schemas.user import UserRecord
from .utils.config import FrontdeskSettings
from .utils.validation import REQUIRED_FIELDS_MESSAGE, is_blank

logger = logging.getLogger(__name__)

INACTIVE_ACCOUNT_MESSAGE = "Tu cuenta está inactiva. Contacta al administrador."


class SessionStorage:
    """Persists the session as a small JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[StoredSession]:
        """
        Read the stored session.

        Returns:
            The stored session, or None when there is none. A corrupt file
            is logged and removed.
        """
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return StoredSession.parse(data)
        except (ValueError, SchemaValidationException) as e:
            logger.warning(f"Discarding unreadable session file {self.path}: {e}")
            self.clear()
            return None

    def save(self, session: StoredSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(session.to_payload()), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class AuthSession:
    """
    Token and current user of this desk.

    Attributes:
        token: Bearer token, None while logged out
        user: The logged-in user as returned by the backend
    """

    def __init__(self, storage: Optional[SessionStorage] = None):
        self.storage = storage
        self.token: Optional[str] = None
        self.user: Optional[UserRecord] = None

    @classmethod
    def from_settings(cls, settings: FrontdeskSettings) -> "AuthSession":
        return cls(SessionStorage(settings.session_file))

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    @property
    def role(self) -> Optional[UserRole]:
        return self.user.role if self.user is not None else None

    @property
    def user_id(self) -> Optional[int]:
        return self.user.id if self.user is not None else None

    def restore(self) -> bool:
        """Load the persisted session, if any. Returns whether one was restored."""
        if self.storage is None:
            return False
        stored = self.storage.load()
        if stored is None:
            return False
        self.token = stored.token
        self.user = stored.user
        logger.info(f"Restored session of user {stored.user.id}")
        return True

    async def login(self, auth_api: AuthApi, email: str, password: str) -> UserRecord:
        """
        Log in and persist the session.

        Raises:
            ValidationException: If email or password is blank
            NotAuthorizedError: If the credentials are refused or the
                account is not active
        """
        if is_blank(email) or is_blank(password):
            raise ValidationException(message=REQUIRED_FIELDS_MESSAGE)

        response = await auth_api.login(email.strip(), password)
        if response.user.status != UserStatus.ACTIVE:
            logger.info(f"Refused login of {response.user.status.value} user {response.user.id}")
            raise NotAuthorizedError(
                message=INACTIVE_ACCOUNT_MESSAGE, role=response.user.role.value
            )

        self.token = response.access_token
        self.user = response.user
        if self.storage is not None:
            self.storage.save(StoredSession(token=self.token, user=self.user))
        logger.info(f"User {self.user.id} logged in as {self.user.role.value}")
        return self.user

    async def register(
        self, auth_api: AuthApi, registration: ClientRegistration
    ) -> UserRecord:
        """
        Create a pet-owner account and log straight into it.

        Raises:
            ConflictException: If the backend refuses the registration, for
                example because the email is already in use
            NotAuthorizedError: If the new account cannot log in
        """
        created = await auth_api.register(registration)
        logger.info(f"Registered client account {created.id}")
        return await self.login(auth_api, registration.email, registration.password)

    def logout(self) -> None:
        """Forget the token and user, in memory and on disk."""
        if self.user is not None:
            logger.info(f"User {self.user.id} logged out")
        self.token = None
        self.user = None
        if self.storage is not None:
            self.storage.clear()

"""
Role permissions.

This check decides which pages and actions the desk offers. It is not a
security boundary; the backend enforces access on its side.
"""

import enum
from typing import Dict, FrozenSet, Optional

from .auth import AuthSession
from .exceptions import NotAuthorizedError, SelfDeletionError
from .models.user import UserRole


class Permission(enum.Enum):
    """Enumeration of gated areas."""

    MANAGE_USERS = "manage_users"
    MANAGE_CLIENTS = "manage_clients"
    MANAGE_PETS = "manage_pets"
    MANAGE_APPOINTMENTS = "manage_appointments"
    MANAGE_CONSULTATIONS = "manage_consultations"
    MANAGE_TREATMENTS = "manage_treatments"
    MANAGE_INVOICES = "manage_invoices"
    MANAGE_PRODUCTS = "manage_products"
    VIEW_REPORTS = "view_reports"
    SYSTEM_CONFIGURATION = "system_configuration"


ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[Permission]] = {
    UserRole.ADMINISTRATOR: frozenset(Permission),
    UserRole.VETERINARIAN: frozenset(
        {
            Permission.MANAGE_CLIENTS,
            Permission.MANAGE_PETS,
            Permission.MANAGE_APPOINTMENTS,
            Permission.MANAGE_CONSULTATIONS,
            Permission.MANAGE_TREATMENTS,
            Permission.VIEW_REPORTS,
        }
    ),
    UserRole.SECRETARY: frozenset(
        {
            Permission.MANAGE_CLIENTS,
            Permission.MANAGE_PETS,
            Permission.MANAGE_APPOINTMENTS,
            Permission.MANAGE_INVOICES,
            Permission.MANAGE_PRODUCTS,
            Permission.VIEW_REPORTS,
        }
    ),
    UserRole.CLIENT: frozenset(),
}


def has_permission(role: Optional[UserRole], permission: Permission) -> bool:
    if role is None:
        return False
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


def require_permission(session: AuthSession, permission: Permission) -> None:
    """
    Raises:
        NotAuthorizedError: If nobody is logged in or the role lacks ``permission``
    """
    role = session.role if session.is_authenticated else None
    if not has_permission(role, permission):
        raise NotAuthorizedError(
            role=role.value if role is not None else None,
            permission=permission.value,
        )


def ensure_not_self(session: AuthSession, user_id: int) -> None:
    """
    Raises:
        SelfDeletionError: If ``user_id`` is the logged-in user
    """
    if session.user_id is not None and session.user_id == user_id:
        raise SelfDeletionError(user_id)

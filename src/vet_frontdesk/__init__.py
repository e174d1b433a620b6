"""
Vet Frontdesk Package

The front-desk client of the veterinary clinic platform. It talks to the
clinic REST backend, keeps per-session copies of the entity collections in an
in-memory store and hosts the front-desk rules:

- Slot calculation and double-booking protection for appointments
- Invoice totals (13% tax) and invoice generation from completed consultations
- Status lifecycles for appointments and invoices
- Client/pet deactivation and deletion guards
- Role permissions and an explicit login session
- Auto-expiring notices for success and error banners

Quick Start:
    >>> from vet_frontdesk import ApiClient, AuthSession, EntityStore
    >>> from vet_frontdesk.api import AppointmentsApi
    >>> from vet_frontdesk.services import BookingService

    >>> session = AuthSession()
    >>> store = await EntityStore.open()
    >>> async with ApiClient("http://localhost:8000/api", session=session) as client:
    ...     booking = BookingService(AppointmentsApi(client), store, session)
    ...     await booking.refresh()
    ...     slots = await booking.available_slots(date(2025, 1, 15))

Requirements:
    - Python 3.11+
    - SQLAlchemy 2.0+ with aiosqlite
    - Pydantic 2.5+
    - httpx
"""

__version__ = "0.1.0"
__author__ = "Vet Clinic Platform Team"
__email__ = "dev@vetclinic.com"
__license__ = "MIT"
__copyright__ = "Copyright 2025 Vet Clinic Platform Team"

# Import implemented modules
from . import api
from . import database
from . import exceptions
from . import models
from . import schemas
from . import services
from . import utils

# Convenience imports for common usage patterns
from .api import ApiClient
from .auth import AuthSession, SessionStorage
from .database import EntityStore
from .exceptions import (
    ConflictException,
    FrontdeskException,
    NetworkException,
    NotAuthorizedError,
    ValidationException,
)
from .models import Appointment, Consultation, Invoice, Pet, User
from .permissions import Permission, has_permission, require_permission

__all__ = [
    # Version and metadata
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__copyright__",

    # Core modules
    "api",
    "database",
    "exceptions",
    "models",
    "schemas",
    "services",
    "utils",

    # Convenience imports
    "ApiClient",
    "AuthSession",
    "SessionStorage",
    "EntityStore",
    "FrontdeskException",
    "ValidationException",
    "NetworkException",
    "ConflictException",
    "NotAuthorizedError",
    "User",
    "Pet",
    "Appointment",
    "Consultation",
    "Invoice",
    "Permission",
    "has_permission",
    "require_permission",
]

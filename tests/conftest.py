"""
Pytest configuration and fixtures for vet-frontdesk tests.

This module provides the in-memory entity store, the fake backend served
through ``httpx.MockTransport``, API clients wired to it, and factory classes
for building model instances.
"""

import itertools
from datetime import date, time
from decimal import Decimal
from typing import AsyncGenerator

import pytest

from fake_backend import BASE_URL, FakeBackend
from vet_frontdesk.api import ApiClient
from vet_frontdesk.auth import AuthSession
from vet_frontdesk.database import EntityStore
from vet_frontdesk.models import (
    Appointment,
    AppointmentStatus,
    Consultation,
    ConsultationStatus,
    Invoice,
    InvoiceStatus,
    Pet,
    PetStatus,
    Treatment,
    TreatmentKind,
    TreatmentStatus,
    User,
    UserRole,
    UserStatus,
)
from vet_frontdesk.schemas import UserRecord

# A Wednesday and the Saturday of the same week
WEEKDAY = date(2025, 1, 15)
SATURDAY = date(2025, 1, 18)

_ids = itertools.count(1)


@pytest.fixture
async def store() -> AsyncGenerator[EntityStore, None]:
    """Fresh in-memory entity store per test."""
    entity_store = await EntityStore.open("sqlite+aiosqlite:///:memory:")
    yield entity_store
    await entity_store.close()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(today=WEEKDAY)


@pytest.fixture
def auth_session() -> AuthSession:
    """Logged-in secretary session, not persisted."""
    session = AuthSession()
    session.token = "token-123"
    session.user = UserRecord.parse(
        {
            "id": 99,
            "nombre": "Sofía",
            "apellido": "Mora",
            "correo": "sofia@clinica.test",
            "rol_nombre": "Secretaria",
            "estado": "Activo",
        }
    )
    return session


@pytest.fixture
async def api_client(
    backend: FakeBackend, auth_session: AuthSession
) -> AsyncGenerator[ApiClient, None]:
    async with ApiClient(
        BASE_URL, session=auth_session, transport=backend.transport()
    ) as client:
        yield client


# Factory classes for creating test entities
class UserFactory:
    """Factory for creating test User instances."""

    @staticmethod
    def build(**kwargs) -> User:
        defaults = {
            "id": next(_ids),
            "first_name": "Ana",
            "last_name": "Pérez",
            "phone": "555-0101",
            "role": UserRole.CLIENT,
            "status": UserStatus.ACTIVE,
        }
        defaults.update(kwargs)
        return User(**defaults)

    @staticmethod
    def build_veterinarian(**kwargs) -> User:
        defaults = {
            "first_name": "Carlos",
            "last_name": "Ruiz",
            "email": "carlos@clinica.test",
            "role": UserRole.VETERINARIAN,
        }
        defaults.update(kwargs)
        return UserFactory.build(**defaults)


class PetFactory:
    """Factory for creating test Pet instances."""

    @staticmethod
    def build(owner_id: int, **kwargs) -> Pet:
        defaults = {
            "id": next(_ids),
            "owner_id": owner_id,
            "name": "Firulais",
            "species": "Perro",
            "status": PetStatus.ACTIVE,
        }
        defaults.update(kwargs)
        return Pet(**defaults)


class AppointmentFactory:
    """Factory for creating test Appointment instances."""

    @staticmethod
    def build(**kwargs) -> Appointment:
        defaults = {
            "id": next(_ids),
            "pet_id": 1,
            "veterinarian_id": 10,
            "scheduled_date": WEEKDAY,
            "scheduled_time": time(9, 0),
            "reason": "Control anual",
            "status": AppointmentStatus.SCHEDULED,
        }
        defaults.update(kwargs)
        return Appointment(**defaults)


class ConsultationFactory:
    """Factory for creating test Consultation instances."""

    @staticmethod
    def build(**kwargs) -> Consultation:
        defaults = {
            "id": next(_ids),
            "pet_id": 1,
            "veterinarian_id": 10,
            "consulted_on": date(2025, 1, 10),
            "reason": "Vacunación",
            "diagnosis": "Sano",
            "treatment": "Vacuna",
            "cost": Decimal("200.00"),
            "status": ConsultationStatus.COMPLETED,
        }
        defaults.update(kwargs)
        return Consultation(**defaults)


class InvoiceFactory:
    """Factory for creating test Invoice instances."""

    @staticmethod
    def build(**kwargs) -> Invoice:
        defaults = {
            "id": next(_ids),
            "client_id": 1,
            "consultation_id": 1,
            "invoice_number": "FAC-20250115-0001",
            "issue_date": WEEKDAY,
            "due_date": date(2025, 2, 14),
            "subtotal": Decimal("100.00"),
            "tax": Decimal("13.00"),
            "total": Decimal("113.00"),
            "status": InvoiceStatus.PENDING,
        }
        defaults.update(kwargs)
        return Invoice(**defaults)


class TreatmentFactory:
    """Factory for creating test Treatment instances."""

    @staticmethod
    def build(**kwargs) -> Treatment:
        defaults = {
            "id": next(_ids),
            "pet_id": 1,
            "veterinarian_id": 10,
            "name": "Amoxicilina",
            "description": "Antibiótico por infección leve",
            "kind": TreatmentKind.MEDICATION,
            "start_date": date(2025, 1, 10),
            "dose": "250 mg",
            "frequency": "Cada 12 horas",
            "cost": Decimal("45.50"),
            "status": TreatmentStatus.ACTIVE,
        }
        defaults.update(kwargs)
        return Treatment(**defaults)

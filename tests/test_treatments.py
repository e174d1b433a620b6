"""
Tests for pet treatments: wire schemas, joined views and the service.
"""

from datetime import date
from decimal import Decimal

import pytest

from conftest import PetFactory, TreatmentFactory, UserFactory
from vet_frontdesk.api import TreatmentsApi
from vet_frontdesk.exceptions import NotAuthorizedError, SchemaValidationException
from vet_frontdesk.models import TreatmentKind, TreatmentStatus, UserRole
from vet_frontdesk.schemas import TreatmentCreate, TreatmentRecord, TreatmentUpdate
from vet_frontdesk.services import TreatmentService


def prescription(**changes) -> TreatmentCreate:
    data = {
        "mascota_id": 5,
        "veterinario_id": 10,
        "nombre": "Meloxicam",
        "descripcion": "Antiinflamatorio tras la cirugía",
        "tipo": "Medicamento",
        "fecha_inicio": "2025-01-15",
        "fecha_fin": "2025-01-22",
        "dosis": "0.5 ml",
        "frecuencia": "Una vez al día",
        "costo": "80",
    }
    data.update(changes)
    return TreatmentCreate.parse(data)


class TestTreatmentSchemas:
    """Test cases for treatment records and forms."""

    def test_record_from_backend(self):
        record = TreatmentRecord.parse(
            {
                "id": 3,
                "mascota_id": 5,
                "veterinario_id": 10,
                "nombre": "Vacuna triple",
                "descripcion": None,
                "tipo": "Vacunación",
                "fecha_inicio": "2025-01-10",
                "fecha_fin": "",
                "dosis": " ",
                "costo": 0.1,
                "estado": "Completado",
            }
        )

        assert record.kind == TreatmentKind.VACCINATION
        assert record.status == TreatmentStatus.COMPLETED
        assert record.description == ""
        assert record.end_date is None
        assert record.dose is None
        assert record.cost == Decimal("0.1")

        treatment = record.to_model()
        assert not treatment.is_active
        assert treatment.start_date == date(2025, 1, 10)

    def test_create_payload(self):
        payload = prescription(dosis="", observaciones="  ").to_payload()

        assert payload == {
            "mascota_id": 5,
            "veterinario_id": 10,
            "nombre": "Meloxicam",
            "descripcion": "Antiinflamatorio tras la cirugía",
            "tipo": "Medicamento",
            "fecha_inicio": "2025-01-15",
            "fecha_fin": "2025-01-22",
            "frecuencia": "Una vez al día",
            "costo": "80.00",
            "estado": "Activo",
        }

    def test_end_before_start(self):
        with pytest.raises(SchemaValidationException) as exc_info:
            prescription(fecha_fin="2025-01-01")

        errors = exc_info.value.details["validation_errors"]
        assert any(
            "anterior a la de inicio" in m for messages in errors.values() for m in messages
        )

    @pytest.mark.parametrize(
        "changes",
        [
            {"nombre": ""},
            {"descripcion": "  "},
            {"mascota_id": 0},
            {"costo": "-1"},
            {"tipo": "Homeopatía"},
        ],
    )
    def test_invalid_forms(self, changes):
        with pytest.raises(SchemaValidationException):
            prescription(**changes)


class TestTreatmentViews:
    """Test cases for the joined treatment views and the summary."""

    @pytest.fixture
    async def loaded(self, store):
        vet = UserFactory.build_veterinarian(id=10)
        await store.replace_users([vet])
        await store.replace_pets([PetFactory.build(owner_id=1, id=5, name="Luna")])
        await store.replace_treatments(
            [
                TreatmentFactory.build(id=1, pet_id=5, start_date=date(2025, 1, 5)),
                TreatmentFactory.build(
                    id=2,
                    pet_id=5,
                    name="Esterilización",
                    kind=TreatmentKind.SURGERY,
                    start_date=date(2025, 1, 12),
                    status=TreatmentStatus.COMPLETED,
                    cost=Decimal("300.00"),
                ),
                TreatmentFactory.build(
                    id=3,
                    pet_id=99,
                    veterinarian_id=77,
                    status=TreatmentStatus.CANCELLED,
                    cost=Decimal("10.00"),
                ),
            ]
        )
        return store

    async def test_views_newest_first_with_names(self, loaded):
        views = await loaded.treatment_views()

        assert [v.id for v in views] == [2, 3, 1]
        assert views[0].pet_name == "Luna"
        assert views[0].veterinarian_name == "Carlos Ruiz"

    async def test_missing_references(self, loaded):
        views = {v.id: v for v in await loaded.treatment_views()}

        assert views[3].pet_name == "N/A"
        assert views[3].veterinarian_name == "N/A"

    async def test_search(self, loaded):
        assert [v.id for v in await loaded.search_treatments("luna")] == [2, 1]
        assert [v.id for v in await loaded.search_treatments("cirugía")] == [2]
        assert len(await loaded.search_treatments("  ")) == 3

    async def test_summary(self, loaded):
        summary = await loaded.treatment_summary()

        assert summary.active_count == 1
        assert summary.completed_count == 1
        assert summary.pending_count == 0
        assert summary.total_cost == Decimal("355.50")


class TestTreatmentService:
    """Test cases for treatment workflows against the backend."""

    @pytest.fixture
    def vet_session(self, auth_session):
        auth_session.user = auth_session.user.model_copy(
            update={"role": UserRole.VETERINARIAN}
        )
        return auth_session

    @pytest.fixture
    def service(self, api_client, store, vet_session):
        return TreatmentService(TreatmentsApi(api_client), store, vet_session)

    async def test_refresh(self, service, backend):
        backend.add_treatment(1, mascota_id=5, nombre="Amoxicilina")
        backend.add_treatment(
            2, mascota_id=5, nombre="Control", fecha_inicio="2025-01-14"
        )

        treatments = await service.refresh()

        assert [t.name for t in treatments] == ["Control", "Amoxicilina"]

    async def test_create_update_delete(self, service, backend, store):
        created = await service.create(prescription())

        assert created.name == "Meloxicam"
        assert created.cost == Decimal("80.00")
        assert [t.id for t in await store.list_treatments()] == [created.id]

        form = TreatmentUpdate.parse({**prescription().to_payload(), "estado": "Completado"})
        updated = await service.update(created.id, form)
        assert updated.status == TreatmentStatus.COMPLETED
        assert backend.data["tratamientos"][created.id]["estado"] == "Completado"

        await service.delete(created.id)
        assert await store.list_treatments() == []

    @pytest.mark.parametrize("role", [UserRole.SECRETARY, UserRole.CLIENT])
    async def test_other_roles_are_refused(
        self, api_client, store, auth_session, backend, role
    ):
        auth_session.user = auth_session.user.model_copy(update={"role": role})
        service = TreatmentService(TreatmentsApi(api_client), store, auth_session)

        with pytest.raises(NotAuthorizedError):
            await service.create(prescription())
        with pytest.raises(NotAuthorizedError):
            await service.delete(1)

        assert backend.requests == []

    async def test_summary(self, service, backend):
        backend.add_treatment(1, mascota_id=5, nombre="Amoxicilina", costo="20.00")
        backend.add_treatment(2, mascota_id=5, nombre="Control", estado="Pendiente")
        await service.refresh()

        summary = await service.summary()

        assert summary.active_count == 1
        assert summary.pending_count == 1
        assert summary.total_cost == Decimal("70.00")

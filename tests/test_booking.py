"""
Tests for appointment booking and status changes.
"""

import asyncio
from datetime import time

import pytest

from conftest import SATURDAY, WEEKDAY, AppointmentFactory
from vet_frontdesk.api import AppointmentsApi
from vet_frontdesk.exceptions import (
    ConflictException,
    IllegalTransitionError,
    NetworkException,
    NotAuthorizedError,
    SlotTakenError,
    ValidationException,
)
from vet_frontdesk.models import AppointmentStatus, UserRole
from vet_frontdesk.schemas import AppointmentRecord
from vet_frontdesk.services.booking import BookingService, prepare_booking


class TestPrepareBooking:
    """Test cases for the local booking guard."""

    def test_builds_scheduled_appointment(self):
        """A valid request becomes a new appointment in Agendada."""
        appointment = prepare_booking(1, 10, WEEKDAY, time(9, 0), " Vacuna ", [])

        assert appointment.status == AppointmentStatus.SCHEDULED
        assert appointment.pet_id == 1
        assert appointment.veterinarian_id == 10
        assert appointment.scheduled_time == time(9, 0)
        assert appointment.reason == "Vacuna"

    @pytest.mark.parametrize(
        "pet_id,vet_id,reason",
        [(None, 10, "Control"), (1, None, "Control"), (1, 10, "   "), (1, 10, None)],
    )
    def test_missing_fields(self, pet_id, vet_id, reason):
        """Blank pet, veterinarian or reason fails before anything else."""
        with pytest.raises(ValidationException) as exc_info:
            prepare_booking(pet_id, vet_id, WEEKDAY, time(9, 0), reason, [])

        assert exc_info.value.message == "Todos los campos son requeridos"

    def test_missing_date_or_time(self):
        """Date and time must both be selected."""
        with pytest.raises(ValidationException) as exc_info:
            prepare_booking(1, 10, WEEKDAY, None, "Control", [])
        assert exc_info.value.message == "Debe seleccionar fecha y hora"

        with pytest.raises(ValidationException):
            prepare_booking(1, 10, None, time(9, 0), "Control", [])

    def test_reason_too_long(self):
        with pytest.raises(ValidationException) as exc_info:
            prepare_booking(1, 10, WEEKDAY, time(9, 0), "x" * 2001, [])

        assert exc_info.value.field == "motivo"
        assert "2000" in exc_info.value.message

    def test_time_outside_template(self):
        """Weekend afternoons are not bookable."""
        with pytest.raises(ValidationException):
            prepare_booking(1, 10, SATURDAY, time(15, 0), "Control", [])

    def test_taken_slot(self):
        """A scheduled appointment in the slot blocks the booking."""
        existing = [AppointmentFactory.build(scheduled_time=time(9, 0))]

        with pytest.raises(SlotTakenError) as exc_info:
            prepare_booking(2, 11, WEEKDAY, time(9, 0), "Control", existing)

        assert exc_info.value.scheduled_time == time(9, 0)
        assert exc_info.value.error_code == "SLOT_TAKEN"

    def test_cancelled_slot_can_be_rebooked(self):
        """Cancelling the first appointment frees the slot."""
        existing = [
            AppointmentFactory.build(
                scheduled_time=time(9, 0), status=AppointmentStatus.CANCELLED
            )
        ]

        appointment = prepare_booking(2, 11, WEEKDAY, time(9, 0), "Control", existing)

        assert appointment.is_scheduled

    def test_seconds_are_ignored(self):
        """Times are compared at minute granularity."""
        existing = [AppointmentFactory.build(scheduled_time=time(10, 0))]

        with pytest.raises(SlotTakenError):
            prepare_booking(2, 11, WEEKDAY, time(10, 0, 30), "Control", existing)

    def test_veterinarian_scoped_guard(self):
        """With a per-veterinarian scope other veterinarians do not conflict."""
        existing = [AppointmentFactory.build(veterinarian_id=20, scheduled_time=time(9, 0))]

        appointment = prepare_booking(
            2, 11, WEEKDAY, time(9, 0), "Control", existing, scope_to_veterinarian=True
        )

        assert appointment.veterinarian_id == 11


class TestBookingService:
    """Test cases for booking against the backend."""

    @pytest.fixture
    def service(self, api_client, store, auth_session):
        return BookingService(AppointmentsApi(api_client), store, auth_session)

    async def test_book_then_refresh(self, service, backend, store):
        """A successful booking is created remotely and re-fetched."""
        booked = await service.validate_and_book(1, 10, WEEKDAY, time(14, 0), "Control")

        assert booked.id is not None
        assert booked.status == AppointmentStatus.SCHEDULED
        assert len(backend.requests_to("POST", "/citas/")) == 1
        loaded = await store.appointments_on(WEEKDAY)
        assert [a.scheduled_time for a in loaded] == [time(14, 0)]

    async def test_second_booking_same_slot_fails_locally(self, service, backend):
        """The second booking is refused without another request."""
        await service.validate_and_book(1, 10, WEEKDAY, time(9, 0), "Control")

        with pytest.raises(SlotTakenError):
            await service.validate_and_book(2, 11, WEEKDAY, time(9, 0), "Vacuna")

        assert len(backend.requests_to("POST", "/citas/")) == 1

    async def test_rebook_after_cancellation(self, service):
        """Once the first appointment is cancelled the slot can be booked again."""
        first = await service.validate_and_book(1, 10, WEEKDAY, time(9, 0), "Control")
        await service.cancel(first.id)

        second = await service.validate_and_book(2, 11, WEEKDAY, time(9, 0), "Vacuna")

        assert second.id != first.id
        assert second.is_scheduled

    async def test_backend_conflict_maps_to_slot_taken(self, service, backend):
        """Another desk booked the slot first; the 409 detail is kept."""
        backend.add_appointment(500, WEEKDAY.isoformat(), "10:00")

        with pytest.raises(SlotTakenError) as exc_info:
            await service.validate_and_book(1, 10, WEEKDAY, time(10, 0), "Control")

        assert exc_info.value.message == "Ya existe una cita en ese horario"
        assert exc_info.value.server_detail == "Ya existe una cita en ese horario"
        assert isinstance(exc_info.value.__cause__, ConflictException)

    async def test_validation_makes_no_request(self, service, backend):
        """Missing fields are reported before any network call."""
        with pytest.raises(ValidationException):
            await service.validate_and_book(None, 10, WEEKDAY, time(9, 0), "Control")

        assert backend.requests == []

    async def test_overlong_reason_makes_no_request(self, service, backend):
        """A reason past the wire limit is a validation error, not a crash."""
        with pytest.raises(ValidationException) as exc_info:
            await service.validate_and_book(1, 10, WEEKDAY, time(9, 0), "x" * 2001)

        assert exc_info.value.details["field"] == "motivo"
        assert backend.requests == []

    async def test_client_role_cannot_book(self, service, backend, auth_session):
        """A Cliente session is refused before anything is sent."""
        auth_session.user = auth_session.user.model_copy(
            update={"role": UserRole.CLIENT}
        )

        with pytest.raises(NotAuthorizedError):
            await service.validate_and_book(1, 10, WEEKDAY, time(9, 0), "Control")
        with pytest.raises(NotAuthorizedError):
            await service.cancel(1)

        assert backend.requests == []

    async def test_confirm_with_backend(self, api_client, store, backend, auth_session):
        """The optional backend check refuses a slot the store does not know about."""
        backend.add_appointment(500, WEEKDAY.isoformat(), "11:00")
        service = BookingService(
            AppointmentsApi(api_client), store, auth_session, confirm_with_backend=True
        )

        with pytest.raises(SlotTakenError):
            await service.validate_and_book(1, 10, WEEKDAY, time(11, 0), "Control")

        assert backend.requests_to("POST", "/citas/") == []

    async def test_available_slots_after_refresh(self, service, backend):
        """Slots are derived from the refreshed store."""
        backend.add_appointment(1, WEEKDAY.isoformat(), "09:00")
        backend.add_appointment(2, WEEKDAY.isoformat(), "15:00", estado="Cancelada")
        await service.refresh()

        slots = await service.available_slots(WEEKDAY)

        assert time(9, 0) not in slots
        assert time(15, 0) in slots

    async def test_complete_appointment(self, service, backend):
        """Scheduled appointments can be completed."""
        backend.add_appointment(1, WEEKDAY.isoformat(), "09:00")
        await service.refresh()

        completed = await service.complete(1)

        assert completed.status == AppointmentStatus.COMPLETED
        assert backend.data["citas"][1]["estado"] == "Completada"

    async def test_terminal_status_rejected_locally(self, service, backend):
        """A completed appointment cannot be cancelled; nothing is sent."""
        backend.add_appointment(1, WEEKDAY.isoformat(), "09:00", estado="Completada")
        await service.refresh()

        with pytest.raises(IllegalTransitionError):
            await service.cancel(1)

        assert backend.requests_to("PATCH", "/citas/1/") == []

    async def test_network_failure_surfaces_detail(self, service, backend):
        """A failed create is terminal and carries the server detail."""
        backend.fail_next(500, {"detail": "Base de datos no disponible"})

        with pytest.raises(NetworkException) as exc_info:
            await service.validate_and_book(1, 10, WEEKDAY, time(9, 0), "Control")

        assert exc_info.value.message == "Base de datos no disponible"
        assert exc_info.value.status_code == 500


class ScriptedAppointmentsApi:
    """Appointment endpoints answering ``list`` from a script of (gate, records)."""

    def __init__(self, answers):
        self.answers = list(answers)

    async def list(self):
        gate, records = self.answers.pop(0)
        if gate is not None:
            await gate.wait()
        return records


class TestRefreshSequencing:
    """Test cases for overlapping refreshes."""

    async def test_stale_refresh_does_not_overwrite_newer(self, store, auth_session):
        """The slow first answer arrives last and is dropped."""
        gate = asyncio.Event()
        newer = AppointmentRecord.parse(
            {
                "id": 7,
                "mascota_id": 1,
                "veterinario_id": 10,
                "fecha": WEEKDAY.isoformat(),
                "hora": "09:00",
                "motivo": "Control",
            }
        )
        api = ScriptedAppointmentsApi([(gate, []), (None, [newer])])
        service = BookingService(api, store, auth_session)

        stale = asyncio.create_task(service.refresh())
        await asyncio.sleep(0)
        current = await service.refresh()
        gate.set()
        after_stale = await stale

        assert [a.id for a in current] == [7]
        assert [a.id for a in after_stale] == [7]
        assert [a.id for a in await store.list_appointments()] == [7]

    async def test_refresh_applies_when_alone(self, store, auth_session):
        api = ScriptedAppointmentsApi([(None, [])])
        service = BookingService(api, store, auth_session)
        await store.replace_appointments([AppointmentFactory.build()])

        assert await service.refresh() == []

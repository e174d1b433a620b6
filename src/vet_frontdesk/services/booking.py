"""
Appointment booking with double-booking protection.

The local conflict check runs at submission time against the appointments
loaded in the store. It is only a fast path: the backend is the authority
and answers HTTP 409 when another desk took the slot first, which surfaces
as the same ``SlotTakenError``.
"""

import logging
from datetime import date, time
from typing import Iterable, List, Optional

from ..api.appointments import AppointmentsApi
from ..api.sequencing import RequestSequencer
from ..auth import AuthSession
from ..database.store import EntityStore
from ..exceptions import ConflictException, SlotTakenError, ValidationException
from ..models.appointment import APPOINTMENT_LIFECYCLE, Appointment, AppointmentStatus
from ..permissions import Permission, require_permission
from ..schemas.appointment import REASON_MAX_LENGTH, AppointmentCreate
from ..utils.validation import REQUIRED_FIELDS_MESSAGE, is_blank
from . import slots

logger = logging.getLogger(__name__)

DATE_TIME_REQUIRED_MESSAGE = "Debe seleccionar fecha y hora"
INVALID_SLOT_MESSAGE = "El horario seleccionado no está disponible para esa fecha"
REASON_TOO_LONG_MESSAGE = f"El motivo no puede superar {REASON_MAX_LENGTH} caracteres"


def prepare_booking(
    pet_id: Optional[int],
    veterinarian_id: Optional[int],
    scheduled_date: Optional[date],
    scheduled_time: Optional[time],
    reason: Optional[str],
    existing: Iterable[Appointment],
    scope_to_veterinarian: bool = False,
) -> Appointment:
    """
    Validate a booking request and build the appointment to create.

    Args:
        pet_id: Pet to book for
        veterinarian_id: Veterinarian to book with
        scheduled_date: Calendar day
        scheduled_time: Slot time
        reason: Reason for the visit
        existing: Appointments currently known
        scope_to_veterinarian: Only the same veterinarian's appointments
            conflict; by default the clinic has a single schedule

    Returns:
        A new, unsaved appointment in ``Agendada`` status

    Raises:
        ValidationException: If a field is missing, too long or the time is not a slot
        SlotTakenError: If a non-cancelled appointment holds the slot
    """
    missing = [
        name
        for name, value in (
            ("mascota_id", pet_id),
            ("veterinario_id", veterinarian_id),
            ("motivo", reason),
        )
        if is_blank(value)
    ]
    if missing:
        raise ValidationException(
            message=REQUIRED_FIELDS_MESSAGE,
            field=missing[0],
            validation_errors={name: "Este campo es requerido" for name in missing},
        )

    reason = (reason or "").strip()
    if len(reason) > REASON_MAX_LENGTH:
        raise ValidationException(
            message=REASON_TOO_LONG_MESSAGE,
            field="motivo",
            validation_errors={"motivo": REASON_TOO_LONG_MESSAGE},
        )

    if scheduled_date is None or scheduled_time is None:
        raise ValidationException(
            message=DATE_TIME_REQUIRED_MESSAGE,
            field="fecha" if scheduled_date is None else "hora",
        )

    scheduled_time = scheduled_time.replace(second=0, microsecond=0)
    if not slots.is_template_slot(scheduled_date, scheduled_time):
        raise ValidationException(
            message=INVALID_SLOT_MESSAGE,
            field="hora",
            value=scheduled_time.strftime("%H:%M"),
        )

    scope = veterinarian_id if scope_to_veterinarian else None
    for appointment in existing:
        if appointment.occupies(scheduled_date, scheduled_time, veterinarian_id=scope):
            logger.info(
                f"Slot {scheduled_date} {scheduled_time} already held by appointment "
                f"{appointment.id}"
            )
            raise SlotTakenError(scheduled_date, scheduled_time)

    return Appointment(
        pet_id=pet_id,
        veterinarian_id=veterinarian_id,
        scheduled_date=scheduled_date,
        scheduled_time=scheduled_time,
        reason=reason,
        status=APPOINTMENT_LIFECYCLE.initial,
    )


class BookingService:
    """Appointment workflows over the backend and the entity store."""

    def __init__(
        self,
        api: AppointmentsApi,
        store: EntityStore,
        session: AuthSession,
        scope_to_veterinarian: bool = False,
        confirm_with_backend: bool = False,
        sequencer: Optional[RequestSequencer] = None,
    ):
        """
        Args:
            api: Appointment endpoints
            store: Entity store holding the loaded appointments
            session: Logged-in session; booking needs ``manage_appointments``
            scope_to_veterinarian: Check conflicts per veterinarian instead
                of clinic-wide
            confirm_with_backend: Ask ``/citas/validar-horario/`` before
                creating, in addition to the local check
            sequencer: Shared generation counters; a private one by default
        """
        self.api = api
        self.store = store
        self.session = session
        self.scope_to_veterinarian = scope_to_veterinarian
        self.confirm_with_backend = confirm_with_backend
        self.sequencer = sequencer or RequestSequencer()

    async def refresh(self) -> List[Appointment]:
        """
        Reload every appointment from the backend into the store.

        An answer overtaken by a later refresh is dropped.
        """
        applied, records = await self.sequencer.run("appointments", self.api.list())
        if applied:
            await self.store.replace_appointments(
                record.to_model() for record in records
            )
        return await self.store.list_appointments()

    async def available_slots(
        self, day: date, veterinarian_id: Optional[int] = None
    ) -> List[time]:
        scope = veterinarian_id if self.scope_to_veterinarian else None
        return slots.available_slots(
            day, await self.store.appointments_on(day), veterinarian_id=scope
        )

    async def validate_and_book(
        self,
        pet_id: Optional[int],
        veterinarian_id: Optional[int],
        scheduled_date: Optional[date],
        scheduled_time: Optional[time],
        reason: Optional[str],
    ) -> Appointment:
        """
        Book an appointment.

        Raises:
            NotAuthorizedError: Before any request, if the role may not book
            ValidationException: Before any request, for missing fields
            SlotTakenError: From the local check or a backend 409
            NetworkException: If the backend request fails
        """
        require_permission(self.session, Permission.MANAGE_APPOINTMENTS)
        existing = (
            await self.store.appointments_on(scheduled_date)
            if scheduled_date is not None
            else []
        )
        appointment = prepare_booking(
            pet_id,
            veterinarian_id,
            scheduled_date,
            scheduled_time,
            reason,
            existing,
            scope_to_veterinarian=self.scope_to_veterinarian,
        )

        if self.confirm_with_backend and not await self.api.is_slot_available(
            appointment.scheduled_date, appointment.scheduled_time
        ):
            raise SlotTakenError(appointment.scheduled_date, appointment.scheduled_time)

        try:
            record = await self.api.create(AppointmentCreate.from_model(appointment))
        except ConflictException as e:
            raise SlotTakenError(
                appointment.scheduled_date,
                appointment.scheduled_time,
                server_detail=e.server_detail,
            ) from e

        logger.info(
            f"Booked appointment {record.id} on {record.scheduled_date} at "
            f"{record.scheduled_time}"
        )
        await self.refresh()
        return record.to_model()

    async def _current(self, appointment_id: int) -> Appointment:
        appointment = await self.store.get(Appointment, appointment_id)
        if appointment is None:
            appointment = (await self.api.get(appointment_id)).to_model()
        return appointment

    async def change_status(
        self, appointment_id: int, status: AppointmentStatus
    ) -> Appointment:
        """
        Move an appointment to ``Completada`` or ``Cancelada``.

        Raises:
            IllegalTransitionError: Before any request, if the move is not allowed
        """
        require_permission(self.session, Permission.MANAGE_APPOINTMENTS)
        appointment = await self._current(appointment_id)
        APPOINTMENT_LIFECYCLE.check(appointment.status, status)

        record = await self.api.change_status(appointment_id, status)
        await self.refresh()
        return record.to_model()

    async def complete(self, appointment_id: int) -> Appointment:
        return await self.change_status(appointment_id, AppointmentStatus.COMPLETED)

    async def cancel(self, appointment_id: int) -> Appointment:
        return await self.change_status(appointment_id, AppointmentStatus.CANCELLED)

    async def delete(self, appointment_id: int) -> None:
        require_permission(self.session, Permission.MANAGE_APPOINTMENTS)
        await self.api.delete(appointment_id)
        await self.refresh()

"""
Appointment endpoints (``/citas/``).
"""

from datetime import date, time
from typing import List

from ..models.appointment import AppointmentStatus
from ..schemas.appointment import (
    AppointmentCreate,
    AppointmentRecord,
    AppointmentStatusUpdate,
    SlotAvailability,
    SlotCheck,
)
from ..utils.datetime_utils import format_wire_date, format_wire_time
from .client import ApiClient, parse_many, parse_one


class AppointmentsApi:
    BASE = "/citas/"

    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self) -> List[AppointmentRecord]:
        return parse_many(AppointmentRecord, await self.client.get(self.BASE))

    async def get(self, appointment_id: int) -> AppointmentRecord:
        return parse_one(
            AppointmentRecord, await self.client.get(f"{self.BASE}{appointment_id}/")
        )

    async def create(self, data: AppointmentCreate) -> AppointmentRecord:
        return parse_one(
            AppointmentRecord, await self.client.post(self.BASE, data.to_payload())
        )

    async def update(
        self, appointment_id: int, data: AppointmentCreate
    ) -> AppointmentRecord:
        return parse_one(
            AppointmentRecord,
            await self.client.put(f"{self.BASE}{appointment_id}/", data.to_payload()),
        )

    async def change_status(
        self, appointment_id: int, status: AppointmentStatus
    ) -> AppointmentRecord:
        body = AppointmentStatusUpdate(status=status).to_payload()
        return parse_one(
            AppointmentRecord,
            await self.client.patch(f"{self.BASE}{appointment_id}/", body),
        )

    async def delete(self, appointment_id: int) -> None:
        await self.client.delete(f"{self.BASE}{appointment_id}/")

    async def available_slots(self, day: date) -> List[SlotAvailability]:
        payload = await self.client.get(
            f"{self.BASE}horarios-disponibles/", params={"fecha": format_wire_date(day)}
        )
        return parse_many(SlotAvailability, payload)

    async def is_slot_available(self, day: date, slot: time) -> bool:
        """Ask the backend whether ``slot`` on ``day`` is still free."""
        payload = await self.client.get(
            f"{self.BASE}validar-horario/",
            params={"fecha": format_wire_date(day), "hora": format_wire_time(slot)},
        )
        return parse_one(SlotCheck, payload).available

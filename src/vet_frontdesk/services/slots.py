"""
Appointment slot calculation.

The clinic books on fixed slot times: seven a day on weekdays (a morning and
an afternoon block) and three on Saturday and Sunday mornings. A slot is
free unless a non-cancelled appointment already holds it on that date.
"""

from datetime import date, time
from typing import Iterable, List, Optional, Tuple

from ..models.appointment import Appointment
from ..schemas.appointment import SlotAvailability
from ..utils.datetime_utils import is_weekend, week_dates

WEEKDAY_SLOTS: Tuple[time, ...] = (
    time(9, 0),
    time(10, 0),
    time(11, 0),
    time(14, 0),
    time(15, 0),
    time(16, 0),
    time(17, 0),
)

WEEKEND_SLOTS: Tuple[time, ...] = (
    time(9, 0),
    time(10, 0),
    time(11, 0),
)


def slot_template(day: date) -> Tuple[time, ...]:
    """All slot times of ``day``'s weekday class, in ascending order."""
    return WEEKEND_SLOTS if is_weekend(day) else WEEKDAY_SLOTS


def is_template_slot(day: date, slot: time) -> bool:
    return slot in slot_template(day)


def taken_slots(
    day: date,
    appointments: Iterable[Appointment],
    veterinarian_id: Optional[int] = None,
) -> set:
    """Slot times on ``day`` held by non-cancelled appointments."""
    return {
        appointment.scheduled_time
        for appointment in appointments
        if appointment.occupies(
            day, appointment.scheduled_time, veterinarian_id=veterinarian_id
        )
    }


def available_slots(
    day: date,
    appointments: Iterable[Appointment],
    veterinarian_id: Optional[int] = None,
) -> List[time]:
    """
    Bookable slot times for ``day``.

    Pure function of its inputs; callers re-derive it whenever the selected
    date or the loaded appointments change.

    Args:
        day: Calendar day being booked
        appointments: Appointments currently known, any date
        veterinarian_id: Restrict conflicts to this veterinarian's
            appointments; None keeps one clinic-wide schedule

    Returns:
        Free slot times in template order; empty when the day is fully booked
    """
    taken = taken_slots(day, appointments, veterinarian_id)
    return [slot for slot in slot_template(day) if slot not in taken]


def slot_availability(
    day: date,
    appointments: Iterable[Appointment],
    veterinarian_id: Optional[int] = None,
) -> List[SlotAvailability]:
    """Every template slot of ``day`` flagged free or taken."""
    taken = taken_slots(day, appointments, veterinarian_id)
    return [
        SlotAvailability(slot_date=day, slot_time=slot, available=slot not in taken)
        for slot in slot_template(day)
    ]


def week_overview(
    day: date, appointments: Iterable[Appointment]
) -> List[Tuple[date, List[Appointment]]]:
    """
    Appointments of the Monday-to-Sunday week containing ``day``.

    Returns:
        One ``(date, appointments)`` pair per day, appointments sorted by time
    """
    appointments = list(appointments)
    return [
        (
            current,
            sorted(
                (a for a in appointments if a.scheduled_date == current),
                key=lambda a: (a.scheduled_time, a.id or 0),
            ),
        )
        for current in week_dates(day)
    ]

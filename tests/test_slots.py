"""
Tests for appointment slot calculation.
"""

from datetime import date, time, timedelta

import pytest

from conftest import SATURDAY, WEEKDAY, AppointmentFactory
from vet_frontdesk.models import AppointmentStatus
from vet_frontdesk.services.slots import (
    WEEKDAY_SLOTS,
    WEEKEND_SLOTS,
    available_slots,
    is_template_slot,
    slot_availability,
    slot_template,
    week_overview,
)


class TestSlotTemplate:
    """Test cases for the weekday and weekend templates."""

    def test_weekday_template(self):
        """Weekdays offer a morning and an afternoon block."""
        assert slot_template(WEEKDAY) == (
            time(9, 0),
            time(10, 0),
            time(11, 0),
            time(14, 0),
            time(15, 0),
            time(16, 0),
            time(17, 0),
        )

    def test_weekend_template(self):
        """Saturday and Sunday offer three morning slots."""
        assert slot_template(SATURDAY) == (time(9, 0), time(10, 0), time(11, 0))
        assert slot_template(SATURDAY + timedelta(days=1)) == WEEKEND_SLOTS

    @pytest.mark.parametrize("offset", range(14))
    def test_empty_day_returns_full_template(self, offset):
        """Without appointments every template slot is free, sorted and unique."""
        day = date(2025, 1, 13) + timedelta(days=offset)
        slots = available_slots(day, [])

        expected = WEEKEND_SLOTS if day.weekday() >= 5 else WEEKDAY_SLOTS
        assert slots == list(expected)
        assert slots == sorted(set(slots))

    def test_is_template_slot(self):
        """Afternoon times only exist on weekdays."""
        assert is_template_slot(WEEKDAY, time(14, 0))
        assert not is_template_slot(SATURDAY, time(14, 0))
        assert not is_template_slot(WEEKDAY, time(12, 30))


class TestAvailableSlots:
    """Test cases for excluding booked slots."""

    def test_booked_slot_is_excluded(self):
        """A scheduled appointment takes its slot."""
        booked = AppointmentFactory.build(scheduled_time=time(10, 0))

        slots = available_slots(WEEKDAY, [booked])

        assert time(10, 0) not in slots
        assert len(slots) == len(WEEKDAY_SLOTS) - 1

    def test_completed_appointment_still_holds_slot(self):
        """Only cancellation frees a slot."""
        done = AppointmentFactory.build(
            scheduled_time=time(11, 0), status=AppointmentStatus.COMPLETED
        )

        assert time(11, 0) not in available_slots(WEEKDAY, [done])

    def test_cancelled_appointment_frees_slot(self):
        """A cancelled appointment does not block anything."""
        cancelled = AppointmentFactory.build(
            scheduled_time=time(9, 0), status=AppointmentStatus.CANCELLED
        )

        assert available_slots(WEEKDAY, [cancelled]) == list(WEEKDAY_SLOTS)

    def test_other_dates_are_ignored(self):
        """Appointments on other days never block this day."""
        tomorrow = AppointmentFactory.build(
            scheduled_date=WEEKDAY + timedelta(days=1), scheduled_time=time(9, 0)
        )

        assert time(9, 0) in available_slots(WEEKDAY, [tomorrow])

    def test_fully_booked_day_is_empty_not_error(self):
        """A full weekend day yields an empty list."""
        booked = [
            AppointmentFactory.build(scheduled_date=SATURDAY, scheduled_time=slot)
            for slot in WEEKEND_SLOTS
        ]

        assert available_slots(SATURDAY, booked) == []

    def test_conflicts_are_clinic_wide_by_default(self):
        """Another veterinarian's appointment blocks the slot for everyone."""
        other_vet = AppointmentFactory.build(veterinarian_id=20, scheduled_time=time(9, 0))

        assert time(9, 0) not in available_slots(WEEKDAY, [other_vet])

    def test_veterinarian_scope(self):
        """With a veterinarian scope only that veterinarian's bookings count."""
        other_vet = AppointmentFactory.build(veterinarian_id=20, scheduled_time=time(9, 0))

        assert time(9, 0) in available_slots(WEEKDAY, [other_vet], veterinarian_id=10)
        assert time(9, 0) not in available_slots(
            WEEKDAY, [other_vet], veterinarian_id=20
        )

    def test_slot_availability_flags(self):
        """Every template slot is reported with its availability."""
        booked = AppointmentFactory.build(
            scheduled_date=SATURDAY, scheduled_time=time(10, 0)
        )

        flags = slot_availability(SATURDAY, [booked])

        assert [(f.slot_time, f.available) for f in flags] == [
            (time(9, 0), True),
            (time(10, 0), False),
            (time(11, 0), True),
        ]
        assert all(f.slot_date == SATURDAY for f in flags)


class TestWeekOverview:
    """Test cases for the weekly calendar."""

    def test_week_runs_monday_to_sunday(self):
        """The overview covers the week containing the day."""
        overview = week_overview(WEEKDAY, [])

        assert [day for day, _ in overview] == [
            date(2025, 1, 13) + timedelta(days=i) for i in range(7)
        ]

    def test_appointments_grouped_and_sorted(self):
        """Each day lists its appointments by time."""
        late = AppointmentFactory.build(scheduled_time=time(16, 0))
        early = AppointmentFactory.build(scheduled_time=time(9, 0))
        saturday = AppointmentFactory.build(scheduled_date=SATURDAY)

        overview = dict(week_overview(WEEKDAY, [late, early, saturday]))

        assert overview[WEEKDAY] == [early, late]
        assert overview[SATURDAY] == [saturday]
        assert overview[date(2025, 1, 13)] == []

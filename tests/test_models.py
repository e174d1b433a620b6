"""
Tests for the entity models and their status lifecycles.
"""

from datetime import date, time
from decimal import Decimal

import pytest

from conftest import (
    WEEKDAY,
    AppointmentFactory,
    ConsultationFactory,
    InvoiceFactory,
    PetFactory,
    UserFactory,
)
from vet_frontdesk.exceptions import IllegalTransitionError
from vet_frontdesk.models import (
    APPOINTMENT_LIFECYCLE,
    INVOICE_LIFECYCLE,
    Appointment,
    AppointmentStatus,
    ConsultationStatus,
    Invoice,
    InvoiceStatus,
    PaymentMethod,
    PetStatus,
    User,
    UserRole,
    UserStatus,
    append_note,
)


class TestLifecycles:
    """Test cases for the allowed status transitions."""

    def test_appointment_lifecycle(self):
        assert APPOINTMENT_LIFECYCLE.initial == AppointmentStatus.SCHEDULED
        assert APPOINTMENT_LIFECYCLE.can_transition(
            AppointmentStatus.SCHEDULED, AppointmentStatus.CANCELLED
        )
        assert APPOINTMENT_LIFECYCLE.is_terminal(AppointmentStatus.COMPLETED)
        assert APPOINTMENT_LIFECYCLE.is_terminal(AppointmentStatus.CANCELLED)

    @pytest.mark.parametrize("terminal", [InvoiceStatus.PAID, InvoiceStatus.VOIDED])
    def test_invoice_terminal_states(self, terminal):
        assert INVOICE_LIFECYCLE.is_terminal(terminal)
        for target in InvoiceStatus:
            assert not INVOICE_LIFECYCLE.can_transition(terminal, target)

    def test_overdue_settles_like_pending(self):
        assert INVOICE_LIFECYCLE.allowed_targets(
            InvoiceStatus.OVERDUE
        ) == INVOICE_LIFECYCLE.allowed_targets(InvoiceStatus.PENDING)

    def test_check_raises(self):
        with pytest.raises(IllegalTransitionError) as exc_info:
            INVOICE_LIFECYCLE.check(InvoiceStatus.PAID, InvoiceStatus.VOIDED)

        assert exc_info.value.from_state == "Pagada"
        assert exc_info.value.entity == "la factura"


class TestAppointment:
    """Test cases for the Appointment model."""

    def test_defaults_to_scheduled(self):
        appointment = Appointment(
            id=1,
            pet_id=1,
            veterinarian_id=10,
            scheduled_date=WEEKDAY,
            scheduled_time=time(9, 0),
        )

        assert appointment.is_scheduled
        assert appointment.holds_slot

    def test_occupies(self):
        appointment = AppointmentFactory.build(veterinarian_id=10)

        assert appointment.occupies(WEEKDAY, time(9, 0))
        assert appointment.occupies(WEEKDAY, time(9, 0), veterinarian_id=10)
        assert not appointment.occupies(WEEKDAY, time(9, 0), veterinarian_id=11)
        assert not appointment.occupies(WEEKDAY, time(10, 0))
        assert not appointment.occupies(date(2025, 1, 16), time(9, 0))

    def test_completed_still_occupies(self):
        appointment = AppointmentFactory.build()
        appointment.complete()

        assert appointment.is_completed
        assert appointment.occupies(WEEKDAY, time(9, 0))

    def test_cancel_frees_slot(self):
        appointment = AppointmentFactory.build()
        appointment.cancel()

        assert appointment.is_cancelled
        assert not appointment.occupies(WEEKDAY, time(9, 0))

    def test_terminal_status_cannot_change(self):
        appointment = AppointmentFactory.build(status=AppointmentStatus.CANCELLED)

        assert not appointment.can_transition_to(AppointmentStatus.COMPLETED)
        with pytest.raises(IllegalTransitionError):
            appointment.complete()
        assert appointment.is_cancelled


class TestInvoice:
    """Test cases for the Invoice model."""

    def test_defaults_to_pending(self):
        invoice = Invoice(
            id=1,
            client_id=1,
            consultation_id=1,
            invoice_number="FAC-20250115-0001",
            issue_date=WEEKDAY,
            due_date=date(2025, 2, 14),
            subtotal=Decimal("100.00"),
            tax=Decimal("13.00"),
            total=Decimal("113.00"),
        )

        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.is_open

    def test_register_payment(self):
        invoice = InvoiceFactory.build(notes="Primera visita")

        invoice.register_payment(PaymentMethod.TRANSFER, WEEKDAY, note="Ref 123")

        assert invoice.is_paid
        assert invoice.payment_method == PaymentMethod.TRANSFER
        assert invoice.payment_date == WEEKDAY
        assert invoice.notes == "Primera visita\nRef 123"

    def test_paid_cannot_be_voided(self):
        invoice = InvoiceFactory.build()
        invoice.register_payment(PaymentMethod.CASH, WEEKDAY)

        with pytest.raises(IllegalTransitionError):
            invoice.void("Error")
        assert invoice.is_paid

    def test_void_keeps_reason(self):
        invoice = InvoiceFactory.build()

        invoice.void("  Cobro duplicado ")

        assert invoice.is_voided
        assert invoice.notes == "Anulada: Cobro duplicado"
        with pytest.raises(IllegalTransitionError):
            invoice.register_payment(PaymentMethod.CASH, WEEKDAY)

    def test_void_without_reason(self):
        invoice = InvoiceFactory.build()

        invoice.void()

        assert invoice.notes is None

    def test_overdue_is_derived(self):
        invoice = InvoiceFactory.build(due_date=date(2025, 1, 14))

        assert invoice.is_overdue(WEEKDAY)
        assert invoice.display_status(WEEKDAY) == InvoiceStatus.OVERDUE
        assert not invoice.is_overdue(date(2025, 1, 14))
        assert invoice.status == InvoiceStatus.PENDING

    def test_paid_is_never_overdue(self):
        invoice = InvoiceFactory.build(
            due_date=date(2025, 1, 1),
            status=InvoiceStatus.PAID,
            payment_method=PaymentMethod.CARD,
        )

        assert not invoice.is_overdue(WEEKDAY)
        assert invoice.display_status(WEEKDAY) == InvoiceStatus.PAID

    def test_backend_overdue_can_be_paid(self):
        invoice = InvoiceFactory.build(status=InvoiceStatus.OVERDUE)

        invoice.register_payment(PaymentMethod.CHECK, WEEKDAY)

        assert invoice.is_paid

    def test_append_note(self):
        assert append_note(None, "  ") is None
        assert append_note("a", None) == "a"
        assert append_note(None, " b ") == "b"


class TestUserAndPet:
    """Test cases for users, clients and pets."""

    def test_user_defaults(self):
        user = User(id=1, first_name="Ana", last_name="")

        assert user.role == UserRole.CLIENT
        assert user.status == UserStatus.ACTIVE
        assert user.pet_count == 0
        assert user.full_name == "Ana"
        assert user.is_client
        assert not user.has_login

    def test_staff_properties(self):
        vet = UserFactory.build_veterinarian()

        assert vet.is_staff
        assert vet.is_veterinarian
        assert vet.has_login
        assert repr(vet) == f"<User(id={vet.id}, name='Carlos Ruiz', role='Veterinario')>"

    def test_user_activation(self):
        client = UserFactory.build()

        client.deactivate()
        assert not client.is_active
        client.activate()
        assert client.is_active

    def test_pet_activation(self):
        pet = PetFactory.build(owner_id=1)

        pet.deactivate()
        assert pet.status == PetStatus.INACTIVE
        assert not pet.is_active

    def test_consultation_defaults(self):
        consultation = ConsultationFactory.build(status=ConsultationStatus.PENDING)

        assert not consultation.is_completed


class TestBaseModel:
    """Test cases for the shared model behaviour."""

    def test_to_dict_serializes_values(self):
        invoice = InvoiceFactory.build(payment_method=PaymentMethod.CARD)

        data = invoice.to_dict()

        assert data["total"] == "113.00"
        assert data["issue_date"] == "2025-01-15"
        assert data["status"] == "Pendiente"
        assert data["payment_method"] == "Tarjeta"

    def test_update_fields(self):
        pet = PetFactory.build(owner_id=1)

        pet.update_fields(name="Rocky", breed="Mestizo")

        assert pet.name == "Rocky"
        with pytest.raises(AttributeError):
            pet.update_fields(color="negro")

    def test_table_name(self):
        assert Invoice.get_table_name() == "invoices"

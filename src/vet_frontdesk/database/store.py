"""
In-memory entity store.

The store holds this session's copies of the backend collections. Every
mutation path refreshes a whole collection from the backend and hands it to
a ``replace_*`` method; the only local patch is replacing one record by id
with the version the backend returned. Name lookups across collections are
done once per query with SQL joins, producing the view records the list
screens show.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased

from ..exceptions import StoreException
from ..models import (
    Appointment,
    Base,
    BaseModel,
    Consultation,
    ConsultationStatus,
    Invoice,
    InvoiceStatus,
    Pet,
    PetStatus,
    Treatment,
    TreatmentStatus,
    User,
    UserRole,
)
from ..schemas.views import (
    MISSING,
    AppointmentView,
    BillingSummary,
    ConsultationView,
    InvoiceView,
    TreatmentSummary,
    TreatmentView,
)
from ..utils.filtering import filter_by_term
from .connection import create_engine
from .session import SessionManager

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

ZERO = Decimal("0.00")


def _name(user: Optional[User]) -> str:
    return user.full_name if user is not None else MISSING


class EntityStore:
    """Per-session copies of the clinic collections."""

    def __init__(self, session_manager: SessionManager):
        self.sessions = session_manager

    @classmethod
    async def open(cls, store_url: str = "sqlite+aiosqlite:///:memory:") -> "EntityStore":
        """Create an engine for ``store_url`` and an initialized store on it."""
        store = cls(SessionManager(create_engine(store_url)))
        await store.initialize()
        return store

    async def initialize(self) -> None:
        await self.sessions.initialize_database(Base.metadata)

    async def close(self) -> None:
        await self.sessions.close_all_sessions()

    # Collection replacement

    async def _replace(
        self,
        model: Type[M],
        records: Iterable[M],
        scope=None,
    ) -> int:
        records = list(records)
        statement = delete(model)
        if scope is not None:
            statement = statement.where(scope)
        try:
            async with self.sessions.get_transaction() as session:
                await session.execute(statement)
                for record in records:
                    await session.merge(record)
        except SQLAlchemyError as e:
            logger.error(f"Failed to replace {model.get_table_name()}: {e}")
            raise StoreException(
                f"Failed to replace {model.get_table_name()}",
                operation="replace",
                original_error=e,
            )
        logger.debug(f"Replaced {model.get_table_name()} with {len(records)} records")
        return len(records)

    async def replace_clients(self, clients: Iterable[User]) -> int:
        """Replace the client list, leaving staff records alone."""
        return await self._replace(User, clients, User.role == UserRole.CLIENT)

    async def replace_users(
        self, users: Iterable[User], roles: Optional[Iterable[UserRole]] = None
    ) -> int:
        """
        Replace system users.

        Args:
            users: Freshly fetched users
            roles: Only replace users having one of these roles; all users
                when omitted
        """
        scope = User.role.in_(list(roles)) if roles is not None else None
        return await self._replace(User, users, scope)

    async def replace_pets(self, pets: Iterable[Pet]) -> int:
        return await self._replace(Pet, pets)

    async def replace_appointments(self, appointments: Iterable[Appointment]) -> int:
        return await self._replace(Appointment, appointments)

    async def replace_consultations(self, consultations: Iterable[Consultation]) -> int:
        return await self._replace(Consultation, consultations)

    async def replace_invoices(self, invoices: Iterable[Invoice]) -> int:
        return await self._replace(Invoice, invoices)

    async def replace_treatments(self, treatments: Iterable[Treatment]) -> int:
        return await self._replace(Treatment, treatments)

    async def upsert(self, record: M) -> M:
        """Replace one record by id with the version returned by the backend."""
        try:
            async with self.sessions.get_transaction() as session:
                merged = await session.merge(record)
        except SQLAlchemyError as e:
            raise StoreException(
                f"Failed to store {record!r}", operation="upsert", original_error=e
            )
        return merged

    async def remove(self, model: Type[M], record_id: int) -> None:
        try:
            async with self.sessions.get_transaction() as session:
                await session.execute(delete(model).where(model.id == record_id))
        except SQLAlchemyError as e:
            raise StoreException(
                f"Failed to remove {model.__name__} {record_id}",
                operation="remove",
                original_error=e,
            )

    # Plain queries

    async def _scalars(self, statement: Select) -> List:
        try:
            async with self.sessions.get_session() as session:
                result = await session.execute(statement)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreException("Query failed", operation="query", original_error=e)

    async def _rows(self, statement: Select) -> Sequence:
        try:
            async with self.sessions.get_session() as session:
                result = await session.execute(statement)
                return result.all()
        except SQLAlchemyError as e:
            raise StoreException("Query failed", operation="query", original_error=e)

    async def get(self, model: Type[M], record_id: int) -> Optional[M]:
        async with self.sessions.get_session() as session:
            return await session.get(model, record_id)

    async def list_clients(self) -> List[User]:
        return await self._scalars(
            select(User)
            .where(User.role == UserRole.CLIENT)
            .order_by(User.first_name, User.last_name, User.id)
        )

    async def list_users(self, role: Optional[UserRole] = None) -> List[User]:
        statement = select(User).order_by(User.first_name, User.last_name, User.id)
        if role is not None:
            statement = statement.where(User.role == role)
        return await self._scalars(statement)

    async def list_veterinarians(self) -> List[User]:
        return await self.list_users(UserRole.VETERINARIAN)

    async def list_pets(self, active_only: bool = False) -> List[Pet]:
        statement = select(Pet).order_by(Pet.name, Pet.id)
        if active_only:
            statement = statement.where(Pet.status == PetStatus.ACTIVE)
        return await self._scalars(statement)

    async def pets_of(self, owner_id: int) -> List[Pet]:
        return await self._scalars(
            select(Pet).where(Pet.owner_id == owner_id).order_by(Pet.name, Pet.id)
        )

    async def list_appointments(self) -> List[Appointment]:
        return await self._scalars(
            select(Appointment).order_by(
                Appointment.scheduled_date, Appointment.scheduled_time, Appointment.id
            )
        )

    async def appointments_on(self, day: date) -> List[Appointment]:
        return await self._scalars(
            select(Appointment)
            .where(Appointment.scheduled_date == day)
            .order_by(Appointment.scheduled_time, Appointment.id)
        )

    async def list_consultations(self) -> List[Consultation]:
        return await self._scalars(
            select(Consultation).order_by(
                Consultation.consulted_on.desc(), Consultation.id.desc()
            )
        )

    async def list_invoices(self) -> List[Invoice]:
        return await self._scalars(
            select(Invoice).order_by(Invoice.issue_date.desc(), Invoice.id.desc())
        )

    async def list_treatments(self) -> List[Treatment]:
        return await self._scalars(
            select(Treatment).order_by(
                Treatment.start_date.desc(), Treatment.id.desc()
            )
        )

    async def invoice_for_consultation(self, consultation_id: int) -> Optional[Invoice]:
        invoices = await self._scalars(
            select(Invoice).where(Invoice.consultation_id == consultation_id).limit(1)
        )
        return invoices[0] if invoices else None

    async def consultations_awaiting_invoice(self) -> List[Consultation]:
        """Completed consultations that no invoice references yet."""
        invoiced = select(Invoice.consultation_id)
        return await self._scalars(
            select(Consultation)
            .where(Consultation.status == ConsultationStatus.COMPLETED)
            .where(Consultation.id.not_in(invoiced))
            .order_by(Consultation.consulted_on, Consultation.id)
        )

    # Joined views

    async def appointment_views(self, day: Optional[date] = None) -> List[AppointmentView]:
        owner = aliased(User)
        vet = aliased(User)
        statement = (
            select(Appointment, Pet, owner, vet)
            .outerjoin(Pet, Pet.id == Appointment.pet_id)
            .outerjoin(owner, owner.id == Pet.owner_id)
            .outerjoin(vet, vet.id == Appointment.veterinarian_id)
            .order_by(
                Appointment.scheduled_date, Appointment.scheduled_time, Appointment.id
            )
        )
        if day is not None:
            statement = statement.where(Appointment.scheduled_date == day)

        return [
            AppointmentView(
                id=appointment.id,
                scheduled_date=appointment.scheduled_date,
                scheduled_time=appointment.scheduled_time,
                reason=appointment.reason,
                status=appointment.status,
                pet_id=appointment.pet_id,
                pet_name=pet.name if pet is not None else MISSING,
                owner_name=_name(pet_owner),
                veterinarian_id=appointment.veterinarian_id,
                veterinarian_name=_name(veterinarian),
            )
            for appointment, pet, pet_owner, veterinarian in await self._rows(statement)
        ]

    async def consultation_views(
        self, only: Optional[Iterable[int]] = None
    ) -> List[ConsultationView]:
        owner = aliased(User)
        vet = aliased(User)
        statement = (
            select(Consultation, Pet, owner, vet)
            .outerjoin(Pet, Pet.id == Consultation.pet_id)
            .outerjoin(owner, owner.id == Pet.owner_id)
            .outerjoin(vet, vet.id == Consultation.veterinarian_id)
            .order_by(Consultation.consulted_on.desc(), Consultation.id.desc())
        )
        if only is not None:
            statement = statement.where(Consultation.id.in_(list(only)))

        return [
            ConsultationView(
                id=consultation.id,
                consulted_on=consultation.consulted_on,
                reason=consultation.reason,
                diagnosis=consultation.diagnosis,
                treatment=consultation.treatment,
                cost=consultation.cost,
                status=consultation.status,
                pet_id=consultation.pet_id,
                pet_name=pet.name if pet is not None else MISSING,
                species=pet.species if pet is not None else MISSING,
                owner_id=pet.owner_id if pet is not None else None,
                owner_name=_name(pet_owner),
                veterinarian_id=consultation.veterinarian_id,
                veterinarian_name=_name(veterinarian),
            )
            for consultation, pet, pet_owner, veterinarian in await self._rows(
                statement
            )
        ]

    async def invoice_views(self, today: date) -> List[InvoiceView]:
        client = aliased(User)
        statement = (
            select(Invoice, client)
            .outerjoin(client, client.id == Invoice.client_id)
            .order_by(Invoice.issue_date.desc(), Invoice.id.desc())
        )
        return [
            InvoiceView(
                id=invoice.id,
                invoice_number=invoice.invoice_number,
                issue_date=invoice.issue_date,
                due_date=invoice.due_date,
                subtotal=invoice.subtotal,
                tax=invoice.tax,
                total=invoice.total,
                status=invoice.status,
                display_status=invoice.display_status(today),
                payment_method=invoice.payment_method,
                payment_date=invoice.payment_date,
                client_id=invoice.client_id,
                client_name=_name(invoice_client),
                consultation_id=invoice.consultation_id,
            )
            for invoice, invoice_client in await self._rows(statement)
        ]

    async def treatment_views(self) -> List[TreatmentView]:
        vet = aliased(User)
        statement = (
            select(Treatment, Pet, vet)
            .outerjoin(Pet, Pet.id == Treatment.pet_id)
            .outerjoin(vet, vet.id == Treatment.veterinarian_id)
            .order_by(Treatment.start_date.desc(), Treatment.id.desc())
        )
        return [
            TreatmentView(
                id=treatment.id,
                name=treatment.name,
                description=treatment.description,
                kind=treatment.kind,
                status=treatment.status,
                start_date=treatment.start_date,
                end_date=treatment.end_date,
                dose=treatment.dose,
                frequency=treatment.frequency,
                cost=treatment.cost,
                pet_id=treatment.pet_id,
                pet_name=pet.name if pet is not None else MISSING,
                veterinarian_id=treatment.veterinarian_id,
                veterinarian_name=_name(veterinarian),
            )
            for treatment, pet, veterinarian in await self._rows(statement)
        ]

    # Search

    async def search_clients(self, term: Optional[str]) -> List[User]:
        return filter_by_term(
            await self.list_clients(),
            term,
            lambda c: (c.first_name, c.last_name, c.full_name, c.email, c.phone),
        )

    async def search_pets(self, term: Optional[str]) -> List[Pet]:
        return filter_by_term(
            await self.list_pets(), term, lambda p: (p.name, p.species, p.breed)
        )

    async def search_appointments(
        self, term: Optional[str], day: Optional[date] = None
    ) -> List[AppointmentView]:
        return filter_by_term(
            await self.appointment_views(day),
            term,
            lambda a: (a.pet_name, a.owner_name, a.veterinarian_name, a.reason),
        )

    async def search_consultations(self, term: Optional[str]) -> List[ConsultationView]:
        return filter_by_term(
            await self.consultation_views(),
            term,
            lambda c: (
                c.pet_name,
                c.owner_name,
                c.veterinarian_name,
                c.reason,
                c.diagnosis,
            ),
        )

    async def search_invoices(self, term: Optional[str], today: date) -> List[InvoiceView]:
        return filter_by_term(
            await self.invoice_views(today),
            term,
            lambda i: (i.invoice_number, i.client_name),
        )

    async def search_treatments(self, term: Optional[str]) -> List[TreatmentView]:
        return filter_by_term(
            await self.treatment_views(),
            term,
            lambda t: (t.name, t.description, t.pet_name, t.kind.value),
        )

    # Statistics

    async def billing_summary(self, today: date) -> BillingSummary:
        """
        Billing figures over the loaded invoices.

        Voided invoices are excluded from every amount; pending covers every
        open invoice, overdue ones included.
        """
        invoiced = paid = pending = ZERO
        overdue = 0
        invoices = await self.list_invoices()
        for invoice in invoices:
            if invoice.status == InvoiceStatus.VOIDED:
                continue
            invoiced += invoice.total
            if invoice.is_paid:
                paid += invoice.total
            elif invoice.is_open:
                pending += invoice.total
                if invoice.is_overdue(today):
                    overdue += 1

        return BillingSummary(
            total_invoiced=invoiced,
            total_paid=paid,
            total_pending=pending,
            overdue_count=overdue,
            invoice_count=len(invoices),
        )

    async def treatment_summary(self) -> TreatmentSummary:
        """Counts per status over the loaded treatments; the cost covers all of them."""
        treatments = await self.list_treatments()
        by_status = {status: 0 for status in TreatmentStatus}
        total = ZERO
        for treatment in treatments:
            by_status[treatment.status] += 1
            total += treatment.cost
        return TreatmentSummary(
            active_count=by_status[TreatmentStatus.ACTIVE],
            completed_count=by_status[TreatmentStatus.COMPLETED],
            pending_count=by_status[TreatmentStatus.PENDING],
            total_cost=total,
        )

"""
Treatment records of pets.

Only administrators and veterinarians manage treatments.
"""

import logging
from typing import List, Optional

from ..api.sequencing import RequestSequencer
from ..api.treatments import TreatmentsApi
from ..auth import AuthSession
from ..database.store import EntityStore
from ..models.treatment import Treatment
from ..permissions import Permission, require_permission
from ..schemas.treatment import TreatmentCreate, TreatmentUpdate
from ..schemas.views import TreatmentSummary

logger = logging.getLogger(__name__)


class TreatmentService:
    """Treatment workflows, gated on the ``manage_treatments`` permission."""

    def __init__(
        self,
        api: TreatmentsApi,
        store: EntityStore,
        session: AuthSession,
        sequencer: Optional[RequestSequencer] = None,
    ):
        self.api = api
        self.store = store
        self.session = session
        self.sequencer = sequencer or RequestSequencer()

    async def refresh(self) -> List[Treatment]:
        applied, records = await self.sequencer.run("treatments", self.api.list())
        if applied:
            await self.store.replace_treatments(record.to_model() for record in records)
        return await self.store.list_treatments()

    async def create(self, data: TreatmentCreate) -> Treatment:
        """
        Prescribe a treatment.

        Raises:
            NotAuthorizedError: Before any request, for roles other than
                administrator and veterinarian
        """
        require_permission(self.session, Permission.MANAGE_TREATMENTS)
        record = await self.api.create(data)
        logger.info(f"Created treatment {record.id} for pet {record.pet_id}")
        await self.refresh()
        return record.to_model()

    async def update(self, treatment_id: int, data: TreatmentUpdate) -> Treatment:
        require_permission(self.session, Permission.MANAGE_TREATMENTS)
        record = await self.api.update(treatment_id, data)
        await self.refresh()
        return record.to_model()

    async def delete(self, treatment_id: int) -> None:
        require_permission(self.session, Permission.MANAGE_TREATMENTS)
        await self.api.delete(treatment_id)
        logger.info(f"Deleted treatment {treatment_id}")
        await self.refresh()

    async def summary(self) -> TreatmentSummary:
        return await self.store.treatment_summary()

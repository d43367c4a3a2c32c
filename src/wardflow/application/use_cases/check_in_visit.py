"""Patient check-in: open a waiting visit with a token and queue position."""

import logging

from ...core.utils.datetime_utils import utc_now
from ...domain.entities.visit import Visit
from ...domain.value_objects.record_id import VisitId
from ..dto.visit_dto import CheckInRequest
from ..ports.repositories.sequence_repo import SequenceRepository
from ..ports.repositories.visit_repo import VisitRepository

logger = logging.getLogger(__name__)


def token_counter_key(department: str, day: str) -> str:
    """Token numbers restart every day for each department."""
    return f"token:{department.lower()}:{day}"


def queue_counter_key(department: str) -> str:
    return f"queue:{department.lower()}"


class CheckInVisitUseCase:
    def __init__(self, visit_repository: VisitRepository, sequences: SequenceRepository):
        self._visit_repository = visit_repository
        self._sequences = sequences

    async def execute(self, request: CheckInRequest) -> Visit:
        department = (request.department or "").strip()
        if not department:
            raise ValueError("Department is required for check-in")
        if not (request.patient_id or "").strip():
            raise ValueError("Patient ID is required for check-in")

        now = utc_now()
        token_number = await self._sequences.next_value(
            token_counter_key(department, now.strftime("%Y-%m-%d"))
        )
        queue_position = await self._sequences.next_value(queue_counter_key(department))

        visit = Visit(
            visit_id=VisitId.generate(),
            patient_id=request.patient_id.strip(),
            patient_name=request.patient_name,
            department=department,
            doctor_id=request.doctor_id,
            priority=request.priority,
            token_number=token_number,
            queue_position=queue_position,
            symptoms=request.symptoms,
            checked_in_at=now,
            updated_at=now,
        )
        await self._visit_repository.save(visit)
        logger.info(
            f"🎫 Checked in patient {visit.patient_id} to {department} "
            f"(token {token_number}, queue position {queue_position})"
        )
        return visit

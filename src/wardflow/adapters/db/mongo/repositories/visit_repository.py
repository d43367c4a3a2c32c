"""
MongoDB implementation of VisitRepository.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from beanie.operators import In, Set

from wardflow.application.ports.repositories.visit_repo import VisitRepository
from wardflow.core.utils.datetime_utils import as_utc
from wardflow.domain.entities.visit import ConsultationRecord, Visit
from wardflow.domain.enums import VisitPriority, VisitStatus
from wardflow.domain.value_objects.record_id import VisitId

from ..models.workflow_m import VisitMongo


class MongoVisitRepository(VisitRepository):
    """MongoDB implementation of VisitRepository."""

    async def save(self, visit: Visit) -> Visit:
        existing = await VisitMongo.find_one(VisitMongo.visit_id == visit.visit_id.value)
        fields = self._domain_to_fields(visit)
        if existing:
            for name, value in fields.items():
                setattr(existing, name, value)
            await existing.save()
        else:
            await VisitMongo(**fields).insert()
        return visit

    async def save_if_status(self, visit: Visit, expected_status: VisitStatus) -> bool:
        fields = self._domain_to_fields(visit)
        fields.pop("visit_id")
        result = await VisitMongo.find_one(
            VisitMongo.visit_id == visit.visit_id.value,
            VisitMongo.status == expected_status.value,
        ).update(Set(fields))
        return result is not None and result.matched_count > 0

    async def find_by_id(self, visit_id: VisitId) -> Optional[Visit]:
        visit_mongo = await VisitMongo.find_one(VisitMongo.visit_id == visit_id.value)
        if not visit_mongo:
            return None
        return self._mongo_to_domain(visit_mongo)

    async def find_by_status(
        self,
        statuses: Iterable[VisitStatus],
        doctor_id: Optional[str] = None,
        department: Optional[str] = None,
        checked_in_since: Optional[datetime] = None,
    ) -> List[Visit]:
        criteria = [In(VisitMongo.status, [status.value for status in statuses])]
        if doctor_id:
            criteria.append(VisitMongo.doctor_id == doctor_id)
        if department:
            criteria.append(VisitMongo.department == department)
        if checked_in_since:
            criteria.append(VisitMongo.checked_in_at >= checked_in_since)

        visits_mongo = (
            await VisitMongo.find(*criteria)
            .sort(+VisitMongo.queue_position, +VisitMongo.checked_in_at)
            .to_list()
        )
        return [self._mongo_to_domain(visit_mongo) for visit_mongo in visits_mongo]

    def _domain_to_fields(self, visit: Visit) -> Dict[str, Any]:
        consultation = dict(vars(visit.consultation)) if visit.consultation else None
        return {
            "visit_id": visit.visit_id.value,
            "patient_id": visit.patient_id,
            "patient_name": visit.patient_name,
            "department": visit.department,
            "doctor_id": visit.doctor_id,
            "status": visit.status.value,
            "priority": visit.priority.value,
            "token_number": visit.token_number,
            "queue_position": visit.queue_position,
            "symptoms": visit.symptoms,
            "diagnosis": visit.diagnosis,
            "consultation": consultation,
            "checked_in_at": visit.checked_in_at,
            "updated_at": visit.updated_at,
        }

    def _mongo_to_domain(self, visit_mongo: VisitMongo) -> Visit:
        consultation = None
        if visit_mongo.consultation:
            record = visit_mongo.consultation
            consultation = ConsultationRecord(
                chief_complaint=record.chief_complaint,
                history_of_present_illness=record.history_of_present_illness,
                examination_notes=record.examination_notes,
                diagnosis=record.diagnosis,
                treatment_plan=record.treatment_plan,
                follow_up_instructions=record.follow_up_instructions,
                started_at=as_utc(record.started_at) if record.started_at else None,
                ended_at=as_utc(record.ended_at) if record.ended_at else None,
            )
        return Visit(
            visit_id=VisitId(visit_mongo.visit_id),
            patient_id=visit_mongo.patient_id,
            patient_name=visit_mongo.patient_name,
            department=visit_mongo.department,
            doctor_id=visit_mongo.doctor_id,
            status=VisitStatus(visit_mongo.status),
            priority=VisitPriority(visit_mongo.priority),
            token_number=visit_mongo.token_number,
            queue_position=visit_mongo.queue_position,
            symptoms=visit_mongo.symptoms,
            diagnosis=visit_mongo.diagnosis,
            consultation=consultation,
            checked_in_at=as_utc(visit_mongo.checked_in_at),
            updated_at=as_utc(visit_mongo.updated_at),
        )

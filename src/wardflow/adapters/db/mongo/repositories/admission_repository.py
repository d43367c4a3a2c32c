"""
MongoDB implementation of AdmissionRepository.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from beanie.operators import Set

from wardflow.application.ports.repositories.admission_repo import AdmissionRepository
from wardflow.core.utils.datetime_utils import as_utc
from wardflow.domain.entities.admission import Admission
from wardflow.domain.enums import AdmissionStatus, AdmissionType, AdmissionUrgency
from wardflow.domain.value_objects.record_id import AdmissionId, BedId, VisitId, WardId

from ..models.workflow_m import AdmissionMongo


def _optional_utc(value: Optional[datetime]) -> Optional[datetime]:
    return as_utc(value) if value else None


class MongoAdmissionRepository(AdmissionRepository):
    """MongoDB implementation of AdmissionRepository."""

    async def save(self, admission: Admission) -> Admission:
        existing = await AdmissionMongo.find_one(
            AdmissionMongo.admission_id == admission.admission_id.value
        )
        fields = self._domain_to_fields(admission)
        if existing:
            for name, value in fields.items():
                setattr(existing, name, value)
            await existing.save()
        else:
            await AdmissionMongo(**fields).insert()
        return admission

    async def save_if_status(
        self, admission: Admission, expected_status: AdmissionStatus
    ) -> bool:
        fields = self._domain_to_fields(admission)
        fields.pop("admission_id")
        result = await AdmissionMongo.find_one(
            AdmissionMongo.admission_id == admission.admission_id.value,
            AdmissionMongo.status == expected_status.value,
        ).update(Set(fields))
        return result is not None and result.matched_count > 0

    async def find_by_id(self, admission_id: AdmissionId) -> Optional[Admission]:
        admission_mongo = await AdmissionMongo.find_one(
            AdmissionMongo.admission_id == admission_id.value
        )
        if not admission_mongo:
            return None
        return self._mongo_to_domain(admission_mongo)

    async def find_all(
        self, status: Optional[AdmissionStatus] = None, limit: int = 100
    ) -> List[Admission]:
        query = (
            AdmissionMongo.find(AdmissionMongo.status == status.value)
            if status
            else AdmissionMongo.find_all()
        )
        admissions_mongo = await query.sort(-AdmissionMongo.requested_at).limit(limit).to_list()
        return [self._mongo_to_domain(admission_mongo) for admission_mongo in admissions_mongo]

    def _domain_to_fields(self, admission: Admission) -> Dict[str, Any]:
        return {
            "admission_id": admission.admission_id.value,
            "admission_number": admission.admission_number,
            "patient_id": admission.patient_id,
            "visit_id": admission.visit_id.value,
            "requested_by": admission.requested_by,
            "reason": admission.reason,
            "ward_type": admission.ward_type,
            "urgency": admission.urgency.value,
            "admission_type": admission.admission_type.value,
            "status": admission.status.value,
            "ward_id": admission.ward_id.value if admission.ward_id else None,
            "bed_id": admission.bed_id.value if admission.bed_id else None,
            "diagnosis": admission.diagnosis,
            "treatment_plan": admission.treatment_plan,
            "estimated_stay_days": admission.estimated_stay_days,
            "special_requirements": admission.special_requirements,
            "approved_by": admission.approved_by,
            "assigned_doctor_id": admission.assigned_doctor_id,
            "rejection_reason": admission.rejection_reason,
            "discharge_notes": admission.discharge_notes,
            "requested_at": admission.requested_at,
            "approved_at": admission.approved_at,
            "admitted_at": admission.admitted_at,
            "discharged_at": admission.discharged_at,
            "updated_at": admission.updated_at,
        }

    def _mongo_to_domain(self, admission_mongo: AdmissionMongo) -> Admission:
        return Admission(
            admission_id=AdmissionId(admission_mongo.admission_id),
            admission_number=admission_mongo.admission_number,
            patient_id=admission_mongo.patient_id,
            visit_id=VisitId(admission_mongo.visit_id),
            requested_by=admission_mongo.requested_by,
            reason=admission_mongo.reason,
            ward_type=admission_mongo.ward_type,
            urgency=AdmissionUrgency(admission_mongo.urgency),
            admission_type=AdmissionType(admission_mongo.admission_type),
            status=AdmissionStatus(admission_mongo.status),
            ward_id=WardId(admission_mongo.ward_id) if admission_mongo.ward_id else None,
            bed_id=BedId(admission_mongo.bed_id) if admission_mongo.bed_id else None,
            diagnosis=admission_mongo.diagnosis,
            treatment_plan=admission_mongo.treatment_plan,
            estimated_stay_days=admission_mongo.estimated_stay_days,
            special_requirements=admission_mongo.special_requirements,
            approved_by=admission_mongo.approved_by,
            assigned_doctor_id=admission_mongo.assigned_doctor_id,
            rejection_reason=admission_mongo.rejection_reason,
            discharge_notes=admission_mongo.discharge_notes,
            requested_at=as_utc(admission_mongo.requested_at),
            approved_at=_optional_utc(admission_mongo.approved_at),
            admitted_at=_optional_utc(admission_mongo.admitted_at),
            discharged_at=_optional_utc(admission_mongo.discharged_at),
            updated_at=as_utc(admission_mongo.updated_at),
        )

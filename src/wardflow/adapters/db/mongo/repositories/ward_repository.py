"""
MongoDB implementation of WardRepository.
"""

from typing import Any, Dict, List, Optional

from beanie.operators import Set

from wardflow.application.ports.repositories.ward_repo import WardRepository
from wardflow.core.utils.datetime_utils import as_utc
from wardflow.domain.entities.ward import Bed, Ward
from wardflow.domain.enums import BedStatus
from wardflow.domain.value_objects.record_id import AdmissionId, BedId, WardId

from ..models.workflow_m import BedMongo, WardMongo


class MongoWardRepository(WardRepository):
    """MongoDB implementation of WardRepository."""

    async def save_ward(self, ward: Ward) -> Ward:
        existing = await WardMongo.find_one(WardMongo.ward_id == ward.ward_id.value)
        if existing:
            existing.name = ward.name
            existing.ward_type = ward.ward_type
            existing.is_active = ward.is_active
            await existing.save()
        else:
            await WardMongo(
                ward_id=ward.ward_id.value,
                name=ward.name,
                ward_type=ward.ward_type,
                is_active=ward.is_active,
                created_at=ward.created_at,
            ).insert()
        return ward

    async def find_ward(self, ward_id: WardId) -> Optional[Ward]:
        ward_mongo = await WardMongo.find_one(WardMongo.ward_id == ward_id.value)
        return self._ward_to_domain(ward_mongo) if ward_mongo else None

    async def list_wards(
        self, ward_type: Optional[str] = None, active_only: bool = False
    ) -> List[Ward]:
        criteria = []
        if ward_type:
            criteria.append(WardMongo.ward_type == ward_type.lower())
        if active_only:
            criteria.append(WardMongo.is_active == True)  # noqa: E712
        wards_mongo = await WardMongo.find(*criteria).sort(+WardMongo.name).to_list()
        return [self._ward_to_domain(ward_mongo) for ward_mongo in wards_mongo]

    async def save_bed(self, bed: Bed) -> Bed:
        existing = await BedMongo.find_one(BedMongo.bed_id == bed.bed_id.value)
        fields = self._bed_to_fields(bed)
        if existing:
            for name, value in fields.items():
                setattr(existing, name, value)
            await existing.save()
        else:
            await BedMongo(**fields).insert()
        return bed

    async def find_bed(self, bed_id: BedId) -> Optional[Bed]:
        bed_mongo = await BedMongo.find_one(BedMongo.bed_id == bed_id.value)
        return self._bed_to_domain(bed_mongo) if bed_mongo else None

    async def list_beds(
        self, ward_id: Optional[WardId] = None, status: Optional[BedStatus] = None
    ) -> List[Bed]:
        criteria = []
        if ward_id:
            criteria.append(BedMongo.ward_id == ward_id.value)
        if status:
            criteria.append(BedMongo.status == status.value)
        beds_mongo = await BedMongo.find(*criteria).sort(+BedMongo.bed_number).to_list()
        return [self._bed_to_domain(bed_mongo) for bed_mongo in beds_mongo]

    async def save_bed_if(
        self,
        bed: Bed,
        expected_status: BedStatus,
        expected_admission_id: Optional[AdmissionId] = None,
    ) -> bool:
        # Single-document filtered update: Mongo applies it atomically
        criteria = [
            BedMongo.bed_id == bed.bed_id.value,
            BedMongo.status == expected_status.value,
        ]
        if expected_admission_id is not None:
            criteria.append(BedMongo.current_admission_id == expected_admission_id.value)

        fields = self._bed_to_fields(bed)
        fields.pop("bed_id")
        result = await BedMongo.find_one(*criteria).update(Set(fields))
        return result is not None and result.matched_count > 0

    def _bed_to_fields(self, bed: Bed) -> Dict[str, Any]:
        return {
            "bed_id": bed.bed_id.value,
            "ward_id": bed.ward_id.value,
            "bed_number": bed.bed_number,
            "bed_type": bed.bed_type,
            "status": bed.status.value,
            "current_patient_id": bed.current_patient_id,
            "current_admission_id": (
                bed.current_admission_id.value if bed.current_admission_id else None
            ),
            "updated_at": bed.updated_at,
        }

    def _bed_to_domain(self, bed_mongo: BedMongo) -> Bed:
        return Bed(
            bed_id=BedId(bed_mongo.bed_id),
            ward_id=WardId(bed_mongo.ward_id),
            bed_number=bed_mongo.bed_number,
            bed_type=bed_mongo.bed_type,
            status=BedStatus(bed_mongo.status),
            current_patient_id=bed_mongo.current_patient_id,
            current_admission_id=(
                AdmissionId(bed_mongo.current_admission_id)
                if bed_mongo.current_admission_id
                else None
            ),
            updated_at=as_utc(bed_mongo.updated_at),
        )

    def _ward_to_domain(self, ward_mongo: WardMongo) -> Ward:
        return Ward(
            ward_id=WardId(ward_mongo.ward_id),
            name=ward_mongo.name,
            ward_type=ward_mongo.ward_type,
            is_active=ward_mongo.is_active,
            created_at=as_utc(ward_mongo.created_at),
        )

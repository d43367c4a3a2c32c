"""Ward setup and bed housekeeping."""

import logging

from ...domain.entities.ward import Bed, Ward
from ...domain.errors import ConcurrentUpdateError, IllegalTransitionError
from ...domain.enums import BedStatus
from ...domain.value_objects.record_id import BedId, WardId
from ..dto.ward_dto import AddBedRequest, CreateWardRequest, SetBedStatusRequest
from ..ports.repositories.ward_repo import WardRepository
from ..utils.lookups import require_bed, require_ward

logger = logging.getLogger(__name__)


class CreateWardUseCase:
    def __init__(self, ward_repository: WardRepository):
        self._ward_repository = ward_repository

    async def execute(self, request: CreateWardRequest) -> Ward:
        if not request.name.strip() or not request.ward_type.strip():
            raise ValueError("Ward name and ward type are required")
        ward = Ward(
            ward_id=WardId.generate(),
            name=request.name.strip(),
            ward_type=request.ward_type.strip().lower(),
            is_active=request.is_active,
        )
        await self._ward_repository.save_ward(ward)
        logger.info(f"🏥 Created {ward.ward_type} ward '{ward.name}'")
        return ward


class AddBedUseCase:
    def __init__(self, ward_repository: WardRepository):
        self._ward_repository = ward_repository

    async def execute(self, request: AddBedRequest) -> Bed:
        ward = await require_ward(self._ward_repository, request.ward_id)
        if not request.bed_number.strip():
            raise ValueError("Bed number is required")
        bed = Bed(
            bed_id=BedId.generate(),
            ward_id=ward.ward_id,
            bed_number=request.bed_number.strip(),
            bed_type=request.bed_type,
        )
        await self._ward_repository.save_bed(bed)
        logger.info(f"🛏️ Added bed {bed.bed_number} to ward '{ward.name}'")
        return bed


class SetBedStatusUseCase:
    """Maintenance and reservation moves.

    Occupancy changes only through admission approval and discharge, so
    neither ``occupied`` as a target nor an occupied bed as a source is
    accepted here.
    """

    def __init__(self, ward_repository: WardRepository):
        self._ward_repository = ward_repository

    async def execute(self, request: SetBedStatusRequest) -> Bed:
        bed = await require_bed(self._ward_repository, request.bed_id)
        previous = bed.status
        if BedStatus.OCCUPIED in (previous, request.status):
            raise IllegalTransitionError("bed", request.bed_id, previous.value, request.status.value)

        bed.set_status(request.status)
        if not await self._ward_repository.save_bed_if(bed, previous):
            raise ConcurrentUpdateError("bed", request.bed_id)
        logger.info(f"🔧 Bed {bed.bed_number}: {previous.value} -> {bed.status.value}")
        return bed

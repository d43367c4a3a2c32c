"""Ward occupancy and bed availability views."""

from typing import List

from ...domain.entities.ward import Bed, WardOccupancy
from ...domain.enums import BedStatus
from ..dto.ward_dto import WardOccupancyRequest
from ..ports.repositories.ward_repo import WardRepository
from ..utils.lookups import require_ward


class GetWardOccupancyUseCase:
    def __init__(self, ward_repository: WardRepository):
        self._ward_repository = ward_repository

    async def execute(self, request: WardOccupancyRequest) -> List[WardOccupancy]:
        wards = await self._ward_repository.list_wards(ward_type=request.ward_type)
        result = []
        for ward in wards:
            beds = await self._ward_repository.list_beds(ward_id=ward.ward_id)
            result.append(WardOccupancy(ward=ward, beds=beds))
        return result


class ListAvailableBedsUseCase:
    def __init__(self, ward_repository: WardRepository):
        self._ward_repository = ward_repository

    async def execute(self, ward_id: str) -> List[Bed]:
        ward = await require_ward(self._ward_repository, ward_id)
        return await self._ward_repository.list_beds(
            ward_id=ward.ward_id, status=BedStatus.AVAILABLE
        )

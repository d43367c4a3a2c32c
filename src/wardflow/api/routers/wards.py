"""Ward and bed endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from wardflow.application.dto.ward_dto import (
    AddBedRequest,
    CreateWardRequest,
    SetBedStatusRequest,
    WardOccupancyRequest,
)
from wardflow.application.use_cases.manage_wards import (
    AddBedUseCase,
    CreateWardUseCase,
    SetBedStatusUseCase,
)
from wardflow.application.use_cases.ward_occupancy import (
    GetWardOccupancyUseCase,
    ListAvailableBedsUseCase,
)

from ..deps import WardRepositoryDep
from ..schemas import wards as schemas
from ..schemas.common import ErrorResponse

router = APIRouter(prefix="/wards", tags=["wards"])


@router.get("", response_model=List[schemas.WardOccupancySchema])
async def list_wards(ward_repo: WardRepositoryDep, ward_type: Optional[str] = Query(None)):
    """Active wards with live bed counts."""
    use_case = GetWardOccupancyUseCase(ward_repo)
    occupancy = await use_case.execute(WardOccupancyRequest(ward_type=ward_type))
    return [schemas.WardOccupancySchema.from_occupancy(item) for item in occupancy]


@router.post("", response_model=schemas.WardSchema, status_code=status.HTTP_201_CREATED)
async def create_ward(request: schemas.CreateWardRequest, ward_repo: WardRepositoryDep):
    use_case = CreateWardUseCase(ward_repo)
    ward = await use_case.execute(
        CreateWardRequest(name=request.name, ward_type=request.ward_type, is_active=request.is_active)
    )
    return schemas.WardSchema.from_domain(ward)


@router.get(
    "/{ward_id}/beds/available",
    response_model=List[schemas.BedSchema],
    responses={404: {"model": ErrorResponse, "description": "Ward not found"}},
)
async def list_available_beds(ward_id: str, ward_repo: WardRepositoryDep):
    use_case = ListAvailableBedsUseCase(ward_repo)
    beds = await use_case.execute(ward_id)
    return [schemas.BedSchema.from_domain(bed) for bed in beds]


@router.post(
    "/{ward_id}/beds",
    response_model=schemas.BedSchema,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse, "description": "Ward not found"}},
)
async def add_bed(ward_id: str, request: schemas.AddBedRequest, ward_repo: WardRepositoryDep):
    use_case = AddBedUseCase(ward_repo)
    bed = await use_case.execute(
        AddBedRequest(ward_id=ward_id, bed_number=request.bed_number, bed_type=request.bed_type)
    )
    return schemas.BedSchema.from_domain(bed)


@router.put(
    "/beds/{bed_id}/status",
    response_model=schemas.BedSchema,
    responses={
        404: {"model": ErrorResponse, "description": "Bed not found"},
        409: {"model": ErrorResponse, "description": "Illegal bed transition"},
    },
)
async def set_bed_status(bed_id: str, request: schemas.SetBedStatusRequest, ward_repo: WardRepositoryDep):
    """Maintenance and reservation moves; occupancy follows admissions only."""
    use_case = SetBedStatusUseCase(ward_repo)
    bed = await use_case.execute(SetBedStatusRequest(bed_id=bed_id, status=request.status))
    return schemas.BedSchema.from_domain(bed)

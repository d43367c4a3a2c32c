"""
Pydantic schemas for ward and bed endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from wardflow.domain.entities.ward import Bed, Ward, WardOccupancy
from wardflow.domain.enums import BedStatus


class CreateWardRequest(BaseModel):
    name: str = Field(..., min_length=1)
    ward_type: str = Field(..., min_length=1, description="general, icu, surgery, ...")
    is_active: bool = True


class AddBedRequest(BaseModel):
    bed_number: str = Field(..., min_length=1)
    bed_type: str = "standard"


class SetBedStatusRequest(BaseModel):
    status: BedStatus


class BedSchema(BaseModel):
    bed_id: str
    ward_id: str
    bed_number: str
    bed_type: str
    status: BedStatus
    current_patient_id: Optional[str] = None
    current_admission_id: Optional[str] = None

    @classmethod
    def from_domain(cls, bed: Bed) -> "BedSchema":
        return cls(
            bed_id=bed.bed_id.value,
            ward_id=bed.ward_id.value,
            bed_number=bed.bed_number,
            bed_type=bed.bed_type,
            status=bed.status,
            current_patient_id=bed.current_patient_id,
            current_admission_id=(
                bed.current_admission_id.value if bed.current_admission_id else None
            ),
        )


class WardSchema(BaseModel):
    ward_id: str
    name: str
    ward_type: str
    is_active: bool

    @classmethod
    def from_domain(cls, ward: Ward) -> "WardSchema":
        return cls(
            ward_id=ward.ward_id.value,
            name=ward.name,
            ward_type=ward.ward_type,
            is_active=ward.is_active,
        )


class WardOccupancySchema(WardSchema):
    total_beds: int
    occupied_beds: int
    available_beds: int
    beds: List[BedSchema] = Field(default_factory=list)

    @classmethod
    def from_occupancy(cls, occupancy: WardOccupancy) -> "WardOccupancySchema":
        ward = occupancy.ward
        return cls(
            ward_id=ward.ward_id.value,
            name=ward.name,
            ward_type=ward.ward_type,
            is_active=ward.is_active,
            total_beds=occupancy.total_beds,
            occupied_beds=occupancy.occupied_beds,
            available_beds=occupancy.available_beds,
            beds=[BedSchema.from_domain(bed) for bed in occupancy.beds],
        )

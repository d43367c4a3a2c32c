"""Load-or-raise helpers shared by the lifecycle use cases.

An id that is not a valid UUID cannot name a stored record, so it is
reported as not found.
"""

from ...domain.entities.admission import Admission
from ...domain.entities.visit import Visit
from ...domain.entities.ward import Bed, Ward
from ...domain.errors import (
    AdmissionNotFoundError,
    BedNotFoundError,
    VisitNotFoundError,
    WardNotFoundError,
)
from ...domain.value_objects.record_id import AdmissionId, BedId, VisitId, WardId
from ..ports.repositories.admission_repo import AdmissionRepository
from ..ports.repositories.visit_repo import VisitRepository
from ..ports.repositories.ward_repo import WardRepository


async def require_visit(repo: VisitRepository, visit_id: str) -> Visit:
    try:
        parsed = VisitId.from_string(visit_id)
    except ValueError:
        raise VisitNotFoundError(visit_id)
    visit = await repo.find_by_id(parsed)
    if not visit:
        raise VisitNotFoundError(visit_id)
    return visit


async def require_admission(repo: AdmissionRepository, admission_id: str) -> Admission:
    try:
        parsed = AdmissionId.from_string(admission_id)
    except ValueError:
        raise AdmissionNotFoundError(admission_id)
    admission = await repo.find_by_id(parsed)
    if not admission:
        raise AdmissionNotFoundError(admission_id)
    return admission


async def require_bed(repo: WardRepository, bed_id: str) -> Bed:
    try:
        parsed = BedId.from_string(bed_id)
    except ValueError:
        raise BedNotFoundError(bed_id)
    bed = await repo.find_bed(parsed)
    if not bed:
        raise BedNotFoundError(bed_id)
    return bed


async def require_ward(repo: WardRepository, ward_id: str) -> Ward:
    try:
        parsed = WardId.from_string(ward_id)
    except ValueError:
        raise WardNotFoundError(ward_id)
    ward = await repo.find_ward(parsed)
    if not ward:
        raise WardNotFoundError(ward_id)
    return ward

import asyncio
import re
from datetime import datetime, timezone

import pytest

from wardflow.application.dto.admission_dto import (
    ApproveAdmissionRequest,
    DischargeAdmissionRequest,
    ListAdmissionsRequest,
    RejectAdmissionRequest,
    RequestAdmissionRequest,
)
from wardflow.application.use_cases.activate_admission import ActivateAdmissionUseCase
from wardflow.application.use_cases.approve_admission import ApproveAdmissionUseCase
from wardflow.application.use_cases.discharge_admission import DischargeAdmissionUseCase
from wardflow.application.use_cases.list_admissions import ListAdmissionsUseCase
from wardflow.application.use_cases.reject_admission import RejectAdmissionUseCase
from wardflow.application.use_cases.request_admission import RequestAdmissionUseCase
from wardflow.domain.entities.admission import build_admission_number
from wardflow.domain.entities.visit import ConsultationRecord
from wardflow.domain.errors import (
    AdmissionNotFoundError,
    BedUnavailableError,
    IllegalTransitionError,
    NoBedsAvailableError,
)
from wardflow.domain.enums import (
    AdmissionStatus,
    AdmissionType,
    AdmissionUrgency,
    BedStatus,
    VisitStatus,
)
from wardflow.domain.value_objects.record_id import AdmissionId


@pytest.fixture
def request_admission(visit_repo, admission_repo, ward_repo, make_visit):
    """File an admission for a fresh completed visit."""

    async def _request(ward_type="general", **overrides):
        visit = await make_visit(status=VisitStatus.COMPLETED)
        fields = {
            "visit_id": visit.visit_id.value,
            "requested_by": "doc-1",
            "reason": "IV antibiotics",
            "ward_type": ward_type,
        }
        fields.update(overrides)
        use_case = RequestAdmissionUseCase(visit_repo, admission_repo, ward_repo)
        return await use_case.execute(RequestAdmissionRequest(**fields))

    return _request


def approve(admission_repo, ward_repo, admission, bed, approved_by="admin-1"):
    return ApproveAdmissionUseCase(admission_repo, ward_repo).execute(
        ApproveAdmissionRequest(
            admission_id=admission.admission_id.value,
            bed_id=bed.bed_id.value,
            approved_by=approved_by,
        )
    )


def test_admission_number_format():
    now = datetime(2026, 5, 4, 10, 30, tzinfo=timezone.utc)

    number = build_admission_number(now)

    assert re.fullmatch(r"ADM-2026-\d{6}", number)
    assert number.endswith(str(int(now.timestamp() * 1000))[-6:])


async def test_request_moves_visit_and_creates_pending_admission(
    visit_repo, admission_repo, ward_repo, make_visit, make_ward
):
    ward, _ = await make_ward()
    visit = await make_visit(
        status=VisitStatus.COMPLETED,
        consultation=ConsultationRecord(diagnosis="Pneumonia", treatment_plan="IV ceftriaxone"),
    )

    admission = await RequestAdmissionUseCase(visit_repo, admission_repo, ward_repo).execute(
        RequestAdmissionRequest(
            visit_id=visit.visit_id.value,
            requested_by="doc-1",
            reason="Needs IV antibiotics",
            ward_type="General",
        )
    )

    assert admission.status == AdmissionStatus.PENDING
    assert admission.ward_id == ward.ward_id
    assert admission.bed_id is None
    assert admission.diagnosis == "Pneumonia"
    assert admission.treatment_plan == "IV ceftriaxone"
    assert admission.admission_type == AdmissionType.ELECTIVE
    assert admission_repo.admissions[admission.admission_id.value].patient_id == visit.patient_id
    assert visit_repo.visits[visit.visit_id.value].status == VisitStatus.ADMISSION_REQUESTED


async def test_request_prefers_ward_with_most_free_beds(request_admission, make_ward):
    await make_ward(name="General A", bed_count=1)
    roomy, _ = await make_ward(name="General B", bed_count=3)
    await make_ward(name="General C", bed_count=5, is_active=False)

    admission = await request_admission()

    assert admission.ward_id == roomy.ward_id


async def test_emergency_urgency_marks_emergency_admission(request_admission, make_ward):
    await make_ward(ward_type="icu")

    admission = await request_admission(ward_type="icu", urgency=AdmissionUrgency.EMERGENCY)

    assert admission.admission_type == AdmissionType.EMERGENCY


async def test_request_without_free_beds_fails_and_keeps_visit(
    visit_repo, admission_repo, ward_repo, make_visit, make_ward
):
    await make_ward(bed_count=0)
    visit = await make_visit(status=VisitStatus.COMPLETED)

    with pytest.raises(NoBedsAvailableError):
        await RequestAdmissionUseCase(visit_repo, admission_repo, ward_repo).execute(
            RequestAdmissionRequest(
                visit_id=visit.visit_id.value, requested_by="doc-1", reason="x", ward_type="general"
            )
        )

    assert visit_repo.visits[visit.visit_id.value].status == VisitStatus.COMPLETED
    assert admission_repo.admissions == {}


async def test_request_from_waiting_visit_is_illegal(
    visit_repo, admission_repo, ward_repo, make_visit, make_ward
):
    await make_ward()
    visit = await make_visit(status=VisitStatus.WAITING)

    with pytest.raises(IllegalTransitionError):
        await RequestAdmissionUseCase(visit_repo, admission_repo, ward_repo).execute(
            RequestAdmissionRequest(
                visit_id=visit.visit_id.value, requested_by="doc-1", reason="x", ward_type="general"
            )
        )


async def test_failed_admission_write_reverts_visit(
    visit_repo, admission_repo, ward_repo, make_visit, make_ward
):
    await make_ward()
    visit = await make_visit(status=VisitStatus.COMPLETED)
    admission_repo.fail_saves = True

    with pytest.raises(RuntimeError):
        await RequestAdmissionUseCase(visit_repo, admission_repo, ward_repo).execute(
            RequestAdmissionRequest(
                visit_id=visit.visit_id.value, requested_by="doc-1", reason="x", ward_type="general"
            )
        )

    assert visit_repo.visits[visit.visit_id.value].status == VisitStatus.COMPLETED


async def test_approval_claims_bed(admission_repo, ward_repo, request_admission, make_ward):
    _, beds = await make_ward()
    admission = await request_admission()

    approved = await approve(admission_repo, ward_repo, admission, beds[0])

    assert approved.status == AdmissionStatus.APPROVED
    assert approved.bed_id == beds[0].bed_id
    assert approved.approved_by == "admin-1"
    bed = ward_repo.beds[beds[0].bed_id.value]
    assert bed.status == BedStatus.OCCUPIED
    assert bed.current_admission_id == admission.admission_id
    assert bed.current_patient_id == admission.patient_id


async def test_approval_requires_bed(admission_repo, ward_repo, request_admission, make_ward):
    await make_ward()
    admission = await request_admission()
    use_case = ApproveAdmissionUseCase(admission_repo, ward_repo)

    with pytest.raises(ValueError):
        await use_case.execute(
            ApproveAdmissionRequest(admission_id=admission.admission_id.value, bed_id="", approved_by="a")
        )


async def test_approval_of_unavailable_bed_is_rejected(
    admission_repo, ward_repo, request_admission, make_ward
):
    _, beds = await make_ward()
    bed = beds[0]
    bed.set_status(BedStatus.MAINTENANCE)
    await ward_repo.save_bed(bed)
    admission = await request_admission()

    with pytest.raises(BedUnavailableError):
        await approve(admission_repo, ward_repo, admission, bed)

    assert admission_repo.admissions[admission.admission_id.value].status == AdmissionStatus.PENDING
    assert ward_repo.beds[bed.bed_id.value].status == BedStatus.MAINTENANCE


async def test_approval_with_bed_from_another_ward_is_rejected(
    admission_repo, ward_repo, request_admission, make_ward
):
    await make_ward(name="General", bed_count=2)
    _, icu_beds = await make_ward(name="ICU", ward_type="icu", bed_count=1)
    admission = await request_admission(ward_type="general")

    with pytest.raises(BedUnavailableError):
        await approve(admission_repo, ward_repo, admission, icu_beds[0])

    assert ward_repo.beds[icu_beds[0].bed_id.value].status == BedStatus.AVAILABLE


async def test_concurrent_approvals_for_one_bed_admit_exactly_one(
    admission_repo, ward_repo, request_admission, make_ward
):
    _, beds = await make_ward(bed_count=1)
    first = await request_admission()
    second = await request_admission()

    results = await asyncio.gather(
        approve(admission_repo, ward_repo, first, beds[0], approved_by="admin-1"),
        approve(admission_repo, ward_repo, second, beds[0], approved_by="admin-2"),
        return_exceptions=True,
    )

    approved = [r for r in results if not isinstance(r, Exception)]
    conflicts = [r for r in results if isinstance(r, BedUnavailableError)]
    assert len(approved) == 1 and len(conflicts) == 1

    statuses = sorted(a.status.value for a in admission_repo.admissions.values())
    assert statuses == ["approved", "pending"]
    bed = ward_repo.beds[beds[0].bed_id.value]
    assert bed.status == BedStatus.OCCUPIED
    assert bed.current_admission_id == approved[0].admission_id


async def test_reject_pending_admission_leaves_beds_alone(
    admission_repo, ward_repo, request_admission, make_ward
):
    _, beds = await make_ward()
    admission = await request_admission()

    rejected = await RejectAdmissionUseCase(admission_repo).execute(
        RejectAdmissionRequest(
            admission_id=admission.admission_id.value, rejected_by="admin-1", reason="No indication"
        )
    )

    assert rejected.status == AdmissionStatus.REJECTED
    assert rejected.rejection_reason == "No indication"
    assert all(bed.status == BedStatus.AVAILABLE for bed in ward_repo.beds.values())


async def test_approved_admission_cannot_be_rejected(
    admission_repo, ward_repo, request_admission, make_ward
):
    _, beds = await make_ward()
    admission = await request_admission()
    await approve(admission_repo, ward_repo, admission, beds[0])

    with pytest.raises(IllegalTransitionError):
        await RejectAdmissionUseCase(admission_repo).execute(
            RejectAdmissionRequest(admission_id=admission.admission_id.value, rejected_by="admin-1")
        )


async def test_activate_then_discharge_releases_bed(
    admission_repo, ward_repo, request_admission, make_ward
):
    _, beds = await make_ward()
    admission = await request_admission()
    await approve(admission_repo, ward_repo, admission, beds[0])

    active = await ActivateAdmissionUseCase(admission_repo).execute(admission.admission_id.value)
    result = await DischargeAdmissionUseCase(admission_repo, ward_repo).execute(
        DischargeAdmissionRequest(admission_id=admission.admission_id.value, notes="Recovered")
    )

    assert active.admitted_at is not None
    assert result.bed_released is True
    assert result.admission.status == AdmissionStatus.DISCHARGED
    assert result.admission.discharge_notes == "Recovered"
    bed = ward_repo.beds[beds[0].bed_id.value]
    assert bed.status == BedStatus.AVAILABLE
    assert bed.current_admission_id is None


async def test_discharge_does_not_release_bed_held_by_someone_else(
    admission_repo, ward_repo, request_admission, make_ward
):
    _, beds = await make_ward()
    admission = await request_admission()
    await approve(admission_repo, ward_repo, admission, beds[0])
    bed = ward_repo.beds[beds[0].bed_id.value]
    bed.current_admission_id = AdmissionId.generate()

    result = await DischargeAdmissionUseCase(admission_repo, ward_repo).execute(
        DischargeAdmissionRequest(admission_id=admission.admission_id.value)
    )

    assert result.admission.status == AdmissionStatus.DISCHARGED
    assert result.bed_released is False
    assert ward_repo.beds[beds[0].bed_id.value].status == BedStatus.OCCUPIED


async def test_pending_admission_cannot_be_discharged(admission_repo, ward_repo, request_admission, make_ward):
    await make_ward()
    admission = await request_admission()

    with pytest.raises(IllegalTransitionError):
        await DischargeAdmissionUseCase(admission_repo, ward_repo).execute(
            DischargeAdmissionRequest(admission_id=admission.admission_id.value)
        )


async def test_unknown_admission(admission_repo):
    with pytest.raises(AdmissionNotFoundError):
        await ActivateAdmissionUseCase(admission_repo).execute(AdmissionId.generate().value)


async def test_list_admissions_filters_by_status(
    admission_repo, ward_repo, request_admission, make_ward
):
    await make_ward()
    first = await request_admission()
    await request_admission()
    await RejectAdmissionUseCase(admission_repo).execute(
        RejectAdmissionRequest(admission_id=first.admission_id.value, rejected_by="admin-1")
    )

    use_case = ListAdmissionsUseCase(admission_repo)
    pending = await use_case.execute(ListAdmissionsRequest(status=AdmissionStatus.PENDING))
    everything = await use_case.execute(ListAdmissionsRequest(limit=0))

    assert len(pending) == 1
    assert pending[0].admission_id != first.admission_id
    # limit is clamped to at least one
    assert len(everything) == 1

import pytest

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
from wardflow.domain.enums import BedStatus
from wardflow.domain.errors import BedNotFoundError, IllegalTransitionError, WardNotFoundError
from wardflow.domain.value_objects.record_id import AdmissionId


async def test_create_ward_normalizes_type(ward_repo):
    ward = await CreateWardUseCase(ward_repo).execute(
        CreateWardRequest(name="  Intensive Care ", ward_type="ICU")
    )

    assert ward.name == "Intensive Care"
    assert ward.ward_type == "icu"
    assert ward.ward_id.value in ward_repo.wards


async def test_create_ward_requires_name(ward_repo):
    with pytest.raises(ValueError):
        await CreateWardUseCase(ward_repo).execute(CreateWardRequest(name=" ", ward_type="icu"))


async def test_add_bed_starts_available(ward_repo, make_ward):
    ward, _ = await make_ward(bed_count=0)

    bed = await AddBedUseCase(ward_repo).execute(
        AddBedRequest(ward_id=ward.ward_id.value, bed_number="ICU-1", bed_type="icu")
    )

    assert bed.status == BedStatus.AVAILABLE
    assert bed.ward_id == ward.ward_id
    assert ward_repo.beds[bed.bed_id.value].bed_type == "icu"


async def test_add_bed_to_unknown_ward(ward_repo):
    with pytest.raises(WardNotFoundError):
        await AddBedUseCase(ward_repo).execute(AddBedRequest(ward_id="nope", bed_number="1"))


async def test_maintenance_round_trip(ward_repo, make_ward):
    _, beds = await make_ward(bed_count=1)
    use_case = SetBedStatusUseCase(ward_repo)

    await use_case.execute(SetBedStatusRequest(bed_id=beds[0].bed_id.value, status=BedStatus.MAINTENANCE))
    assert ward_repo.beds[beds[0].bed_id.value].status == BedStatus.MAINTENANCE

    bed = await use_case.execute(
        SetBedStatusRequest(bed_id=beds[0].bed_id.value, status=BedStatus.AVAILABLE)
    )
    assert bed.status == BedStatus.AVAILABLE


async def test_housekeeping_cannot_occupy_a_bed(ward_repo, make_ward):
    _, beds = await make_ward(bed_count=1)

    with pytest.raises(IllegalTransitionError):
        await SetBedStatusUseCase(ward_repo).execute(
            SetBedStatusRequest(bed_id=beds[0].bed_id.value, status=BedStatus.OCCUPIED)
        )


async def test_housekeeping_cannot_free_an_occupied_bed(ward_repo, make_ward):
    _, beds = await make_ward(bed_count=1)
    bed = beds[0]
    bed.occupy(AdmissionId.generate(), "recPATIENT1")
    await ward_repo.save_bed(bed)

    with pytest.raises(IllegalTransitionError):
        await SetBedStatusUseCase(ward_repo).execute(
            SetBedStatusRequest(bed_id=bed.bed_id.value, status=BedStatus.AVAILABLE)
        )

    assert ward_repo.beds[bed.bed_id.value].status == BedStatus.OCCUPIED


async def test_reserved_bed_cannot_go_to_maintenance(ward_repo, make_ward):
    _, beds = await make_ward(bed_count=1)
    use_case = SetBedStatusUseCase(ward_repo)
    await use_case.execute(SetBedStatusRequest(bed_id=beds[0].bed_id.value, status=BedStatus.RESERVED))

    with pytest.raises(IllegalTransitionError):
        await use_case.execute(
            SetBedStatusRequest(bed_id=beds[0].bed_id.value, status=BedStatus.MAINTENANCE)
        )


async def test_unknown_bed(ward_repo):
    with pytest.raises(BedNotFoundError):
        await SetBedStatusUseCase(ward_repo).execute(
            SetBedStatusRequest(bed_id="not-a-uuid", status=BedStatus.MAINTENANCE)
        )


async def test_available_beds_excludes_other_statuses(ward_repo, make_ward):
    ward, beds = await make_ward(bed_count=3)
    beds[1].set_status(BedStatus.MAINTENANCE)
    await ward_repo.save_bed(beds[1])

    available = await ListAvailableBedsUseCase(ward_repo).execute(ward.ward_id.value)

    assert [bed.bed_number for bed in available] == ["B-01", "B-03"]


async def test_occupancy_counts_come_from_beds(ward_repo, make_ward):
    _, general_beds = await make_ward(name="General", bed_count=3)
    await make_ward(name="ICU", ward_type="icu", bed_count=1)
    general_beds[0].occupy(AdmissionId.generate(), "recPATIENT1")
    await ward_repo.save_bed(general_beds[0])
    general_beds[1].set_status(BedStatus.RESERVED)
    await ward_repo.save_bed(general_beds[1])

    everything = await GetWardOccupancyUseCase(ward_repo).execute(WardOccupancyRequest())
    general_only = await GetWardOccupancyUseCase(ward_repo).execute(
        WardOccupancyRequest(ward_type="general")
    )

    assert [occupancy.ward.name for occupancy in everything] == ["General", "ICU"]
    assert len(general_only) == 1
    general = general_only[0]
    assert (general.total_beds, general.occupied_beds, general.available_beds) == (3, 1, 1)

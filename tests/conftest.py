"""Shared fixtures."""

import pytest

from wardflow.application.services.ai_gateway import AIGateway
from wardflow.application.services.quota_governor import QuotaGovernor
from wardflow.application.utils.diagnosis_extraction import DiagnosisExtractor
from wardflow.core.config import DiagnosisExtractionSettings, OpenAISettings
from wardflow.core.resilience import ResilientCallExecutor
from wardflow.domain.entities.visit import Visit
from wardflow.domain.entities.ward import Bed, Ward
from wardflow.domain.enums import VisitStatus
from wardflow.domain.value_objects.record_id import BedId, VisitId, WardId

from .fakes import (
    FakeClock,
    FakeOracle,
    FakeRecordStore,
    InMemoryAdmissionRepository,
    InMemorySequenceRepository,
    InMemoryVisitRepository,
    InMemoryWardRepository,
    RecordingSleep,
)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def executor(sleep):
    return ResilientCallExecutor(sleep=sleep)


@pytest.fixture
def governor(clock):
    return QuotaGovernor(5, clock=clock)


@pytest.fixture
def oracle():
    return FakeOracle()


@pytest.fixture
def openai_settings():
    return OpenAISettings(api_key="sk-test")


@pytest.fixture
def gateway(oracle, governor, executor, openai_settings):
    return AIGateway(oracle, governor, executor, openai_settings)


@pytest.fixture
def extractor():
    return DiagnosisExtractor(DiagnosisExtractionSettings())


@pytest.fixture
def record_store():
    return FakeRecordStore()


@pytest.fixture
def visit_repo():
    return InMemoryVisitRepository()


@pytest.fixture
def admission_repo():
    return InMemoryAdmissionRepository()


@pytest.fixture
def ward_repo():
    return InMemoryWardRepository()


@pytest.fixture
def sequences():
    return InMemorySequenceRepository()


@pytest.fixture
def make_visit(visit_repo):
    """Store a visit directly in the given status."""

    async def _make(status=VisitStatus.WAITING, **overrides):
        fields = {"patient_id": "recPATIENT1", "department": "General", "doctor_id": "doc-1"}
        fields.update(overrides)
        visit = Visit(visit_id=VisitId.generate(), status=status, **fields)
        await visit_repo.save(visit)
        return visit

    return _make


@pytest.fixture
def make_ward(ward_repo):
    """Store a ward with ``bed_count`` available beds; returns (ward, beds)."""

    async def _make(name="General Ward A", ward_type="general", bed_count=2, is_active=True):
        ward = Ward(ward_id=WardId.generate(), name=name, ward_type=ward_type, is_active=is_active)
        await ward_repo.save_ward(ward)
        beds = []
        for number in range(1, bed_count + 1):
            bed = Bed(bed_id=BedId.generate(), ward_id=ward.ward_id, bed_number=f"B-{number:02d}")
            await ward_repo.save_bed(bed)
            beds.append(bed)
        return ward, beds

    return _make

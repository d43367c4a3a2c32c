import pytest
from fastapi.testclient import TestClient

from wardflow.api import deps
from wardflow.app import create_app
from wardflow.core.config import settings
from wardflow.core.errors import AITimeoutError, TransientServiceError


def provide(instance):
    """Parameterless provider so every request sees the same test double."""
    return lambda: instance


@pytest.fixture
def client(
    monkeypatch,
    visit_repo,
    admission_repo,
    ward_repo,
    sequences,
    record_store,
    executor,
    gateway,
    extractor,
):
    monkeypatch.setattr(settings, "app_env", "testing")
    app = create_app()
    overrides = {
        deps.get_visit_repository: visit_repo,
        deps.get_admission_repository: admission_repo,
        deps.get_ward_repository: ward_repo,
        deps.get_sequence_repository: sequences,
        deps.get_record_store: record_store,
        deps.get_executor: executor,
        deps.get_ai_gateway: gateway,
        deps.get_diagnosis_extractor: extractor,
    }
    for getter, instance in overrides.items():
        app.dependency_overrides[getter] = provide(instance)

    with TestClient(app) as test_client:
        yield test_client


def create_ward_with_bed(client, ward_type="general"):
    ward = client.post("/wards", json={"name": f"{ward_type} ward", "ward_type": ward_type}).json()
    bed = client.post(f"/wards/{ward['ward_id']}/beds", json={"bed_number": "B-01"}).json()
    return ward, bed


def check_in(client, department="Cardiology", patient_id="recPATIENT1"):
    response = client.post(
        "/visits/check-in", json={"patient_id": patient_id, "department": department}
    )
    assert response.status_code == 201
    return response.json()


def completed_visit(client, department="Cardiology"):
    visit = check_in(client, department)
    client.post("/visits/next", json={"department": department})
    response = client.post(
        f"/visits/{visit['visit_id']}/consultation",
        json={"diagnosis": "Community-acquired pneumonia", "treatment_plan": "IV antibiotics"},
    )
    assert response.status_code == 200
    return response.json()


def test_health_and_correlation_header(client):
    response = client.get("/health", headers={"x-correlation-id": "req-123"})

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["x-correlation-id"] == "req-123"
    assert response.headers["x-api-span"] == "GET /health"
    assert response.headers["Cache-Control"].startswith("no-store")


def test_correlation_id_is_generated(client):
    response = client.get("/")

    assert response.json()["environment"] == "testing"
    assert response.headers["x-correlation-id"]


def test_queue_flow(client):
    first = check_in(client)
    second = check_in(client)
    assert (first["token_number"], second["token_number"]) == (1, 2)

    called = client.post("/visits/next", json={"department": "Cardiology"}).json()
    queue = client.get("/visits/queue", params={"department": "Cardiology"}).json()

    assert called["called"] is True
    assert called["visit"]["visit_id"] == first["visit_id"]
    assert called["visit"]["status"] == "in_consultation"
    assert called["remaining"] == 1
    assert queue["in_consultation"]["visit_id"] == first["visit_id"]
    assert [v["visit_id"] for v in queue["waiting"]] == [second["visit_id"]]
    assert queue["next_token"] == 2
    assert queue["counts"]["waiting"] == 1


def test_empty_queue_is_not_an_error(client):
    response = client.post("/visits/next", json={"department": "ENT"})

    assert response.status_code == 200
    assert response.json()["called"] is False
    assert response.json()["visit"] is None


def test_call_next_needs_a_filter(client):
    response = client.post("/visits/next", json={})

    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


def test_illegal_transition_is_a_conflict(client):
    visit = check_in(client)

    response = client.put("/visits/status", json={"visit_id": visit["visit_id"], "status": "completed"})

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "ILLEGAL_TRANSITION"
    assert body["details"]["current_status"] == "waiting"


def test_status_endpoint_cannot_request_admission(client):
    visit = completed_visit(client)

    response = client.put(
        "/visits/status", json={"visit_id": visit["visit_id"], "status": "admission_requested"}
    )

    assert response.status_code == 409
    assert response.json()["error"] == "WORKFLOW_STEP_REQUIRED"
    assert client.get("/admissions").json() == []


def test_unknown_visit_is_not_found(client):
    response = client.put("/visits/status", json={"visit_id": "missing", "status": "completed"})

    assert response.status_code == 404
    assert response.json()["error"] == "VISIT_NOT_FOUND"


def test_admission_flow(client):
    ward, bed = create_ward_with_bed(client)
    visit = completed_visit(client)

    requested = client.post(
        "/admissions/request",
        json={
            "visit_id": visit["visit_id"],
            "requested_by": "doc-1",
            "reason": "Needs IV antibiotics",
            "ward_type": "general",
        },
    )
    assert requested.status_code == 201
    admission = requested.json()
    assert admission["status"] == "pending"
    assert admission["ward_id"] == ward["ward_id"]
    assert admission["diagnosis"] == "Community-acquired pneumonia"

    approved = client.post(
        f"/admissions/{admission['admission_id']}/approve",
        json={"bed_id": bed["bed_id"], "approved_by": "admin-1"},
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert client.get(f"/wards/{ward['ward_id']}/beds/available").json() == []

    discharged = client.post(
        f"/admissions/{admission['admission_id']}/discharge", json={"notes": "Stable"}
    )
    assert discharged.status_code == 200
    assert discharged.json()["bed_released"] is True
    assert discharged.json()["admission"]["status"] == "discharged"

    pending = client.get("/admissions", params={"status": "pending"}).json()
    assert pending == []


def test_second_approval_for_same_bed_conflicts(client):
    _, bed = create_ward_with_bed(client)
    admissions = []
    for _ in range(2):
        visit = completed_visit(client)
        admissions.append(
            client.post(
                "/admissions/request",
                json={
                    "visit_id": visit["visit_id"],
                    "requested_by": "doc-1",
                    "reason": "Observation",
                    "ward_type": "general",
                },
            ).json()
        )

    first = client.post(
        f"/admissions/{admissions[0]['admission_id']}/approve",
        json={"bed_id": bed["bed_id"], "approved_by": "admin-1"},
    )
    second = client.post(
        f"/admissions/{admissions[1]['admission_id']}/approve",
        json={"bed_id": bed["bed_id"], "approved_by": "admin-2"},
    )

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["error"] == "BED_UNAVAILABLE"


def test_no_beds_available(client):
    visit = completed_visit(client)

    response = client.post(
        "/admissions/request",
        json={"visit_id": visit["visit_id"], "requested_by": "doc-1", "reason": "x", "ward_type": "icu"},
    )

    assert response.status_code == 409
    assert response.json()["error"] == "NO_BEDS_AVAILABLE"


def test_ward_occupancy_listing(client):
    create_ward_with_bed(client, "icu")

    wards = client.get("/wards", params={"ward_type": "icu"}).json()

    assert len(wards) == 1
    assert wards[0]["total_beds"] == 1
    assert wards[0]["available_beds"] == 1


def test_quota_endpoint_does_not_consume(client, governor):
    for _ in range(3):
        response = client.get("/ai/quota")

    assert response.status_code == 200
    body = response.json()
    assert body["used"] == 0
    assert body["limit"] == 5
    assert body["is_limit_reached"] is False


def test_chat_consumes_quota(client, oracle):
    oracle.replies = ["Stay hydrated and rest."]

    response = client.post("/ai/chat", json={"messages": [{"role": "user", "content": "I have a cold"}]})

    assert response.json() == {"reply": "Stay hydrated and rest.", "used_fallback": False}
    assert client.get("/ai/quota").json()["used"] == 1


def test_triage_emergency(client, oracle):
    response = client.post("/ai/triage", json={"symptoms": "sudden chest pain and sweating"})

    assert response.status_code == 200
    assert response.json()["urgency_level"] == 1
    assert oracle.calls == []


def test_ai_timeout_maps_to_504(client, oracle):
    oracle.replies = [AITimeoutError(service="openai")]

    response = client.post("/ai/diagnosis", json={"symptoms": "fever"})

    assert response.status_code == 504
    assert response.json()["error"] == "AI_TIMEOUT"


def test_search_outage_maps_to_503(client, record_store):
    record_store.failures["list_records"] = [
        TransientServiceError("Airtable API error: 503", service="airtable", status_code=503)
        for _ in range(3)
    ]

    response = client.get("/patients/search", params={"name": "ali"})

    assert response.status_code == 503
    body = response.json()
    assert body["error"] == "RETRIES_EXHAUSTED"
    assert body["details"]["service"] == "airtable"


def test_patient_visits_degrade(client, record_store):
    record_store.failures["list_records"] = [
        TransientServiceError("down", service="airtable") for _ in range(5)
    ]

    response = client.get("/patients/recMISSING/visits")

    assert response.status_code == 200
    assert response.json()["visits"] == []


def test_register_patient_validation(client):
    response = client.post("/patients", json={"name": "Sara", "father_name": "Ali", "age": 200})

    assert response.status_code == 422

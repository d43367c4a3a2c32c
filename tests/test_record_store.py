import json

import httpx
import pytest

from wardflow.adapters.external.airtable_record_store import AirtableRecordStore
from wardflow.core.config import RecordStoreSettings
from wardflow.core.errors import (
    ExternalRequestError,
    MalformedResponseError,
    QuotaExceededError,
    ServiceConfigurationError,
    TransientServiceError,
)

SETTINGS = RecordStoreSettings(base_id="appTEST", token="pat-test")


def store_with(handler, settings=SETTINGS):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AirtableRecordStore(settings, client=client)


async def test_list_records_sends_query_params():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"records": [{"id": "rec1", "fields": {"Name": "A"}}]})

    store = store_with(handler)
    records = await store.list_records(
        "Visits", filter_formula="{Age} = 3", max_records=25, sort_field="Visit Date", sort_direction="desc"
    )

    assert records == [{"id": "rec1", "fields": {"Name": "A"}}]
    assert seen["url"].path == "/v0/appTEST/Visits"
    params = seen["url"].params
    assert params["filterByFormula"] == "{Age} = 3"
    assert params["maxRecords"] == "25"
    assert params["sort[0][field]"] == "Visit Date"
    assert params["sort[0][direction]"] == "desc"
    assert seen["auth"] == "Bearer pat-test"


async def test_create_record_posts_fields():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert json.loads(request.content) == {"fields": {"Name": "Sara"}}
        return httpx.Response(200, json={"id": "recNEW", "fields": {"Name": "Sara"}})

    record = await store_with(handler).create_record("Patients", {"Name": "Sara"})

    assert record["id"] == "recNEW"


@pytest.mark.parametrize(
    "status, error_type",
    [
        (429, QuotaExceededError),
        (401, ServiceConfigurationError),
        (403, ServiceConfigurationError),
        (500, TransientServiceError),
        (503, TransientServiceError),
        (404, ExternalRequestError),
        (422, ExternalRequestError),
    ],
)
async def test_status_codes_map_to_error_types(status, error_type):
    store = store_with(lambda request: httpx.Response(status, text="nope"))

    with pytest.raises(error_type) as exc_info:
        await store.get_record("Patients", "rec1")

    assert exc_info.value.status_code == status
    assert exc_info.value.service == "airtable"


async def test_rate_limit_is_not_a_spent_quota():
    store = store_with(lambda request: httpx.Response(429, text="slow down"))

    with pytest.raises(QuotaExceededError) as exc_info:
        await store.list_records("Patients")

    assert exc_info.value.daily_quota_exhausted is False
    assert exc_info.value.retryable is True


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json=["not", "a", "dict"]),
        httpx.Response(200, json={"rows": []}),
    ],
)
async def test_malformed_listing(response):
    store = store_with(lambda request: response)

    with pytest.raises(MalformedResponseError):
        await store.list_records("Patients")


async def test_record_without_fields_is_malformed():
    store = store_with(lambda request: httpx.Response(200, json={"id": "rec1"}))

    with pytest.raises(MalformedResponseError):
        await store.get_record("Patients", "rec1")


async def test_transport_errors_are_transient():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransientServiceError) as excinfo:
        await store_with(handler).list_records("Patients")

    assert excinfo.value.status_code is None
    assert excinfo.value.details["request_sent"] is False


async def test_timeouts_do_not_claim_the_request_was_unsent():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(TransientServiceError) as excinfo:
        await store_with(handler).create_record("Visits", {"Symptoms": "cough"})

    assert "request_sent" not in excinfo.value.details


async def test_missing_credentials():
    store = store_with(lambda request: httpx.Response(200, json={}), RecordStoreSettings())

    with pytest.raises(ServiceConfigurationError):
        await store.list_records("Patients")

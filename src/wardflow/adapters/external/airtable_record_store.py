"""
Airtable implementation of RecordStore over httpx.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from wardflow.application.ports.services.record_store import RecordStore
from wardflow.core.config import RecordStoreSettings
from wardflow.core.errors import (
    ExternalRequestError,
    MalformedResponseError,
    QuotaExceededError,
    ServiceConfigurationError,
    TransientServiceError,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "airtable"


class AirtableRecordStore(RecordStore):
    """Thin async client for the Airtable REST API.

    One request per call; retries are applied by the caller's policy.
    """

    def __init__(
        self, settings: RecordStoreSettings, client: Optional[httpx.AsyncClient] = None
    ):
        self._settings = settings
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if not self._settings.base_id or not self._settings.token:
            raise ServiceConfigurationError(
                "Record store is not configured (AIRTABLE_BASE_ID / AIRTABLE_TOKEN)",
                service=SERVICE_NAME,
            )
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.request_timeout_seconds)
        return self._client

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.token}",
            "Content-Type": "application/json",
        }

    def _url(self, table: str, record_id: Optional[str] = None) -> str:
        url = f"{self._settings.base_url}/{table}"
        return f"{url}/{record_id}" if record_id else url

    async def list_records(
        self,
        table: str,
        *,
        filter_formula: Optional[str] = None,
        max_records: Optional[int] = None,
        sort_field: Optional[str] = None,
        sort_direction: str = "asc",
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {}
        if filter_formula:
            params["filterByFormula"] = filter_formula
        if max_records:
            params["maxRecords"] = str(max_records)
        if sort_field:
            params["sort[0][field]"] = sort_field
            params["sort[0][direction]"] = sort_direction

        data = await self._request("GET", self._url(table), params=params)
        records = data.get("records")
        if not isinstance(records, list):
            raise MalformedResponseError(
                "Invalid response format from Airtable", service=SERVICE_NAME
            )
        logger.debug(f"📊 {table}: {len(records)} records")
        return records

    async def get_record(self, table: str, record_id: str) -> Dict[str, Any]:
        data = await self._request("GET", self._url(table, record_id))
        return self._require_record(data)

    async def create_record(self, table: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._request("POST", self._url(table), json={"fields": fields})
        record = self._require_record(data)
        logger.info(f"➕ Created {table} record {record['id']}")
        return record

    def _require_record(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(data.get("id"), str) or not isinstance(data.get("fields"), dict):
            raise MalformedResponseError(
                "Invalid response format from Airtable", service=SERVICE_NAME
            )
        return data

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        client = self._get_client()
        try:
            response = await client.request(method, url, headers=self._headers(), **kwargs)
        except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
            raise TransientServiceError(
                f"Airtable connection failed: {exc}",
                service=SERVICE_NAME,
                details={"request_sent": False},
            ) from exc
        except httpx.TimeoutException as exc:
            raise TransientServiceError(
                f"Airtable request timed out: {exc}", service=SERVICE_NAME
            ) from exc
        except httpx.TransportError as exc:
            raise TransientServiceError(
                f"Airtable transport error: {exc}", service=SERVICE_NAME
            ) from exc

        logger.debug(f"📡 Airtable {method} {url} -> {response.status_code}")
        if response.status_code >= 400:
            raise self._status_error(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                "Invalid response format from Airtable", service=SERVICE_NAME
            ) from exc
        if not isinstance(data, dict):
            raise MalformedResponseError(
                "Invalid response format from Airtable", service=SERVICE_NAME
            )
        return data

    def _status_error(self, response: httpx.Response):
        status_code = response.status_code
        message = f"Airtable API error: {status_code} - {response.text}"
        logger.error(f"❌ {message}")
        if status_code == 429:
            return QuotaExceededError(message, service=SERVICE_NAME, status_code=status_code)
        if status_code in (401, 403):
            return ServiceConfigurationError(
                message, service=SERVICE_NAME, status_code=status_code
            )
        if status_code >= 500:
            return TransientServiceError(message, service=SERVICE_NAME, status_code=status_code)
        return ExternalRequestError(message, service=SERVICE_NAME, status_code=status_code)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

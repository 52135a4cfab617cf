# Rev 1.0.0

"""HTTP client for the inventory backend's list endpoints."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from stockdesk.api.errors import ApiResponseError, MalformedResponseError, TransportError
from stockdesk.config import ClientSettings
from stockdesk.models.page_result import PageResult
from stockdesk.models.request_descriptor import RequestDescriptor

logger = logging.getLogger(__name__)


class ApiClient:
    """Thin wrapper around ``requests.Session`` returning decoded envelopes."""

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("Accept", "application/json")
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_settings(cls, settings: ClientSettings, *, session: Optional[requests.Session] = None) -> "ApiClient":
        return cls(
            settings.api_url,
            token=settings.api_token,
            timeout=settings.timeout_s,
            session=session,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def get(self, path: str, params: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """GET ``path`` and return the decoded JSON envelope.

        Raises TransportError, ApiResponseError or MalformedResponseError.
        """
        url = self.url_for(path)
        try:
            response = self._session.get(url, params=dict(params or {}), timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(f"Could not reach {url}: {exc}") from exc

        payload = self._decode(response)
        if not 200 <= response.status_code < 300:
            message = self._server_message(payload) or f"Request failed with status {response.status_code}"
            raise ApiResponseError(message, status_code=response.status_code)
        if not isinstance(payload, dict):
            raise MalformedResponseError(f"Expected a JSON object from {path}")
        if payload.get("success") is False:
            raise ApiResponseError(
                self._server_message(payload) or "Request was not successful",
                status_code=response.status_code,
            )
        return payload

    def list_reference(self, resource: str) -> List[Dict[str, Any]]:
        """Return the ``data`` array of an unpaged reference list (locations, users...)."""
        payload = self.get(resource)
        data = payload.get("data")
        if data is None:
            return []
        if not isinstance(data, list):
            raise MalformedResponseError(f"'{resource}' data is not an array")
        return data

    def close(self) -> None:
        self._session.close()

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            if 200 <= response.status_code < 300:
                raise MalformedResponseError("Response body is not valid JSON") from exc
            return None

    @staticmethod
    def _server_message(payload: Any) -> Optional[str]:
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("error")
            if isinstance(message, str) and message.strip():
                return message.strip()
        return None


class RemoteListSource:
    """``ListSource`` backed by one paged endpoint of the remote API."""

    def __init__(
        self,
        client: ApiClient,
        endpoint: str,
        *,
        parse_item: Optional[Callable[[Mapping[str, Any]], Any]] = None,
    ) -> None:
        self._client = client
        self._endpoint = endpoint
        self._parse_item = parse_item

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def fetch_page(self, descriptor: RequestDescriptor) -> PageResult:
        params = descriptor.to_query_params()
        logger.debug("GET %s %s", self._endpoint, params)
        payload = self._client.get(self._endpoint, params)
        return PageResult.from_payload(
            payload,
            page=descriptor.page,
            limit=descriptor.limit,
            parse_item=self._parse_item,
        )


class RemoteOptionsSource:
    """Reference lists used to populate filter pickers."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def list_reference(self, resource: str) -> List[Dict[str, Any]]:
        return self._client.list_reference(resource)

"""
Thin async client for the REST backend.

Every service talks to the backend through ApiClient so that transport
failures, non-2xx answers and 404s surface as the shared error taxonomy
rather than raw httpx exceptions.
"""
import time
from typing import Any, Optional

import httpx
import structlog

from shared.config import settings
from shared.errors import NetworkError, NotFound
from shared.observability import backoffice_upstream_request_duration_seconds

logger = structlog.get_logger(__name__)


class ApiClient:
    def __init__(
        self,
        base_url: str = None,
        token: Optional[str] = None,
        timeout: float = None,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.base_url = (base_url or settings.UPSTREAM_API_URL).rstrip("/")
        self.token = token
        self.timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT
        self._transport = transport

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def with_token(self, token: Optional[str]) -> "ApiClient":
        return ApiClient(self.base_url, token, self.timeout, self._transport)

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                headers=self._headers(), timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.request(method, url, json=json, params=params)
        except httpx.HTTPError as e:
            self._observe(method, "unreachable", started)
            logger.error("upstream_unreachable", method=method, endpoint=endpoint, error=str(e))
            raise NetworkError(f"Could not reach the order backend: {e}") from e

        if resp.status_code == 404:
            self._observe(method, "not_found", started)
            raise NotFound(self._error_message(resp, f"{endpoint} not found"))

        if not resp.is_success:
            self._observe(method, "rejected", started)
            message = self._error_message(resp, "API request failed")
            logger.warning(
                "upstream_rejected",
                method=method,
                endpoint=endpoint,
                status=resp.status_code,
                detail=message,
            )
            raise NetworkError(message, upstream_status=resp.status_code)

        self._observe(method, "ok", started)
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError("Backend answered with a non-JSON body") from e

    @staticmethod
    def _observe(method: str, outcome: str, started: float):
        backoffice_upstream_request_duration_seconds.labels(method=method, outcome=outcome).observe(
            time.perf_counter() - started
        )

    @staticmethod
    def _error_message(resp: httpx.Response, default: str) -> str:
        try:
            body = resp.json()
        except ValueError:
            return default
        if not isinstance(body, dict):
            return default
        for key in ("message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
            if isinstance(value, list) and value:
                # FastAPI-style [{"loc": [...], "msg": "..."}]
                return "; ".join(
                    str(item.get("msg", item)) if isinstance(item, dict) else str(item)
                    for item in value
                )
        return default

    async def get(self, endpoint: str, params: Optional[dict] = None) -> Any:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, json: Any = None) -> Any:
        return await self.request("POST", endpoint, json=json)

    async def put(self, endpoint: str, json: Any = None) -> Any:
        return await self.request("PUT", endpoint, json=json)

    async def delete(self, endpoint: str) -> Any:
        return await self.request("DELETE", endpoint)

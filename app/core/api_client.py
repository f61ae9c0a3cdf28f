from typing import Any

import httpx
from fastapi import Header

from app.core.app_logger import get_logger
from app.core.config import settings
from app.core.errors import TransportError, error_for_status

logger = get_logger("api_client")


def _extract_message(resp: httpx.Response) -> str:
    """
    Pull a readable message out of an error body.
    Backends answer with {"message": "..."}, {"message": ["...", "..."]} or {"detail": ...}.
    """
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        msg = body.get("message") or body.get("detail") or body.get("error")
        if isinstance(msg, list):
            msg = "; ".join(str(m) for m in msg)
        if msg:
            return str(msg)

    return resp.reason_phrase or f"HTTP {resp.status_code}"


class PerformanceApi:
    """Thin async wrapper around the remote performance REST API."""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            resp = await self.http.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise TransportError(f"Could not reach the performance service: {e}", path=path) from e

        if resp.is_error:
            message = _extract_message(resp)
            logger.warning("%s %s -> %s %s", method, path, resp.status_code, message)
            raise error_for_status(resp.status_code, message, path)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {path}", resp.status_code, path) from e

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)


async def get_api_client(authorization: str | None = Header(default=None)):
    # Auth is external; the caller's bearer token is passed through untouched.
    headers = {"Authorization": authorization} if authorization else {}
    async with httpx.AsyncClient(
        base_url=settings.API_BASE_URL,
        timeout=settings.API_TIMEOUT_SECONDS,
        headers=headers,
    ) as http:
        yield PerformanceApi(http)

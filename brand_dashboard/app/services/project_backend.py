# app/services/project_backend.py
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings, logger
from app.core.errors import Unavailable, UpstreamError


class ProjectBackendClient:
    """JSON client for the service that provisions projects and pulls their mentions."""

    def __init__(
        self,
        base_url: str = settings.PROJECT_BACKEND_URL,
        timeout: float = settings.UPSTREAM_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _post(self, path: str, payload: Dict[str, Any]) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                return await client.post(f"{self.base_url}{path}", json=payload)
        except httpx.TransportError as e:
            logger.error(f"[ProjectBackend] POST {path} failed: {e}")
            raise Unavailable(
                f"Unable to connect to backend server. Please ensure it is running on {self.base_url}"
            ) from e

    @staticmethod
    def _json(response: httpx.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"[ProjectBackend] {path} returned a non-JSON body")
            raise UpstreamError(502, f"Project backend returned invalid JSON for {path}") from e

    async def full_setup(self, payload: Dict[str, Any]) -> Any:
        logger.info(f"[ProjectBackend] Creating project {payload.get('project_name')!r}")
        response = await self._post("/projects/full_setup", payload)
        if not response.is_success:
            logger.error(f"[ProjectBackend] full_setup error: {response.status_code} {response.text}")
            status_code = 503 if response.status_code == 503 else 500
            raise UpstreamError(
                status_code, f"Project backend error: {response.status_code} - {response.text}"
            )
        return self._json(response, "/projects/full_setup")

    async def get_mentions(self, project_id: Any) -> Any:
        logger.info(f"[ProjectBackend] Fetching mentions for project: {project_id}")
        response = await self._post("/projects/get_mentions", {"project_id": project_id})
        if not response.is_success:
            logger.error(f"[ProjectBackend] get_mentions error: {response.status_code} {response.reason_phrase}")
            raise UpstreamError(
                response.status_code,
                f"Project backend error: {response.status_code} {response.reason_phrase}",
            )
        return self._json(response, "/projects/get_mentions")

# app/services/brandmentions.py
"""
Client for the BrandMentions command API.

Every call is a GET to ``/command.php`` with the API key and a ``command``
name in the query string. Failures are never turned into empty results:
a non-2xx answer raises UpstreamError, a timeout or connection failure
raises Unavailable.
"""
from typing import Any, Iterable, List, Optional, Tuple

import httpx

from app.core.config import settings, logger
from app.core.errors import Unavailable, UpstreamError

Params = List[Tuple[str, Any]]


def _extend(params: Params, name: str, values: Optional[Iterable[str]]) -> None:
    for value in values or ():
        params.append((f"{name}[]", value))


class BrandMentionsClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = settings.BRANDMENTIONS_BASE_URL,
        timeout: float = settings.UPSTREAM_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def request(self, command: str, params: Optional[Params] = None) -> Any:
        query: Params = [("api_key", self.api_key), ("command", command)]
        query.extend(params or [])
        logger.info(f"[BrandMentions] {command} {[p for p in query if p[0] != 'api_key']}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(f"{self.base_url}/command.php", params=query)
        except httpx.TimeoutException as e:
            logger.error(f"[BrandMentions] {command} timed out")
            raise Unavailable("BrandMentions API timed out") from e
        except httpx.TransportError as e:
            logger.error(f"[BrandMentions] {command} connection failed: {e}")
            raise Unavailable("Unable to reach the BrandMentions API") from e

        if not response.is_success:
            logger.error(f"[BrandMentions] {command} failed: {response.status_code} {response.reason_phrase}")
            raise UpstreamError(
                response.status_code,
                f"BrandMentions API error: {response.reason_phrase or response.status_code}",
            )
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(502, f"BrandMentions API returned invalid JSON for {command}") from e

    async def get_remaining_credits(self) -> Any:
        return await self.request("GetRemainingCredits")

    async def list_projects(self) -> Any:
        return await self.request("ListProjects")

    async def get_project_mentions(
        self,
        project_id: str,
        page: int = 1,
        per_page: int = 250,
        start_period: Optional[str] = None,
        end_period: Optional[str] = None,
        sources: Optional[List[str]] = None,
        countries: Optional[List[str]] = None,
    ) -> Any:
        params: Params = [("project_id", project_id), ("page", page), ("per_page", per_page)]
        if start_period:
            params.append(("start_period", start_period))
        if end_period:
            params.append(("end_period", end_period))
        _extend(params, "sources", sources)
        _extend(params, "countries", countries)
        return await self.request("GetProjectMentions", params)

    async def get_project_influencers(
        self,
        project_id: str,
        page: int = 1,
        per_page: int = 100,
        start_period: Optional[str] = None,
        end_period: Optional[str] = None,
        sources: Optional[List[str]] = None,
    ) -> Any:
        params: Params = [("project_id", project_id), ("page", page), ("per_page", per_page)]
        if start_period:
            params.append(("start_period", start_period))
        if end_period:
            params.append(("end_period", end_period))
        _extend(params, "sources", sources)
        return await self.request("GetProjectInfluencers", params)

    async def get_mention_count(self, project_id: str) -> Any:
        return await self.request("GetMentionsCount", [("project_id", project_id)])

    async def add_project(
        self,
        name: str,
        keyword1: str,
        keyword2: Optional[str] = None,
        match_type1: Optional[str] = None,
        languages: Optional[List[str]] = None,
        countries: Optional[List[str]] = None,
        active_sources: Optional[List[str]] = None,
    ) -> Any:
        params: Params = [("name", name), ("keyword1", keyword1)]
        if keyword2:
            params.append(("keyword2", keyword2))
        if match_type1:
            params.append(("match_type1", match_type1))
        _extend(params, "languages", languages)
        _extend(params, "countries", countries)
        _extend(params, "active_sources", active_sources)
        return await self.request("AddProject", params)

    async def delete_project(self, project_id: str) -> Any:
        return await self.request("DeleteProject", [("project_id", project_id)])

# app/api/dependencies.py
"""FastAPI dependencies shared by the dashboard routers."""
from typing import Any, Dict, Optional

from fastapi import Query, Request
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.errors import DashboardError, ValidationError
from app.db.filters import parse_days
from app.models.domain.mentions import REPEATABLE_FILTERS, MentionFilters
from app.services.brandmentions import BrandMentionsClient
from app.services.project_backend import ProjectBackendClient


def _validate_filters(data: Dict[str, Any]) -> MentionFilters:
    try:
        return MentionFilters.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else None
        raise ValidationError(f"Invalid {field} parameter: {first['msg']}", field=field)


def get_mention_filters(request: Request) -> MentionFilters:
    """Reads the shared filter set from the query string; repeatable keys keep every value."""
    params = request.query_params
    data: Dict[str, Any] = {}
    for key in params.keys():
        data[key] = params.getlist(key) if key in REPEATABLE_FILTERS else params.get(key)
    return _validate_filters(data)


def get_site_filters(
    projectId: Optional[str] = Query(None),
    startPeriod: Optional[str] = Query(None),
    endPeriod: Optional[str] = Query(None),
) -> MentionFilters:
    return _validate_filters({
        "project_id": projectId,
        "published_from": startPeriod,
        "published_to": endPeriod,
    })


def get_days(days: Optional[str] = Query(None)) -> int:
    return parse_days(days)


def get_brandmentions_client() -> BrandMentionsClient:
    if not settings.BRANDMENTIONS_API_KEY:
        raise DashboardError("API key not configured")
    return BrandMentionsClient(api_key=settings.BRANDMENTIONS_API_KEY)


def get_project_backend() -> ProjectBackendClient:
    return ProjectBackendClient()

# app/api/v1/endpoints/sites.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_site_filters
from app.core.errors import QueryError, Unavailable
from app.db.database import get_db_session
from app.models.domain.mentions import MentionFilters
from app.services import dashboard, formatter

router = APIRouter()


@router.get("/sites")
async def list_sites(
    filters: MentionFilters = Depends(get_site_filters),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Sites that mentioned the project, most mentions first.

    Query parameters: ``projectId``, ``startPeriod``, ``endPeriod`` (ISO dates).
    Each site carries display strings (``visits``, ``performance``) and the raw
    ``estimated_visits`` / ``performance_score`` numbers.
    """
    try:
        sites = await dashboard.load_sites(db, filters)
    except QueryError as e:
        raise Unavailable("Failed to fetch sites") from e
    return formatter.sites_response(sites)

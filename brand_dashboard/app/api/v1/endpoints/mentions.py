# app/api/v1/endpoints/mentions.py
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_mention_filters
from app.api.fallback import render
from app.core.config import logger
from app.db.database import get_db_session
from app.models.domain.mentions import MentionFilters, MentionRow
from app.services import dashboard, mock_data

# Define the FastAPI router
router = APIRouter()


@router.get("/mentions", response_model=List[MentionRow])
async def list_mentions(
    response: Response,
    filters: MentionFilters = Depends(get_mention_filters),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Latest mentions matching the filters, newest first, at most 50.

    Repeat ``sentiment`` / ``social_network`` to match any of several values.
    """
    logger.info(f"Fetching mentions with filters: {filters.model_dump(exclude_defaults=True)}")
    outcome = await dashboard.load_mentions(db, filters)
    return render(outcome, response, mock_data.mock_mentions)

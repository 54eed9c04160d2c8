# app/api/v1/endpoints/analytics.py
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.dependencies import get_days, get_mention_filters
from app.api.fallback import render
from app.db.database import get_db_session, get_session_factory
from app.models.domain.mentions import AnalyticsReport, MentionFilters, PlatformCount, SentimentReport
from app.services import dashboard, mock_data

router = APIRouter()


@router.get("/analytics", response_model=AnalyticsReport)
async def get_analytics(
    response: Response,
    days: int = Depends(get_days),
    filters: MentionFilters = Depends(get_mention_filters),
    db: AsyncSession = Depends(get_db_session),
):
    """Daily mention volume and reach over the last ``days`` days (1-365, default 7)."""
    outcome = await dashboard.load_analytics(db, filters, days)
    return render(outcome, response, lambda: mock_data.mock_analytics(days))


@router.get("/sentiment", response_model=SentimentReport)
async def get_sentiment(
    response: Response,
    days: int = Depends(get_days),
    filters: MentionFilters = Depends(get_mention_filters),
    db: AsyncSession = Depends(get_db_session),
):
    outcome = await dashboard.load_sentiment(db, filters, days)
    return render(outcome, response, lambda: mock_data.mock_sentiment(days))


@router.get("/platforms", response_model=List[PlatformCount])
async def get_platforms(
    response: Response,
    filters: MentionFilters = Depends(get_mention_filters),
    db: AsyncSession = Depends(get_db_session),
):
    outcome = await dashboard.load_platforms(db, filters)
    return render(outcome, response, mock_data.mock_platforms)


@router.get("/dashboard")
async def get_overview(
    response: Response,
    days: int = Depends(get_days),
    filters: MentionFilters = Depends(get_mention_filters),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """The three chart widgets in one round trip, loaded concurrently."""
    analytics, sentiment, platforms = await dashboard.load_overview(session_factory, filters, days)
    degraded = analytics.degraded or sentiment.degraded or platforms.degraded
    return {
        "analytics": render(analytics, response, lambda: mock_data.mock_analytics(days)),
        "sentiment": render(sentiment, response, lambda: mock_data.mock_sentiment(days)),
        "platforms": render(platforms, response, mock_data.mock_platforms),
        "degraded": degraded,
    }

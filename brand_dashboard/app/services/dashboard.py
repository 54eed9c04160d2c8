# app/services/dashboard.py
"""
Read paths behind the dashboard widgets.

Each loader validates nothing and renders nothing: it runs the query and
returns an Outcome. A database failure becomes a degraded Outcome carrying the
error, and the HTTP layer decides whether to show mock data or fail.
"""
import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import logger
from app.core.errors import QueryError
from app.db.crud import mentions as crud_mentions
from app.db.filters import build_where, lookback_where
from app.models.domain.mentions import (
    AnalyticsReport,
    MentionFilters,
    MentionRow,
    PlatformCount,
    SentimentReport,
)
from app.services import formatter
from app.services.site_aggregator import SiteStats, aggregate_sites

T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    data: Optional[T] = None
    error: Optional[QueryError] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None


async def _attempt(name: str, load: Callable[[], Awaitable[T]]) -> Outcome[T]:
    try:
        return Outcome(data=await load())
    except QueryError as e:
        logger.error(f"Error fetching {name}: {e}")
        return Outcome(error=e)


async def load_mentions(db: AsyncSession, filters: MentionFilters) -> Outcome[List[MentionRow]]:
    where = build_where(filters)
    return await _attempt("mentions", lambda: crud_mentions.list_mentions(db, where))


async def load_analytics(db: AsyncSession, filters: MentionFilters, days: int) -> Outcome[AnalyticsReport]:
    where = build_where(filters, lookback_where(days))

    async def load() -> AnalyticsReport:
        volumes = await crud_mentions.daily_analytics(db, where)
        return formatter.analytics_response(volumes, days)

    return await _attempt("analytics data", load)


async def load_sentiment(db: AsyncSession, filters: MentionFilters, days: int) -> Outcome[SentimentReport]:
    where = build_where(filters, lookback_where(days))

    async def load() -> SentimentReport:
        counts = await crud_mentions.sentiment_counts(db, where)
        return formatter.sentiment_response(counts, days)

    return await _attempt("sentiment data", load)


async def load_platforms(db: AsyncSession, filters: MentionFilters) -> Outcome[List[PlatformCount]]:
    where = build_where(filters)
    return await _attempt("platforms data", lambda: crud_mentions.platform_counts(db, where))


async def load_sites(db: AsyncSession, filters: MentionFilters) -> List[SiteStats]:
    """Sites have no placeholder data; a QueryError propagates to the caller."""
    rows = await crud_mentions.site_mentions(db, build_where(filters))
    sites = aggregate_sites(rows)
    logger.info(f"Aggregated {len(rows)} mentions into {len(sites)} sites")
    return sites


async def load_overview(session_factory: async_sessionmaker, filters: MentionFilters, days: int):
    """Analytics, sentiment and platforms fetched concurrently, one session each."""

    async def with_session(loader, *args):
        async with session_factory() as db:
            return await loader(db, *args)

    return await asyncio.gather(
        with_session(load_analytics, filters, days),
        with_session(load_sentiment, filters, days),
        with_session(load_platforms, filters),
    )

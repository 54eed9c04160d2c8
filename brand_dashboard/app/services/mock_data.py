# app/services/mock_data.py
"""
Placeholder payloads for the dashboard widgets.

Used only when the local database read failed and the caller chose to render
something anyway. Values are fixed so repeated requests render the same chart.
"""
import datetime
from typing import List, Optional

from app.models.domain.mentions import (
    AnalyticsReport,
    DailyVolume,
    MentionRow,
    PlatformCount,
    SentimentCounts,
    SentimentReport,
)

_DAILY_MENTIONS = (24, 31, 18, 42, 37, 29, 45)
_DAILY_REACH = (4200, 5100, 2900, 8800, 7400, 6100, 9300)


def _now(now: Optional[datetime.datetime]) -> datetime.datetime:
    return now or datetime.datetime.now(datetime.timezone.utc)


def mock_mentions(now: Optional[datetime.datetime] = None) -> List[MentionRow]:
    now = _now(now)
    return [
        MentionRow(
            mention_id="1",
            published=now,
            url="https://twitter.com/user1/status/123",
            tracked_keyword="brand",
            social_network="twitter",
            text="Great experience with this brand! Highly recommend.",
            sentiment="positive",
            author_name="John Doe",
            username="johndoe",
            followers=1500,
        ),
        MentionRow(
            mention_id="2",
            published=now - datetime.timedelta(hours=1),
            url="https://instagram.com/p/abc123",
            tracked_keyword="product",
            social_network="instagram",
            text="The product quality could be better.",
            sentiment="negative",
            author_name="Jane Smith",
            username="janesmith",
            followers=2300,
        ),
        MentionRow(
            mention_id="3",
            published=now - datetime.timedelta(hours=2),
            url="https://facebook.com/post/xyz789",
            tracked_keyword="service",
            social_network="facebook",
            text="Average service, nothing special.",
            sentiment="neutral",
            author_name="Mike Johnson",
            username="mikej",
            followers=890,
        ),
    ]


def mock_analytics(days: int, now: Optional[datetime.datetime] = None) -> AnalyticsReport:
    """Seven days of volume ending today, whatever the requested period."""
    today = _now(now).date()
    data = [
        DailyVolume(
            day=(today - datetime.timedelta(days=offset)).isoformat(),
            mentions=_DAILY_MENTIONS[6 - offset],
            reach=_DAILY_REACH[6 - offset],
        )
        for offset in range(6, -1, -1)
    ]
    return AnalyticsReport(
        data=data,
        period=f"{days} days",
        totalMentions=sum(d.mentions for d in data),
        totalReach=sum(d.reach for d in data),
    )


def mock_sentiment(days: int) -> SentimentReport:
    return SentimentReport(
        data=SentimentCounts(positive=45, neutral=30, negative=25, total=100),
        period=f"{days} days",
    )


def mock_platforms() -> List[PlatformCount]:
    return [
        PlatformCount(social_network="twitter", count=45),
        PlatformCount(social_network="instagram", count=32),
        PlatformCount(social_network="facebook", count=23),
        PlatformCount(social_network="linkedin", count=15),
        PlatformCount(social_network="youtube", count=8),
    ]

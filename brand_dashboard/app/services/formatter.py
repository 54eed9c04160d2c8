# app/services/formatter.py
from typing import Any, Dict, List

from app.models.domain.mentions import AnalyticsReport, DailyVolume, SentimentCounts, SentimentReport
from app.services.site_aggregator import SiteStats


def period(days: int) -> str:
    return f"{days} days"


def unwrap_envelope(payload: Any) -> Any:
    """
    Returns the data carried by an upstream response.

    Accepts ``{"success": ..., "data": ...}`` wrappers, bare arrays and plain
    objects; anything that is not a wrapper is returned unchanged.
    """
    if isinstance(payload, dict) and "data" in payload and ("success" in payload or len(payload) == 1):
        return payload["data"]
    return payload


def as_list(payload: Any, *keys: str) -> List[Any]:
    """Like unwrap_envelope, but always a list: looks under ``keys`` when the data is an object."""
    data = unwrap_envelope(payload)
    if isinstance(data, dict):
        for key in keys:
            if isinstance(data.get(key), list):
                return data[key]
        return []
    if isinstance(data, list):
        return data
    return []


def analytics_response(volumes: List[DailyVolume], days: int) -> AnalyticsReport:
    return AnalyticsReport(
        data=volumes,
        period=period(days),
        totalMentions=sum(v.mentions for v in volumes),
        totalReach=sum(v.reach for v in volumes),
    )


def sentiment_response(counts: SentimentCounts, days: int) -> SentimentReport:
    return SentimentReport(data=counts, period=period(days))


def sites_response(sites: List[SiteStats]) -> Dict[str, Any]:
    return {
        "sites": [site.to_display() for site in sites],
        "total": len(sites),
    }

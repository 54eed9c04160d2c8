# app/api/fallback.py
from typing import Callable, TypeVar

from fastapi import Response

from app.core.config import settings, logger
from app.services.dashboard import Outcome

T = TypeVar("T")

DATA_SOURCE_HEADER = "X-Data-Source"


def render(outcome: Outcome[T], response: Response, mock: Callable[[], T]) -> T:
    """
    Returns the outcome's data, or placeholder data when the read was degraded.

    Placeholder responses are marked with ``X-Data-Source: mock``. With
    SERVE_MOCK_ON_DB_ERROR disabled the underlying error is raised instead (503).
    """
    if not outcome.degraded:
        return outcome.data
    if not settings.SERVE_MOCK_ON_DB_ERROR:
        raise outcome.error
    logger.warning(f"Serving mock data after database error: {outcome.error}")
    response.headers[DATA_SOURCE_HEADER] = "mock"
    return mock()

# app/db/crud/mentions.py
import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy import BigInteger, Integer, Numeric, Select, case, cast, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import logger
from app.core.errors import QueryError
from app.db.filters import WhereClause
from app.models.db.mentions import MentionDB, ProjectDB
from app.models.domain.mentions import (
    DailyVolume,
    MentionRow,
    PlatformCount,
    SentimentCounts,
    parse_int,
)

# Hard cap for the listing endpoint; callers cannot raise it
MENTIONS_LIMIT = 50

_author = MentionDB.author


def _from_mentions(stmt: Select, where: Optional[WhereClause]) -> Select:
    stmt = stmt.select_from(MentionDB).outerjoin(
        ProjectDB, MentionDB.project_id == ProjectDB.project_id
    )
    if where:
        stmt = stmt.where(where.clause())
    return stmt


async def run_query(db: AsyncSession, name: str, stmt, params: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
    """
    Executes a statement and returns its rows as plain dicts.

    Raises:
        QueryError: the database rejected the statement or could not be reached.
    """
    logger.info(f"Executing {name} query with values: {params or []}")
    try:
        result = await db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"{name} query failed: {e}", exc_info=True)
        raise QueryError(f"Database query failed: {e.__class__.__name__}") from e


def _mention_rows(name: str, rows: List[Dict[str, Any]]) -> List[MentionRow]:
    """Validates rows one by one; a row the model cannot read is logged and dropped."""
    mentions = []
    for row in rows:
        try:
            mentions.append(MentionRow.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping unreadable {name} row {row.get('mention_id')}: {e.error_count()} error(s)")
    return mentions


async def list_mentions(db: AsyncSession, where: WhereClause) -> List[MentionRow]:
    """Newest mentions matching the filters, at most MENTIONS_LIMIT of them."""
    stmt = _from_mentions(
        select(
            MentionDB.mention_id,
            MentionDB.published,
            MentionDB.url,
            MentionDB.tracked_keyword,
            MentionDB.social_network,
            MentionDB.text,
            MentionDB.sentiment,
            _author["name"].as_string().label("author_name"),
            _author["username"].as_string().label("username"),
            _author["followers"].as_string().label("followers"),
            _author["profile_pic"].as_string().label("profile_pic"),
            MentionDB.domain_influence,
            MentionDB.social_media_interactions,
            MentionDB.linked,
            ProjectDB.keyword.label("project_keyword"),
        ),
        where,
    ).order_by(desc(MentionDB.published)).limit(MENTIONS_LIMIT)

    rows = await run_query(db, "mentions", stmt, where.args)
    return _mention_rows("mentions", rows)


def _day(value: Any) -> str:
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    # SQLite hands back text when the column was written outside the ORM
    return str(value)[:10]


def _reach_as_int(dialect: str):
    """Author reach, stored as text, as an integer; text that is not a number counts 0."""
    reach = func.trim(_author["reach"].as_string())
    if dialect == "postgresql":
        return case(
            (reach.regexp_match(r"^-?[0-9]+(\.[0-9]+)?$"), cast(func.trunc(cast(reach, Numeric)), BigInteger)),
            else_=0,
        )
    # SQLite casts unreadable text to 0 instead of failing
    return cast(reach, Integer)


async def daily_analytics(db: AsyncSession, where: WhereClause) -> List[DailyVolume]:
    """Mention volume and summed author reach per calendar day, oldest day first."""
    day = func.date(MentionDB.published)
    stmt = _from_mentions(
        select(
            day.label("day"),
            func.count().label("mentions"),
            func.coalesce(func.sum(_reach_as_int(db.get_bind().dialect.name)), 0).label("reach"),
        ),
        where,
    ).group_by(day).order_by(day)

    rows = await run_query(db, "analytics", stmt, where.args)
    return [
        DailyVolume(day=_day(r["day"]), mentions=parse_int(r["mentions"]), reach=parse_int(r["reach"]))
        for r in rows
    ]


def _sentiment_bucket():
    sentiment = func.lower(MentionDB.sentiment)
    return case(
        (sentiment.like("%positive%"), "positive"),
        (sentiment.like("%negative%"), "negative"),
        (sentiment.like("%neutral%"), "neutral"),
        else_=None,
    )


async def sentiment_counts(db: AsyncSession, where: WhereClause) -> SentimentCounts:
    """Positive/neutral/negative counts; unrecognized sentiments fall in no bucket and not in total."""
    bucket = _sentiment_bucket()
    stmt = _from_mentions(
        select(
            func.count(case((bucket == "positive", 1))).label("positive"),
            func.count(case((bucket == "neutral", 1))).label("neutral"),
            func.count(case((bucket == "negative", 1))).label("negative"),
        ),
        where,
    )

    rows = await run_query(db, "sentiment", stmt, where.args)
    row = rows[0] if rows else {}
    positive = parse_int(row.get("positive"))
    neutral = parse_int(row.get("neutral"))
    negative = parse_int(row.get("negative"))
    return SentimentCounts(
        positive=positive,
        neutral=neutral,
        negative=negative,
        total=positive + neutral + negative,
    )


async def platform_counts(db: AsyncSession, where: WhereClause) -> List[PlatformCount]:
    """Mention count per social network, largest first."""
    count = func.count().label("count")
    stmt = _from_mentions(
        select(MentionDB.social_network, count),
        where,
    ).group_by(MentionDB.social_network).order_by(desc(count), MentionDB.social_network)

    rows = await run_query(db, "platforms", stmt, where.args)
    return [PlatformCount(social_network=r["social_network"], count=int(r["count"])) for r in rows]


async def site_mentions(db: AsyncSession, where: WhereClause) -> List[MentionRow]:
    """Every mention with a URL matching the filters, newest first, for site aggregation."""
    where.add_raw("mentions.url IS NOT NULL AND mentions.url != ''")
    stmt = _from_mentions(
        select(
            MentionDB.mention_id,
            MentionDB.url,
            MentionDB.sentiment,
            MentionDB.published,
            MentionDB.domain_influence,
            MentionDB.social_media_interactions,
            _author["name"].as_string().label("author_name"),
            _author["username"].as_string().label("username"),
            _author["profile_pic"].as_string().label("profile_pic"),
            _author["followers"].as_string().label("followers"),
        ),
        where,
    ).order_by(desc(MentionDB.published))

    rows = await run_query(db, "sites", stmt, where.args)
    return _mention_rows("sites", rows)

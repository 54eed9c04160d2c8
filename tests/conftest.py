"""Shared fixtures: a seeded SQLite database and an HTTP client bound to the app."""
import datetime

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db.database import Base, get_db_session, get_session_factory
from app.main import app
from app.models.db.mentions import MentionDB, ProjectDB

UTC = datetime.timezone.utc


def _noon(days_ago: int) -> datetime.datetime:
    day = datetime.datetime.now(UTC) - datetime.timedelta(days=days_ago)
    return day.replace(hour=12, minute=0, second=0, microsecond=0)


def seed_rows():
    projects = [
        ProjectDB(project_id="p1", keyword="Acme Shoes", name="Acme",
                  created_at=datetime.datetime(2024, 1, 1, tzinfo=UTC)),
        ProjectDB(project_id="p2", keyword="Globex", name="Globex",
                  created_at=datetime.datetime(2024, 6, 1, tzinfo=UTC)),
    ]
    mentions = [
        MentionDB(
            mention_id="m1", project_id="p1", published=_noon(1),
            url="https://www.example.com/a", tracked_keyword="acme", social_network="twitter",
            text="Love my new Acme shoes", sentiment="positive", language="en", country="US",
            author={"name": "Alice", "username": "alice", "profile_pic": "https://img/alice.png",
                    "followers": "1500", "reach": "1000"},
            domain_influence=80, social_media_interactions=50, linked=True,
        ),
        MentionDB(
            mention_id="m2", project_id="p1", published=_noon(1) - datetime.timedelta(hours=1),
            url="https://example.com/b", tracked_keyword="acme shoes", social_network="facebook",
            text="Soles fell apart", sentiment="Very Negative", language="en", country="GB",
            author={"name": "Bob", "username": "bob", "followers": "abc", "reach": "500"},
            domain_influence=10, social_media_interactions=None, linked=False,
        ),
        MentionDB(
            mention_id="m3", project_id="p1", published=_noon(3),
            url="not-a-url", tracked_keyword="acme", social_network="twitter",
            text="Acme store opening", sentiment="neutral", language="fr", country="FR",
            author={"name": "Carol", "username": "carol", "followers": "200", "reach": "n/a"},
            domain_influence=None, social_media_interactions=300, linked=False,
        ),
        MentionDB(
            mention_id="m4", project_id="p2", published=_noon(40),
            url="https://news.site.org/x", tracked_keyword="globex", social_network="instagram",
            text="Globex quarterly results", sentiment="mixed", language="en", country="US",
            author={"name": "Dan", "username": "dan", "followers": "10", "reach": "2000"},
            domain_influence=50, social_media_interactions=10, linked=True,
        ),
        MentionDB(
            mention_id="m5", project_id="p2", published=_noon(2),
            url="", tracked_keyword="globex", social_network="twitter",
            text="Globex again", sentiment="positive", language="de", country="DE",
            author=None, domain_influence=None, social_media_interactions=None, linked=None,
        ),
    ]
    return projects, mentions


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Session factory over a file-backed SQLite database seeded with two projects."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'dashboard.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    projects, mentions = seed_rows()
    async with factory() as session:
        session.add_all(projects)
        await session.flush()
        session.add_all(mentions)
        await session.commit()
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def broken_session_factory(tmp_path):
    """Session factory over an empty database: every query fails with 'no such table'."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


def _override_sessions(factory):
    async def _session():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_session_factory] = lambda: factory


@pytest_asyncio.fixture
async def client(session_factory):
    _override_sessions(session_factory)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def broken_client(broken_session_factory):
    _override_sessions(broken_session_factory)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def now():
    return datetime.datetime(2025, 3, 10, 15, 30, tzinfo=UTC)

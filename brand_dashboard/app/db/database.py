# app/db/database.py
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.config import settings, logger

logger.info(f"Using database {settings.DATABASE_URL.split('@')[-1]}")
# Create the async engine
engine = create_async_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

# Create a configured "Session" class
# expire_on_commit=False is often useful with async sessions
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Base class for declarative models
Base = declarative_base()

# Dependency to get DB session in API endpoints
async def get_db_session() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session

# Dependency for handlers that fan out into several sessions at once
def get_session_factory() -> async_sessionmaker:
    return AsyncSessionLocal

# Function to initialize the database (create tables)
async def init_db():
    # Import models so they are registered on Base.metadata
    from app.models.db import mentions  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created (if they didn't exist).")

"""Database primitives."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from meditrack.config import get_settings


class Base(DeclarativeBase):
    """Base declarative model class."""

    metadata = MetaData()


settings = get_settings()
engine = create_async_engine(settings.database_url, future=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory.

    Returns
    -------
    async_sessionmaker[AsyncSession]
        Store client shared by request sessions and the audit log.
    """
    return SessionLocal


async def get_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session.

    Yields
    ------
    AsyncSession
        Active async SQLAlchemy session.
    """
    async with session_factory() as session:
        yield session

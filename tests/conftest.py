"""Pytest fixtures."""

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from meditrack.config import get_settings
from meditrack.database import Base, get_session_factory
from meditrack.main import app
from meditrack.models.user import User
from meditrack.routers.dependencies import get_mailer
from meditrack.services.security import hash_password

SessionFactory = async_sessionmaker[AsyncSession]


class RecordingMailer:
    """Mailer that keeps sent messages in memory."""

    def __init__(self) -> None:
        self.sent: list[dict[str, str]] = []

    async def send(self, *, to: str, subject: str, html: str) -> str | None:
        """Record one message.

        Returns
        -------
        str | None
            Synthetic message id.
        """
        self.sent.append({"to": to, "subject": subject, "html": html})
        return f"msg-{len(self.sent)}"


@pytest.fixture(autouse=True)
def _clear_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Reset cached settings and pin the token secret.

    Parameters
    ----------
    monkeypatch : pytest.MonkeyPatch
        Environment monkeypatch helper.

    Yields
    ------
    None
        Applies environment overrides for each test.
    """
    get_settings.cache_clear()
    monkeypatch.setenv("MEDITRACK_JWT_SECRET", "test-secret")
    monkeypatch.delenv("MEDITRACK_RESEND_API_KEY", raising=False)
    yield
    get_settings.cache_clear()


@pytest.fixture()
async def session_factory(tmp_path: Path) -> AsyncIterator[SessionFactory]:
    """Create a session factory on a fresh SQLite database.

    Parameters
    ----------
    tmp_path : Path
        Temporary directory for test database.

    Yields
    ------
    async_sessionmaker[AsyncSession]
        Session factory with the schema created.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", future=True
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


@pytest.fixture()
async def broken_session_factory(tmp_path: Path) -> AsyncIterator[SessionFactory]:
    """Create a session factory whose database has no tables.

    Parameters
    ----------
    tmp_path : Path
        Temporary directory for test database.

    Yields
    ------
    async_sessionmaker[AsyncSession]
        Session factory on which every query fails.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}", future=True
    )
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


@pytest.fixture()
def mailer() -> RecordingMailer:
    """Return an in-memory mailer."""
    return RecordingMailer()


@pytest.fixture()
def make_user(
    session_factory: SessionFactory,
) -> Callable[..., Awaitable[User]]:
    """Return a helper that inserts a user directly.

    Parameters
    ----------
    session_factory : async_sessionmaker[AsyncSession]
        Test session factory.

    Returns
    -------
    Callable[..., Awaitable[User]]
        Coroutine factory creating users.
    """

    async def _make_user(
        *,
        name: str,
        email: str,
        role: str = "user",
        organization_id: str | None = None,
        password: str = "secret123",
    ) -> User:
        async with session_factory() as session:
            user = User(
                name=name,
                email=email,
                role=role,
                organization_id=organization_id,
                password_hash=hash_password(password),
            )
            session.add(user)
            await session.commit()
            return user

    return _make_user


@pytest.fixture()
async def client(
    session_factory: SessionFactory, mailer: RecordingMailer
) -> AsyncIterator[AsyncClient]:
    """Create a test HTTP client backed by SQLite.

    Parameters
    ----------
    session_factory : async_sessionmaker[AsyncSession]
        Test session factory.
    mailer : RecordingMailer
        In-memory mailer.

    Yields
    ------
    AsyncClient
        Configured test client.
    """
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_mailer] = lambda: mailer
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://testserver",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()

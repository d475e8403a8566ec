"""Registration, login and account tests."""

import re

import pytest
from sqlalchemy import select

from meditrack.config import get_settings
from meditrack.main import app
from meditrack.models.audit import AuditLog
from meditrack.models.caretaker import Caretaker
from meditrack.routers.dependencies import get_audit_writer
from meditrack.services.audit import AuditLogWriter
from meditrack.services.security import decode_token, hash_password


async def _actions(session_factory) -> list[str]:
    async with session_factory() as session:
        result = await session.execute(select(AuditLog.action).order_by(AuditLog.id))
        return list(result.scalars().all())


class TestRegistrationAndLogin:
    """Account creation and sign-in."""

    @pytest.mark.asyncio
    async def test_register_and_login(self, client, session_factory) -> None:
        """Register a user, sign in and record both actions.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.
        session_factory : async_sessionmaker[AsyncSession]
            Test session factory.

        Returns
        -------
        None
            Asserts the token claims and audit trail.
        """
        register = await client.post(
            "/api/register",
            json={"email": "pat@example.com", "password": "secret1", "name": "Pat"},
        )
        assert register.status_code == 201
        uid = register.json()["uid"]

        login = await client.post(
            "/api/login",
            json={"email": "pat@example.com", "password": "secret1"},
        )
        assert login.status_code == 200
        body = login.json()
        assert body["userId"] == uid
        assert body["role"] == "user"
        assert body["organizationId"] is None

        claims = decode_token(body["token"], get_settings())
        assert claims is not None
        assert claims["userId"] == uid
        assert claims["email"] == "pat@example.com"
        assert await _actions(session_factory) == ["REGISTER", "LOGIN"]

    @pytest.mark.asyncio
    async def test_register_rejects_duplicate_email(self, client) -> None:
        """Refuse a second account for the same email.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.

        Returns
        -------
        None
            Asserts the conflict.
        """
        payload = {"email": "dup@example.com", "password": "secret1", "name": "Dup"}
        assert (await client.post("/api/register", json=payload)).status_code == 201

        response = await client.post("/api/register", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Registration failed")

    @pytest.mark.asyncio
    async def test_register_validates_password_length(self, client) -> None:
        """Reject passwords shorter than six characters.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.

        Returns
        -------
        None
            Asserts validation failure.
        """
        response = await client.post(
            "/api/register",
            json={"email": "short@example.com", "password": "abc", "name": "Short"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_invalid_credentials(
        self, client, make_user, session_factory
    ) -> None:
        """Reject a wrong password without logging a login.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.
        make_user : Callable
            User factory fixture.
        session_factory : async_sessionmaker[AsyncSession]
            Test session factory.

        Returns
        -------
        None
            Asserts the 401 response.
        """
        await make_user(name="Ann", email="ann@example.com")

        response = await client.post(
            "/api/login",
            json={"email": "ann@example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert await _actions(session_factory) == []

    @pytest.mark.asyncio
    async def test_login_survives_audit_failure(
        self, client, make_user, broken_session_factory
    ) -> None:
        """Complete the login when the audit log is unavailable.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.
        make_user : Callable
            User factory fixture.
        broken_session_factory : async_sessionmaker[AsyncSession]
            Session factory without tables.

        Returns
        -------
        None
            Asserts the primary response is unaffected.
        """
        await make_user(name="Ben", email="ben@example.com")
        app.dependency_overrides[get_audit_writer] = lambda: AuditLogWriter(
            broken_session_factory
        )

        response = await client.post(
            "/api/login",
            json={"email": "ben@example.com", "password": "secret123"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Ben"

    @pytest.mark.asyncio
    async def test_caretaker_login(self, client, session_factory) -> None:
        """Return the followed patient for a caretaker.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.
        session_factory : async_sessionmaker[AsyncSession]
            Test session factory.

        Returns
        -------
        None
            Asserts the patient id.
        """
        async with session_factory() as session:
            session.add(
                Caretaker(
                    email="care@example.com",
                    password_hash=hash_password("carepass"),
                    patient_id="patient-1",
                )
            )
            await session.commit()

        response = await client.post(
            "/api/caretaker-login",
            json={"email": "care@example.com", "password": "carepass"},
        )
        wrong = await client.post(
            "/api/caretaker-login",
            json={"email": "care@example.com", "password": "nope"},
        )

        assert response.status_code == 200
        assert response.json() == {"patientId": "patient-1"}
        assert wrong.status_code == 401


class TestProfileUpdate:
    """Self-service profile changes."""

    @pytest.mark.asyncio
    async def test_update_name_and_password(
        self, client, make_user, session_factory
    ) -> None:
        """Change the name and password and record old and new values.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.
        make_user : Callable
            User factory fixture.
        session_factory : async_sessionmaker[AsyncSession]
            Test session factory.

        Returns
        -------
        None
            Asserts the update and its audit entry.
        """
        user = await make_user(name="Cara", email="cara@example.com")

        response = await client.post(
            "/api/update",
            json={
                "userId": user.id,
                "name": "Cara Jones",
                "password": "newpass1",
                "currentPassword": "secret123",
            },
        )
        assert response.status_code == 200

        login = await client.post(
            "/api/login",
            json={"email": "cara@example.com", "password": "newpass1"},
        )
        assert login.status_code == 200
        async with session_factory() as session:
            entry = (
                await session.execute(
                    select(AuditLog).where(AuditLog.action == "UPDATE")
                )
            ).scalar_one()
        assert entry.details == {
            "oldData": {"name": "Cara", "email": "cara@example.com"},
            "newData": {"name": "Cara Jones", "email": "cara@example.com"},
        }

    @pytest.mark.asyncio
    async def test_password_change_requires_current_password(
        self, client, make_user
    ) -> None:
        """Reject password changes without a correct current password.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.
        make_user : Callable
            User factory fixture.

        Returns
        -------
        None
            Asserts 400 and 401 responses.
        """
        user = await make_user(name="Dan", email="dan@example.com")

        missing = await client.post(
            "/api/update", json={"userId": user.id, "password": "newpass1"}
        )
        wrong = await client.post(
            "/api/update",
            json={"userId": user.id, "password": "newpass1", "currentPassword": "x"},
        )

        assert missing.status_code == 400
        assert wrong.status_code == 401

    @pytest.mark.asyncio
    async def test_update_unknown_user(self, client) -> None:
        """Return 404 for an unknown user id.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.

        Returns
        -------
        None
            Asserts the missing user.
        """
        response = await client.post("/api/update", json={"userId": "ghost"})

        assert response.status_code == 404


class TestPasswordReset:
    """Password reset emails."""

    @pytest.mark.asyncio
    async def test_reset_link_is_emailed(
        self, client, make_user, mailer, session_factory
    ) -> None:
        """Send a signed reset link and record the request.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.
        make_user : Callable
            User factory fixture.
        mailer : RecordingMailer
            In-memory mailer.
        session_factory : async_sessionmaker[AsyncSession]
            Test session factory.

        Returns
        -------
        None
            Asserts the email contents and audit entry.
        """
        user = await make_user(name="Eve", email="eve@example.com")

        response = await client.post(
            "/api/request-password-reset", json={"email": "eve@example.com"}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Reset email sent successfully!"
        [message] = mailer.sent
        assert message["to"] == "eve@example.com"
        assert message["subject"] == "Reset Your Password - MediTrack"
        token = re.search(r"token=([^\"&]+)", message["html"]).group(1)
        claims = decode_token(token, get_settings())
        assert claims["sub"] == user.id
        assert claims["purpose"] == "password_reset"
        assert await _actions(session_factory) == ["REQUEST_PASSWORD_RESET"]

    @pytest.mark.asyncio
    async def test_unknown_email(self, client, mailer) -> None:
        """Return 404 without sending mail for unknown emails.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.
        mailer : RecordingMailer
            In-memory mailer.

        Returns
        -------
        None
            Asserts nothing is sent.
        """
        response = await client.post(
            "/api/request-password-reset", json={"email": "nobody@example.com"}
        )

        assert response.status_code == 404
        assert mailer.sent == []

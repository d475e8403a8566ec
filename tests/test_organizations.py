"""Organization route tests."""

import pytest
from sqlalchemy import select

from meditrack.models.audit import AuditLog


class TestOrganizations:
    """Organization lifecycle."""

    @pytest.mark.asyncio
    async def test_create_list_update_delete(
        self, client, make_user, session_factory
    ) -> None:
        """Walk an organization through its lifecycle.

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
            Asserts each step and the audit trail.
        """
        owner = await make_user(name="Olga", email="olga@example.com", role="owner")

        created = await client.post(
            "/api/organization/create",
            json={"userId": owner.id, "name": "Clinic", "description": "Downtown"},
        )
        assert created.status_code == 201
        organization_id = created.json()["organizationId"]

        owned = await client.get("/api/organizations", params={"userId": owner.id})
        assert owned.status_code == 200
        [organization] = owned.json()
        assert organization["id"] == organization_id
        assert organization["userId"] == owner.id
        assert organization["description"] == "Downtown"

        summaries = await client.get("/api/organization/get-all")
        assert summaries.json() == [
            {"organizationId": organization_id, "name": "Clinic"}
        ]

        updated = await client.put(
            f"/api/organization/{organization_id}",
            json={"userId": owner.id, "name": "Clinic North"},
        )
        assert updated.status_code == 200

        deleted = await client.request(
            "DELETE",
            f"/api/organization/{organization_id}",
            json={"userId": owner.id},
        )
        assert deleted.status_code == 200
        assert (await client.get("/api/organization/get-all")).json() == []

        async with session_factory() as session:
            entries = (
                await session.execute(select(AuditLog).order_by(AuditLog.id))
            ).scalars().all()
        assert [entry.action for entry in entries] == [
            "CREATE_ORGANIZATION",
            "UPDATE_ORGANIZATION",
            "DELETE_ORGANIZATION",
        ]
        assert entries[1].entity_name == "Clinic North"
        assert entries[2].entity_id == organization_id
        assert all(entry.actor_user_id == owner.id for entry in entries)

    @pytest.mark.asyncio
    async def test_create_requires_owner_and_name(self, client) -> None:
        """Reject creation without an owner or a name.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.

        Returns
        -------
        None
            Asserts the bad request.
        """
        response = await client.post(
            "/api/organization/create", json={"name": "Nameless owner"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_only_owner_may_modify(self, client, make_user) -> None:
        """Forbid updates and deletes by anyone but the owner.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.
        make_user : Callable
            User factory fixture.

        Returns
        -------
        None
            Asserts 403 responses.
        """
        owner = await make_user(name="Olga", email="olga@example.com", role="owner")
        created = await client.post(
            "/api/organization/create",
            json={"userId": owner.id, "name": "Clinic"},
        )
        organization_id = created.json()["organizationId"]

        updated = await client.put(
            f"/api/organization/{organization_id}",
            json={"userId": "intruder", "name": "Mine now"},
        )
        deleted = await client.delete(f"/api/organization/{organization_id}")

        assert updated.status_code == 403
        assert deleted.status_code == 403

    @pytest.mark.asyncio
    async def test_listing_owned_requires_user_id(self, client) -> None:
        """Require the owner id when listing owned organizations.

        Parameters
        ----------
        client : AsyncClient
            Test HTTP client.

        Returns
        -------
        None
            Asserts the bad request.
        """
        response = await client.get("/api/organizations")

        assert response.status_code == 400

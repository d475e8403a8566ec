"""Seed an owner, organizations, admins and patients through the public API."""

from __future__ import annotations

import os
from dataclasses import dataclass

import anyio
import httpx


@dataclass(frozen=True, slots=True)
class OrganizationSeed:
    """Organization seed definition.

    Attributes
    ----------
    name : str
        Organization name.
    description : str
        Organization description.
    """

    name: str
    description: str


ORGANIZATIONS: tuple[OrganizationSeed, ...] = (
    OrganizationSeed(name="HealthCare Inc.", description="Primary healthcare provider"),
    OrganizationSeed(name="MediWell Corp", description="Wellness services"),
)

OWNER_EMAIL = "owner@meditrack.com"
OWNER_PASSWORD = "ownerpass123"
ADMIN_PASSWORD = "adminpass123"
PATIENT_PASSWORD = "userpass123"


async def ensure_owner(client: httpx.AsyncClient) -> str:
    """Register the owner account if needed and return its id.

    Parameters
    ----------
    client : httpx.AsyncClient
        API client.

    Returns
    -------
    str
        Owner user id.
    """
    response = await client.post(
        "/api/register",
        json={
            "email": OWNER_EMAIL,
            "password": OWNER_PASSWORD,
            "name": "Owner",
            "role": "owner",
        },
    )
    if response.status_code not in (201, 400):
        response.raise_for_status()

    login = await client.post(
        "/api/login",
        json={"email": OWNER_EMAIL, "password": OWNER_PASSWORD},
    )
    login.raise_for_status()
    return login.json()["userId"]


async def ensure_organization(
    client: httpx.AsyncClient, *, owner_id: str, seed: OrganizationSeed
) -> str:
    """Create an organization unless the owner already has one by that name.

    Parameters
    ----------
    client : httpx.AsyncClient
        API client.
    owner_id : str
        Owner user id.
    seed : OrganizationSeed
        Organization definition.

    Returns
    -------
    str
        Organization id.
    """
    response = await client.get("/api/organizations", params={"userId": owner_id})
    response.raise_for_status()
    for organization in response.json():
        if organization["name"] == seed.name:
            return organization["id"]

    create_response = await client.post(
        "/api/organization/create",
        json={"userId": owner_id, "name": seed.name, "description": seed.description},
    )
    create_response.raise_for_status()
    return create_response.json()["organizationId"]


async def ensure_members(
    client: httpx.AsyncClient, *, organization_index: int, organization_id: str
) -> None:
    """Create two admins and two patients for an organization.

    Parameters
    ----------
    client : httpx.AsyncClient
        API client.
    organization_index : int
        One-based organization position, used in names and emails.
    organization_id : str
        Organization id.

    Returns
    -------
    None
        Existing accounts are left untouched.
    """
    for member in (1, 2):
        admin = await client.post(
            "/api/register-admin",
            json={
                "name": f"Admin {organization_index}-{member}",
                "email": f"admin{organization_index}{member}@meditrack.com",
                "phone": f"555-010{organization_index}{member}",
                "password": ADMIN_PASSWORD,
                "organizationId": organization_id,
            },
        )
        if admin.status_code not in (200, 400):
            admin.raise_for_status()

        patient = await client.post(
            "/api/users",
            json={
                "name": f"Patient {organization_index}-{member}",
                "email": f"patient{organization_index}{member}@meditrack.com",
                "phone": f"555-020{organization_index}{member}",
                "password": PATIENT_PASSWORD,
                "role": "user",
                "organizationId": organization_id,
            },
        )
        if patient.status_code not in (200, 400):
            patient.raise_for_status()


async def main() -> None:
    """Seed demo data against ``MEDITRACK_BASE_URL``.

    Returns
    -------
    None
        Seeds records and prints a short summary.
    """
    base_url = os.environ.get("MEDITRACK_BASE_URL", "http://127.0.0.1:4000")
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
        owner_id = await ensure_owner(client)
        for index, seed in enumerate(ORGANIZATIONS, start=1):
            organization_id = await ensure_organization(
                client, owner_id=owner_id, seed=seed
            )
            await ensure_members(
                client, organization_index=index, organization_id=organization_id
            )
            print(f"seeded {seed.name}")


if __name__ == "__main__":
    anyio.run(main)

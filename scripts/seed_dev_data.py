"""Seed a development database with regions, users, sites and activities.

Usage:
    python -m scripts.seed_dev_data
Idempotent only on an empty database. Prints a bearer token per user.
Requires Postgres (DATABASE_URL) and SECRET_KEY.
"""

import asyncio
import sys

from app.core.config import get_settings
from app.domain.entities import Principal
from app.domain.enums import ActivityStatus, Role
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.persistence.models import (
    Activity,
    Region,
    Site,
    SiteAssignment,
    User,
)
from app.infrastructure.security.jwt import create_principal_token


async def main() -> None:
    """Create two regions, one user per role, three sites and one activity."""
    get_settings()
    factory = get_session_factory()

    async with factory() as session:
        async with session.begin():
            nord = Region(name="Nord")
            sud = Region(name="Sud")
            session.add_all([nord, sud])
            await session.flush()

            users = {
                Role.SUPERADMIN: User(email="root@example.org", role=Role.SUPERADMIN.value, regions=[]),
                Role.ADMIN: User(email="admin@example.org", role=Role.ADMIN.value, regions=[nord]),
                Role.SUPERVISEUR: User(
                    email="superviseur@example.org", role=Role.SUPERVISEUR.value, regions=[nord]
                ),
                Role.CONSEILLER: User(
                    email="conseiller@example.org", role=Role.CONSEILLER.value, regions=[nord]
                ),
            }
            session.add_all(users.values())

            sites = [
                Site(name="Parcelle A", region_id=nord.id),
                Site(name="Parcelle B", region_id=nord.id),
                Site(name="Parcelle C", region_id=sud.id),
            ]
            session.add_all(sites)
            await session.flush()

            conseiller = users[Role.CONSEILLER]
            session.add(SiteAssignment(user_id=conseiller.id, site_id=sites[0].id))
            session.add(
                Activity(
                    type="formation",
                    region_id=nord.id,
                    site_id=sites[0].id,
                    created_by_id=conseiller.id,
                    status=ActivityStatus.EN_ATTENTE.value,
                )
            )

    for role, user in users.items():
        principal = Principal.of(user.id, role, (r.id for r in user.regions))
        print(f"{role.value:<12} id={user.id} token={create_principal_token(principal, user.email)}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(130)

"""Report site assignments that fall outside the conseiller's current regions.

Usage:
    python -m scripts.report_stale_assignments [conseiller_id ...]
Without ids, checks every conseiller. Read-only: nothing is removed. Exit
code 2 when stale assignments were found. Requires Postgres.
"""

import asyncio
import sys

from sqlalchemy import select

from app.application.services.assignment_index import AssignmentIndex
from app.core.config import get_settings
from app.domain.enums import Role
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.persistence.models import User
from app.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from app.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def _conseiller_ids() -> list[int]:
    async with get_session_factory()() as session:
        result = await session.execute(
            select(User.id).where(User.role == Role.CONSEILLER.value).order_by(User.id)
        )
        return list(result.scalars().all())


async def main() -> None:
    """Print one line per stale assignment."""
    get_settings()
    setup_logging()
    ids = [int(a) for a in sys.argv[1:]] or await _conseiller_ids()
    logger.info("Checking assignments of %d conseiller(s)", len(ids))

    index = AssignmentIndex(SqlAlchemyUnitOfWork)
    found = 0
    for conseiller_id in ids:
        for site in await index.find_out_of_scope_assignments(conseiller_id):
            found += 1
            print(
                f"conseiller={conseiller_id} site={site.id} "
                f"name={site.name!r} region={site.region_id}"
            )
    print(f"{found} stale assignment(s) across {len(ids)} conseiller(s)")
    if found:
        sys.exit(2)


if __name__ == "__main__":
    asyncio.run(main())

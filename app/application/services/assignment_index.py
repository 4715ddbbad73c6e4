"""Assignment index: which sites each conseiller is assigned to.

Reads never fail on an empty relation. Writes validate then replace inside
one unit of work; a refused write returns AssignmentResult.failure and
leaves the stored assignments untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from app.application.interfaces.services import IUnitOfWork
from app.domain.entities import Principal, SiteEntity, UserEntity
from app.domain.enums import AssignmentErrorKind, Role
from app.domain.value_objects import AssignmentError, AssignmentResult

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], IUnitOfWork]

ASSIGNER_ROLES: frozenset[Role] = frozenset({Role.SUPERADMIN, Role.ADMIN})


class AssignmentIndex:
    """Reads and writes the conseiller to site relation."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def assigned_sites(self, conseiller_id: int) -> frozenset[int]:
        """Return the sites assigned to conseiller_id (empty set when none)."""
        async with self._uow_factory() as uow:
            return await uow.assignments.get_assigned_site_ids(conseiller_id)

    async def assigned_users(self, site_id: int) -> frozenset[int]:
        """Return the users assigned to site_id (empty set when none)."""
        async with self._uow_factory() as uow:
            return await uow.assignments.get_assigned_user_ids(site_id)

    async def assign(
        self,
        admin: Principal,
        conseiller_id: int,
        site_ids: Iterable[int],
    ) -> AssignmentResult:
        """Replace conseiller_id's assignments with site_ids.

        Checks, in order: acting role, target exists, target is a conseiller,
        target has a region, every site exists, every site lies in the
        target's regions. The first failing check is returned.
        """
        requested = frozenset(site_ids)
        if admin.role not in ASSIGNER_ROLES:
            return self._refuse(
                AssignmentError.build(
                    AssignmentErrorKind.FORBIDDEN,
                    "Only superadmins and admins may assign sites",
                    user_id=conseiller_id,
                ),
                admin,
            )

        async with self._uow_factory() as uow:
            target = await uow.users.get_by_id(conseiller_id)
            sites = await uow.sites.get_by_ids(requested) if requested else []
            error = _validate(conseiller_id, target, requested, sites)
            if error is not None:
                return self._refuse(error, admin)
            await uow.assignments.replace_assignments(conseiller_id, requested)
            await uow.commit()

        logger.info(
            "Assignments replaced: admin=%s conseiller=%s sites=%s",
            admin.id,
            conseiller_id,
            sorted(requested),
        )
        return AssignmentResult.success(requested)

    async def unassign(
        self,
        admin: Principal,
        conseiller_id: int,
        site_id: int,
    ) -> AssignmentResult:
        """Remove one assignment edge. Removing an absent edge succeeds."""
        if admin.role not in ASSIGNER_ROLES:
            return self._refuse(
                AssignmentError.build(
                    AssignmentErrorKind.FORBIDDEN,
                    "Only superadmins and admins may unassign sites",
                    user_id=conseiller_id,
                    site_ids=[site_id],
                ),
                admin,
            )
        async with self._uow_factory() as uow:
            removed = await uow.assignments.remove_assignment(conseiller_id, site_id)
            remaining = await uow.assignments.get_assigned_site_ids(conseiller_id)
            await uow.commit()
        if removed:
            logger.info(
                "Assignment removed: admin=%s conseiller=%s site=%s",
                admin.id,
                conseiller_id,
                site_id,
            )
        return AssignmentResult.success(remaining)

    async def find_out_of_scope_assignments(self, conseiller_id: int) -> list[SiteEntity]:
        """Return assigned sites whose region the conseiller no longer belongs to.

        Report only; nothing is removed.
        """
        async with self._uow_factory() as uow:
            site_ids = await uow.assignments.get_assigned_site_ids(conseiller_id)
            if not site_ids:
                return []
            region_ids = await uow.users.list_region_ids(conseiller_id)
            sites = await uow.sites.get_by_ids(site_ids)
        stale = sorted(
            (s for s in sites if s.region_id not in region_ids), key=lambda s: s.id
        )
        if stale:
            logger.warning(
                "Stale assignments: conseiller=%s sites=%s regions=%s",
                conseiller_id,
                [s.id for s in stale],
                sorted(region_ids),
            )
        return stale

    @staticmethod
    def _refuse(error: AssignmentError, admin: Principal) -> AssignmentResult:
        logger.info(
            "Assignment refused: admin=%s conseiller=%s kind=%s sites=%s",
            admin.id,
            error.user_id,
            error.kind.value,
            list(error.site_ids),
        )
        return AssignmentResult.failure(error)


def _validate(
    conseiller_id: int,
    target: UserEntity | None,
    requested: frozenset[int],
    sites: list[SiteEntity],
) -> AssignmentError | None:
    if target is None:
        return AssignmentError.build(
            AssignmentErrorKind.NOT_FOUND,
            f"User {conseiller_id} not found",
            user_id=conseiller_id,
        )
    if target.role is not Role.CONSEILLER:
        return AssignmentError.build(
            AssignmentErrorKind.ROLE_MISMATCH,
            "Only conseillers can be assigned to sites",
            user_id=conseiller_id,
        )
    if not target.region_ids:
        return AssignmentError.build(
            AssignmentErrorKind.NO_REGION,
            "The conseiller must belong to at least one region before being assigned sites",
            user_id=conseiller_id,
        )

    missing = requested - {s.id for s in sites}
    if missing:
        return AssignmentError.build(
            AssignmentErrorKind.NOT_FOUND,
            f"Sites not found: {sorted(missing)}",
            user_id=conseiller_id,
            site_ids=missing,
        )

    outside = [s for s in sites if s.region_id not in target.region_ids]
    if outside:
        names = ", ".join(
            f"{s.name or s.id} (region {s.region_id})"
            for s in sorted(outside, key=lambda s: s.id)
        )
        return AssignmentError.build(
            AssignmentErrorKind.OUT_OF_SCOPE,
            f"Sites outside the conseiller's regions {sorted(target.region_ids)}: {names}",
            user_id=conseiller_id,
            site_ids=[s.id for s in outside],
            region_ids=target.region_ids,
        )
    return None

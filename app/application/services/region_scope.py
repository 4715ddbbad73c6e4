"""Region scope resolver: which regions a principal may act within."""

from __future__ import annotations

from app.domain.entities import Principal
from app.domain.enums import Role
from app.domain.value_objects import ALL_REGIONS, RegionSet, Scope


def resolve_scope(principal: Principal) -> Scope:
    """Return AllRegions for superadmin, else the principal's own RegionSet.

    A principal with no regions gets an empty RegionSet, which matches nothing.
    """
    match principal.role:
        case Role.SUPERADMIN:
            return ALL_REGIONS
        case Role.ADMIN | Role.SUPERVISEUR | Role.CONSEILLER:
            return RegionSet(principal.region_ids)

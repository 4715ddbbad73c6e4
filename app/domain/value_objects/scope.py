"""Region scope value objects.

A scope is either AllRegions (superadmin) or a RegionSet. An empty RegionSet
matches nothing; it is never a wildcard.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class AllRegions:
    """Unrestricted scope."""

    def includes(self, region_id: int | None) -> bool:
        return True

    def overlaps(self, region_ids: Iterable[int]) -> bool:
        return True

    @property
    def is_empty(self) -> bool:
        return False


@dataclass(frozen=True)
class RegionSet:
    """Scope limited to an explicit set of region ids."""

    region_ids: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.region_ids, frozenset):
            object.__setattr__(self, "region_ids", frozenset(self.region_ids))

    def includes(self, region_id: int | None) -> bool:
        """True when region_id is one of the scope's regions (never for None)."""
        return region_id is not None and region_id in self.region_ids

    def overlaps(self, region_ids: Iterable[int]) -> bool:
        return not self.region_ids.isdisjoint(region_ids)

    @property
    def is_empty(self) -> bool:
        return not self.region_ids


Scope = AllRegions | RegionSet

ALL_REGIONS = AllRegions()

"""Assignment result values (returned, never raised)."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import AssignmentErrorKind


@dataclass(frozen=True)
class AssignmentError:
    """Why an assignment write was refused.

    site_ids names the offending sites (missing or out of scope); region_ids
    names the conseiller's regions so the message is actionable.
    """

    kind: AssignmentErrorKind
    message: str
    user_id: int | None = None
    site_ids: tuple[int, ...] = ()
    region_ids: tuple[int, ...] = ()

    @classmethod
    def build(
        cls,
        kind: AssignmentErrorKind,
        message: str,
        *,
        user_id: int | None = None,
        site_ids: Iterable[int] = (),
        region_ids: Iterable[int] = (),
    ) -> "AssignmentError":
        return cls(
            kind=kind,
            message=message,
            user_id=user_id,
            site_ids=tuple(sorted(site_ids)),
            region_ids=tuple(sorted(region_ids)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "user_id": self.user_id,
            "site_ids": list(self.site_ids),
            "region_ids": list(self.region_ids),
        }


@dataclass(frozen=True)
class AssignmentResult:
    """Outcome of assign(): the conseiller's full site set, or an error."""

    site_ids: frozenset[int] = field(default_factory=frozenset)
    error: AssignmentError | None = None

    @classmethod
    def success(cls, site_ids: Iterable[int]) -> "AssignmentResult":
        return cls(site_ids=frozenset(site_ids))

    @classmethod
    def failure(cls, error: AssignmentError) -> "AssignmentResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

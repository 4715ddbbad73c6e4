"""Authorization decision value object.

Every policy check returns a Decision. A denial carries a DenyReason, a
human-readable message and details (e.g. which region mismatched) so the
caller can explain it to the user.
"""

from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import DenyReason


@dataclass(frozen=True)
class Decision:
    """Allow, or Deny(reason)."""

    allowed: bool
    reason: DenyReason | None = None
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str, **details: Any) -> "Decision":
        """Build a denial. Set-valued details are sorted into lists for serialization."""
        clean = {
            k: sorted(v) if isinstance(v, (set, frozenset)) else v
            for k, v in details.items()
        }
        return cls(allowed=False, reason=reason, message=message, details=clean)

    @property
    def denied(self) -> bool:
        return not self.allowed

    def to_dict(self) -> dict[str, Any]:
        return {
            "allowed": self.allowed,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "details": self.details,
        }


def first_denial(*decisions: Decision) -> Decision:
    """Return the first denial among decisions, else allow."""
    for decision in decisions:
        if decision.denied:
            return decision
    return Decision.allow()

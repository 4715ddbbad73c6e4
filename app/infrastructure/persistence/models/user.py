"""User ORM model and its region memberships."""

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.domain.enums import Role, UserStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IntIdMixin, TimestampMixin
from app.infrastructure.persistence.models.region import Region


def _in_values(column: str, values: list[str]) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class UserRegion(Base):
    """Many-to-many user-region. Table: user_region."""

    __tablename__ = "user_region"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="CASCADE"), primary_key=True
    )
    region_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("region.id", ondelete="CASCADE"), primary_key=True
    )


class User(IntIdMixin, TimestampMixin, Base):
    """User account. Table: app_user. Unique email."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False, server_default="")
    role: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text(f"'{UserStatus.ACTIF.value}'")
    )

    regions: Mapped[list[Region]] = relationship(
        secondary="user_region", lazy="selectin"
    )

    __table_args__ = (
        CheckConstraint(_in_values("role", Role.values()), name="ck_app_user_role"),
        CheckConstraint(
            _in_values("status", [s.value for s in UserStatus]),
            name="ck_app_user_status",
        ),
    )

    @property
    def region_ids(self) -> frozenset[int]:
        return frozenset(r.id for r in self.regions)

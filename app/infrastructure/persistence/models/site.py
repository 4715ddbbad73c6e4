"""Site ORM model and conseiller assignments."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IntIdMixin, TimestampMixin


class SiteAssignment(Base):
    """Many-to-many conseiller-site. Table: site_assignment.

    Rows are removed with the site (and with the user).
    """

    __tablename__ = "site_assignment"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="CASCADE"), primary_key=True
    )
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("site.id", ondelete="CASCADE"), primary_key=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (Index("ix_site_assignment_site", "site_id"),)


class Site(IntIdMixin, TimestampMixin, Base):
    """Field site. Table: site."""

    __tablename__ = "site"

    name: Mapped[str] = mapped_column(String, nullable=False)
    region_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("region.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    assignments: Mapped[list[SiteAssignment]] = relationship(
        lazy="selectin", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def assigned_user_ids(self) -> frozenset[int]:
        return frozenset(a.user_id for a in self.assignments)

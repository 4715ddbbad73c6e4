"""Activity ORM model."""

from typing import Any

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import ActivityStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IntIdMixin, TimestampMixin


class Activity(IntIdMixin, TimestampMixin, Base):
    """Field activity reported by a conseiller. Table: activity.

    region_id is copied from the site at creation. A site with activities
    cannot be deleted (RESTRICT).
    """

    __tablename__ = "activity"

    type: Mapped[str] = mapped_column(String, nullable=False)
    theme: Mapped[str | None] = mapped_column(String, nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    region_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("region.id", ondelete="RESTRICT"), nullable=False
    )
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("site.id", ondelete="RESTRICT"), nullable=False
    )
    created_by_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="RESTRICT"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String,
        nullable=False,
        server_default=text(f"'{ActivityStatus.EN_ATTENTE.value}'"),
    )
    geolocation: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    beneficiaries: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    photos: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('en_attente', 'approuve', 'rejete')",
            name="ck_activity_status",
        ),
        Index("ix_activity_region_status", "region_id", "status"),
        Index("ix_activity_site", "site_id"),
        Index("ix_activity_created_by", "created_by_id"),
    )

"""Region ORM model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IntIdMixin, TimestampMixin


class Region(IntIdMixin, TimestampMixin, Base):
    """Administrative region. Table: region. Unique name."""

    __tablename__ = "region"

    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)

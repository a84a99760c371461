"""ResearcherProfile model: one profile per researcher user account."""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.base import TimestampMixin


class ResearcherProfile(Base, TimestampMixin):
    """Keyed by user_id; the researcher's identity is the user account."""

    __tablename__ = "researcher_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    title: Mapped[str | None] = mapped_column(String(255))
    affiliation: Mapped[str | None] = mapped_column(String(255))
    institution: Mapped[str | None] = mapped_column(String(255))

    # Comma-separated tag fields
    expertise: Mapped[str | None] = mapped_column(Text)
    methods: Mapped[str | None] = mapped_column(String(255))
    domains: Mapped[str | None] = mapped_column(String(255))
    tools: Mapped[str | None] = mapped_column(String(255))

    research_interests: Mapped[str | None] = mapped_column(Text)
    compliance_certifications: Mapped[str | None] = mapped_column(Text)

    # Both namings exist in stored data; hourly_rate_* is the canonical pair
    rate_min: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    rate_max: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    hourly_rate_min: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    hourly_rate_max: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))

    availability: Mapped[str | None] = mapped_column(String(255))
    current_projects_count: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    max_concurrent_projects: Mapped[int] = mapped_column(
        Integer, default=3, server_default="3", nullable=False
    )
    available_start_date: Mapped[date | None] = mapped_column(Date)
    projects_completed: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="researcher_profile")  # type: ignore[name-defined]  # noqa: F821

    def __repr__(self) -> str:
        return f"<ResearcherProfile(user_id={self.user_id})>"

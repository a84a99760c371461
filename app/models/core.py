"""Core models: Organization, User."""

from typing import Optional

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class Organization(BaseModel):
    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Comma-separated research domains, compared against researcher domains
    focus_areas: Mapped[str | None] = mapped_column(Text)

    # Relationships
    projects: Mapped[list["Project"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="organization"
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name!r})>"


class User(BaseModel):
    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_email", "email", unique=True),
        Index("ix_users_is_active", "is_active"),
    )

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, server_default="true", nullable=False)

    # Relationships
    researcher_profile: Mapped[Optional["ResearcherProfile"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="user"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"

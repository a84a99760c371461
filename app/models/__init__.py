"""SQLAlchemy models package: import all models so Base.metadata is populated."""

from app.models.base import BaseModel, TimestampMixin
from app.models.core import Organization, User
from app.models.enums import ProjectStatus
from app.models.projects import Project
from app.models.researchers import ResearcherProfile

__all__ = [
    "BaseModel",
    "Organization",
    "Project",
    "ProjectStatus",
    "ResearcherProfile",
    "TimestampMixin",
    "User",
]

"""Read-only lookups the matching service needs.

One statement per collection: callers pass id lists and get back dicts, so
scoring N candidates never costs N queries. Nothing here scores or filters on
match quality.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.core import Organization, User
from app.models.enums import ProjectStatus
from app.models.projects import Project
from app.models.researchers import ResearcherProfile


async def get_project(db: AsyncSession, project_id: uuid.UUID) -> Project | None:
    stmt = select(Project).where(
        Project.id == project_id,
        Project.is_deleted.is_(False),
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_organization(
    db: AsyncSession, org_id: uuid.UUID | None
) -> Organization | None:
    if org_id is None:
        return None
    stmt = select(Organization).where(
        Organization.id == org_id,
        Organization.is_deleted.is_(False),
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_organizations(
    db: AsyncSession, org_ids: Iterable[uuid.UUID | None]
) -> dict[uuid.UUID, Organization]:
    ids = {org_id for org_id in org_ids if org_id is not None}
    if not ids:
        return {}
    stmt = select(Organization).where(
        Organization.id.in_(ids),
        Organization.is_deleted.is_(False),
    )
    result = await db.execute(stmt)
    return {org.id: org for org in result.scalars().all()}


async def get_researcher_profile(
    db: AsyncSession, user_id: uuid.UUID
) -> ResearcherProfile | None:
    stmt = select(ResearcherProfile).where(ResearcherProfile.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_researcher_profiles(db: AsyncSession) -> list[ResearcherProfile]:
    """All profiles in primary-key order, which is the tie-break order for ranking."""
    stmt = select(ResearcherProfile).order_by(ResearcherProfile.user_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_active_users(
    db: AsyncSession, user_ids: Iterable[uuid.UUID]
) -> dict[uuid.UUID, User]:
    """Users among user_ids whose accounts are active and not deleted."""
    ids = set(user_ids)
    if not ids:
        return {}
    stmt = select(User).where(
        User.id.in_(ids),
        User.is_active.is_(True),
        User.is_deleted.is_(False),
    )
    result = await db.execute(stmt)
    return {user.id: user for user in result.scalars().all()}


async def list_projects_by_status(
    db: AsyncSession, status: ProjectStatus
) -> list[Project]:
    stmt = (
        select(Project)
        .where(
            Project.status == status,
            Project.is_deleted.is_(False),
        )
        .order_by(Project.created_at, Project.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())

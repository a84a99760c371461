"""Shared test fixtures for the Research Match API test suite."""

import uuid
from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database import get_readonly_db
from app.main import app
from app.models.core import Organization, User
from app.models.enums import ProjectStatus
from app.models.projects import Project
from app.models.researchers import ResearcherProfile


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def mock_db() -> MagicMock:
    """Stand-in AsyncSession; tests patch the repository or stub execute()."""
    db = MagicMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
async def client(mock_db: MagicMock) -> AsyncGenerator[AsyncClient]:
    app.dependency_overrides[get_readonly_db] = lambda: mock_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.pop(get_readonly_db, None)


# ── Sample data ───────────────────────────────────────────────────────────────

SAMPLE_ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
SAMPLE_PROJECT_ID = uuid.UUID("00000000-0000-0000-0000-000000000010")
SAMPLE_RESEARCHER_ID = uuid.UUID("00000000-0000-0000-0000-000000000100")


def make_org(**overrides) -> Organization:
    fields = {
        "id": SAMPLE_ORG_ID,
        "name": "Literacy Alliance",
        "focus_areas": "education, literacy",
        "is_deleted": False,
    }
    fields.update(overrides)
    return Organization(**fields)


def make_project(**overrides) -> Project:
    fields = {
        "id": SAMPLE_PROJECT_ID,
        "org_id": SAMPLE_ORG_ID,
        "title": "After-school reading outcomes",
        "problem": "program evaluation, education policy",
        "outcomes": "impact report",
        "timeline": "3 months",
        "methods_required": "survey, interview",
        "budget_min": Decimal("5000"),
        "budget_max": Decimal("10000"),
        "estimated_hours": 100,
        "start_date": date(2026, 12, 1),
        "status": ProjectStatus.OPEN,
        "is_deleted": False,
    }
    fields.update(overrides)
    return Project(**fields)


def make_profile(**overrides) -> ResearcherProfile:
    fields = {
        "user_id": SAMPLE_RESEARCHER_ID,
        "title": "PhD",
        "institution": "State University",
        "expertise": "program evaluation, education policy",
        "methods": "survey, interview",
        "domains": "education, literacy",
        "tools": "R, Stata",
        "hourly_rate_min": Decimal("50"),
        "hourly_rate_max": Decimal("100"),
        "current_projects_count": 0,
        "max_concurrent_projects": 3,
        "available_start_date": date(2026, 11, 1),
        "projects_completed": 12,
    }
    fields.update(overrides)
    return ResearcherProfile(**fields)


def make_user(user_id: uuid.UUID = SAMPLE_RESEARCHER_ID, **overrides) -> User:
    fields = {
        "id": user_id,
        "email": f"{user_id.hex[-6:]}@example.org",
        "full_name": "Dana Researcher",
        "is_active": True,
        "is_deleted": False,
    }
    fields.update(overrides)
    return User(**fields)

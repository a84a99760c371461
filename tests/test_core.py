"""Tests for application wiring: health check, error envelope, Sentry setup."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from app.core.config import Settings
from app.core.database import get_readonly_db
from app.core.sentry import _scrub_sensitive_data, init_sentry
from app.main import app

pytestmark = pytest.mark.anyio


async def test_health_reports_degraded_database(client: AsyncClient):
    failing = MagicMock()
    failing.return_value.__aenter__ = AsyncMock(side_effect=OSError("connection refused"))
    failing.return_value.__aexit__ = AsyncMock(return_value=False)
    with patch("app.core.database.async_session_factory", failing):
        resp = await client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "degraded"
    assert body["checks"]["postgresql"]["status"] == "unhealthy"


async def test_unknown_route_uses_error_envelope(client: AsyncClient):
    resp = await client.get("/v1/matching/nowhere")
    assert resp.status_code == 404
    assert set(resp.json()) == {"error", "message", "detail", "request_id"}


async def test_unhandled_errors_return_500_envelope():
    from app.modules.matching import repository

    with patch.object(repository, "get_project", AsyncMock(side_effect=RuntimeError("boom"))):
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as ac:
            resp = await ac.get(
                "/v1/matching/projects/00000000-0000-0000-0000-000000000010/matches",
                headers={"X-Request-ID": "req-123"},
            )

    assert resp.status_code == 500
    assert resp.json() == {
        "error": "internal_server_error",
        "message": "An unexpected error occurred. Our team has been notified.",
        "request_id": "req-123",
    }


def test_init_sentry_without_dsn_is_noop():
    with patch("app.core.sentry.sentry_sdk.init") as sentry_init:
        assert init_sentry(None) is False
    sentry_init.assert_not_called()


def test_init_sentry_with_dsn_wires_integrations():
    with patch("app.core.sentry.sentry_sdk.init") as sentry_init:
        assert init_sentry("https://key@sentry.example/1", "production", "1.2.3") is True

    kwargs = sentry_init.call_args.kwargs
    assert kwargs["dsn"] == "https://key@sentry.example/1"
    assert kwargs["release"] == "1.2.3"
    assert kwargs["traces_sample_rate"] == 0.1
    assert kwargs["send_default_pii"] is False
    assert kwargs["before_send"] is _scrub_sensitive_data
    assert [type(i) for i in kwargs["integrations"]] == [FastApiIntegration, SqlalchemyIntegration]


def test_init_sentry_samples_everything_outside_production():
    with patch("app.core.sentry.sentry_sdk.init") as sentry_init:
        init_sentry("https://key@sentry.example/1", "staging")
    assert sentry_init.call_args.kwargs["traces_sample_rate"] == 1.0


async def test_readonly_session_never_commits():
    session = AsyncMock()
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = session
    with patch("app.core.database.read_only_session_factory", factory):
        sessions = get_readonly_db()
        assert await sessions.__anext__() is session
        with pytest.raises(StopAsyncIteration):
            await sessions.__anext__()

    session.commit.assert_not_awaited()
    session.close.assert_awaited_once()


def test_scrub_sensitive_headers():
    event = {"request": {"headers": {"Authorization": "Bearer x", "Accept": "json"}}}
    scrubbed = _scrub_sensitive_data(event, {})
    assert scrubbed["request"]["headers"] == {"Authorization": "[REDACTED]", "Accept": "json"}


def test_matching_defaults_from_environment(monkeypatch):
    monkeypatch.setenv("MATCHING_DEFAULT_LIMIT", "10")
    monkeypatch.setenv("MATCHING_DEFAULT_MIN_SCORE", "65")
    s = Settings()
    assert s.MATCHING_DEFAULT_LIMIT == 10
    assert s.MATCHING_DEFAULT_MIN_SCORE == 65
    assert s.MATCHING_MAX_LIMIT == 100

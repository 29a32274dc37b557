import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi.testclient import TestClient

from signalist.api.deps import get_current_user, get_optional_user
from signalist.config.settings import settings
from signalist.db.session import get_session
from signalist.errors import ConfigurationError, UserNotFoundError
from signalist.mail import unsubscribe
from signalist.main import app
from signalist.services.users import UserProfile
from signalist.web.pages import format_market_cap, templates

USER = UserProfile(id="user-1", email="ada@example.com", name="Ada", country="US")
SESSION_COOKIE = {settings.auth.session_cookie_name: "token.signature"}
JOBS_KEY = "jobs-signing-key"
SIGNED = {"Authorization": f"Bearer {JOBS_KEY}"}


async def fake_session():
    yield None


@pytest.fixture
def client():
    app.dependency_overrides[get_session] = fake_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def signed_in_client():
    app.dependency_overrides[get_session] = fake_session
    app.dependency_overrides[get_optional_user] = lambda: USER
    app.dependency_overrides[get_current_user] = lambda: USER
    try:
        yield TestClient(app, cookies=SESSION_COOKIE)
    finally:
        app.dependency_overrides.clear()


def test_pages_redirect_without_session_cookie(client) -> None:
    response = client.get("/watchlist", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/sign-in"


def test_public_paths_skip_the_guard(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/sign-in").status_code == 200


def test_api_requires_signed_in_user(client) -> None:
    response = client.get("/api/watchlist")

    assert response.status_code == 401


def test_sign_up_page_lists_profile_options(client) -> None:
    response = client.get("/sign-up")

    assert response.status_code == 200
    assert "Risk Tolerance" in response.text
    assert "Consumer Goods" in response.text


def test_dashboard_renders_widgets(signed_in_client) -> None:
    response = signed_in_client.get("/")

    assert response.status_code == 200
    assert "Market Overview" in response.text
    assert "embed-widget-stock-heatmap.js" in response.text


def test_watchlist_page_renders_metrics(signed_in_client) -> None:
    item = SimpleNamespace(
        symbol="AAPL",
        company="Apple Inc",
        added_at=datetime.datetime(2026, 10, 18),
        price=190.5,
        change=1.25,
        market_cap=2.9e12,
        pe_ratio=29.4,
    )
    with patch("signalist.web.pages.watchlist_service.list_items_by_email", AsyncMock(return_value=[item])):
        response = signed_in_client.get("/watchlist")

    assert response.status_code == 200
    assert "$190.50" in response.text
    assert "$2.90T" in response.text


def test_toggle_reports_unknown_user(signed_in_client) -> None:
    with patch(
        "signalist.api.routes.watchlist_service.toggle_by_email",
        AsyncMock(side_effect=UserNotFoundError("No user found for ada@example.com")),
    ):
        response = signed_in_client.post("/api/watchlist/toggle", json={"symbol": "AAPL"})

    assert response.status_code == 200
    assert response.json() == {"ok": False, "action": None, "error": "No user found for ada@example.com"}


def test_toggle_returns_action(signed_in_client) -> None:
    with patch("signalist.api.routes.watchlist_service.toggle_by_email", AsyncMock(return_value="added")):
        response = signed_in_client.post("/api/watchlist/toggle", json={"symbol": "aapl", "company": "Apple"})

    assert response.json()["ok"] is True
    assert response.json()["action"] == "added"


def test_domain_errors_become_json(signed_in_client) -> None:
    with patch(
        "signalist.api.routes.watchlist_service.add_by_email",
        AsyncMock(side_effect=UserNotFoundError("No user found for ada@example.com")),
    ):
        response = signed_in_client.post("/api/watchlist", json={"symbol": "AAPL"})

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "No user found for ada@example.com"}


def test_unsubscribe_rejects_tampered_signature(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "email_unsub_secret", "unsub-secret")
    with patch("signalist.api.routes.set_daily_emails_subscription", AsyncMock(return_value=True)) as update_mock:
        response = client.get(
            "/api/email/unsubscribe",
            params={"email": "ada@example.com", "t": "1760000000000", "sig": "0" * 64},
        )

    assert response.status_code == 400
    assert response.json()["message"] == "Signature mismatch."
    update_mock.assert_not_awaited()


def test_unsubscribe_requires_all_params(client) -> None:
    response = client.get("/api/email/unsubscribe", params={"email": "ada@example.com"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid unsubscribe link."


def test_unsubscribe_turns_off_daily_emails(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "email_unsub_secret", "unsub-secret")
    timestamp = "1760000000000"
    signature = unsubscribe.sign("ada@example.com", timestamp)
    with patch("signalist.api.routes.set_daily_emails_subscription", AsyncMock(return_value=True)) as update_mock:
        response = client.get(
            "/api/email/unsubscribe",
            params={"email": "ada@example.com", "t": timestamp, "sig": signature},
        )

    assert response.status_code == 200
    assert "You've been unsubscribed" in response.text
    update_mock.assert_awaited_once_with(None, "ada@example.com", False)


def test_unsubscribe_unknown_user(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "email_unsub_secret", "unsub-secret")
    timestamp = "1760000000000"
    signature = unsubscribe.sign("ghost@example.com", timestamp)
    with patch("signalist.api.routes.set_daily_emails_subscription", AsyncMock(return_value=False)):
        response = client.get(
            "/api/email/unsubscribe",
            params={"email": "ghost@example.com", "t": timestamp, "sig": signature},
        )

    assert response.status_code == 404


def test_debug_db_reports_failure_without_caching(client) -> None:
    fake_database = Mock()
    fake_database.connect = AsyncMock(side_effect=ConfigurationError("DATABASE_URL must be set."))
    with patch("signalist.api.routes.database", fake_database):
        response = client.get("/api/debug/db")

    assert response.status_code == 500
    assert response.headers["cache-control"] == "no-store"
    assert response.json()["ok"] is False
    assert response.json()["error"] == "DATABASE_URL must be set."


def test_debug_db_describes_connection(client) -> None:
    fake_database = Mock()
    fake_database.connect = AsyncMock()
    fake_database.describe.return_value = {
        "state": "connected",
        "db_name": "signalist",
        "host": "db.internal",
        "url": "postgresql+asyncpg://signalist:<redacted>@db.internal/signalist",
    }
    with patch("signalist.api.routes.database", fake_database):
        response = client.get("/api/debug/db")

    body = response.json()
    assert response.status_code == 200
    assert body["ok"] is True
    assert body["state"] == "connected"
    assert "<redacted>" in body["url"]


def test_send_job_event(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "jobs_signing_key", JOBS_KEY)
    job = Mock()
    job.id = "job-7"
    with patch("signalist.jobs.registry.queue.enqueue_daily_news_summary", return_value=job):
        response = client.post("/api/jobs", json={"name": "app/send.daily.news"}, headers=SIGNED)

    assert response.json() == {"function_id": "daily-news-summary", "job_id": "job-7"}


def test_unsigned_job_event_is_refused(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "jobs_signing_key", JOBS_KEY)
    with patch("signalist.jobs.registry.queue.enqueue_welcome_email") as enqueue_mock:
        anonymous = client.post(
            "/api/jobs",
            json={"name": "app/user.created", "data": {"email": "someone@example.org", "name": "Anyone"}},
        )
        wrong_key = client.post(
            "/api/jobs",
            json={"name": "app/user.created", "data": {"email": "someone@example.org", "name": "Anyone"}},
            headers={"Authorization": "Bearer guessed"},
        )

    assert anonymous.status_code == 401
    assert wrong_key.status_code == 401
    enqueue_mock.assert_not_called()


def test_job_events_refused_without_configured_key(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "jobs_signing_key", None)
    with patch("signalist.jobs.registry.queue.enqueue_daily_news_summary") as enqueue_mock:
        response = client.post("/api/jobs", json={"name": "app/send.daily.news"}, headers={"Authorization": "Bearer "})

    assert response.status_code == 401
    enqueue_mock.assert_not_called()


def test_schedule_registration_requires_signature(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "jobs_signing_key", JOBS_KEY)
    with patch("signalist.jobs.registry.queue.schedule_daily_news_summary") as schedule_mock:
        unsigned = client.put("/api/jobs")
        signed = client.put("/api/jobs", headers=SIGNED)

    assert unsigned.status_code == 401
    assert signed.status_code == 200
    schedule_mock.assert_called_once()


def test_job_manifest_is_readable_without_signature(client) -> None:
    response = client.get("/api/jobs")

    assert response.status_code == 200
    assert [function["id"] for function in response.json()] == ["sign-up-email", "daily-news-summary"]


def test_unknown_job_event_is_rejected(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "jobs_signing_key", JOBS_KEY)
    response = client.post("/api/jobs", json={"name": "app/nope"}, headers=SIGNED)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_unsubscribe_rejects_non_ascii_signature(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "email_unsub_secret", "unsub-secret")
    with patch("signalist.api.routes.set_daily_emails_subscription", AsyncMock(return_value=True)) as update_mock:
        response = client.get(
            "/api/email/unsubscribe",
            params={"email": "ada@example.com", "t": "1760000000000", "sig": "é" * 64},
        )

    assert response.status_code == 400
    assert response.json()["message"] == "Signature mismatch."
    update_mock.assert_not_awaited()


def test_market_cap_filter() -> None:
    assert templates.env.filters["market_cap"] is format_market_cap
    assert format_market_cap(2.9e12) == "$2.90T"
    assert format_market_cap(45_600_000.0) == "$45.60M"
    assert format_market_cap(None) == "–"

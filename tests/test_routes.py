"""
Tests for the HTTP surface: status codes, bodies and CORS headers
"""

import pytest
from fastapi.testclient import TestClient

from config import get_settings
from conftest import FakePage
from main import app
from routes import get_browser_launcher


@pytest.fixture
def client_for(make_launcher, settings):
    """Return (client, browser) with the app wired to a fake browser around page"""

    def _client(page, capture_enabled=True):
        launcher, browser, _ = make_launcher(page)
        app.dependency_overrides[get_browser_launcher] = lambda: launcher
        app.dependency_overrides[get_settings] = lambda: settings.model_copy(
            update={"CAPTURE_ENABLED": capture_enabled}
        )
        return TestClient(app), browser

    yield _client
    app.dependency_overrides.clear()


def test_password_protected_capture_end_to_end(client_for):
    client, browser = client_for(FakePage(gated=True))

    response = client.post("/screenshot", json={"url": "https://x.squarespace.com", "password": "secret"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["imageData"].startswith("data:image/png;base64,")
    assert body["originalUrl"] == "https://x.squarespace.com"
    assert body["cleanedUrl"] == "https://x.squarespace.com"
    assert body["size"].endswith(" KB")
    assert body["timestamp"].endswith("Z")
    assert browser.close_calls == 1


def test_missing_url(client_for):
    client, browser = client_for(FakePage())

    response = client.post("/screenshot", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "URL parameter is required"}
    assert browser.close_calls == 0


def test_invalid_url(client_for):
    client, _ = client_for(FakePage())

    response = client.post("/screenshot", json={"url": "http://"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid URL format"}


def test_non_positive_viewport_is_rejected(client_for):
    client, _ = client_for(FakePage())

    response = client.post("/screenshot", json={"url": "example.com", "viewport": {"width": 0, "height": 600}})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body"


def test_password_required(client_for):
    client, browser = client_for(FakePage(gated=True))

    response = client.post("/screenshot", json={"url": "https://x.squarespace.com"})

    assert response.status_code == 401
    body = response.json()
    assert body["error"] == "Password required"
    assert body["message"]
    assert browser.close_calls == 1


def test_navigation_failure(client_for, navigation_timeout):
    client, browser = client_for(FakePage(goto_errors=[navigation_timeout, navigation_timeout]))

    response = client.post("/screenshot", json={"url": "https://slow.example.com"})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to capture screenshot"
    assert "slow.example.com" in body["details"]
    assert browser.close_calls == 1


def test_capture_disabled_returns_501(client_for):
    client, browser = client_for(FakePage(), capture_enabled=False)

    response = client.post("/screenshot", json={"url": "https://example.com"})

    assert response.status_code == 501
    body = response.json()
    assert body["error"] == "Screenshot service temporarily unavailable"
    assert body["url"] == "https://example.com"
    assert browser.close_calls == 0


def test_url_check_endpoint_does_not_capture(client_for):
    client, browser = client_for(FakePage())

    response = client.post("/screenshot-test", json={"url": "foo.squarespace.com/blog?x=1"})

    assert response.status_code == 200
    body = response.json()
    assert body["cleanedUrl"] == "https://foo.squarespace.com"
    assert body["originalUrl"] == "foo.squarespace.com/blog?x=1"
    assert browser.close_calls == 0


def test_options_short_circuits(client_for):
    client, _ = client_for(FakePage())

    response = client.options("/screenshot")

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"


def test_browser_preflight_with_extra_headers_is_answered_empty(client_for):
    client, _ = client_for(FakePage())

    response = client.options(
        "/screenshot",
        headers={
            "Origin": "https://feedback.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "x-requested-with",
        },
    )

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_cors_headers_on_every_response(client_for):
    client, _ = client_for(FakePage())

    for response in (
        client.get("/health"),
        client.post("/screenshot", json={}),
        client.post("/screenshot", json={"url": "https://example.com"}),
    ):
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]


def test_detailed_status(client_for):
    client, _ = client_for(FakePage())
    client.post("/screenshot", json={"url": "https://example.com"})

    body = client.get("/status/detailed").json()

    assert body["capture_enabled"] is True
    assert body["browser"]["sessions_served"] == 1
    assert body["browser"]["active_sessions"] == 0

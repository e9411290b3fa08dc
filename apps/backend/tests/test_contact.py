from __future__ import annotations

import dataclasses
import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from app.contact import routes as contact_routes
from app.contact.service import (
    ContactValidationError,
    RateLimiter,
    sanitize,
    validate_contact_form,
)

FORM = {
    "name": "Ada",
    "email": "ada@example.com",
    "subject": "Hello",
    "message": "I <3 <b>PDFs</b>\nThanks",
}


@pytest.fixture()
def sent(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    payloads: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == "https://api.resend.com/emails"
        assert request.headers["authorization"] == "Bearer re_test_key"
        payloads.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "email_1"})

    monkeypatch.setattr(contact_routes, "resend_transport", httpx.MockTransport(handler))
    return payloads


def test_contact_form_sends_email(client: TestClient, sent: list[dict[str, Any]]) -> None:
    response = client.post("/api/contact", json=FORM)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["remaining"] == 4
    (payload,) = sent
    assert payload["from"] == "PDFSuit Contact Form <onboarding@resend.dev>"
    assert payload["to"] == ["owner@example.com", "help@example.com"]
    assert payload["reply_to"] == "ada@example.com"
    assert payload["subject"] == "New Contact: Hello"
    assert "I &lt;3 &lt;b&gt;PDFs&lt;/b&gt;<br>Thanks" in payload["html"]
    assert "<b>PDFs" not in payload["html"]
    assert "Name: Ada" in payload["text"]


@pytest.mark.parametrize(
    ("changes", "error"),
    [
        ({"name": ""}, "Missing required fields"),
        ({"email": "not-an-email"}, "Invalid email address"),
        ({"name": "x" * 101}, "Name too long"),
        ({"subject": "x" * 201}, "Subject too long"),
        ({"message": "x" * 5001}, "Message too long"),
    ],
)
def test_contact_form_validation(
    client: TestClient, sent: list[dict[str, Any]], changes: dict[str, str], error: str
) -> None:
    response = client.post("/api/contact", json={**FORM, **changes})

    assert response.status_code == 400
    assert response.json()["error"] == error
    assert sent == []


def test_contact_form_rejects_non_json(client: TestClient, sent: list[dict[str, Any]]) -> None:
    response = client.post("/api/contact", content=b"name=Ada", headers={"content-type": "text/plain"})

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields"


def test_contact_form_rate_limit_per_address(client: TestClient, sent: list[dict[str, Any]]) -> None:
    headers = {"x-forwarded-for": "203.0.113.7, 10.0.0.1"}
    statuses = [client.post("/api/contact", json=FORM, headers=headers).status_code for _ in range(6)]
    other = client.post("/api/contact", json=FORM, headers={"x-real-ip": "198.51.100.2"})

    assert statuses == [200, 200, 200, 200, 200, 429]
    assert other.status_code == 200
    assert len(sent) == 6


def test_contact_form_delivery_failure(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        contact_routes,
        "resend_transport",
        httpx.MockTransport(lambda request: httpx.Response(422, json={"message": "bad"})),
    )

    response = client.post("/api/contact", json=FORM)

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to send email"


def test_contact_form_without_configuration(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    unconfigured = dataclasses.replace(get_settings(), resend_api_key=None)
    monkeypatch.setattr(contact_routes, "get_settings", lambda: unconfigured)

    response = client.post("/api/contact", json=FORM)

    assert response.status_code == 500
    assert response.json()["error"] == "Configuration error"


def test_contact_form_only_accepts_post(client: TestClient) -> None:
    assert client.get("/api/contact").status_code == 405


def test_rate_limiter_window_resets() -> None:
    now = [0.0]
    limiter = RateLimiter(max_requests=2, window_seconds=10, clock=lambda: now[0])

    assert [limiter.check("a").allowed for _ in range(3)] == [True, True, False]
    assert limiter.check("b").remaining == 1
    now[0] = 11.0
    assert limiter.check("a").allowed is True


def test_validate_contact_form_sanitises_fields() -> None:
    form = validate_contact_form({**FORM, "name": "  <Ada>  "})

    assert form.name == "&lt;Ada&gt;"
    assert sanitize(" a<b ") == "a&lt;b"
    with pytest.raises(ContactValidationError):
        validate_contact_form({"name": "Ada"})

"""Shared fixtures for API and client tests."""

import json
from pathlib import Path
from typing import Any, Callable, Iterator, Optional
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ergtracking.api.app import create_app
from ergtracking.core.config import Settings

PROFILE: dict[str, Any] = {
    "id": "42",
    "username": "ann",
    "discriminator": "0001",
    "avatar": "a1b2c3",
    "global_name": "Ann",
    "locale": "en-US",
}


class DiscordStub:
    """Fake Discord token and profile endpoints."""

    def __init__(self) -> None:
        self.profile: dict[str, Any] = dict(PROFILE)
        self.token_status = 200
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/oauth2/token"):
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_grant"})
            return httpx.Response(
                200,
                json={"access_token": "token-abc", "token_type": "Bearer", "scope": "identify"},
            )
        if request.url.path.endswith("/users/@me"):
            return httpx.Response(200, json=self.profile)
        return httpx.Response(404)


class WebhookRecorder:
    """Fake webhook endpoint recording every message it receives."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []
        self.status = 204
        self.unreachable = False

    @property
    def calls(self) -> int:
        return len(self.messages)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.messages.append(json.loads(request.content))
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status)


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    """Directory with a built single-page application."""
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<!doctype html><title>ERG</title>", encoding="utf-8")
    (public / "app.js").write_text("console.log('erg');", encoding="utf-8")
    return public


@pytest.fixture
def settings(static_dir: Path) -> Settings:
    """Settings with Discord credentials and a webhook configured."""
    return Settings(  # type: ignore[call-arg]
        _env_file=None,
        discord_client_id="client-id",
        discord_client_secret="client-secret",
        discord_callback_url="https://erg.example/auth/callback",
        discord_api_base="https://discord.test/api",
        webhook_url="https://hooks.example/webhook",
        static_dir=str(static_dir),
    )


@pytest.fixture
def discord() -> DiscordStub:
    return DiscordStub()


@pytest.fixture
def webhook() -> WebhookRecorder:
    return WebhookRecorder()


@pytest.fixture
def app(settings: Settings, discord: DiscordStub, webhook: WebhookRecorder) -> FastAPI:
    return create_app(
        settings,
        discord_transport=httpx.MockTransport(discord),
        webhook_transport=httpx.MockTransport(webhook),
    )


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    # https so the Secure session cookie is sent back
    with TestClient(app, base_url="https://testserver") as test_client:
        yield test_client


@pytest.fixture
def login() -> Callable[..., httpx.Response]:
    """Run the OAuth handshake against the Discord stub."""

    def _login(client: TestClient, code: str = "auth-code", state: Optional[str] = None) -> httpx.Response:
        response = client.get("/auth/discord", follow_redirects=False)
        issued = parse_qs(urlparse(response.headers["location"]).query)["state"][0]
        return client.get(
            "/auth/callback",
            params={"code": code, "state": state or issued},
            follow_redirects=False,
        )

    return _login

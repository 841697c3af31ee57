"""Authentication routes."""

import secrets
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from ergtracking.api.dependencies import (
    OAUTH_STATE_KEY,
    SESSION_ID_KEY,
    get_current_identity,
    get_discord_client,
    get_session_store,
)
from ergtracking.api.schemas.schemas import OkResponse
from ergtracking.auth.discord import DiscordOAuthClient
from ergtracking.auth.models import Identity
from ergtracking.auth.sessions import SessionStore
from ergtracking.core.exceptions import ConfigurationException, OAuthException
from ergtracking.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["authentication"])

LOGIN_SUCCEEDED_URL = "/?auth=success"
LOGIN_FAILED_URL = "/?auth=failed"


def _login_failed(
    request: Request,
    sessions: SessionStore,
    reason: str,
    **details: Any,
) -> RedirectResponse:
    sessions.destroy(request.session.get(SESSION_ID_KEY))
    request.session.clear()
    logger.warning("login_failed", reason=reason, **details)
    return RedirectResponse(LOGIN_FAILED_URL, status_code=302)


@router.get("/auth/discord")
async def login(
    request: Request,
    discord: DiscordOAuthClient = Depends(get_discord_client),
    sessions: SessionStore = Depends(get_session_store),
) -> RedirectResponse:
    """Redirect to Discord to ask for the ``identify`` scope."""
    state = secrets.token_urlsafe(16)

    try:
        url = discord.authorize_url(state)
    except ConfigurationException as e:
        return _login_failed(request, sessions, "not_configured", error=e.message)

    request.session[OAUTH_STATE_KEY] = state
    return RedirectResponse(url, status_code=302)


@router.get("/auth/callback")
async def oauth_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    discord: DiscordOAuthClient = Depends(get_discord_client),
    sessions: SessionStore = Depends(get_session_store),
) -> RedirectResponse:
    """Finish the login handshake and open a session."""
    expected_state = request.session.pop(OAUTH_STATE_KEY, None)

    if error or not code:
        return _login_failed(request, sessions, "provider_error", error=error or "missing code")

    if not state or not expected_state or not secrets.compare_digest(state, expected_state):
        return _login_failed(request, sessions, "state_mismatch")

    try:
        identity = await discord.fetch_identity(code)
    except (OAuthException, ConfigurationException) as e:
        return _login_failed(request, sessions, "exchange_failed", error=e.message)

    sessions.destroy(request.session.get(SESSION_ID_KEY))
    request.session[SESSION_ID_KEY] = sessions.create(identity)

    logger.info("login_succeeded", user_id=identity.id, username=identity.username)
    return RedirectResponse(LOGIN_SUCCEEDED_URL, status_code=302)


@router.post("/logout", response_model=OkResponse)
async def logout(
    request: Request,
    sessions: SessionStore = Depends(get_session_store),
) -> OkResponse:
    """End the current session, if any."""
    if sessions.destroy(request.session.get(SESSION_ID_KEY)):
        logger.info("logged_out")
    request.session.clear()
    return OkResponse()


@router.get("/api/user")
async def current_user(
    identity: Optional[Identity] = Depends(get_current_identity),
) -> dict:
    """Get current user info."""
    if identity is None:
        return {"loggedIn": False}
    return {"loggedIn": True, "user": identity.model_dump()}

"""Request dependencies for FastAPI."""

import json
from typing import Any, Optional

from fastapi import Depends, Request

from ergtracking.auth.discord import DiscordOAuthClient
from ergtracking.auth.models import Identity
from ergtracking.auth.sessions import SessionStore
from ergtracking.core.config import Settings
from ergtracking.core.exceptions import (
    BadRequestException,
    NotFoundException,
    PayloadTooLargeException,
    UnauthorizedException,
)
from ergtracking.storage.models import SubmissionKind
from ergtracking.storage.submissions import SubmissionStore
from ergtracking.webhooks.notifier import WebhookNotifier

# Keys inside the signed cookie session
SESSION_ID_KEY = "sid"
OAUTH_STATE_KEY = "oauth_state"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_submission_store(request: Request) -> SubmissionStore:
    return request.app.state.submissions


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_notifier(request: Request) -> WebhookNotifier:
    return request.app.state.notifier


def get_discord_client(request: Request) -> DiscordOAuthClient:
    return request.app.state.discord


async def get_current_identity(
    request: Request,
    sessions: SessionStore = Depends(get_session_store),
) -> Optional[Identity]:
    """Get the identity bound to the request's session.

    Args:
        request: Incoming request
        sessions: Server-side session store

    Returns:
        Identity or None if not authenticated
    """
    session_id = request.session.get(SESSION_ID_KEY)
    identity = sessions.get(session_id)

    if identity is None and session_id:
        # Expired or unknown on this process
        request.session.pop(SESSION_ID_KEY, None)

    return identity


async def require_identity(
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    """Require an authenticated user.

    Raises:
        UnauthorizedException: If the request has no live session
    """
    if identity is None:
        raise UnauthorizedException()
    return identity


async def get_submission_kind(kind: str) -> SubmissionKind:
    """Resolve the ``{kind}`` path segment of a submission route.

    Raises:
        NotFoundException: If the kind is not a known form
    """
    try:
        return SubmissionKind(kind)
    except ValueError:
        raise NotFoundException(f"unknown submission kind: {kind}") from None


def _is_json(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"invalid JSON constant: {name}")


async def read_payload(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> Any:
    """Read the submission body as an opaque JSON document.

    Empty bodies and non-JSON content types yield an empty object.

    Raises:
        PayloadTooLargeException: If the body exceeds ``max_body_bytes``
        BadRequestException: If the body is not a JSON object or array
    """
    limit = settings.max_body_bytes

    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        raise PayloadTooLargeException(details={"limit": limit})

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeException(details={"limit": limit})

    if not body.strip() or not _is_json(request.headers.get("content-type", "")):
        return {}

    try:
        payload = json.loads(bytes(body), parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        raise BadRequestException("malformed JSON body") from None

    if not isinstance(payload, (dict, list)):
        raise BadRequestException("body must be a JSON object or array")
    return payload

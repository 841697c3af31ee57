"""FastAPI application."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.sessions import SessionMiddleware

from ergtracking import __version__
from ergtracking.api.routes import admin, auth, spa, submissions
from ergtracking.auth.discord import DiscordOAuthClient
from ergtracking.auth.sessions import SessionStore
from ergtracking.core.config import DEFAULT_SESSION_SECRET, Settings, get_settings
from ergtracking.core.exceptions import APIException
from ergtracking.core.logging import bind_request_context, get_logger, setup_logging
from ergtracking.storage.submissions import SubmissionStore
from ergtracking.webhooks.notifier import WebhookNotifier

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info(
        "application_starting",
        version=__version__,
        port=settings.port,
        discord_configured=settings.discord_configured,
        webhook_enabled=app.state.notifier.enabled,
    )
    yield
    logger.info("application_shutting_down")


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Render API errors as ``{"error": message}``."""
    content: dict = {"error": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


def create_app(
    settings: Optional[Settings] = None,
    *,
    discord_transport: Optional[httpx.AsyncBaseTransport] = None,
    webhook_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use (default: environment)
        discord_transport: httpx transport for Discord calls (tests)
        webhook_transport: httpx transport for webhook calls (tests)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    setup_logging(settings)

    if settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning("default_session_secret_in_use")
    if not settings.discord_configured:
        logger.warning("discord_oauth_not_configured")

    app = FastAPI(
        title="ERG Tracking API",
        description="Discord login and form submissions for ERG tracking",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
    )

    app.state.settings = settings
    app.state.submissions = SubmissionStore(capacity=settings.submission_capacity)
    app.state.sessions = SessionStore(lifetime=settings.session_lifetime)
    app.state.notifier = WebhookNotifier.from_settings(settings, transport=webhook_transport)
    app.state.discord = DiscordOAuthClient.from_settings(settings, transport=discord_transport)

    # Cookie holds only the session id; its Max-Age is refreshed by the
    # middleware but the server-side expiry stays fixed.
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie_name,
        max_age=int(settings.session_lifetime.total_seconds()),
        same_site="lax",
        https_only=settings.session_cookie_secure,
    )

    app.add_exception_handler(APIException, api_exception_handler)  # type: ignore[arg-type]

    @app.middleware("http")
    async def request_context(request: Request, call_next: Callable) -> Response:
        """Tag log entries and the response with a request id."""
        request_id = bind_request_context(
            request.method,
            request.url.path,
            request.headers.get("x-request-id"),
        )
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(auth.router)
    app.include_router(submissions.router, prefix="/api")
    app.include_router(admin.router, prefix="/api")

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
        }

    # Must stay last: catches every other GET
    app.include_router(spa.router)

    return app


app = create_app()

"""Client for the Discord OAuth2 authorization-code flow."""

from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from ergtracking.auth.models import Identity
from ergtracking.core.config import Settings
from ergtracking.core.exceptions import ConfigurationException, OAuthException
from ergtracking.core.logging import get_logger

logger = get_logger(__name__)

SCOPE = "identify"


class DiscordOAuthClient:
    """Performs the login handshake with Discord and fetches the profile."""

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        callback_url: Optional[str],
        api_base: str = "https://discord.com/api",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize Discord client.

        Args:
            client_id: OAuth2 application id
            client_secret: OAuth2 application secret
            callback_url: Redirect URI registered with Discord
            api_base: Base URL of the Discord API
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "DiscordOAuthClient":
        return cls(
            client_id=settings.discord_client_id,
            client_secret=settings.discord_client_secret,
            callback_url=settings.discord_callback_url,
            api_base=settings.discord_api_base,
            timeout=settings.discord_timeout,
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret and self.callback_url)

    def authorize_url(self, state: str) -> str:
        """Build the URL the user agent is sent to for consent.

        Args:
            state: Anti-forgery value echoed back on the callback

        Returns:
            Authorization endpoint URL

        Raises:
            ConfigurationException: If client id or callback URL is missing
        """
        if not self.client_id or not self.callback_url:
            raise ConfigurationException("Discord client id and callback URL are required")

        query = urlencode(
            {
                "response_type": "code",
                "client_id": self.client_id,
                "redirect_uri": self.callback_url,
                "scope": SCOPE,
                "state": state,
            }
        )
        return f"{self.api_base}/oauth2/authorize?{query}"

    async def fetch_identity(self, code: str) -> Identity:
        """Exchange an authorization code and load the user's profile.

        Args:
            code: Authorization code from the callback

        Returns:
            Identity built from the profile response

        Raises:
            ConfigurationException: If credentials are missing
            OAuthException: If Discord rejects the code or the call fails
        """
        if not self.configured:
            raise ConfigurationException("Discord OAuth credentials are not configured")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            access_token = await self._exchange_code(client, code)
            profile = await self._get_json(
                client,
                "GET",
                f"{self.api_base}/users/@me",
                headers={"Authorization": f"Bearer {access_token}"},
            )

        try:
            return Identity.from_profile(profile)
        except ValueError as e:
            raise OAuthException("Malformed profile response") from e

    async def _exchange_code(self, client: httpx.AsyncClient, code: str) -> str:
        token = await self._get_json(
            client,
            "POST",
            f"{self.api_base}/oauth2/token",
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.callback_url,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "scope": SCOPE,
            },
            headers={"Accept": "application/json"},
        )

        access_token = token.get("access_token")
        if not access_token:
            raise OAuthException("Token response has no access_token")
        return access_token

    @staticmethod
    async def _get_json(
        client: httpx.AsyncClient,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise OAuthException(f"Request error: {e}") from e

        if response.status_code >= 400:
            raise OAuthException(
                f"HTTP {response.status_code}",
                details={"url": url, "body": response.text[:500]},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise OAuthException("Response is not JSON", details={"url": url}) from e

        if not isinstance(payload, dict):
            raise OAuthException("Unexpected response shape", details={"url": url})
        return payload

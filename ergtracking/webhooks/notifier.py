"""Best-effort submission notifications to a Discord-compatible webhook."""

import enum
import json
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from ergtracking.auth.models import Identity
from ergtracking.core.config import Settings
from ergtracking.core.exceptions import WebhookDeliveryException
from ergtracking.core.logging import get_logger

logger = get_logger(__name__)

EMBED_COLOR = 0x38BDF8
DATA_LIMIT = 1800
PLACEHOLDER = "-"


class DeliveryOutcome(str, enum.Enum):
    """Result of a single notification attempt."""

    SKIPPED = "skipped"
    DELIVERED = "delivered"
    FAILED = "failed"


def format_user(identity: Optional[Identity]) -> str:
    """Render the "User" field of a notification."""
    if identity is None:
        return PLACEHOLDER
    return identity.tag


def format_data(payload: Any) -> str:
    """Render the payload as a JSON code block, cut at DATA_LIMIT characters."""
    body = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    return "```json\n" + body[:DATA_LIMIT] + "\n```"


class WebhookNotifier:
    """Posts one message per submission to the configured webhook.

    Every call makes at most one HTTP attempt. Failures are logged and
    reported through the returned outcome, never raised.
    """

    def __init__(
        self,
        url: Optional[str],
        timeout: float = 5.0,
        brand: str = "ERG",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize webhook notifier.

        Args:
            url: Webhook URL; notifications are skipped when empty
            timeout: Request timeout in seconds
            brand: Prefix for the message content
            transport: Optional httpx transport (used by tests)
        """
        self.url = url or None
        self.timeout = timeout
        self.brand = brand
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "WebhookNotifier":
        return cls(
            url=settings.webhook_url,
            timeout=settings.webhook_timeout,
            brand=settings.webhook_brand,
            transport=transport,
        )

    @property
    def enabled(self) -> bool:
        return self.url is not None

    def build_message(
        self,
        title: str,
        kind: Optional[str],
        identity: Optional[Identity],
        payload: Any,
    ) -> dict[str, Any]:
        """Build the webhook body for a submission.

        Args:
            title: Embed title
            kind: Submission kind
            identity: Submitting user, if known
            payload: Submitted data

        Returns:
            JSON-serializable webhook body
        """
        embed = {
            "title": title,
            "color": EMBED_COLOR,
            "fields": [
                {"name": "Type", "value": kind or PLACEHOLDER, "inline": True},
                {"name": "User", "value": format_user(identity), "inline": True},
                {"name": "Data", "value": format_data(payload)},
            ],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return {"content": f"{self.brand} {kind} submission", "embeds": [embed]}

    async def notify(
        self,
        title: str,
        kind: Optional[str],
        identity: Optional[Identity],
        payload: Any,
    ) -> DeliveryOutcome:
        """Deliver one notification, best effort.

        Args:
            title: Embed title
            kind: Submission kind
            identity: Submitting user, if known
            payload: Submitted data

        Returns:
            SKIPPED without a webhook URL, otherwise DELIVERED or FAILED
        """
        if not self.enabled:
            return DeliveryOutcome.SKIPPED

        message = self.build_message(title, kind, identity, payload)

        try:
            await self._post_once(message)
        except WebhookDeliveryException as e:
            logger.warning(
                "webhook_delivery_failed",
                kind=kind,
                error=e.message,
                **e.details,
            )
            return DeliveryOutcome.FAILED
        except Exception as e:
            logger.error(
                "webhook_delivery_error",
                kind=kind,
                error=str(e),
                exc_info=True,
            )
            return DeliveryOutcome.FAILED

        logger.info("webhook_delivered", kind=kind)
        return DeliveryOutcome.DELIVERED

    async def _post_once(self, message: dict[str, Any]) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.url,
                    json=message,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as e:
            raise WebhookDeliveryException(f"Request error: {e}") from e

        if not 200 <= response.status_code < 300:
            raise WebhookDeliveryException(
                f"HTTP {response.status_code}",
                details={"status_code": response.status_code, "body": response.text[:500]},
            )

"""Webhook notification system."""

from ergtracking.webhooks.notifier import DeliveryOutcome, WebhookNotifier

__all__ = ["DeliveryOutcome", "WebhookNotifier"]

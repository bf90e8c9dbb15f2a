# src/delivery/webhook.py — v1
"""Push formatted digests to an external webhook.

The payload is the same completed-task envelope returned to reactive
callers. One attempt per call; the next scheduled run is the retry.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

import httpx

from trendscout.a2a.models import Message, TextPart
from trendscout.a2a.task import TaskRecord
from trendscout.core.errors import DeliveryFailed

logger = logging.getLogger(__name__)

NOTIFICATION_TEXT = "Proactive notification"


def build_notification(text: str) -> dict[str, Any]:
    """Completed-task envelope carrying text as the agent reply."""
    task_id = str(uuid.uuid4())
    trigger = Message(
        role="agent",
        parts=[TextPart(text=NOTIFICATION_TEXT)],
        message_id=str(uuid.uuid4()),
        task_id=task_id,
    )
    task = TaskRecord(str(uuid.uuid4()), trigger, task_id=task_id)
    task.start()
    task.complete(text)
    return task.to_response().to_payload()


class WebhookChannel:
    """Delivers text to a configured HTTP endpoint."""

    def __init__(self, client: httpx.AsyncClient, url: str, timeout_s: float = 10.0) -> None:
        if not url:
            raise ValueError("webhook url must not be empty")
        self._client = client
        self._url = url
        self._timeout = httpx.Timeout(timeout_s)

    async def deliver(self, text: str) -> None:
        """Post one notification.

        Raises:
            DeliveryFailed: On transport errors or a non-2xx answer.
        """
        payload = build_notification(text)
        try:
            response = await self._client.post(self._url, json=payload, timeout=self._timeout)
        except httpx.HTTPError as e:
            raise DeliveryFailed(f"Webhook request failed: {e}") from e
        if not response.is_success:
            raise DeliveryFailed(f"Webhook failed: {response.status_code}")
        logger.info("Delivered notification to webhook (%d chars)", len(text))

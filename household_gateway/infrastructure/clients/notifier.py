"""Notification webhook client with exponential backoff retry logic"""

import httpx
import asyncio
from typing import List
from household_gateway.config import settings
from household_gateway.domain.models import Notification
from household_gateway.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter


class NotificationClient:
    """Client handing composed notifications to the delivery service"""

    def __init__(self, webhook_url: str | None = None, timeout: float | None = None):
        self.webhook_url = webhook_url or settings.notification_webhook_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base

    async def send_notifications(self, household_id: str, notifications: List[Notification]) -> None:
        """
        Post a batch of notifications to the delivery webhook.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^attempt)
        - Retries on HTTP error responses and network failures
        - Tracks latency histogram and failure counter

        An empty batch is not sent.
        """
        if not notifications:
            return

        payload = {
            "household_id": household_id,
            "notifications": [n.to_payload() for n in notifications],
        }

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError):
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        raise

                    await asyncio.sleep(self.backoff_base * (2 ** (attempt - 1)))

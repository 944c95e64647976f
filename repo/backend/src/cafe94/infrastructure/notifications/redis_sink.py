from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from uuid import uuid4

import redis

from cafe94.application.ports.notifications import NotificationSink
from cafe94.domain.common.ids import CustomerId
from cafe94.infrastructure.observability.otel import get_tracer

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "notifications"


def notification_channel(customer_id: CustomerId) -> str:
    return f"{CHANNEL_PREFIX}:{customer_id}"


def serialize_notification(customer_id: CustomerId, message: str, occurred_at: datetime) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": "customer.notified",
        "occurred_at": occurred_at.isoformat(),
        "payload": {
            "customerId": customer_id,
            "message": message,
        },
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


class RedisNotificationSink(NotificationSink):
    """Publishes each customer message on that customer's pub/sub channel."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_env(cls, timeout_seconds: float = 1.0) -> RedisNotificationSink:
        redis_url = os.getenv("REDIS_URL")
        if not redis_url:
            raise RuntimeError("REDIS_URL is not set")
        # from_url is lazy; the first publish opens the connection.
        return cls(
            redis.Redis.from_url(
                redis_url,
                socket_connect_timeout=timeout_seconds,
                socket_timeout=timeout_seconds,
            )
        )

    def notify_customer(self, customer_id: CustomerId, message: str) -> None:
        channel = notification_channel(customer_id)
        with get_tracer().start_as_current_span("notification.publish") as span:
            span.set_attribute("messaging.destination.name", channel)
            receivers = self._client.publish(
                channel,
                serialize_notification(customer_id, message, datetime.now(timezone.utc)),
            )
        logger.debug(
            "notification_published",
            extra={"customer_id": customer_id, "receivers": receivers},
        )

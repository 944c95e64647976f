from __future__ import annotations

import logging

from cafe94.application.metrics.lifecycle import record_notification_failure
from cafe94.application.ports.notifications import NotificationSink
from cafe94.domain.common.ids import CustomerId

logger = logging.getLogger(__name__)


def notify_customer(sink: NotificationSink, customer_id: CustomerId, message: str) -> None:
    """Hand a message to the sink; delivery problems are logged, never raised."""
    try:
        sink.notify_customer(customer_id, message)
    except Exception:
        record_notification_failure()
        logger.exception("notification_failed", extra={"customer_id": customer_id})

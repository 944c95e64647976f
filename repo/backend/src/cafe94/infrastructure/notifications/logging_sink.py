from __future__ import annotations

import logging

from cafe94.application.ports.notifications import NotificationSink
from cafe94.domain.common.ids import CustomerId

logger = logging.getLogger(__name__)


class LoggingNotificationSink(NotificationSink):
    def notify_customer(self, customer_id: CustomerId, message: str) -> None:
        logger.info(
            "Notification to customer %s: %s",
            customer_id,
            message,
            extra={"customer_id": customer_id},
        )

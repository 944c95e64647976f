from __future__ import annotations

from typing import Protocol

from cafe94.domain.common.ids import CustomerId


class NotificationSink(Protocol):
    def notify_customer(self, customer_id: CustomerId, message: str) -> None: ...

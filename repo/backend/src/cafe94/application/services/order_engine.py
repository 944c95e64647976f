from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime, time

from cafe94.application.metrics.lifecycle import record_order_status, record_order_transition
from cafe94.application.ports.clock import Clock
from cafe94.application.ports.notifications import NotificationSink
from cafe94.application.services.notifier import notify_customer
from cafe94.domain.common.errors import InvalidInputError, NotFoundError
from cafe94.domain.common.ids import CustomerId, DriverId, OrderId
from cafe94.domain.order.entities import Order, OrderStatus

logger = logging.getLogger(__name__)


class OrderEngine:
    def __init__(
        self,
        notifications: NotificationSink,
        clock: Clock,
        orders: Iterable[Order] = (),
    ) -> None:
        self._lock = threading.RLock()
        self._notifications = notifications
        self._clock = clock
        self._orders: dict[OrderId, Order] = {}
        for order in orders:
            if not order.is_placed:
                raise InvalidInputError("stored orders must carry an order id")
            if order.order_id in self._orders:
                raise InvalidInputError(f"duplicate order id {order.order_id}")
            self._orders[order.order_id] = order
        self._next_id = max(self._orders, default=0) + 1

    def place(self, order: Order) -> Order:
        if not order.items:
            raise InvalidInputError("order must contain at least one item")
        if order.is_placed:
            raise InvalidInputError(f"order {order.order_id} has already been placed")
        with self._lock:
            placed = order.with_id(OrderId(self._next_id))
            self._orders[placed.order_id] = placed
            self._next_id += 1

        record_order_status(placed)
        logger.info(
            "order_placed",
            extra={
                "order_id": placed.order_id,
                "customer_id": placed.customer_id,
                "status": placed.status.value,
            },
        )
        notify_customer(
            self._notifications,
            placed.customer_id,
            f"Your order (ID: {placed.order_id}) has been placed",
        )
        return placed

    def update_status(self, order_id: OrderId, new_status: OrderStatus) -> bool:
        now = self._clock.now()
        return self._mutate(order_id, lambda order: order.with_status(new_status, now)) is not None

    def process_order(self, order_id: OrderId) -> bool:
        now = self._clock.now()
        return self._mutate(order_id, lambda order: order.process(now)) is not None

    def assign_driver(self, order_id: OrderId, driver_id: DriverId) -> bool:
        if driver_id <= 0:
            raise InvalidInputError(f"assigned driver id must be positive, got {driver_id}")
        now = self._clock.now()
        return self._mutate(order_id, lambda order: order.assign_driver(driver_id, now)) is not None

    def set_estimated_delivery_time(self, order_id: OrderId, estimated: time | None) -> bool:
        now = self._clock.now()
        changed = self._mutate(
            order_id,
            lambda order: order.set_estimated_delivery_time(estimated, now),
        )
        return changed is not None

    def advance(self, order_id: OrderId, target: OrderStatus) -> Order:
        now = self._clock.now()
        changed = self._mutate(order_id, lambda order: order.transition_to(target, now))
        if changed is None:
            raise NotFoundError(f"order {order_id} not found")
        return changed

    def confirm(self, order_id: OrderId) -> Order:
        return self.advance(order_id, OrderStatus.CONFIRMED)

    def start_preparation(self, order_id: OrderId) -> Order:
        return self.advance(order_id, OrderStatus.PREPARING)

    def mark_ready(self, order_id: OrderId) -> Order:
        return self.advance(order_id, OrderStatus.READY)

    def hand_over(self, order_id: OrderId) -> Order:
        order = self.find_by_id(order_id)
        if order is None:
            raise NotFoundError(f"order {order_id} not found")
        return self.advance(order_id, order.hand_over_status)

    def complete(self, order_id: OrderId) -> Order:
        return self.advance(order_id, OrderStatus.COMPLETED)

    def cancel(self, order_id: OrderId) -> Order:
        return self.advance(order_id, OrderStatus.CANCELLED)

    def find_by_id(self, order_id: OrderId) -> Order | None:
        with self._lock:
            return self._orders.get(order_id)

    def track_status(self, order_id: OrderId) -> OrderStatus | None:
        order = self.find_by_id(order_id)
        return order.status if order is not None else None

    def list_by_status(self, status: OrderStatus) -> list[Order]:
        with self._lock:
            return [order for order in self._orders.values() if order.status == status]

    def list_by_customer(self, customer_id: CustomerId) -> list[Order]:
        with self._lock:
            return [order for order in self._orders.values() if order.customer_id == customer_id]

    def list_outstanding(self) -> list[Order]:
        with self._lock:
            return [order for order in self._orders.values() if not order.is_terminal]

    def list_between(self, start: datetime, end: datetime) -> list[Order]:
        with self._lock:
            return [
                order for order in self._orders.values() if start <= order.ordered_at <= end
            ]

    def list_all(self) -> list[Order]:
        with self._lock:
            return list(self._orders.values())

    def _mutate(self, order_id: OrderId, change: Callable[[Order], Order]) -> Order | None:
        with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                return None
            updated = change(current)
            self._orders[order_id] = updated

        if updated.status != current.status:
            record_order_transition(from_status=current.status, to_status=updated.status)
            record_order_status(updated)
            logger.info(
                "order_status_changed",
                extra={
                    "order_id": order_id,
                    "customer_id": updated.customer_id,
                    "status": updated.status.value,
                },
            )
            notify_customer(
                self._notifications,
                updated.customer_id,
                f"Your order (ID: {order_id}) is now {updated.status.value}",
            )
        return updated

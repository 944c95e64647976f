from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from cafe94.application.ports.clock import Clock
from cafe94.application.ports.notifications import NotificationSink
from cafe94.application.services.order_engine import OrderEngine
from cafe94.application.services.reservation_engine import ReservationEngine
from cafe94.application.services.table_registry import DEFAULT_TABLE_LAYOUT, TableRegistry
from cafe94.domain.order.entities import Order
from cafe94.domain.reservation.entities import Booking
from cafe94.domain.table.entities import Table
from cafe94.infrastructure.clock import SystemClock
from cafe94.infrastructure.notifications.logging_sink import LoggingNotificationSink
from cafe94.infrastructure.notifications.redis_sink import RedisNotificationSink
from cafe94.infrastructure.observability.logging_config import configure_logging
from cafe94.infrastructure.observability.otel import configure_tracing


@dataclass(frozen=True)
class CafeCore:
    tables: TableRegistry
    reservations: ReservationEngine
    orders: OrderEngine


def _table_layout() -> tuple[tuple[int, int], ...]:
    raw_value = os.getenv("CAFE_TABLE_LAYOUT")
    if not raw_value:
        return DEFAULT_TABLE_LAYOUT

    layout: list[tuple[int, int]] = []
    for entry in raw_value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        capacity, _, count = entry.partition(":")
        try:
            layout.append((int(capacity), int(count)))
        except ValueError as exc:
            raise RuntimeError(f"invalid CAFE_TABLE_LAYOUT entry: {entry!r}") from exc
    return tuple(layout)


def _notification_sink() -> NotificationSink:
    kind = os.getenv("CAFE_NOTIFICATION_SINK", "log").lower()
    if kind == "log":
        return LoggingNotificationSink()
    if kind == "redis":
        return RedisNotificationSink.from_env()
    raise RuntimeError(f"unsupported CAFE_NOTIFICATION_SINK: {kind}")


def create_core(
    *,
    clock: Clock | None = None,
    notifications: NotificationSink | None = None,
    layout: Sequence[tuple[int, int]] | None = None,
    tables: Iterable[Table] | None = None,
    bookings: Iterable[Booking] = (),
    orders: Iterable[Order] = (),
) -> CafeCore:
    configure_logging()
    configure_tracing()

    clock = clock or SystemClock()
    notifications = notifications or _notification_sink()
    if tables is not None:
        registry = TableRegistry(tables, clock)
    else:
        registry = TableRegistry.with_layout(
            clock, layout if layout is not None else _table_layout()
        )
    return CafeCore(
        tables=registry,
        reservations=ReservationEngine(
            table_registry=registry,
            notifications=notifications,
            clock=clock,
            bookings=bookings,
        ),
        orders=OrderEngine(notifications=notifications, clock=clock, orders=orders),
    )

from __future__ import annotations

from prometheus_client import Counter, Gauge

from cafe94.domain.order.entities import Order, OrderStatus
from cafe94.domain.reservation.entities import Booking, ReservationStatus
from cafe94.domain.table.entities import Table, TableStatus

BOOKINGS_TOTAL = Counter(
    "cafe94_bookings_total",
    "Total number of bookings observed by status.",
    ["status"],
)

BOOKING_TRANSITION_TOTAL = Counter(
    "cafe94_booking_transition_total",
    "Total number of booking lifecycle transitions.",
    ["from", "to"],
)

TABLE_ASSIGNMENTS_TOTAL = Counter(
    "cafe94_table_assignments_total",
    "Total number of table assignment attempts by result.",
    ["result"],
)

TABLES_BY_STATUS = Gauge(
    "cafe94_tables",
    "Current number of tables per status in each registry.",
    ["registry", "status"],
)

ORDERS_TOTAL = Counter(
    "cafe94_orders_total",
    "Total number of orders observed by type and status.",
    ["order_type", "status"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "cafe94_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to"],
)

NOTIFICATION_FAILURES_TOTAL = Counter(
    "cafe94_notification_failures_total",
    "Total number of customer notifications the sink failed to accept.",
)


def record_booking_status(booking: Booking) -> None:
    BOOKINGS_TOTAL.labels(status=booking.status.value).inc()


def record_booking_transition(from_status: ReservationStatus, to_status: ReservationStatus) -> None:
    BOOKING_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_table_assignment(result: str) -> None:
    TABLE_ASSIGNMENTS_TOTAL.labels(result=result).inc()


def record_table_statuses(registry: str, tables: list[Table]) -> None:
    for status in TableStatus:
        TABLES_BY_STATUS.labels(registry=registry, status=status.value).set(
            sum(1 for table in tables if table.status == status)
        )


def record_order_status(order: Order) -> None:
    ORDERS_TOTAL.labels(order_type=order.order_type.value, status=order.status.value).inc()


def record_order_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_notification_failure() -> None:
    NOTIFICATION_FAILURES_TOTAL.inc()

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import datetime

from cafe94.application.metrics.lifecycle import record_booking_status, record_booking_transition
from cafe94.application.ports.clock import Clock
from cafe94.application.ports.notifications import NotificationSink
from cafe94.application.services.notifier import notify_customer
from cafe94.application.services.table_registry import TableRegistry
from cafe94.domain.common.errors import InvalidInputError
from cafe94.domain.common.ids import CustomerId, ReservationId, TableId
from cafe94.domain.reservation.entities import (
    DEFAULT_BOOKING_DURATION_MINUTES,
    Booking,
    ReservationStatus,
    create_pending_booking,
)

logger = logging.getLogger(__name__)


class ReservationEngine:
    """Creates bookings, puts them on tables, approves and cancels them.

    Lock order is engine first, then registry. The registry never calls back into
    the engine.
    """

    def __init__(
        self,
        table_registry: TableRegistry,
        notifications: NotificationSink,
        clock: Clock,
        bookings: Iterable[Booking] = (),
    ) -> None:
        self._lock = threading.RLock()
        self._table_registry = table_registry
        self._notifications = notifications
        self._clock = clock
        self._bookings: dict[ReservationId, Booking] = {}
        self._by_customer: dict[CustomerId, list[ReservationId]] = {}
        for booking in bookings:
            if booking.reservation_id in self._bookings:
                raise InvalidInputError(f"duplicate booking id {booking.reservation_id}")
            self._insert(booking)
        self._next_id = max(self._bookings, default=0) + 1

    def create_booking(
        self,
        customer_id: CustomerId,
        start_time: datetime,
        *,
        guest_count: int,
        duration_minutes: int = DEFAULT_BOOKING_DURATION_MINUTES,
    ) -> Booking:
        if customer_id <= 0:
            raise InvalidInputError(f"valid customer id is required, got {customer_id}")
        with self._lock:
            booking = create_pending_booking(
                reservation_id=ReservationId(self._next_id),
                customer_id=customer_id,
                start_time=start_time,
                duration_minutes=duration_minutes,
                guest_count=guest_count,
                now=self._clock.now(),
            )
            self._insert(booking)
            self._next_id += 1

        record_booking_status(booking)
        logger.info(
            "booking_created",
            extra={"booking_id": booking.reservation_id, "customer_id": customer_id},
        )
        return booking

    def assign_table(self, booking_id: ReservationId, table_id: TableId) -> bool:
        with self._lock:
            booking = self._bookings.get(booking_id)
            table = self._table_registry.get(table_id)
            if booking is None or table is None:
                return False

            booking.ensure_assignable()
            booking.ensure_fits(table)
            if table_id in booking.table_ids:
                return True
            if not self._table_registry.assign(table_id, booking):
                return False
            self._bookings[booking_id] = booking.with_table(table_id)
            return True

    def approve(self, booking_id: ReservationId) -> bool:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return False
            if not booking.table_ids:
                logger.info("booking_approval_rejected", extra={"booking_id": booking_id})
                return False
            if booking.status == ReservationStatus.APPROVED:
                return True
            approved = booking.approve()
            self._bookings[booking_id] = approved

        record_booking_transition(booking.status, approved.status)
        record_booking_status(approved)
        logger.info("booking_approved", extra={"booking_id": booking_id})
        notify_customer(self._notifications, approved.customer_id, "Booking confirmed!")
        return True

    def cancel(self, booking_id: ReservationId) -> None:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None or booking.status == ReservationStatus.CANCELLED:
                return
            for table_id in booking.table_ids:
                self._table_registry.release(table_id, reservation_id=booking.reservation_id)
            cancelled = booking.cancel()
            self._bookings[booking_id] = cancelled

        record_booking_transition(booking.status, cancelled.status)
        record_booking_status(cancelled)
        logger.info("booking_cancelled", extra={"booking_id": booking_id})
        notify_customer(
            self._notifications,
            cancelled.customer_id,
            f"Your booking (ID: {booking_id}) has been cancelled",
        )

    def find_by_id(self, booking_id: ReservationId) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def list_by_customer(self, customer_id: CustomerId) -> list[Booking]:
        with self._lock:
            return [self._bookings[rid] for rid in self._by_customer.get(customer_id, [])]

    def list_between(self, start: datetime, end: datetime) -> list[Booking]:
        with self._lock:
            return [
                booking
                for booking in self._bookings.values()
                if start <= booking.start_time <= end
            ]

    def list_all(self) -> list[Booking]:
        with self._lock:
            return list(self._bookings.values())

    def _insert(self, booking: Booking) -> None:
        self._bookings[booking.reservation_id] = booking
        self._by_customer.setdefault(booking.customer_id, []).append(booking.reservation_id)

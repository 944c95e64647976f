from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence
from datetime import datetime

from cafe94.application.metrics.lifecycle import record_table_assignment, record_table_statuses
from cafe94.application.ports.clock import Clock
from cafe94.domain.common.errors import InvalidInputError, TableUnavailableError
from cafe94.domain.common.ids import ReservationId, TableId
from cafe94.domain.common.time_range import TimeRange, ensure_aware
from cafe94.domain.reservation.entities import Booking
from cafe94.domain.table.entities import Table

logger = logging.getLogger(__name__)

# (capacity, count): four 2-seaters, four 4-seaters, two 8-seaters, one 10-seater.
DEFAULT_TABLE_LAYOUT: tuple[tuple[int, int], ...] = ((2, 4), (4, 4), (8, 2), (10, 1))


def build_tables(layout: Sequence[tuple[int, int]]) -> list[Table]:
    tables: list[Table] = []
    for capacity, count in layout:
        if count < 0:
            raise InvalidInputError("table count must be >= 0")
        for _ in range(count):
            tables.append(Table(table_id=TableId(len(tables) + 1), capacity=capacity))
    return tables


class TableRegistry:
    """Fixed table inventory.

    Tables are frozen snapshots; every change replaces the stored instance under the
    registry lock, so anything handed to a caller is safe to keep.
    """

    def __init__(self, tables: Iterable[Table], clock: Clock, name: str = "main") -> None:
        self._lock = threading.RLock()
        self.name = name
        self._clock = clock
        self._tables: dict[TableId, Table] = {}
        for table in tables:
            if table.table_id in self._tables:
                raise InvalidInputError(f"duplicate table id {table.table_id}")
            self._tables[table.table_id] = table
        record_table_statuses(self.name, list(self._tables.values()))

    @classmethod
    def with_layout(
        cls,
        clock: Clock,
        layout: Sequence[tuple[int, int]] = DEFAULT_TABLE_LAYOUT,
        name: str = "main",
    ) -> TableRegistry:
        return cls(build_tables(layout), clock, name=name)

    def get(self, table_id: TableId) -> Table | None:
        with self._lock:
            return self._tables.get(table_id)

    def list_tables(self) -> list[Table]:
        with self._lock:
            return list(self._tables.values())

    def tables_by_capacity(self, min_capacity: int, max_capacity: int) -> list[Table]:
        with self._lock:
            return [
                table
                for table in self._tables.values()
                if min_capacity <= table.capacity <= max_capacity
            ]

    def find_available(
        self,
        start_time: datetime,
        duration_minutes: int,
        guest_count: int,
    ) -> list[Table]:
        if guest_count <= 0:
            raise InvalidInputError("guest_count must be positive")
        requested = _requested_range(start_time, duration_minutes)
        with self._lock:
            return [
                table
                for table in self._tables.values()
                if table.fits(guest_count) and table.is_available(requested)
            ]

    def check_availability(
        self,
        table_id: TableId,
        start_time: datetime,
        duration_minutes: int,
    ) -> bool:
        requested = _requested_range(start_time, duration_minutes)
        with self._lock:
            table = self._tables.get(table_id)
            return table is not None and table.is_available(requested)

    def assign(self, table_id: TableId, booking: Booking) -> bool:
        with self._lock:
            table = self._tables.get(table_id)
            if table is None:
                record_table_assignment("missing")
                return False
            try:
                held = table.hold(booking.reservation_id, booking.time_range)
            except TableUnavailableError:
                record_table_assignment("unavailable")
                logger.info(
                    "table_unavailable",
                    extra={"table_id": table_id, "booking_id": booking.reservation_id},
                )
                return False
            self._store(held)

        record_table_assignment("assigned")
        logger.info(
            "table_assigned",
            extra={"table_id": table_id, "booking_id": booking.reservation_id},
        )
        return True

    def release(self, table_id: TableId, reservation_id: ReservationId | None = None) -> None:
        with self._lock:
            table = self._tables.get(table_id)
            if table is None:
                return
            self._store(table.release(self._clock.now(), reservation_id=reservation_id))
        logger.info("table_released", extra={"table_id": table_id})

    def seat(self, table_id: TableId) -> bool:
        with self._lock:
            table = self._tables.get(table_id)
            if table is None:
                return False
            self._store(table.seat())
            return True

    def mark_unavailable(self, table_id: TableId) -> bool:
        with self._lock:
            table = self._tables.get(table_id)
            if table is None:
                return False
            self._store(table.mark_unavailable())
            return True

    def mark_available(self, table_id: TableId) -> bool:
        with self._lock:
            table = self._tables.get(table_id)
            if table is None:
                return False
            self._store(table.mark_available())
            return True

    def _store(self, table: Table) -> None:
        self._tables[table.table_id] = table
        record_table_statuses(self.name, list(self._tables.values()))


def _requested_range(start_time: datetime, duration_minutes: int) -> TimeRange:
    ensure_aware(start_time, "start_time")
    if duration_minutes <= 0:
        raise InvalidInputError("duration_minutes must be positive")
    return TimeRange.from_duration(start_time, duration_minutes)

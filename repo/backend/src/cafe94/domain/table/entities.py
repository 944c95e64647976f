from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from cafe94.domain.common.errors import IllegalTransitionError, TableUnavailableError
from cafe94.domain.common.ids import ReservationId, TableId
from cafe94.domain.common.time_range import TimeRange


class TableStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    OCCUPIED = "OCCUPIED"
    UNAVAILABLE = "UNAVAILABLE"


@dataclass(frozen=True)
class TableHold:
    reservation_id: ReservationId
    time_range: TimeRange


@dataclass(frozen=True)
class Table:
    table_id: TableId
    capacity: int
    status: TableStatus = TableStatus.AVAILABLE
    holds: tuple[TableHold, ...] = ()

    def __post_init__(self) -> None:
        if self.table_id < 1:
            raise ValueError("table_id must be >= 1")
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")
        if self.status in (TableStatus.RESERVED, TableStatus.OCCUPIED) and not self.holds:
            raise ValueError(f"status={self.status.value} requires at least one hold")

    def fits(self, guest_count: int) -> bool:
        return self.capacity >= guest_count

    def is_available(self, requested: TimeRange) -> bool:
        for hold in self.holds:
            if hold.time_range.overlaps(requested):
                return False
        return self.status == TableStatus.AVAILABLE

    def hold(self, reservation_id: ReservationId, requested: TimeRange) -> Table:
        if not self.is_available(requested):
            raise TableUnavailableError(
                f"table {self.table_id} is not available "
                f"from {requested.start.isoformat()} to {requested.end.isoformat()}"
            )
        return replace(
            self,
            status=TableStatus.RESERVED,
            holds=self.holds + (TableHold(reservation_id=reservation_id, time_range=requested),),
        )

    def release(self, now: datetime, reservation_id: ReservationId | None = None) -> Table:
        # Only expired holds (and the detached reservation's own) are dropped.
        kept = tuple(
            hold
            for hold in self.holds
            if not hold.time_range.has_ended(now) and hold.reservation_id != reservation_id
        )
        return replace(self, status=TableStatus.AVAILABLE, holds=kept)

    def seat(self) -> Table:
        if self.status == TableStatus.OCCUPIED:
            return self
        if self.status != TableStatus.RESERVED:
            raise IllegalTransitionError(
                f"cannot seat table {self.table_id} from status={self.status.value}",
                from_status=self.status.value,
                to_status=TableStatus.OCCUPIED.value,
            )
        return replace(self, status=TableStatus.OCCUPIED)

    def mark_unavailable(self) -> Table:
        return replace(self, status=TableStatus.UNAVAILABLE)

    def mark_available(self) -> Table:
        if self.status != TableStatus.UNAVAILABLE:
            return self
        return replace(self, status=TableStatus.AVAILABLE)

    def __str__(self) -> str:
        return f"Table {self.table_id} ({self.capacity} seats) - {self.status.value}"

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from cafe94.domain.common.errors import (
    CapacityExceededError,
    IllegalTransitionError,
    InvalidInputError,
    PreconditionFailedError,
)
from cafe94.domain.common.ids import CustomerId, ReservationId, TableId
from cafe94.domain.common.time_range import TimeRange, end_time, ensure_aware
from cafe94.domain.table.entities import Table

DEFAULT_BOOKING_DURATION_MINUTES = 60


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class Booking:
    reservation_id: ReservationId
    customer_id: CustomerId
    start_time: datetime
    duration_minutes: int
    guest_count: int
    status: ReservationStatus
    created_at: datetime
    table_ids: tuple[TableId, ...] = ()

    def __post_init__(self) -> None:
        if self.reservation_id < 1:
            raise InvalidInputError("reservation_id must be >= 1")
        if self.customer_id < 1:
            raise InvalidInputError("customer_id must be >= 1")
        ensure_aware(self.start_time, "start_time")
        if self.duration_minutes < 1:
            raise InvalidInputError("duration_minutes must be >= 1")
        if self.guest_count < 1:
            raise InvalidInputError("guest_count must be >= 1")
        if len(set(self.table_ids)) != len(self.table_ids):
            raise InvalidInputError("table_ids must not contain duplicates")
        if self.status == ReservationStatus.APPROVED and not self.table_ids:
            raise InvalidInputError("an approved booking must have at least one table")
        if self.status == ReservationStatus.CANCELLED and self.table_ids:
            raise InvalidInputError("a cancelled booking cannot hold tables")

    @property
    def end_time(self) -> datetime:
        return end_time(self.start_time, self.duration_minutes)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange.from_duration(self.start_time, self.duration_minutes)

    @property
    def is_active(self) -> bool:
        return self.status != ReservationStatus.CANCELLED

    def ensure_fits(self, table: Table) -> None:
        if not table.fits(self.guest_count):
            raise CapacityExceededError(
                f"table {table.table_id} ({table.capacity} seats) too small "
                f"for {self.guest_count} guests",
                table_id=table.table_id,
                capacity=table.capacity,
                guest_count=self.guest_count,
            )

    def ensure_assignable(self) -> None:
        if self.status == ReservationStatus.CANCELLED:
            raise IllegalTransitionError(
                f"cannot assign a table to cancelled booking {self.reservation_id}",
                from_status=self.status.value,
                to_status=self.status.value,
            )

    def with_table(self, table_id: TableId) -> Booking:
        self.ensure_assignable()
        if table_id in self.table_ids:
            return self
        return replace(self, table_ids=self.table_ids + (table_id,))

    def approve(self) -> Booking:
        if self.status == ReservationStatus.APPROVED:
            return self
        if self.status == ReservationStatus.CANCELLED:
            raise IllegalTransitionError(
                f"cannot approve booking {self.reservation_id} from status={self.status.value}",
                from_status=self.status.value,
                to_status=ReservationStatus.APPROVED.value,
            )
        if not self.table_ids:
            raise PreconditionFailedError(
                f"cannot approve booking {self.reservation_id}: no tables assigned"
            )
        return replace(self, status=ReservationStatus.APPROVED)

    def cancel(self) -> Booking:
        if self.status == ReservationStatus.CANCELLED and not self.table_ids:
            return self
        return replace(self, status=ReservationStatus.CANCELLED, table_ids=())


def create_pending_booking(
    reservation_id: ReservationId,
    customer_id: CustomerId,
    start_time: datetime,
    duration_minutes: int,
    guest_count: int,
    now: datetime,
) -> Booking:
    if guest_count <= 0:
        raise InvalidInputError("number of guests must be positive")
    if duration_minutes <= 0:
        raise InvalidInputError("duration_minutes must be positive")
    ensure_aware(start_time, "start_time")
    if start_time < now:
        raise InvalidInputError("booking time cannot be in the past")

    return Booking(
        reservation_id=reservation_id,
        customer_id=customer_id,
        start_time=start_time,
        duration_minutes=duration_minutes,
        guest_count=guest_count,
        status=ReservationStatus.PENDING,
        created_at=now,
    )

from __future__ import annotations

from cafe94.application.dto.records import BookingRecord
from cafe94.domain.common.ids import CustomerId, ReservationId, TableId
from cafe94.domain.reservation.entities import Booking, ReservationStatus


def to_booking_record(booking: Booking) -> BookingRecord:
    return BookingRecord(
        reservation_id=booking.reservation_id,
        customer_id=booking.customer_id,
        start_time=booking.start_time,
        duration_minutes=booking.duration_minutes,
        guest_count=booking.guest_count,
        status=booking.status.value,
        created_at=booking.created_at,
        table_ids=list(booking.table_ids),
    )


def from_booking_record(record: BookingRecord) -> Booking:
    return Booking(
        reservation_id=ReservationId(record.reservation_id),
        customer_id=CustomerId(record.customer_id),
        start_time=record.start_time,
        duration_minutes=record.duration_minutes,
        guest_count=record.guest_count,
        status=ReservationStatus(record.status),
        created_at=record.created_at,
        table_ids=tuple(TableId(table_id) for table_id in record.table_ids),
    )

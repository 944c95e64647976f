from __future__ import annotations

from cafe94.application.dto.records import TableHoldRecord, TableRecord
from cafe94.domain.common.ids import ReservationId, TableId
from cafe94.domain.common.time_range import TimeRange
from cafe94.domain.table.entities import Table, TableHold, TableStatus


def to_table_record(table: Table) -> TableRecord:
    return TableRecord(
        table_id=table.table_id,
        capacity=table.capacity,
        status=table.status.value,
        holds=[
            TableHoldRecord(
                reservation_id=hold.reservation_id,
                start=hold.time_range.start,
                end=hold.time_range.end,
            )
            for hold in table.holds
        ],
    )


def from_table_record(record: TableRecord) -> Table:
    return Table(
        table_id=TableId(record.table_id),
        capacity=record.capacity,
        status=TableStatus(record.status),
        holds=tuple(
            TableHold(
                reservation_id=ReservationId(hold.reservation_id),
                time_range=TimeRange(start=hold.start, end=hold.end),
            )
            for hold in record.holds
        ),
    )

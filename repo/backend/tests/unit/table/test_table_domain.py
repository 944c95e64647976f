from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from cafe94.domain.common.errors import DomainError, IllegalTransitionError, TableUnavailableError
from cafe94.domain.common.ids import ReservationId, TableId
from cafe94.domain.common.time_range import TimeRange
from cafe94.domain.table.entities import Table, TableHold, TableStatus

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def _hold(reservation_id: int, start: datetime, minutes: int = 60) -> TableHold:
    return TableHold(
        reservation_id=ReservationId(reservation_id),
        time_range=TimeRange.from_duration(start, minutes),
    )


def test_table_requires_positive_id_and_capacity() -> None:
    with pytest.raises(ValueError):
        Table(table_id=TableId(0), capacity=2)
    with pytest.raises(ValueError):
        Table(table_id=TableId(1), capacity=0)


def test_reserved_table_must_have_a_hold() -> None:
    with pytest.raises(ValueError):
        Table(table_id=TableId(1), capacity=2, status=TableStatus.RESERVED)


def test_hold_reserves_table_and_returns_new_instance() -> None:
    table = Table(table_id=TableId(1), capacity=2)
    window = TimeRange.from_duration(NOW, 60)

    held = table.hold(ReservationId(1), window)

    assert table.status == TableStatus.AVAILABLE
    assert table.holds == ()
    assert held.status == TableStatus.RESERVED
    assert held.holds == (TableHold(reservation_id=ReservationId(1), time_range=window),)


def test_hold_on_reserved_table_is_rejected() -> None:
    held = Table(table_id=TableId(1), capacity=2).hold(
        ReservationId(1), TimeRange.from_duration(NOW, 60)
    )

    with pytest.raises(DomainError) as excinfo:
        held.hold(ReservationId(2), TimeRange.from_duration(NOW + timedelta(hours=3), 60))

    assert isinstance(excinfo.value, TableUnavailableError)


def test_availability_checks_overlap_then_status() -> None:
    table = Table(
        table_id=TableId(1),
        capacity=4,
        status=TableStatus.AVAILABLE,
        holds=(_hold(1, NOW),),
    )

    assert not table.is_available(TimeRange.from_duration(NOW + timedelta(minutes=30), 60))
    assert table.is_available(TimeRange.from_duration(NOW + timedelta(minutes=60), 60))
    assert table.is_available(TimeRange.from_duration(NOW - timedelta(minutes=60), 60))
    assert not table.mark_unavailable().is_available(
        TimeRange.from_duration(NOW + timedelta(hours=5), 60)
    )


def test_release_purges_only_expired_holds() -> None:
    past = _hold(1, NOW - timedelta(hours=3))
    future = _hold(2, NOW + timedelta(hours=1))
    table = Table(
        table_id=TableId(1),
        capacity=2,
        status=TableStatus.RESERVED,
        holds=(past, future),
    )

    released = table.release(NOW)

    assert released.status == TableStatus.AVAILABLE
    assert released.holds == (future,)


def test_release_detaches_given_reservation() -> None:
    first = _hold(1, NOW + timedelta(hours=1))
    second = _hold(2, NOW + timedelta(hours=4))
    table = Table(
        table_id=TableId(1),
        capacity=2,
        status=TableStatus.RESERVED,
        holds=(first, second),
    )

    released = table.release(NOW, reservation_id=ReservationId(1))

    assert released.holds == (second,)


def test_seat_requires_reserved_table() -> None:
    table = Table(table_id=TableId(1), capacity=2)
    with pytest.raises(IllegalTransitionError):
        table.seat()

    seated = table.hold(ReservationId(1), TimeRange.from_duration(NOW, 60)).seat()
    assert seated.status == TableStatus.OCCUPIED
    assert seated.seat() is seated


def test_mark_available_only_lifts_unavailable() -> None:
    table = Table(table_id=TableId(3), capacity=8)

    assert table.mark_unavailable().mark_available().status == TableStatus.AVAILABLE
    assert table.mark_available() is table
    assert str(table) == "Table 3 (8 seats) - AVAILABLE"


def test_release_drops_hold_ending_exactly_now() -> None:
    ending_now = _hold(1, NOW - timedelta(minutes=60))
    table = Table(
        table_id=TableId(1),
        capacity=2,
        status=TableStatus.RESERVED,
        holds=(ending_now,),
    )

    assert table.release(NOW).holds == ()

from __future__ import annotations

import sys
from datetime import datetime, time, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from cafe94.application.services.order_engine import OrderEngine
from cafe94.domain.common.errors import (
    IllegalTransitionError,
    InvalidInputError,
    NotFoundError,
    PreconditionFailedError,
)
from cafe94.domain.common.ids import CustomerId, DriverId, MenuItemId, OrderId, TableId
from cafe94.domain.common.money import Money
from cafe94.domain.order.entities import (
    DeliveryDetails,
    Order,
    OrderItem,
    OrderStatus,
    create_delivery_order,
    create_eat_in_order,
    create_take_away_order,
)

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current


class RecordingNotificationSink:
    def __init__(self) -> None:
        self.messages: list[tuple[int, str]] = []

    def notify_customer(self, customer_id: CustomerId, message: str) -> None:
        self.messages.append((customer_id, message))


def _items() -> list[OrderItem]:
    return [
        OrderItem(
            item_id=MenuItemId("itm_001"),
            name="Full English",
            price=Money(amount_cents=950, currency="GBP"),
        ),
        OrderItem(
            item_id=MenuItemId("itm_002"),
            name="Orange Juice",
            price=Money(amount_cents=300, currency="GBP"),
        ),
    ]


def _engine(
    orders: tuple[Order, ...] = (),
) -> tuple[OrderEngine, FixedClock, RecordingNotificationSink]:
    clock = FixedClock(NOW)
    sink = RecordingNotificationSink()
    return OrderEngine(notifications=sink, clock=clock, orders=orders), clock, sink


def test_place_assigns_monotonic_ids_and_keeps_total() -> None:
    engine, _, sink = _engine()

    first = engine.place(create_eat_in_order(CustomerId(5), _items(), TableId(2), NOW))
    second = engine.place(create_take_away_order(CustomerId(6), _items(), time(13, 0), NOW))

    assert (first.order_id, second.order_id) == (1, 2)
    assert first.total == Money(amount_cents=1250, currency="GBP")
    assert engine.find_by_id(OrderId(1)) == first
    assert sink.messages[0] == (5, "Your order (ID: 1) has been placed")


def test_place_rejects_already_placed_order() -> None:
    engine, _, _ = _engine()
    placed = engine.place(create_eat_in_order(CustomerId(5), _items(), TableId(2), NOW))

    with pytest.raises(InvalidInputError):
        engine.place(placed)
    assert len(engine.list_all()) == 1


def test_update_status_overwrites_without_legality_check() -> None:
    engine, clock, _ = _engine()
    placed = engine.place(create_eat_in_order(CustomerId(5), _items(), TableId(2), NOW))
    clock.current = NOW + timedelta(minutes=3)

    assert engine.update_status(placed.order_id, OrderStatus.COMPLETED)
    assert engine.update_status(placed.order_id, OrderStatus.PENDING)

    stored = engine.find_by_id(placed.order_id)
    assert stored is not None
    assert stored.status == OrderStatus.PENDING
    assert stored.updated_at == NOW + timedelta(minutes=3)
    assert stored.ordered_at == NOW
    assert not engine.update_status(OrderId(99), OrderStatus.COMPLETED)


def test_process_order_by_type() -> None:
    engine, _, _ = _engine()
    eat_in = engine.place(create_eat_in_order(CustomerId(5), _items(), TableId(2), NOW))
    take_away = engine.place(create_take_away_order(CustomerId(5), _items(), time(13, 0), NOW))

    assert engine.process_order(eat_in.order_id)
    assert engine.process_order(take_away.order_id)

    assert engine.track_status(eat_in.order_id) == OrderStatus.IN_PROGRESS
    assert engine.track_status(take_away.order_id) == OrderStatus.COMPLETED
    assert not engine.process_order(OrderId(99))


def test_delivery_needs_driver_before_processing() -> None:
    engine, _, sink = _engine()
    delivery = engine.place(create_delivery_order(CustomerId(5), _items(), "12 Mill Lane", NOW))

    with pytest.raises(PreconditionFailedError):
        engine.process_order(delivery.order_id)
    assert engine.track_status(delivery.order_id) == OrderStatus.PENDING

    assert engine.assign_driver(delivery.order_id, DriverId(7))
    assert engine.process_order(delivery.order_id)

    stored = engine.find_by_id(delivery.order_id)
    assert stored is not None
    assert stored.status == OrderStatus.IN_PROGRESS
    assert isinstance(stored.details, DeliveryDetails)
    assert stored.details.driver_id == 7
    assert sink.messages[-1] == (5, f"Your order (ID: {delivery.order_id}) is now IN_PROGRESS")


def test_assign_driver_rejects_invalid_ids_before_lookup() -> None:
    engine, _, _ = _engine()
    eat_in = engine.place(create_eat_in_order(CustomerId(5), _items(), TableId(2), NOW))

    with pytest.raises(InvalidInputError):
        engine.assign_driver(OrderId(99), DriverId(0))
    with pytest.raises(InvalidInputError):
        engine.assign_driver(eat_in.order_id, DriverId(7))
    assert not engine.assign_driver(OrderId(99), DriverId(7))


def test_set_estimated_delivery_time() -> None:
    engine, _, _ = _engine()
    delivery = engine.place(create_delivery_order(CustomerId(5), _items(), "12 Mill Lane", NOW))

    assert engine.set_estimated_delivery_time(delivery.order_id, time(19, 15))

    stored = engine.find_by_id(delivery.order_id)
    assert stored is not None and isinstance(stored.details, DeliveryDetails)
    assert stored.details.estimated_delivery_time == time(19, 15)
    assert not engine.set_estimated_delivery_time(OrderId(99), time(19, 15))


def test_confirmation_flow_through_engine() -> None:
    engine, _, sink = _engine()
    order = engine.place(
        create_delivery_order(
            CustomerId(5), _items(), "12 Mill Lane", NOW, OrderStatus.PENDING_CONFIRMATION
        )
    )

    assert engine.confirm(order.order_id).status == OrderStatus.CONFIRMED
    assert engine.start_preparation(order.order_id).status == OrderStatus.PREPARING
    assert engine.mark_ready(order.order_id).status == OrderStatus.READY
    assert engine.hand_over(order.order_id).status == OrderStatus.DELIVERED
    assert engine.complete(order.order_id).status == OrderStatus.COMPLETED
    notified = len(sink.messages)

    assert engine.complete(order.order_id).status == OrderStatus.COMPLETED
    assert len(sink.messages) == notified


def test_cancel_is_limited_to_early_statuses() -> None:
    engine, _, _ = _engine()
    early = engine.place(
        create_eat_in_order(
            CustomerId(5), _items(), TableId(1), NOW, OrderStatus.PENDING_CONFIRMATION
        )
    )
    late = engine.place(
        create_eat_in_order(
            CustomerId(6), _items(), TableId(2), NOW, OrderStatus.PENDING_CONFIRMATION
        )
    )
    engine.confirm(late.order_id)
    engine.start_preparation(late.order_id)

    assert engine.cancel(early.order_id).status == OrderStatus.CANCELLED
    assert engine.cancel(early.order_id).status == OrderStatus.CANCELLED
    with pytest.raises(IllegalTransitionError):
        engine.cancel(late.order_id)
    assert engine.track_status(late.order_id) == OrderStatus.PREPARING


def test_strict_transitions_require_existing_order() -> None:
    engine, _, _ = _engine()

    with pytest.raises(NotFoundError):
        engine.confirm(OrderId(1))
    with pytest.raises(NotFoundError):
        engine.hand_over(OrderId(1))


def test_queries() -> None:
    engine, _, _ = _engine()
    first = engine.place(create_eat_in_order(CustomerId(5), _items(), TableId(2), NOW))
    second = engine.place(create_take_away_order(CustomerId(6), _items(), time(13, 0), NOW))
    third = engine.place(create_delivery_order(CustomerId(5), _items(), "12 Mill Lane", NOW))
    engine.process_order(second.order_id)

    assert [order.order_id for order in engine.list_by_customer(CustomerId(5))] == [
        first.order_id,
        third.order_id,
    ]
    assert [order.order_id for order in engine.list_by_status(OrderStatus.COMPLETED)] == [
        second.order_id
    ]
    assert [order.order_id for order in engine.list_outstanding()] == [
        first.order_id,
        third.order_id,
    ]
    assert len(engine.list_between(NOW, NOW)) == 3
    assert engine.list_between(NOW + timedelta(seconds=1), NOW + timedelta(hours=1)) == []
    assert engine.track_status(OrderId(99)) is None


def test_ids_are_seeded_from_stored_orders() -> None:
    stored = create_eat_in_order(CustomerId(5), _items(), TableId(2), NOW).with_id(OrderId(41))
    engine, _, _ = _engine(orders=(stored,))

    placed = engine.place(create_eat_in_order(CustomerId(5), _items(), TableId(2), NOW))

    assert placed.order_id == 42
    with pytest.raises(InvalidInputError):
        _engine(orders=(create_eat_in_order(CustomerId(5), _items(), TableId(2), NOW),))

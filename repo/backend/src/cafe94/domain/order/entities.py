from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime, time
from enum import Enum

from cafe94.domain.common.errors import (
    IllegalTransitionError,
    InvalidInputError,
    PreconditionFailedError,
)
from cafe94.domain.common.ids import (
    UNASSIGNED_DRIVER_ID,
    UNASSIGNED_ORDER_ID,
    CustomerId,
    DriverId,
    MenuItemId,
    OrderId,
    TableId,
)
from cafe94.domain.common.money import Money


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    IN_PROGRESS = "IN_PROGRESS"
    READY = "READY"
    SERVED = "SERVED"
    COLLECTED = "COLLECTED"
    DELIVERED = "DELIVERED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OrderType(str, Enum):
    EAT_IN = "EAT_IN"
    TAKE_AWAY = "TAKE_AWAY"
    DELIVERY = "DELIVERY"


TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

_CONFIRMATION_FLOW: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING_CONFIRMATION: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY}),
    OrderStatus.READY: frozenset(
        {
            OrderStatus.SERVED,
            OrderStatus.COLLECTED,
            OrderStatus.DELIVERED,
            OrderStatus.COMPLETED,
        }
    ),
    OrderStatus.SERVED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COLLECTED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.COMPLETED}),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in _CONFIRMATION_FLOW.get(current, frozenset())


@dataclass(frozen=True)
class OrderItem:
    item_id: MenuItemId
    name: str
    price: Money

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise InvalidInputError("item name must be non-empty")


@dataclass(frozen=True)
class EatInDetails:
    table_number: TableId

    def __post_init__(self) -> None:
        if self.table_number < 1:
            raise InvalidInputError("table_number must be >= 1")


@dataclass(frozen=True)
class TakeAwayDetails:
    pickup_time: time


@dataclass(frozen=True)
class DeliveryDetails:
    delivery_address: str
    driver_id: DriverId = UNASSIGNED_DRIVER_ID
    estimated_delivery_time: time | None = None

    def __post_init__(self) -> None:
        if not self.delivery_address.strip():
            raise InvalidInputError("delivery address must be non-blank")
        if self.driver_id < 0:
            raise InvalidInputError("driver_id must be >= 0")

    @property
    def has_driver(self) -> bool:
        return self.driver_id > 0


OrderDetails = EatInDetails | TakeAwayDetails | DeliveryDetails


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    customer_id: CustomerId
    items: tuple[OrderItem, ...]
    status: OrderStatus
    ordered_at: datetime
    updated_at: datetime
    total: Money
    details: OrderDetails

    def __post_init__(self) -> None:
        if self.order_id < 0:
            raise InvalidInputError("order_id must be >= 0")
        if self.customer_id < 1:
            raise InvalidInputError("customer_id must be >= 1")
        if not self.items:
            raise InvalidInputError("order must contain at least one item")
        if self.total != _sum_prices(self.items):
            raise InvalidInputError("order total must equal sum of item prices")

    @property
    def order_type(self) -> OrderType:
        if isinstance(self.details, EatInDetails):
            return OrderType.EAT_IN
        if isinstance(self.details, TakeAwayDetails):
            return OrderType.TAKE_AWAY
        return OrderType.DELIVERY

    @property
    def is_placed(self) -> bool:
        return self.order_id != UNASSIGNED_ORDER_ID

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def hand_over_status(self) -> OrderStatus:
        if isinstance(self.details, EatInDetails):
            return OrderStatus.SERVED
        if isinstance(self.details, TakeAwayDetails):
            return OrderStatus.COLLECTED
        return OrderStatus.DELIVERED

    def with_id(self, order_id: OrderId) -> Order:
        if order_id <= 0:
            raise InvalidInputError("order_id must be positive")
        return replace(self, order_id=order_id)

    def with_status(self, status: OrderStatus, now: datetime) -> Order:
        if status == self.status:
            return self
        return replace(self, status=status, updated_at=now)

    def process(self, now: datetime) -> Order:
        details = self.details
        if isinstance(details, EatInDetails):
            return self.with_status(OrderStatus.IN_PROGRESS, now)
        if isinstance(details, TakeAwayDetails):
            return self.with_status(OrderStatus.COMPLETED, now)
        if not details.has_driver:
            raise PreconditionFailedError(f"order {self.order_id}: no driver assigned")
        return self.with_status(OrderStatus.IN_PROGRESS, now)

    def transition_to(self, target: OrderStatus, now: datetime) -> Order:
        if target in TERMINAL_STATUSES and self.status == target:
            return self
        if not can_transition(self.status, target):
            raise IllegalTransitionError(
                f"order {self.order_id} cannot move from status={self.status.value} "
                f"to status={target.value}",
                from_status=self.status.value,
                to_status=target.value,
            )
        if target in (OrderStatus.SERVED, OrderStatus.COLLECTED, OrderStatus.DELIVERED):
            if target != self.hand_over_status:
                raise IllegalTransitionError(
                    f"{self.order_type.value} order cannot be marked {target.value}",
                    from_status=self.status.value,
                    to_status=target.value,
                )
        return replace(self, status=target, updated_at=now)

    def assign_driver(self, driver_id: DriverId, now: datetime) -> Order:
        if driver_id <= 0:
            raise InvalidInputError(f"assigned driver id must be positive, got {driver_id}")
        details = self._delivery_details()
        return replace(self, details=replace(details, driver_id=driver_id), updated_at=now)

    def set_estimated_delivery_time(self, estimated: time | None, now: datetime) -> Order:
        details = self._delivery_details()
        return replace(
            self,
            details=replace(details, estimated_delivery_time=estimated),
            updated_at=now,
        )

    def _delivery_details(self) -> DeliveryDetails:
        if not isinstance(self.details, DeliveryDetails):
            raise InvalidInputError(
                f"order {self.order_id} is a {self.order_type.value} order, not a delivery"
            )
        return self.details

    def __str__(self) -> str:
        return (
            f"{self.order_type.value} order #{self.order_id} (customer {self.customer_id}) "
            f"- {self.status.value} - {self.total}"
        )


def _sum_prices(items: Iterable[OrderItem]) -> Money:
    items = list(items)
    total = Money.zero(items[0].price.currency)
    for item in items:
        total = total + item.price
    return total


def create_order(
    customer_id: CustomerId,
    items: Iterable[OrderItem],
    details: OrderDetails,
    now: datetime,
    initial_status: OrderStatus = OrderStatus.PENDING,
) -> Order:
    snapshot = tuple(items)
    if not snapshot:
        raise InvalidInputError("order must contain at least one item")
    if customer_id <= 0:
        raise InvalidInputError(f"valid customer id is required, got {customer_id}")
    try:
        total = _sum_prices(snapshot)
    except ValueError as exc:
        raise InvalidInputError(str(exc)) from exc

    return Order(
        order_id=UNASSIGNED_ORDER_ID,
        customer_id=customer_id,
        items=snapshot,
        status=initial_status,
        ordered_at=now,
        updated_at=now,
        total=total,
        details=details,
    )


def create_eat_in_order(
    customer_id: CustomerId,
    items: Iterable[OrderItem],
    table_number: TableId,
    now: datetime,
    initial_status: OrderStatus = OrderStatus.PENDING,
) -> Order:
    return create_order(
        customer_id=customer_id,
        items=items,
        details=EatInDetails(table_number=table_number),
        now=now,
        initial_status=initial_status,
    )


def create_take_away_order(
    customer_id: CustomerId,
    items: Iterable[OrderItem],
    pickup_time: time,
    now: datetime,
    initial_status: OrderStatus = OrderStatus.PENDING,
) -> Order:
    return create_order(
        customer_id=customer_id,
        items=items,
        details=TakeAwayDetails(pickup_time=pickup_time),
        now=now,
        initial_status=initial_status,
    )


def create_delivery_order(
    customer_id: CustomerId,
    items: Iterable[OrderItem],
    delivery_address: str,
    now: datetime,
    initial_status: OrderStatus = OrderStatus.PENDING,
) -> Order:
    return create_order(
        customer_id=customer_id,
        items=items,
        details=DeliveryDetails(delivery_address=delivery_address),
        now=now,
        initial_status=initial_status,
    )

from __future__ import annotations

from cafe94.application.dto.records import (
    DeliveryDetailsRecord,
    EatInDetailsRecord,
    MoneyRecord,
    OrderItemRecord,
    OrderRecord,
    TakeAwayDetailsRecord,
)
from cafe94.domain.common.ids import CustomerId, DriverId, MenuItemId, OrderId, TableId
from cafe94.domain.common.money import Money
from cafe94.domain.order.entities import (
    DeliveryDetails,
    EatInDetails,
    Order,
    OrderDetails,
    OrderItem,
    OrderStatus,
    TakeAwayDetails,
)


def _to_money_record(money: Money) -> MoneyRecord:
    return MoneyRecord(amount_cents=money.amount_cents, currency=money.currency)


def _from_money_record(record: MoneyRecord) -> Money:
    return Money(amount_cents=record.amount_cents, currency=record.currency)


def _to_details_record(
    details: OrderDetails,
) -> EatInDetailsRecord | TakeAwayDetailsRecord | DeliveryDetailsRecord:
    if isinstance(details, EatInDetails):
        return EatInDetailsRecord(table_number=details.table_number)
    if isinstance(details, TakeAwayDetails):
        return TakeAwayDetailsRecord(pickup_time=details.pickup_time)
    return DeliveryDetailsRecord(
        delivery_address=details.delivery_address,
        driver_id=details.driver_id,
        estimated_delivery_time=details.estimated_delivery_time,
    )


def _from_details_record(
    record: EatInDetailsRecord | TakeAwayDetailsRecord | DeliveryDetailsRecord,
) -> OrderDetails:
    if isinstance(record, EatInDetailsRecord):
        return EatInDetails(table_number=TableId(record.table_number))
    if isinstance(record, TakeAwayDetailsRecord):
        return TakeAwayDetails(pickup_time=record.pickup_time)
    return DeliveryDetails(
        delivery_address=record.delivery_address,
        driver_id=DriverId(record.driver_id),
        estimated_delivery_time=record.estimated_delivery_time,
    )


def to_order_record(order: Order) -> OrderRecord:
    return OrderRecord(
        order_id=order.order_id,
        customer_id=order.customer_id,
        items=[
            OrderItemRecord(
                item_id=str(item.item_id),
                name=item.name,
                price=_to_money_record(item.price),
            )
            for item in order.items
        ],
        status=order.status.value,
        ordered_at=order.ordered_at,
        updated_at=order.updated_at,
        total=_to_money_record(order.total),
        details=_to_details_record(order.details),
    )


def from_order_record(record: OrderRecord) -> Order:
    return Order(
        order_id=OrderId(record.order_id),
        customer_id=CustomerId(record.customer_id),
        items=tuple(
            OrderItem(
                item_id=MenuItemId(item.item_id),
                name=item.name,
                price=_from_money_record(item.price),
            )
            for item in record.items
        ),
        status=OrderStatus(record.status),
        ordered_at=record.ordered_at,
        updated_at=record.updated_at,
        total=_from_money_record(record.total),
        details=_from_details_record(record.details),
    )

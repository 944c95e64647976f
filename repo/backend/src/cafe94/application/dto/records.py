from __future__ import annotations

from datetime import datetime, time
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class MoneyRecord(CamelBaseModel):
    amount_cents: int = Field(ge=0)
    currency: str


class TableHoldRecord(CamelBaseModel):
    reservation_id: int = Field(ge=1)
    start: datetime
    end: datetime


class TableRecord(CamelBaseModel):
    table_id: int = Field(ge=1)
    capacity: int = Field(ge=1)
    status: str
    holds: list[TableHoldRecord] = Field(default_factory=list)


class BookingRecord(CamelBaseModel):
    reservation_id: int = Field(ge=1)
    customer_id: int = Field(ge=1)
    start_time: datetime
    duration_minutes: int = Field(ge=1)
    guest_count: int = Field(ge=1)
    status: str
    created_at: datetime
    table_ids: list[int] = Field(default_factory=list)


class OrderItemRecord(CamelBaseModel):
    item_id: str
    name: str
    price: MoneyRecord


class EatInDetailsRecord(CamelBaseModel):
    kind: Literal["EAT_IN"] = "EAT_IN"
    table_number: int = Field(ge=1)


class TakeAwayDetailsRecord(CamelBaseModel):
    kind: Literal["TAKE_AWAY"] = "TAKE_AWAY"
    pickup_time: time


class DeliveryDetailsRecord(CamelBaseModel):
    kind: Literal["DELIVERY"] = "DELIVERY"
    delivery_address: str
    driver_id: int = Field(default=0, ge=0)
    estimated_delivery_time: time | None = None


OrderDetailsRecord = Annotated[
    Union[EatInDetailsRecord, TakeAwayDetailsRecord, DeliveryDetailsRecord],
    Field(discriminator="kind"),
]


class OrderRecord(CamelBaseModel):
    order_id: int = Field(ge=0)
    customer_id: int = Field(ge=1)
    items: list[OrderItemRecord] = Field(min_length=1)
    status: str
    ordered_at: datetime
    updated_at: datetime
    total: MoneyRecord
    details: OrderDetailsRecord

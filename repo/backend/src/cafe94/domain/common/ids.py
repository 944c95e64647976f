from __future__ import annotations

from typing import NewType

CustomerId = NewType("CustomerId", int)
TableId = NewType("TableId", int)
ReservationId = NewType("ReservationId", int)
OrderId = NewType("OrderId", int)
DriverId = NewType("DriverId", int)
MenuItemId = NewType("MenuItemId", str)

UNASSIGNED_ORDER_ID = OrderId(0)
UNASSIGNED_DRIVER_ID = DriverId(0)

from __future__ import annotations


class DomainError(Exception):
    pass


class InvalidInputError(DomainError, ValueError):
    pass


class NotFoundError(DomainError):
    pass


class CapacityExceededError(DomainError):
    def __init__(self, message: str, table_id: int, capacity: int, guest_count: int) -> None:
        super().__init__(message)
        self.table_id = table_id
        self.capacity = capacity
        self.guest_count = guest_count
        self.details = {"tableId": table_id, "capacity": capacity, "guestCount": guest_count}


class PreconditionFailedError(DomainError):
    pass


class IllegalTransitionError(DomainError):
    def __init__(self, message: str, from_status: str, to_status: str) -> None:
        super().__init__(message)
        self.from_status = from_status
        self.to_status = to_status
        self.details = {"from": from_status, "to": to_status}


class TableUnavailableError(DomainError):
    pass

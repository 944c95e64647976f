"""Half-open time intervals used for table holds and booking windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from cafe94.domain.common.errors import InvalidInputError


def ensure_aware(value: datetime, field: str) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidInputError(f"{field} must be timezone-aware")
    return value


def end_time(start: datetime, duration_minutes: int) -> datetime:
    return start + timedelta(minutes=duration_minutes)


@dataclass(frozen=True)
class TimeRange:
    """Interval ``[start, end)``.

    Two ranges that only share an endpoint do not overlap, so a booking ending at
    19:00 and one starting at 19:00 can hold the same table.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        ensure_aware(self.start, "start")
        ensure_aware(self.end, "end")
        if self.end <= self.start:
            raise ValueError("end must be after start")

    @classmethod
    def from_duration(cls, start: datetime, duration_minutes: int) -> TimeRange:
        if duration_minutes <= 0:
            raise ValueError("duration_minutes must be > 0")
        return cls(start=start, end=end_time(start, duration_minutes))

    def overlaps(self, other: TimeRange) -> bool:
        return overlaps(self, other)

    def has_ended(self, now: datetime) -> bool:
        return self.end <= now


def overlaps(first: TimeRange, second: TimeRange) -> bool:
    return first.start < second.end and first.end > second.start

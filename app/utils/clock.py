from datetime import datetime, timezone
from typing import Optional


def as_utc(value: datetime) -> datetime:
    """Mongo hands back naive datetimes; those are stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock pinned to a given instant. Tests move it with `advance`."""

    def __init__(self, instant: Optional[datetime] = None):
        self.instant = as_utc(instant) if instant else datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self.instant

    def advance(self, delta) -> datetime:
        self.instant = self.instant + delta
        return self.instant


system_clock = SystemClock()


def get_clock() -> SystemClock:
    return system_clock

"""
Time provider abstraction

Entities are stamped with created_at/updated_at from an injected provider,
so tests can freeze and advance the clock.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class TimeProvider(Protocol):
    """Protocol for time providers"""

    def now(self) -> datetime:
        """Return current UTC datetime"""
        ...


class RealTimeProvider:
    """System clock in UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class TestTimeProvider:
    """
    Controllable clock for deterministic tests

    Starts at the given instant (Unix epoch by default) and only moves
    when told to.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, initial_time: datetime | None = None) -> None:
        self._current_time = initial_time or datetime(1970, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current_time

    def set_time(self, dt: datetime) -> None:
        self._current_time = dt

    def advance(self, delta: timedelta) -> None:
        self._current_time += delta

    def advance_days(self, days: int) -> None:
        self.advance(timedelta(days=days))


default_time_provider: TimeProvider = RealTimeProvider()

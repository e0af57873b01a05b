"""Shared test fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fasting.domain.models import DailySchedule, DayOfWeek, TimeOfDay  # noqa: E402
from fasting.ticking.manual import ManualTicker  # noqa: E402
from fasting.timer import FastingTimer  # noqa: E402

# Wednesday 2024-03-13 07:00 at a fixed +09:00 offset
T0 = datetime(2024, 3, 13, 7, 0, tzinfo=timezone(timedelta(hours=9)))


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now

    def set(self, now: datetime) -> datetime:
        self.now = now
        return now


def make_schedule(
    day: DayOfWeek, start: tuple[int, int], end: tuple[int, int], enabled: bool = True
) -> DailySchedule:
    return DailySchedule(
        day_of_week=day,
        fasting_start_time=TimeOfDay(hour=start[0], minute=start[1]),
        fasting_end_time=TimeOfDay(hour=end[0], minute=end[1]),
        is_enabled=enabled,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ticker():
    return ManualTicker()


@pytest.fixture
def timer(ticker, clock):
    return FastingTimer(ticker=ticker, clock=clock, fasting_hours=16)

"""Preset weekly patterns and quick-setting windows.

Static data: every preset is rebuilt on each call so callers can edit the
result without touching the catalog.
"""

from collections.abc import Callable
from enum import StrEnum

from fasting.domain.models import (
    WEEKDAYS,
    WEEKEND,
    DailySchedule,
    DayOfWeek,
    TimeOfDay,
    WeeklySchedulePattern,
)


class PresetKey(StrEnum):
    STANDARD = "standard"
    WEEKDAY_INTENSIVE = "weekday_intensive"
    WEEKEND_RELAXED = "weekend_relaxed"
    FLEXIBLE = "flexible"


def _window(day: DayOfWeek, start: tuple[int, int], end: tuple[int, int]) -> DailySchedule:
    return DailySchedule(
        day_of_week=day,
        fasting_start_time=TimeOfDay(hour=start[0], minute=start[1]),
        fasting_end_time=TimeOfDay(hour=end[0], minute=end[1]),
    )


# Quick settings applied by the schedule editor
WEEKDAY_QUICK_WINDOW = _window(DayOfWeek.MONDAY, (20, 0), (12, 0))
WEEKEND_QUICK_WINDOW = _window(DayOfWeek.SATURDAY, (21, 0), (11, 0))


def standard_pattern() -> WeeklySchedulePattern:
    return WeeklySchedulePattern(name="Standard (16:8)")


def weekday_intensive_pattern() -> WeeklySchedulePattern:
    schedules = {day: _window(day, (20, 0), (12, 0)) for day in WEEKDAYS}
    schedules[DayOfWeek.SATURDAY] = _window(DayOfWeek.SATURDAY, (21, 0), (11, 0))
    schedules[DayOfWeek.SUNDAY] = _window(DayOfWeek.SUNDAY, (19, 0), (11, 0))
    return WeeklySchedulePattern(name="Weekday Intensive", schedules=schedules)


def weekend_relaxed_pattern() -> WeeklySchedulePattern:
    schedules = {day: _window(day, (21, 0), (11, 0)) for day in WEEKDAYS}
    for day in WEEKEND:
        schedules[day] = _window(day, (22, 0), (10, 0))
    return WeeklySchedulePattern(name="Weekend Relaxed", schedules=schedules)


# Sunday first, in DayOfWeek order
_FLEXIBLE_WINDOWS: tuple[tuple[tuple[int, int], tuple[int, int]], ...] = (
    ((20, 0), (12, 0)),  # 16h
    ((19, 30), (11, 30)),  # 16h
    ((20, 30), (12, 30)),  # 16h
    ((19, 0), (12, 0)),  # 17h
    ((21, 0), (11, 0)),  # 14h
    ((22, 0), (10, 0)),  # 12h
    ((20, 0), (13, 0)),  # 17h
)


def flexible_pattern() -> WeeklySchedulePattern:
    schedules = {
        day: _window(day, start, end)
        for day, (start, end) in zip(DayOfWeek, _FLEXIBLE_WINDOWS, strict=True)
    }
    return WeeklySchedulePattern(name="Flexible", schedules=schedules)


PRESET_BUILDERS: dict[PresetKey, Callable[[], WeeklySchedulePattern]] = {
    PresetKey.STANDARD: standard_pattern,
    PresetKey.WEEKDAY_INTENSIVE: weekday_intensive_pattern,
    PresetKey.WEEKEND_RELAXED: weekend_relaxed_pattern,
    PresetKey.FLEXIBLE: flexible_pattern,
}


def preset_patterns() -> list[tuple[PresetKey, WeeklySchedulePattern]]:
    return [(key, build()) for key, build in PRESET_BUILDERS.items()]


def get_preset(key: str) -> WeeklySchedulePattern:
    """Build the preset registered under `key`. Raises ValueError if unknown."""
    try:
        preset_key = PresetKey(key)
    except ValueError:
        raise ValueError(
            f"Unknown preset: {key}. Must be one of: {[k.value for k in PresetKey]}"
        ) from None
    return PRESET_BUILDERS[preset_key]()

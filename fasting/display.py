"""Display-facing output: formatted strings, duration tiers and bar heights.

This is an OUTPUT format for whatever renders the timer and the weekly view.
The domain model and the timer snapshot remain the source of truth.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from fasting.domain.models import DailySchedule, DayOfWeek, WeeklySchedulePattern
from fasting.timer import TimerSnapshot

MIN_BAR_HEIGHT = 20.0
MAX_BAR_HEIGHT = 60.0


class DurationTier(StrEnum):
    LONG = "long"  # >= 16h
    MODERATE = "moderate"  # >= 14h
    SHORT = "short"
    DISABLED = "disabled"


TIER_COLORS: dict[DurationTier, str] = {
    DurationTier.LONG: "orange",
    DurationTier.MODERATE: "yellow",
    DurationTier.SHORT: "green",
    DurationTier.DISABLED: "gray",
}


def format_remaining(seconds: float) -> str:
    """HH:MM:SS, fractional seconds discarded."""
    total = int(seconds)
    return f"{total // 3600:02d}:{total % 3600 // 60:02d}:{total % 60:02d}"


def format_clock(value: datetime) -> str:
    return value.strftime("%H:%M")


def format_hours(hours: float) -> str:
    return f"{hours:.1f}"


def duration_tier(schedule: DailySchedule | None) -> DurationTier:
    if schedule is None or not schedule.is_enabled:
        return DurationTier.DISABLED
    hours = schedule.fasting_duration_hours
    if hours >= 16:
        return DurationTier.LONG
    if hours >= 14:
        return DurationTier.MODERATE
    return DurationTier.SHORT


def bar_height(schedule: DailySchedule | None) -> float:
    if schedule is None or not schedule.is_enabled:
        return MIN_BAR_HEIGHT
    ratio = schedule.fasting_duration_hours / 24.0
    return ratio * (MAX_BAR_HEIGHT - MIN_BAR_HEIGHT) + MIN_BAR_HEIGHT


def timer_view(snapshot: TimerSnapshot) -> dict[str, Any]:
    state = snapshot.state
    return {
        "status": state.status.value,
        "is_active": state.is_active,
        "started_at": state.started_at.isoformat() if state.started_at else None,
        "fasting_hours": state.fasting_hours,
        "eating_hours": state.eating_hours,
        "phase": snapshot.phase.value,
        "phase_label": snapshot.phase.label,
        "time_remaining_seconds": snapshot.time_remaining_seconds,
        "time_remaining": format_remaining(snapshot.time_remaining_seconds),
        "next_switch_at": snapshot.next_switch_at.isoformat() if snapshot.next_switch_at else None,
        "next_switch": format_clock(snapshot.next_switch_at) if snapshot.next_switch_at else None,
        "progress": snapshot.progress,
    }


def day_detail(schedule: DailySchedule) -> dict[str, Any]:
    return {
        "id": str(schedule.id),
        "day": schedule.day_of_week.name.lower(),
        "display_name": schedule.day_of_week.display_name,
        "start": schedule.fasting_start_time.time_string,
        "end": schedule.fasting_end_time.time_string,
        "is_enabled": schedule.is_enabled,
        "crosses_midnight": schedule.crosses_midnight,
        "fasting_duration_hours": schedule.fasting_duration_hours,
        "eating_duration_hours": schedule.eating_duration_hours,
        "fasting_duration": format_hours(schedule.fasting_duration_hours),
        "eating_duration": format_hours(schedule.eating_duration_hours),
    }


def day_card(day: DayOfWeek, schedule: DailySchedule | None) -> dict[str, Any]:
    """One column of the 7-day view. Missing days render like disabled ones."""
    tier = duration_tier(schedule)
    return {
        "day": day.name.lower(),
        "short_name": day.short_name,
        "has_schedule": schedule is not None,
        "is_enabled": schedule is not None and schedule.is_enabled,
        "fasting_duration_hours": schedule.fasting_duration_hours if schedule else None,
        "tier": tier.value,
        "color": TIER_COLORS[tier],
        "bar_height": bar_height(schedule),
    }


def week_view(pattern: WeeklySchedulePattern) -> list[dict[str, Any]]:
    return [day_card(day, pattern.schedule_for(day)) for day in DayOfWeek]


def pattern_view(pattern: WeeklySchedulePattern) -> dict[str, Any]:
    average = pattern.weekly_average_fasting_hours
    return {
        "id": str(pattern.id),
        "name": pattern.name,
        "is_active": pattern.is_active,
        "weekly_average_fasting_hours": average,
        "weekly_average": format_hours(average),
        "days": {
            day.name.lower(): day_detail(schedule)
            for day in DayOfWeek
            if (schedule := pattern.schedule_for(day)) is not None
        },
        "week": week_view(pattern),
    }

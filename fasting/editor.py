"""Schedule editor: explicit commands over the active weekly pattern.

Every command works on a deep copy of the current pattern, swaps it in, and
returns it; subscribers receive each new pattern. Day identity is never copied
across days: bulk operations build fresh entries for every target day.
"""

from collections.abc import Callable, Iterable

import structlog

from fasting.domain.models import (
    WEEKDAYS,
    WEEKEND,
    DailySchedule,
    DayOfWeek,
    TimeOfDay,
    WeeklySchedulePattern,
)
from fasting.domain.presets import (
    WEEKDAY_QUICK_WINDOW,
    WEEKEND_QUICK_WINDOW,
    get_preset,
    standard_pattern,
)
from shared.metrics import schedule_edits_total

logger = structlog.get_logger()


class ScheduleEditor:
    def __init__(self, pattern: WeeklySchedulePattern | None = None) -> None:
        self._pattern = pattern if pattern is not None else standard_pattern()
        self._subscribers: list[Callable[[WeeklySchedulePattern], object]] = []

    @property
    def pattern(self) -> WeeklySchedulePattern:
        """A copy of the active pattern; editing it does not affect the editor."""
        return self._pattern.model_copy(deep=True)

    def subscribe(
        self, callback: Callable[[WeeklySchedulePattern], object]
    ) -> Callable[[], None]:
        """Call `callback` with every new pattern. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _commit(self, pattern: WeeklySchedulePattern, operation: str) -> WeeklySchedulePattern:
        self._pattern = pattern
        schedule_edits_total.labels(operation=operation).inc()
        for callback in list(self._subscribers):
            callback(self.pattern)
        return self.pattern

    def _day_or_default(self, pattern: WeeklySchedulePattern, day: DayOfWeek) -> DailySchedule:
        return pattern.schedule_for(day) or DailySchedule.default_for(day)

    def _update_day(self, day: DayOfWeek, operation: str, **changes) -> WeeklySchedulePattern:
        pattern = self.pattern
        current = self._day_or_default(pattern, day)
        updated = current.model_copy(update=changes)
        pattern.set_schedule(updated)
        logger.info(
            "schedule_day_updated",
            operation=operation,
            day=day.name.lower(),
            start=updated.fasting_start_time.time_string,
            end=updated.fasting_end_time.time_string,
            is_enabled=updated.is_enabled,
        )
        return self._commit(pattern, operation)

    # --- Per-day commands ---

    def toggle_day(self, day: DayOfWeek) -> WeeklySchedulePattern:
        enabled = self._day_or_default(self._pattern, day).is_enabled
        return self._update_day(day, "toggle_day", is_enabled=not enabled)

    def set_day_enabled(self, day: DayOfWeek, enabled: bool) -> WeeklySchedulePattern:
        return self._update_day(day, "set_day_enabled", is_enabled=enabled)

    def update_start_time(self, day: DayOfWeek, start: TimeOfDay) -> WeeklySchedulePattern:
        return self._update_day(day, "update_start_time", fasting_start_time=start)

    def update_end_time(self, day: DayOfWeek, end: TimeOfDay) -> WeeklySchedulePattern:
        return self._update_day(day, "update_end_time", fasting_end_time=end)

    def update_day(
        self,
        day: DayOfWeek,
        start: TimeOfDay | None = None,
        end: TimeOfDay | None = None,
        is_enabled: bool | None = None,
    ) -> WeeklySchedulePattern:
        """Apply whichever of start/end/enabled are given in one edit."""
        changes = {
            key: value
            for key, value in {
                "fasting_start_time": start,
                "fasting_end_time": end,
                "is_enabled": is_enabled,
            }.items()
            if value is not None
        }
        return self._update_day(day, "update_day", **changes)

    # --- Bulk commands ---

    def apply_to_days(
        self, template: DailySchedule, days: Iterable[DayOfWeek], operation: str = "apply_to_days"
    ) -> WeeklySchedulePattern:
        days = list(days)
        pattern = self.pattern
        pattern.apply_to_days(template, days)
        logger.info(
            "schedule_bulk_applied",
            operation=operation,
            days=[d.name.lower() for d in days],
            start=template.fasting_start_time.time_string,
            end=template.fasting_end_time.time_string,
        )
        return self._commit(pattern, operation)

    def copy_day_to_all(self, source: DayOfWeek) -> WeeklySchedulePattern:
        """Copy one day's window to every day. Unchanged if `source` has no entry."""
        template = self._pattern.schedule_for(source)
        if template is None:
            logger.info("schedule_copy_skipped", source=source.name.lower())
            return self.pattern
        return self.apply_to_days(template, DayOfWeek, operation="copy_day_to_all")

    def apply_weekday_schedule(self) -> WeeklySchedulePattern:
        return self.apply_to_days(WEEKDAY_QUICK_WINDOW, WEEKDAYS, operation="weekday_quick")

    def apply_weekend_schedule(self) -> WeeklySchedulePattern:
        return self.apply_to_days(WEEKEND_QUICK_WINDOW, WEEKEND, operation="weekend_quick")

    # --- Whole-pattern commands ---

    def apply_preset(self, key: str) -> WeeklySchedulePattern:
        """Replace the active pattern with a catalog preset. Raises ValueError if unknown."""
        pattern = get_preset(key)
        logger.info("preset_applied", preset=key, name=pattern.name)
        return self._commit(pattern, "apply_preset")

    def restore_defaults(self) -> WeeklySchedulePattern:
        pattern = standard_pattern()
        logger.info("schedule_restored_defaults", name=pattern.name)
        return self._commit(pattern, "restore_defaults")

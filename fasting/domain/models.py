"""Weekly fasting schedule domain model.

A WeeklySchedulePattern maps each DayOfWeek to a DailySchedule, and a
DailySchedule is a fasting window between two TimeOfDay values.

Design principles:
- Clamp, never reject: out-of-range hours/minutes are pulled into range
- Midnight crossing: end <= start means the window ends the next calendar day
- Partial patterns are legal: a missing day is None, not an error
- Host-local calendar: clock times resolve against the host's local calendar,
  so a window crossing a DST switch still ends at its wall-clock end time
"""

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone
from enum import IntEnum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MINUTES_PER_DAY = 24 * 60


def is_host_local(value: datetime) -> bool:
    """True for an aware datetime carrying the host's own UTC offset at that instant.

    That is what `datetime.astimezone()` produces: a fixed offset snapshot of
    local time, which must be re-resolved after calendar arithmetic.
    """
    return isinstance(value.tzinfo, timezone) and value.utcoffset() == value.astimezone().utcoffset()


class DayOfWeek(IntEnum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def short_name(self) -> str:
        return self.display_name[:3]

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        # date.weekday() counts from Monday=0
        return cls((value.weekday() + 1) % 7)

    @classmethod
    def current(cls, now: datetime | None = None) -> "DayOfWeek":
        return cls.from_date(now or datetime.now())

    @classmethod
    def parse(cls, value: str) -> "DayOfWeek":
        """Accept "monday", "Mon" or "1". Raises ValueError for anything else."""
        text = value.strip().lower()
        if text.isdigit():
            return cls(int(text))
        for day in cls:
            if text in (day.name.lower(), day.short_name.lower()):
                return day
        raise ValueError(f"Unknown day of week: {value!r}")


WEEKDAYS: tuple[DayOfWeek, ...] = (
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
)
WEEKEND: tuple[DayOfWeek, ...] = (DayOfWeek.SATURDAY, DayOfWeek.SUNDAY)


class TimeOfDay(BaseModel):
    """Immutable clock time. Hour clamps into [0, 23], minute into [0, 59]."""

    model_config = ConfigDict(frozen=True)

    hour: int = 0
    minute: int = 0

    @field_validator("hour")
    @classmethod
    def clamp_hour(cls, v: int) -> int:
        return max(0, min(23, v))

    @field_validator("minute")
    @classmethod
    def clamp_minute(cls, v: int) -> int:
        return max(0, min(59, v))

    @classmethod
    def from_datetime(cls, value: datetime) -> "TimeOfDay":
        return cls(hour=value.hour, minute=value.minute)

    @property
    def total_minutes(self) -> int:
        return self.hour * 60 + self.minute

    @property
    def time_string(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def to_time(self) -> time:
        return time(self.hour, self.minute)

    def to_datetime(self, on: date | datetime | None = None) -> datetime:
        """Place this clock time on the calendar day of `on` with seconds zeroed.

        A plain date yields a naive datetime. An aware datetime on the host's
        local offset is re-resolved in local time, so the result carries the
        offset in force at that clock time; any other datetime keeps its tzinfo.
        Defaults to today on the host's local calendar.
        """
        if on is None:
            return datetime.combine(date.today(), self.to_time()).astimezone()
        if isinstance(on, datetime):
            if is_host_local(on):
                return datetime.combine(on.date(), self.to_time()).astimezone()
            return on.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        return datetime.combine(on, self.to_time())

    def __str__(self) -> str:
        return self.time_string


class DailySchedule(BaseModel):
    """One day's fasting window."""

    id: UUID = Field(default_factory=uuid4)
    day_of_week: DayOfWeek = Field(frozen=True)
    fasting_start_time: TimeOfDay
    fasting_end_time: TimeOfDay
    is_enabled: bool = True

    @classmethod
    def default_for(cls, day: DayOfWeek) -> "DailySchedule":
        """The 20:00-12:00 (16h) window every day gets when nothing else is known."""
        return cls(
            day_of_week=day,
            fasting_start_time=TimeOfDay(hour=20, minute=0),
            fasting_end_time=TimeOfDay(hour=12, minute=0),
        )

    @property
    def crosses_midnight(self) -> bool:
        # Equal clock times count as a full 24h fast, not an empty window
        return self.fasting_end_time.total_minutes <= self.fasting_start_time.total_minutes

    @property
    def fasting_duration_minutes(self) -> int:
        minutes = (
            self.fasting_end_time.total_minutes - self.fasting_start_time.total_minutes
        ) % MINUTES_PER_DAY
        return minutes or MINUTES_PER_DAY

    @property
    def fasting_duration_hours(self) -> float:
        return self.fasting_duration_minutes / 60.0

    @property
    def eating_duration_hours(self) -> float:
        return 24.0 - self.fasting_duration_hours

    def fasting_start_date(self, on: date | datetime | None = None) -> datetime:
        return self.fasting_start_time.to_datetime(on)

    def fasting_end_date(self, on: date | datetime | None = None) -> datetime:
        """End of the window that starts on `on`, one calendar day later if it crosses midnight."""
        start = self.fasting_start_date(on)
        end_day = start.date() + timedelta(days=1) if self.crosses_midnight else start.date()
        end = datetime.combine(end_day, self.fasting_end_time.to_time())
        if start.tzinfo is None:
            return end
        if is_host_local(start):
            # The local offset may differ across a DST switch
            return end.astimezone()
        return end.replace(tzinfo=start.tzinfo)

    def reassigned_to(self, day: DayOfWeek) -> "DailySchedule":
        """A fresh entry for `day` carrying this window and enabled flag."""
        return DailySchedule(
            day_of_week=day,
            fasting_start_time=self.fasting_start_time,
            fasting_end_time=self.fasting_end_time,
            is_enabled=self.is_enabled,
        )


def default_schedules() -> dict[DayOfWeek, DailySchedule]:
    return {day: DailySchedule.default_for(day) for day in DayOfWeek}


class WeeklySchedulePattern(BaseModel):
    """Named mapping from day of week to that day's fasting window.

    An empty mapping at construction is replaced by the default 16h window for
    every day. A partial mapping is kept as is: missing days read as None.
    """

    id: UUID = Field(default_factory=uuid4)
    name: str
    schedules: dict[DayOfWeek, DailySchedule] = Field(default_factory=dict)
    is_active: bool = True

    @model_validator(mode="after")
    def fill_empty_schedules(self) -> "WeeklySchedulePattern":
        if not self.schedules:
            self.schedules = default_schedules()
        return self

    def schedule_for(self, day: DayOfWeek) -> DailySchedule | None:
        return self.schedules.get(day)

    def todays_schedule(self, now: datetime | None = None) -> DailySchedule | None:
        return self.schedule_for(DayOfWeek.current(now))

    @property
    def enabled_schedules(self) -> list[DailySchedule]:
        return [s for s in self.schedules.values() if s.is_enabled]

    @property
    def weekly_average_fasting_hours(self) -> float:
        enabled = self.enabled_schedules
        if not enabled:
            return 0.0
        return sum(s.fasting_duration_hours for s in enabled) / len(enabled)

    def set_schedule(self, schedule: DailySchedule) -> None:
        """Replace the entry for the schedule's own day."""
        self.schedules[schedule.day_of_week] = schedule

    def apply_to_days(self, template: DailySchedule, days: Iterable[DayOfWeek]) -> None:
        for day in days:
            self.schedules[day] = template.reassigned_to(day)

    def copy_day_to_all(self, source: DayOfWeek) -> bool:
        """Copy one day's window to all seven days. Returns False if `source` is missing."""
        template = self.schedule_for(source)
        if template is None:
            return False
        self.apply_to_days(template, DayOfWeek)
        return True

    def restore_defaults(self) -> None:
        self.schedules = default_schedules()

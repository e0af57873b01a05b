"""Tests for schedule domain models: TimeOfDay, DayOfWeek, DailySchedule, WeeklySchedulePattern."""

import time
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from fasting.domain.models import (
    DailySchedule,
    DayOfWeek,
    TimeOfDay,
    WeeklySchedulePattern,
)
from tests.conftest import make_schedule


class TestTimeOfDay:
    @pytest.mark.parametrize(
        "hour, minute, expected",
        [
            (20, 0, (20, 0)),
            (0, 0, (0, 0)),
            (23, 59, (23, 59)),
            (24, 0, (23, 0)),
            (-1, 30, (0, 30)),
            (12, 60, (12, 59)),
            (12, -5, (12, 0)),
            (99, 99, (23, 59)),
        ],
    )
    def test_out_of_range_values_are_clamped(self, hour, minute, expected):
        t = TimeOfDay(hour=hour, minute=minute)
        assert (t.hour, t.minute) == expected

    def test_total_minutes(self):
        assert TimeOfDay(hour=20, minute=30).total_minutes == 1230

    def test_time_string_zero_padded(self):
        assert TimeOfDay(hour=7, minute=5).time_string == "07:05"
        assert str(TimeOfDay(hour=19, minute=30)) == "19:30"

    def test_is_immutable(self):
        t = TimeOfDay(hour=8, minute=0)
        with pytest.raises(ValidationError):
            t.hour = 9

    def test_equal_values_compare_equal(self):
        assert TimeOfDay(hour=8, minute=0) == TimeOfDay(hour=8, minute=0)

    def test_to_datetime_keeps_date_and_zeroes_seconds(self):
        tz = timezone(timedelta(hours=-5))
        on = datetime(2024, 3, 14, 15, 42, 17, 123456, tzinfo=tz)
        result = TimeOfDay(hour=20, minute=15).to_datetime(on)
        assert result == datetime(2024, 3, 14, 20, 15, 0, tzinfo=tz)

    def test_to_datetime_from_plain_date(self):
        result = TimeOfDay(hour=6, minute=45).to_datetime(date(2024, 2, 29))
        assert result == datetime(2024, 2, 29, 6, 45)

    def test_from_datetime(self):
        t = TimeOfDay.from_datetime(datetime(2024, 3, 14, 21, 7, 59))
        assert (t.hour, t.minute) == (21, 7)


class TestDayOfWeek:
    def test_sunday_is_zero(self):
        assert DayOfWeek.SUNDAY == 0
        assert list(DayOfWeek)[0] is DayOfWeek.SUNDAY
        assert list(DayOfWeek)[-1] is DayOfWeek.SATURDAY

    @pytest.mark.parametrize(
        "value, expected",
        [
            (date(2024, 3, 10), DayOfWeek.SUNDAY),
            (date(2024, 3, 11), DayOfWeek.MONDAY),
            (date(2024, 3, 13), DayOfWeek.WEDNESDAY),
            (date(2024, 3, 16), DayOfWeek.SATURDAY),
        ],
    )
    def test_from_date(self, value, expected):
        assert DayOfWeek.from_date(value) is expected

    def test_current_uses_given_instant(self):
        assert DayOfWeek.current(datetime(2024, 3, 15, 23, 59)) is DayOfWeek.FRIDAY

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("monday", DayOfWeek.MONDAY),
            ("Monday", DayOfWeek.MONDAY),
            ("mon", DayOfWeek.MONDAY),
            ("SAT", DayOfWeek.SATURDAY),
            ("0", DayOfWeek.SUNDAY),
            ("6", DayOfWeek.SATURDAY),
        ],
    )
    def test_parse(self, text, expected):
        assert DayOfWeek.parse(text) is expected

    @pytest.mark.parametrize("text", ["funday", "7", "", "mo"])
    def test_parse_rejects_unknown(self, text):
        with pytest.raises(ValueError):
            DayOfWeek.parse(text)

    def test_names(self):
        assert DayOfWeek.WEDNESDAY.display_name == "Wednesday"
        assert DayOfWeek.WEDNESDAY.short_name == "Wed"


class TestDailyScheduleDurations:
    def test_crossing_midnight(self):
        s = make_schedule(DayOfWeek.MONDAY, (20, 0), (12, 0))
        assert s.crosses_midnight
        assert s.fasting_duration_hours == 16.0
        assert s.eating_duration_hours == 8.0

    def test_same_day_window(self):
        s = make_schedule(DayOfWeek.MONDAY, (8, 0), (20, 0))
        assert not s.crosses_midnight
        assert s.fasting_duration_hours == 12.0

    def test_equal_times_is_full_day_fast(self):
        s = make_schedule(DayOfWeek.MONDAY, (9, 0), (9, 0))
        assert s.crosses_midnight
        assert s.fasting_duration_hours == 24.0
        assert s.eating_duration_hours == 0.0

    def test_half_hours(self):
        s = make_schedule(DayOfWeek.MONDAY, (19, 30), (11, 0))
        assert s.fasting_duration_hours == 15.5

    @pytest.mark.parametrize(
        "start, end",
        [
            ((20, 0), (12, 0)),
            ((8, 0), (20, 0)),
            ((0, 0), (0, 0)),
            ((23, 59), (0, 0)),
            ((0, 0), (23, 59)),
            ((19, 30), (11, 30)),
            ((22, 17), (6, 43)),
            ((12, 1), (12, 0)),
        ],
    )
    def test_fasting_plus_eating_is_exactly_24(self, start, end):
        s = make_schedule(DayOfWeek.MONDAY, start, end)
        assert 0 < s.fasting_duration_hours <= 24
        assert s.fasting_duration_hours + s.eating_duration_hours == 24.0

    def test_default_window(self):
        s = DailySchedule.default_for(DayOfWeek.TUESDAY)
        assert s.day_of_week is DayOfWeek.TUESDAY
        assert s.fasting_start_time.time_string == "20:00"
        assert s.fasting_end_time.time_string == "12:00"
        assert s.is_enabled

    def test_each_schedule_has_its_own_id(self):
        a = DailySchedule.default_for(DayOfWeek.MONDAY)
        b = DailySchedule.default_for(DayOfWeek.MONDAY)
        assert a.id != b.id


class TestDailyScheduleDates:
    ON = datetime(2024, 3, 31, 9, 0, tzinfo=timezone.utc)

    def test_crossing_window_ends_next_day(self):
        s = make_schedule(DayOfWeek.SUNDAY, (20, 0), (12, 0))
        assert s.fasting_start_date(self.ON) == datetime(2024, 3, 31, 20, 0, tzinfo=timezone.utc)
        assert s.fasting_end_date(self.ON) == datetime(2024, 4, 1, 12, 0, tzinfo=timezone.utc)

    def test_same_day_window_ends_same_day(self):
        s = make_schedule(DayOfWeek.SUNDAY, (8, 0), (20, 0))
        assert s.fasting_end_date(self.ON) == datetime(2024, 3, 31, 20, 0, tzinfo=timezone.utc)

    def test_equal_times_end_a_full_day_later(self):
        s = make_schedule(DayOfWeek.SUNDAY, (9, 0), (9, 0))
        end = s.fasting_end_date(self.ON)
        assert end - s.fasting_start_date(self.ON) == timedelta(hours=24)

    def test_date_span_matches_duration(self):
        s = make_schedule(DayOfWeek.SUNDAY, (21, 0), (11, 0))
        span = s.fasting_end_date(self.ON) - s.fasting_start_date(self.ON)
        assert span.total_seconds() / 3600 == s.fasting_duration_hours


@pytest.fixture
def new_york_host(monkeypatch):
    """Run with the host clock in a zone that switches to DST on 2024-03-10."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestDaylightSavingSwitch:
    EST = timedelta(hours=-5)
    EDT = timedelta(hours=-4)

    def test_local_window_ends_at_wall_clock_time(self, new_york_host):
        s = make_schedule(DayOfWeek.SATURDAY, (20, 0), (12, 0))
        on = datetime(2024, 3, 9, 9, 0).astimezone()

        start = s.fasting_start_date(on)
        end = s.fasting_end_date(on)

        assert (start.hour, start.utcoffset()) == (20, self.EST)
        assert (end.date(), end.hour, end.minute) == (date(2024, 3, 10), 12, 0)
        assert end.utcoffset() == self.EDT
        assert end - start == timedelta(hours=15)

    def test_local_start_after_the_switch_takes_new_offset(self, new_york_host):
        on = datetime(2024, 3, 10, 1, 0).astimezone()
        result = TimeOfDay(hour=20, minute=0).to_datetime(on)
        assert result.hour == 20
        assert result.utcoffset() == self.EDT

    def test_zoneinfo_window_ends_at_wall_clock_time(self):
        tz = ZoneInfo("America/New_York")
        s = make_schedule(DayOfWeek.SATURDAY, (20, 0), (12, 0))
        end = s.fasting_end_date(datetime(2024, 3, 9, 9, 0, tzinfo=tz))
        assert end == datetime(2024, 3, 10, 12, 0, tzinfo=tz)
        assert end.utcoffset() == self.EDT

    def test_default_day_is_local_and_aware(self):
        start = DailySchedule.default_for(DayOfWeek.MONDAY).fasting_start_date()
        assert start.tzinfo is not None
        assert (start.hour, start.minute) == (20, 0)


class TestWeeklySchedulePattern:
    def test_empty_mapping_gets_defaults(self):
        pattern = WeeklySchedulePattern(name="Mine")
        assert set(pattern.schedules) == set(DayOfWeek)
        assert all(s.fasting_duration_hours == 16.0 for s in pattern.schedules.values())
        assert all(day is s.day_of_week for day, s in pattern.schedules.items())

    def test_partial_mapping_is_kept(self):
        monday = make_schedule(DayOfWeek.MONDAY, (20, 0), (12, 0))
        pattern = WeeklySchedulePattern(name="Partial", schedules={DayOfWeek.MONDAY: monday})
        assert pattern.schedule_for(DayOfWeek.MONDAY) is monday
        assert pattern.schedule_for(DayOfWeek.TUESDAY) is None

    def test_todays_schedule(self):
        pattern = WeeklySchedulePattern(name="Mine")
        friday = datetime(2024, 3, 15, 10, 0)
        assert pattern.todays_schedule(friday).day_of_week is DayOfWeek.FRIDAY

    def test_average_uniform_16h(self):
        assert WeeklySchedulePattern(name="Mine").weekly_average_fasting_hours == 16.0

    def test_average_ignores_disabled_days(self):
        pattern = WeeklySchedulePattern(
            name="Mixed",
            schedules={
                DayOfWeek.MONDAY: make_schedule(DayOfWeek.MONDAY, (20, 0), (12, 0)),
                DayOfWeek.TUESDAY: make_schedule(DayOfWeek.TUESDAY, (8, 0), (20, 0)),
                DayOfWeek.WEDNESDAY: make_schedule(DayOfWeek.WEDNESDAY, (9, 0), (9, 0), enabled=False),
            },
        )
        assert pattern.weekly_average_fasting_hours == 14.0

    def test_average_with_no_enabled_days_is_zero(self):
        pattern = WeeklySchedulePattern(
            name="Off",
            schedules={
                day: make_schedule(day, (20, 0), (12, 0), enabled=False) for day in DayOfWeek
            },
        )
        assert pattern.weekly_average_fasting_hours == 0.0

    def test_set_schedule_replaces_only_that_day(self):
        pattern = WeeklySchedulePattern(name="Mine")
        before = dict(pattern.schedules)
        friday = make_schedule(DayOfWeek.FRIDAY, (21, 0), (11, 0))
        pattern.set_schedule(friday)
        assert pattern.schedule_for(DayOfWeek.FRIDAY) is friday
        for day in DayOfWeek:
            if day is not DayOfWeek.FRIDAY:
                assert pattern.schedule_for(day) is before[day]

    def test_copy_day_to_all_keeps_target_identity(self):
        pattern = WeeklySchedulePattern(name="Mine")
        source = make_schedule(DayOfWeek.WEDNESDAY, (19, 0), (11, 0), enabled=False)
        pattern.set_schedule(source)

        assert pattern.copy_day_to_all(DayOfWeek.WEDNESDAY) is True

        ids = {s.id for s in pattern.schedules.values()}
        assert len(ids) == 7
        assert source.id not in ids
        for day, s in pattern.schedules.items():
            assert s.day_of_week is day
            assert s.fasting_start_time == source.fasting_start_time
            assert s.fasting_end_time == source.fasting_end_time
            assert s.is_enabled is False

    def test_copy_missing_day_is_a_no_op(self):
        monday = make_schedule(DayOfWeek.MONDAY, (20, 0), (12, 0))
        pattern = WeeklySchedulePattern(name="Partial", schedules={DayOfWeek.MONDAY: monday})
        assert pattern.copy_day_to_all(DayOfWeek.SUNDAY) is False
        assert pattern.schedules == {DayOfWeek.MONDAY: monday}

    def test_apply_to_subset(self):
        pattern = WeeklySchedulePattern(name="Mine")
        template = make_schedule(DayOfWeek.MONDAY, (22, 0), (10, 0))
        pattern.apply_to_days(template, [DayOfWeek.SATURDAY, DayOfWeek.SUNDAY])
        assert pattern.schedule_for(DayOfWeek.SATURDAY).fasting_duration_hours == 12.0
        assert pattern.schedule_for(DayOfWeek.SATURDAY).day_of_week is DayOfWeek.SATURDAY
        assert pattern.schedule_for(DayOfWeek.MONDAY).fasting_duration_hours == 16.0

    def test_restore_defaults(self):
        monday = make_schedule(DayOfWeek.MONDAY, (8, 0), (20, 0))
        pattern = WeeklySchedulePattern(name="Partial", schedules={DayOfWeek.MONDAY: monday})
        pattern.restore_defaults()
        assert len(pattern.schedules) == 7
        assert pattern.weekly_average_fasting_hours == 16.0

    def test_logically_odd_window_is_accepted(self):
        s = make_schedule(DayOfWeek.MONDAY, (12, 0), (12, 0))
        pattern = WeeklySchedulePattern(name="Odd", schedules={DayOfWeek.MONDAY: s})
        assert pattern.weekly_average_fasting_hours == 24.0

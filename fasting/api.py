"""FastAPI router for the fasting timer and weekly schedule.

Endpoints:
- GET  /api/v1/timer                       current display state
- POST /api/v1/timer/{start,stop,reset}    timer commands
- PUT  /api/v1/timer/fasting-hours         change fasting length (not while running)
- GET  /api/v1/schedule                    active pattern + 7-day view
- GET  /api/v1/schedule/today
- GET|PATCH /api/v1/schedule/days/{day}
- POST /api/v1/schedule/days/{day}/toggle
- POST /api/v1/schedule/days/{day}/copy-to-all
- POST /api/v1/schedule/quick/{weekdays,weekend}
- POST /api/v1/schedule/reset
- GET  /api/v1/presets
- POST /api/v1/presets/{key}/apply
"""

import time
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from fasting.display import day_detail, pattern_view, timer_view
from fasting.domain.models import DayOfWeek, TimeOfDay
from fasting.domain.presets import PresetKey, preset_patterns
from fasting.editor import ScheduleEditor
from fasting.ticking.factory import get_ticker
from fasting.timer import FastingTimer, TimerStatus, local_now
from shared.config import settings
from shared.exceptions import (
    ScheduleNotFoundError,
    TimerRunningError,
    UnknownPresetError,
    UnsupportedDayError,
)
from shared.metrics import api_requests_total, api_response_duration_seconds
from shared.middleware import request_id_var

router = APIRouter(prefix="/api/v1")


# --- Dependencies ---


@lru_cache
def get_timer() -> FastingTimer:
    return FastingTimer(ticker=get_ticker())


@lru_cache
def get_editor() -> ScheduleEditor:
    return ScheduleEditor()


# --- Request models ---


class FastingHoursRequest(BaseModel):
    hours: float = Field(..., gt=0, le=24, description="Requested fasting hours per cycle")


class DayUpdateRequest(BaseModel):
    """Partial edit of one day; omitted fields stay as they are."""

    start: TimeOfDay | None = None
    end: TimeOfDay | None = None
    is_enabled: bool | None = None


# --- Response helpers ---


def _meta() -> dict[str, Any]:
    return {
        "request_id": request_id_var.get(""),
        "timestamp": datetime.now(UTC).isoformat(),
        "api_version": settings.api_version,
    }


def _envelope(data: Any, endpoint: str, method: str, started: float, status_code: int = 200):
    api_requests_total.labels(endpoint=endpoint, method=method, status_code=str(status_code)).inc()
    api_response_duration_seconds.labels(endpoint=endpoint).observe(time.monotonic() - started)
    return {"data": data, "meta": _meta()}


def _parse_day(day: str) -> DayOfWeek:
    try:
        return DayOfWeek.parse(day)
    except ValueError:
        raise UnsupportedDayError(day) from None


# --- Timer endpoints ---


@router.get("/timer")
async def get_timer_state(timer: FastingTimer = Depends(get_timer)):
    """Latest timer display: phase, HH:MM:SS remaining, next switch time, progress."""
    started = time.monotonic()
    return _envelope(timer_view(timer.snapshot), "timer", "GET", started)


@router.post("/timer/start")
async def start_timer(timer: FastingTimer = Depends(get_timer)):
    """Start from idle (anchor = now) or resume a paused timer on its existing anchor."""
    started = time.monotonic()
    return _envelope(timer_view(timer.start()), "timer_start", "POST", started)


@router.post("/timer/stop")
async def stop_timer(timer: FastingTimer = Depends(get_timer)):
    """Pause ticking. The anchor is kept, so paused time still counts toward the cycle."""
    started = time.monotonic()
    return _envelope(timer_view(timer.stop()), "timer_stop", "POST", started)


@router.post("/timer/reset")
async def reset_timer(timer: FastingTimer = Depends(get_timer)):
    started = time.monotonic()
    return _envelope(timer_view(timer.reset()), "timer_reset", "POST", started)


@router.put("/timer/fasting-hours")
async def set_fasting_hours(body: FastingHoursRequest, timer: FastingTimer = Depends(get_timer)):
    """Set fasting hours; the value is snapped and clamped to the configured range.

    HTTP status codes:
    - 200: applied (idle or paused timer)
    - 409: timer is running
    - 422: hours not in (0, 24]
    """
    started = time.monotonic()
    if timer.state.status is TimerStatus.RUNNING:
        raise TimerRunningError()
    snapshot = timer.set_fasting_hours(body.hours)
    return _envelope(timer_view(snapshot), "timer_fasting_hours", "PUT", started)


# --- Schedule endpoints ---


@router.get("/schedule")
async def get_schedule(editor: ScheduleEditor = Depends(get_editor)):
    started = time.monotonic()
    return _envelope(pattern_view(editor.pattern), "schedule", "GET", started)


@router.get("/schedule/today")
async def get_todays_schedule(editor: ScheduleEditor = Depends(get_editor)):
    started = time.monotonic()
    now = local_now()
    schedule = editor.pattern.todays_schedule(now)
    if schedule is None:
        raise ScheduleNotFoundError(DayOfWeek.current(now).name.lower())
    return _envelope(day_detail(schedule), "schedule_today", "GET", started)


@router.get("/schedule/days/{day}")
async def get_day(day: str, editor: ScheduleEditor = Depends(get_editor)):
    started = time.monotonic()
    day_of_week = _parse_day(day)
    schedule = editor.pattern.schedule_for(day_of_week)
    if schedule is None:
        raise ScheduleNotFoundError(day_of_week.name.lower())
    return _envelope(day_detail(schedule), "schedule_day", "GET", started)


@router.patch("/schedule/days/{day}")
async def update_day(
    day: str, body: DayUpdateRequest, editor: ScheduleEditor = Depends(get_editor)
):
    """Edit one day's start, end and/or enabled flag.

    A day missing from a partial pattern starts from the default 20:00-12:00 window.
    """
    started = time.monotonic()
    day_of_week = _parse_day(day)
    pattern = editor.update_day(
        day_of_week, start=body.start, end=body.end, is_enabled=body.is_enabled
    )
    return _envelope(pattern_view(pattern), "schedule_day", "PATCH", started)


@router.post("/schedule/days/{day}/toggle")
async def toggle_day(day: str, editor: ScheduleEditor = Depends(get_editor)):
    started = time.monotonic()
    pattern = editor.toggle_day(_parse_day(day))
    return _envelope(pattern_view(pattern), "schedule_day_toggle", "POST", started)


@router.post("/schedule/days/{day}/copy-to-all")
async def copy_day_to_all(day: str, editor: ScheduleEditor = Depends(get_editor)):
    started = time.monotonic()
    day_of_week = _parse_day(day)
    if editor.pattern.schedule_for(day_of_week) is None:
        raise ScheduleNotFoundError(day_of_week.name.lower())
    pattern = editor.copy_day_to_all(day_of_week)
    return _envelope(pattern_view(pattern), "schedule_copy", "POST", started)


@router.post("/schedule/quick/weekdays")
async def apply_weekday_schedule(editor: ScheduleEditor = Depends(get_editor)):
    """Monday to Friday: 20:00-12:00."""
    started = time.monotonic()
    pattern = editor.apply_weekday_schedule()
    return _envelope(pattern_view(pattern), "schedule_quick", "POST", started)


@router.post("/schedule/quick/weekend")
async def apply_weekend_schedule(editor: ScheduleEditor = Depends(get_editor)):
    """Saturday and Sunday: 21:00-11:00."""
    started = time.monotonic()
    pattern = editor.apply_weekend_schedule()
    return _envelope(pattern_view(pattern), "schedule_quick", "POST", started)


@router.post("/schedule/reset")
async def restore_default_schedule(editor: ScheduleEditor = Depends(get_editor)):
    started = time.monotonic()
    pattern = editor.restore_defaults()
    return _envelope(pattern_view(pattern), "schedule_reset", "POST", started)


# --- Preset endpoints ---


@router.get("/presets")
async def list_presets():
    started = time.monotonic()
    data = [{"key": key.value, **pattern_view(pattern)} for key, pattern in preset_patterns()]
    return _envelope(data, "presets", "GET", started)


@router.post("/presets/{key}/apply")
async def apply_preset(key: str, editor: ScheduleEditor = Depends(get_editor)):
    """Replace the active pattern wholesale with a catalog preset."""
    started = time.monotonic()
    try:
        pattern = editor.apply_preset(key)
    except ValueError:
        raise UnknownPresetError(key, [k.value for k in PresetKey]) from None
    return _envelope(pattern_view(pattern), "preset_apply", "POST", started)

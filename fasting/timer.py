"""Fasting timer controller.

Owns the only mutable timer state, {fasting_hours, is_active, started_at},
and a swappable Ticker. Each tick runs the pure cycle engine with
`now = clock()` and publishes a TimerSnapshot to subscribers.

Lifecycle:
- IDLE    (no anchor)          --start-->  RUNNING, anchor = now
- RUNNING (anchor, ticking)    --stop-->   PAUSED, anchor untouched
- PAUSED  (anchor, no ticks)   --start-->  RUNNING, same anchor (resume)
- any                          --reset-->  IDLE, anchor cleared

Pausing does not freeze elapsed time: wall-clock time spent paused still
counts toward the cycle because the anchor never moves.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum

import structlog
from pydantic import BaseModel, ConfigDict

from fasting.domain.cycle import CycleState, FastingPhase, compute_cycle_state
from fasting.ticking.protocol import Ticker
from shared.config import settings
from shared.metrics import phase_switches_total, timer_commands_total, timer_ticks_total

logger = structlog.get_logger()

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current instant on the host's local calendar, timezone-aware."""
    return datetime.now().astimezone()


def clamp_fasting_hours(hours: float) -> float:
    """Snap to the configured step (halves round up) and clamp into the configured range."""
    step = settings.fasting_hours_step
    snapped = math.floor(hours / step + 0.5) * step
    return float(max(settings.min_fasting_hours, min(settings.max_fasting_hours, snapped)))


class TimerStatus(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class TimerState(BaseModel):
    model_config = ConfigDict(frozen=True)

    fasting_hours: float
    is_active: bool = False
    started_at: datetime | None = None

    @property
    def status(self) -> TimerStatus:
        if self.started_at is None:
            return TimerStatus.IDLE
        return TimerStatus.RUNNING if self.is_active else TimerStatus.PAUSED

    @property
    def eating_hours(self) -> float:
        return 24.0 - self.fasting_hours


@dataclass(frozen=True)
class TimerSnapshot:
    """Timer state plus the last derived cycle position, for rendering."""

    state: TimerState
    phase: FastingPhase
    time_remaining_seconds: float
    next_switch_at: datetime | None
    progress: float

    @classmethod
    def idle(cls, state: TimerState) -> "TimerSnapshot":
        return cls(
            state=state,
            phase=FastingPhase.FASTING,
            time_remaining_seconds=state.fasting_hours * 3600,
            next_switch_at=None,
            progress=0.0,
        )

    @classmethod
    def from_cycle(cls, state: TimerState, cycle: CycleState) -> "TimerSnapshot":
        return cls(
            state=state,
            phase=cycle.phase,
            time_remaining_seconds=cycle.time_remaining_seconds,
            next_switch_at=cycle.next_switch_at,
            progress=cycle.progress,
        )


class FastingTimer:
    def __init__(
        self,
        ticker: Ticker,
        clock: Clock = local_now,
        fasting_hours: float | None = None,
    ) -> None:
        if fasting_hours is None:
            fasting_hours = settings.default_fasting_hours
        self._ticker = ticker
        self._clock = clock
        self._state = TimerState(fasting_hours=fasting_hours)
        self._snapshot = TimerSnapshot.idle(self._state)
        self._last_tick_at: datetime | None = None
        self._subscribers: list[Callable[[TimerSnapshot], object]] = []

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def snapshot(self) -> TimerSnapshot:
        return self._snapshot

    def subscribe(self, callback: Callable[[TimerSnapshot], object]) -> Callable[[], None]:
        """Call `callback` with every new snapshot. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, snapshot: TimerSnapshot) -> TimerSnapshot:
        self._snapshot = snapshot
        for callback in list(self._subscribers):
            callback(snapshot)
        return snapshot

    # --- Commands ---

    def start(self) -> TimerSnapshot:
        if self._state.status is TimerStatus.RUNNING:
            return self._snapshot
        resumed = self._state.started_at is not None
        started_at = self._state.started_at if resumed else self._clock()
        # State changes only once the ticker has started
        self._ticker.start(self.tick)
        self._state = self._state.model_copy(update={"is_active": True, "started_at": started_at})
        timer_commands_total.labels(command="start").inc()
        logger.info(
            "timer_started",
            started_at=started_at.isoformat(),
            resumed=resumed,
            fasting_hours=self._state.fasting_hours,
        )
        return self.tick() or self._snapshot

    def stop(self) -> TimerSnapshot:
        if self._state.status is not TimerStatus.RUNNING:
            return self._snapshot
        # Flip the flag first so a tick already in flight is ignored
        self._state = self._state.model_copy(update={"is_active": False})
        self._ticker.stop()
        timer_commands_total.labels(command="stop").inc()
        logger.info("timer_paused", started_at=self._state.started_at.isoformat())
        return self._publish(replace(self._snapshot, state=self._state))

    def toggle(self) -> TimerSnapshot:
        if self._state.status is TimerStatus.RUNNING:
            return self.stop()
        return self.start()

    def reset(self) -> TimerSnapshot:
        self._ticker.stop()
        self._state = TimerState(fasting_hours=self._state.fasting_hours)
        self._last_tick_at = None
        timer_commands_total.labels(command="reset").inc()
        logger.info("timer_reset", fasting_hours=self._state.fasting_hours)
        return self._publish(TimerSnapshot.idle(self._state))

    def set_fasting_hours(self, hours: float) -> TimerSnapshot:
        """Apply a new fasting length, clamped to the configured input range.

        Callers decide whether to allow this while RUNNING; an idle timer
        shows the new full fasting length, a paused one is re-derived at its
        last tick instant.
        """
        clamped = clamp_fasting_hours(hours)
        self._state = self._state.model_copy(update={"fasting_hours": clamped})
        timer_commands_total.labels(command="set_fasting_hours").inc()
        logger.info("fasting_hours_changed", requested=hours, fasting_hours=clamped)
        if self._state.started_at is None:
            return self._publish(TimerSnapshot.idle(self._state))
        if self._state.is_active:
            return self.tick() or self._snapshot
        if self._last_tick_at is None:
            return self._publish(replace(self._snapshot, state=self._state))
        return self._publish(self._derive(self._last_tick_at))

    # --- Ticking ---

    def _derive(self, now: datetime) -> TimerSnapshot:
        cycle = compute_cycle_state(self._state.fasting_hours, self._state.started_at, now)
        return TimerSnapshot.from_cycle(self._state, cycle)

    def tick(self) -> TimerSnapshot | None:
        """Recompute the display from the current instant. No-op unless RUNNING."""
        if self._state.status is not TimerStatus.RUNNING:
            logger.debug("tick_ignored_inactive", status=self._state.status.value)
            return None
        now = self._clock()
        previous = self._snapshot
        snapshot = self._derive(now)
        if previous.next_switch_at is not None and previous.phase != snapshot.phase:
            phase_switches_total.labels(to_phase=snapshot.phase.value).inc()
            logger.info(
                "phase_switched",
                from_phase=previous.phase.value,
                to_phase=snapshot.phase.value,
                next_switch_at=snapshot.next_switch_at.isoformat(),
            )
        self._last_tick_at = now
        timer_ticks_total.inc()
        return self._publish(snapshot)

    def shutdown(self) -> None:
        """Halt the ticker without touching timer state."""
        self._ticker.stop()


"""Fasting cycle engine: pure time-to-phase derivation.

A cycle is 24 hours long and anchored to the instant the timer was first
started. The first `fasting_hours` of every cycle are FASTING, the rest are
EATING. Everything here is a function of (fasting_hours, started_at, now);
the caller supplies `now`, nothing reads the wall clock.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

CYCLE_LENGTH_SECONDS = 24 * 3600


class FastingPhase(StrEnum):
    FASTING = "fasting"
    EATING = "eating"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class CycleState:
    """Where `now` falls inside the cycle."""

    phase: FastingPhase
    time_remaining_seconds: float
    next_switch_at: datetime
    phase_total_seconds: float

    @property
    def progress(self) -> float:
        """Fraction of the current phase already elapsed, capped at 1.0."""
        if self.phase_total_seconds <= 0:
            return 1.0
        elapsed = self.phase_total_seconds - self.time_remaining_seconds
        return min(1.0, elapsed / self.phase_total_seconds)


def compute_cycle_state(
    fasting_hours: float, started_at: datetime, now: datetime
) -> CycleState:
    """Classify `now` within the cycle anchored at `started_at`.

    `fasting_hours` must be positive; values up to 24 are accepted as is.
    A `now` before the anchor counts as zero elapsed time.
    """
    fasting_seconds = fasting_hours * 3600.0
    elapsed = max(0.0, (now - started_at).total_seconds())
    cycle_elapsed = elapsed % CYCLE_LENGTH_SECONDS
    cycle_start = started_at + timedelta(seconds=elapsed - cycle_elapsed)

    if cycle_elapsed < fasting_seconds:
        phase = FastingPhase.FASTING
        remaining = fasting_seconds - cycle_elapsed
        next_switch_at = cycle_start + timedelta(seconds=fasting_seconds)
        phase_total = fasting_seconds
    else:
        phase = FastingPhase.EATING
        remaining = CYCLE_LENGTH_SECONDS - cycle_elapsed
        next_switch_at = cycle_start + timedelta(seconds=CYCLE_LENGTH_SECONDS)
        phase_total = CYCLE_LENGTH_SECONDS - fasting_seconds

    return CycleState(
        phase=phase,
        time_remaining_seconds=max(0.0, remaining),
        next_switch_at=next_switch_at,
        phase_total_seconds=phase_total,
    )

"""Tests for the pure cycle engine: phase, remaining time, next switch, progress."""

from datetime import timedelta

import pytest

from fasting.domain.cycle import (
    CYCLE_LENGTH_SECONDS,
    CycleState,
    FastingPhase,
    compute_cycle_state,
)
from tests.conftest import T0


def at(**kwargs):
    return T0 + timedelta(**kwargs)


class TestSixteenHourScenario:
    def test_at_anchor_fasting_starts(self):
        state = compute_cycle_state(16, T0, T0)
        assert state.phase is FastingPhase.FASTING
        assert state.time_remaining_seconds == 16 * 3600
        assert state.next_switch_at == at(hours=16)
        assert state.progress == 0.0

    def test_one_hour_before_switch(self):
        state = compute_cycle_state(16, T0, at(hours=15))
        assert state.phase is FastingPhase.FASTING
        assert state.time_remaining_seconds == 3600
        assert state.next_switch_at == at(hours=16)

    def test_switch_to_eating_exactly_at_fasting_end(self):
        state = compute_cycle_state(16, T0, at(hours=16))
        assert state.phase is FastingPhase.EATING
        assert state.time_remaining_seconds == 8 * 3600
        assert state.next_switch_at == at(hours=24)

    def test_last_second_of_cycle(self):
        state = compute_cycle_state(16, T0, at(hours=23, minutes=59, seconds=59))
        assert state.phase is FastingPhase.EATING
        assert state.time_remaining_seconds == 1
        assert state.next_switch_at == at(hours=24)

    def test_cycle_restarts_after_24h(self):
        state = compute_cycle_state(16, T0, at(hours=24))
        assert state.phase is FastingPhase.FASTING
        assert state.time_remaining_seconds == 16 * 3600
        assert state.next_switch_at == at(hours=40)

    def test_many_cycles_later(self):
        state = compute_cycle_state(16, T0, at(days=30, hours=20))
        assert state.phase is FastingPhase.EATING
        assert state.time_remaining_seconds == 4 * 3600
        assert state.next_switch_at == at(days=31)


class TestEdgeCases:
    def test_now_before_anchor_counts_as_zero_elapsed(self):
        state = compute_cycle_state(16, T0, at(hours=-3))
        assert state == compute_cycle_state(16, T0, T0)

    def test_full_day_fast_never_eats(self):
        state = compute_cycle_state(24, T0, at(hours=23, minutes=59))
        assert state.phase is FastingPhase.FASTING
        assert state.time_remaining_seconds == 60
        assert state.next_switch_at == at(hours=24)

    def test_fractional_hours(self):
        state = compute_cycle_state(12.5, T0, at(hours=12, minutes=30))
        assert state.phase is FastingPhase.EATING
        assert state.time_remaining_seconds == 11.5 * 3600

    def test_sub_second_elapsed(self):
        state = compute_cycle_state(16, T0, at(seconds=0.25))
        assert state.time_remaining_seconds == 16 * 3600 - 0.25

    def test_idempotent(self):
        now = at(hours=17, minutes=3, seconds=9)
        assert compute_cycle_state(14, T0, now) == compute_cycle_state(14, T0, now)


@pytest.mark.parametrize("fasting_hours", [0.5, 1, 12, 13, 14, 15, 16, 20, 23.99, 24])
@pytest.mark.parametrize(
    "offset_seconds",
    [0, 1, 3599, 43_200, 57_599, 57_600, 86_399, 86_400, 86_401, 10 * 86_400 + 12_345],
)
def test_phase_and_remaining_invariants(fasting_hours, offset_seconds):
    fasting_seconds = fasting_hours * 3600
    state = compute_cycle_state(fasting_hours, T0, at(seconds=offset_seconds))
    cycle_elapsed = offset_seconds % CYCLE_LENGTH_SECONDS

    assert 0 <= state.time_remaining_seconds <= CYCLE_LENGTH_SECONDS
    if fasting_hours < 24:
        assert state.time_remaining_seconds < CYCLE_LENGTH_SECONDS
    assert (state.phase is FastingPhase.FASTING) == (cycle_elapsed < fasting_seconds)
    assert state.next_switch_at > at(seconds=offset_seconds)
    assert 0.0 <= state.progress <= 1.0


class TestProgress:
    def test_midway_through_fast(self):
        state = compute_cycle_state(16, T0, at(hours=8))
        assert state.progress == 0.5

    def test_midway_through_eating_window(self):
        state = compute_cycle_state(16, T0, at(hours=20))
        assert state.phase_total_seconds == 8 * 3600
        assert state.progress == 0.5

    def test_capped_at_one(self):
        state = CycleState(
            phase=FastingPhase.FASTING,
            time_remaining_seconds=-10,
            next_switch_at=T0,
            phase_total_seconds=3600,
        )
        assert state.progress == 1.0

    def test_empty_phase_reads_complete(self):
        state = CycleState(
            phase=FastingPhase.EATING,
            time_remaining_seconds=0,
            next_switch_at=T0,
            phase_total_seconds=0,
        )
        assert state.progress == 1.0


def test_phase_labels():
    assert FastingPhase.FASTING.label == "Fasting"
    assert FastingPhase.EATING.label == "Eating"

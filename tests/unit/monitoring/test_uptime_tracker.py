"""Tests for incremental uptime accounting."""

from __future__ import annotations

from metricslog.config.process_state import ProcessState
from metricslog.monitoring.metrics import pref_names
from metricslog.monitoring.metrics.uptime import UptimeTracker


def test_first_sample_measures_from_process_start(store, process_state, clock) -> None:
    tracker = UptimeTracker(store, process_state)
    clock.advance(12.9)

    assert tracker.sample() == 12
    assert store.get_int(pref_names.UNINSTALL_METRICS_UPTIME_SEC) == 12


def test_samples_accumulate_into_counter(store, process_state, clock) -> None:
    tracker = UptimeTracker(store, process_state)
    clock.advance(10)
    tracker.sample()
    clock.advance(5)

    assert tracker.sample() == 5
    assert store.get_int(pref_names.UNINSTALL_METRICS_UPTIME_SEC) == 15


def test_coincident_samples_return_zero(store, process_state, clock) -> None:
    tracker = UptimeTracker(store, process_state)
    clock.advance(3)
    tracker.sample()

    assert tracker.sample() == 0
    assert store.get_int(pref_names.UNINSTALL_METRICS_UPTIME_SEC) == 3


def test_clock_stepping_back_returns_zero(store, process_state, clock) -> None:
    tracker = UptimeTracker(store, process_state)
    clock.advance(-4)

    assert tracker.sample() == 0
    assert store.get_int(pref_names.UNINSTALL_METRICS_UPTIME_SEC) == 0


def test_trackers_share_the_process_baseline(store, process_state, clock) -> None:
    first = UptimeTracker(store, process_state)
    second = UptimeTracker(store, process_state)
    clock.advance(8)

    assert first.sample() == 8
    assert second.sample() == 0


def test_first_sample_includes_time_before_state_was_built(store, clock) -> None:
    state = ProcessState(clock=clock, age=25.0)
    tracker = UptimeTracker(store, state)
    clock.advance(5)

    assert tracker.sample() == 30

"""Tests for the process-wide reporting state."""

import threading
import time

import psutil
import pytest

from metricslog.config.process_state import ProcessState, get_process_state, process_age, reset_process_state
from metricslog.core.exceptions import ConfigurationError


def test_baseline_starts_at_construction():
    state = ProcessState(clock=lambda: 42.0)

    assert state.started_at == 42.0
    assert state.uptime_baseline == 42.0


def test_explicit_age_backdates_the_start():
    state = ProcessState(clock=lambda: 100.0, age=30.0)

    assert state.started_at == 70.0
    assert state.uptime_baseline == 70.0


def test_real_clock_start_covers_the_process_age():
    age_before = time.time() - psutil.Process().create_time()

    state = ProcessState()

    assert state.clock() - state.started_at >= age_before - 0.5


def test_process_age_is_zero_when_unavailable(monkeypatch):
    def unavailable():
        raise psutil.AccessDenied()

    monkeypatch.setattr(psutil, "Process", unavailable)

    assert process_age() == 0.0


def test_version_extension_is_set_once():
    state = ProcessState(clock=lambda: 0.0)
    state.set_version_extension("-beta")
    state.set_version_extension("-beta")

    with pytest.raises(ConfigurationError) as excinfo:
        state.set_version_extension("-dev")

    assert excinfo.value.error_code == "VERSION_EXTENSION_ALREADY_SET"
    assert state.version_extension == "-beta"


def test_shared_state_is_created_once_across_threads():
    seen = []

    def grab():
        seen.append(get_process_state())

    threads = [threading.Thread(target=grab) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({id(state) for state in seen}) == 1


def test_reset_installs_replacement():
    replacement = ProcessState(clock=lambda: 0.0)

    reset_process_state(replacement)

    assert get_process_state() is replacement

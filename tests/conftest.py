"""Global pytest configuration for the metrics log builder.

The module ensures the ``src`` tree is importable regardless of how the
repository is checked out, and provides the shared fixtures: a controllable
monotonic clock, an isolated process state and a fresh counter store.
"""

import sys
from pathlib import Path

import pytest

# Add the src directory to the Python path so imports can work correctly
# without needing to install the package first
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"

if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from metricslog.config.process_state import ProcessState, reset_process_state  # noqa: E402
from metricslog.monitoring.metrics import pref_names  # noqa: E402
from metricslog.monitoring.metrics.report import Report  # noqa: E402
from metricslog.monitoring.metrics.stores import InMemoryCounterStore  # noqa: E402

REPORT_TIME = 1_600_000_000


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _isolated_process_state():
    """Give every test a fresh shared process state."""
    reset_process_state()
    yield
    reset_process_state()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def process_state(clock: FakeClock) -> ProcessState:
    state = ProcessState(clock=clock)
    reset_process_state(state)
    return state


@pytest.fixture
def store() -> InMemoryCounterStore:
    counter_store = InMemoryCounterStore()
    counter_store.register_list(pref_names.STABILITY_PLUGIN_STATS)
    return counter_store


@pytest.fixture
def report() -> Report:
    return Report("client-1", 7, "1.2.3", wall_clock=lambda: REPORT_TIME + 0.75)

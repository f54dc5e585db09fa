import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from arpsim.config import SimulationSettings
from arpsim.scheduler import FrameScheduler
from arpsim.simulation import ArpSimulation
from arpsim.topology import default_topology


def fixed_clock() -> str:
    return "12:00:00"


@pytest.fixture
def topology():
    return default_topology()


@pytest.fixture
def scheduler():
    return FrameScheduler(frame_interval_ms=16.0)


@pytest.fixture
def sim(scheduler):
    return ArpSimulation(settings=SimulationSettings(), scheduler=scheduler, clock=fixed_clock)

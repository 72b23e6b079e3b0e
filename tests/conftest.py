import pytest

from breakmark.scheduler import TaskScheduler
from fakes import ManualClock


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return TaskScheduler(clock.call_later)

# Test configuration and fixtures
import itertools

import pytest

from dayplan.models import ScheduleConfig, Task


@pytest.fixture
def make_task():
    """Factory for tasks with sequential ids."""
    ids = itertools.count(1)

    def _make(title=None, minutes=30, priority="Med", deadline=None, id=None):
        n = next(ids)
        return Task(
            id=id or f"t{n}",
            title=title or f"Task {n}",
            minutes=minutes,
            priority=priority,
            deadline=deadline,
        )

    return _make


@pytest.fixture
def make_config():
    """Factory for configs with breaks and buffers off unless asked for."""

    def _make(tasks, day_start="09:00", day_end="17:00", buffer_min=0,
              focus_block_min=25, add_breaks=False):
        return ScheduleConfig(
            day_start=day_start,
            day_end=day_end,
            tasks=tasks,
            buffer_min=buffer_min,
            focus_block_min=focus_block_min,
            add_breaks=add_breaks,
        )

    return _make

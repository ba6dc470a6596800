# dayplan/planner.py
import itertools
import logging
import math
from dataclasses import replace
from typing import Callable, List, Optional

from .metrics import SCHEDULE_TIME, record_result
from .models import (
    PRIORITIES,
    Availability,
    Constraints,
    ScheduleConfig,
    ScheduleResult,
    Task,
    clamp_task_minutes,
)
from .scheduler import generate_schedule

logger = logging.getLogger(__name__)


class DayPlanner:
    """
    One planning session: availability window, an editable task list and
    layout constraints, plus the last generated plan.

    Any edit after a plan was accepted marks it as not accepted again.
    """

    def __init__(self,
                 availability: Optional[Availability] = None,
                 constraints: Optional[Constraints] = None):
        self.availability = availability or Availability()
        self.constraints = constraints or Constraints()
        self.tasks: List[Task] = []
        self.plan: Optional[ScheduleResult] = None
        self.accepted = False
        self._ids = itertools.count()
        self._accept_listeners: List[Callable[[ScheduleResult], None]] = []

    # Availability

    def set_availability(self, start: str, end: str, add_breaks: bool = True) -> Availability:
        availability = Availability(start=start, end=end, add_breaks=add_breaks)
        if not availability.is_valid:
            raise ValueError(f"end time {end!r} must be after start time {start!r}")
        self.availability = availability
        return availability

    # Tasks

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        raise KeyError(task_id)

    def get_task(self, task_id: str) -> Task:
        return self.tasks[self._index_of(task_id)]

    @staticmethod
    def _checked(title: str, minutes: float, priority: str):
        title = (title or "").strip()
        if not title:
            raise ValueError("task title must not be blank")
        if minutes is None or not math.isfinite(minutes) or not minutes > 0:
            raise ValueError(f"task minutes must be a positive number, got {minutes!r}")
        if priority not in PRIORITIES:
            raise ValueError(f"priority must be one of {PRIORITIES}, got {priority!r}")
        return title, clamp_task_minutes(minutes), priority

    def add_task(self, title: str, minutes: float = 30, priority: str = "Med") -> Task:
        title, minutes, priority = self._checked(title, minutes, priority)
        task = Task(id=f"task-{next(self._ids)}", title=title, minutes=minutes, priority=priority)
        self.tasks.append(task)
        self.accepted = False
        logger.debug("Added task %s (%s, %d min)", task.id, priority, minutes)
        return task

    def update_task(self, task_id: str,
                    title: Optional[str] = None,
                    minutes: Optional[float] = None,
                    priority: Optional[str] = None) -> Task:
        i = self._index_of(task_id)
        current = self.tasks[i]
        title, minutes, priority = self._checked(
            current.title if title is None else title,
            current.minutes if minutes is None else minutes,
            current.priority if priority is None else priority,
        )
        updated = replace(current, title=title, minutes=minutes, priority=priority)
        self.tasks[i] = updated
        self.accepted = False
        return updated

    def remove_task(self, task_id: str) -> None:
        del self.tasks[self._index_of(task_id)]
        self.accepted = False

    def set_deadline(self, task_id: str, deadline: Optional[str]) -> Task:
        i = self._index_of(task_id)
        updated = replace(self.tasks[i], deadline=deadline or None)
        self.tasks[i] = updated
        self.accepted = False
        return updated

    # Plan

    def build_config(self) -> ScheduleConfig:
        return ScheduleConfig(
            day_start=self.availability.start,
            day_end=self.availability.end,
            tasks=list(self.tasks),
            buffer_min=self.constraints.buffer_min,
            focus_block_min=self.constraints.focus_block_min,
            add_breaks=self.constraints.add_breaks and self.availability.add_breaks,
        )

    def generate(self, constraints: Optional[Constraints] = None) -> ScheduleResult:
        self.constraints = (constraints or self.constraints).sanitized()
        config = self.build_config()

        with SCHEDULE_TIME.time():
            plan = generate_schedule(config)
        record_result(plan)

        logger.info(
            "Generated plan %s-%s: %d items, %d warnings",
            config.day_start, config.day_end, len(plan.items), len(plan.warnings),
        )
        for warning in plan.warnings:
            logger.warning("Planner: %s", warning)

        self.plan = plan
        self.accepted = False
        return plan

    def regenerate(self) -> ScheduleResult:
        return self.generate(self.constraints)

    def on_accept(self, listener: Callable[[ScheduleResult], None]) -> None:
        self._accept_listeners.append(listener)

    def accept(self) -> ScheduleResult:
        if self.plan is None:
            raise ValueError("generate a plan before accepting it")
        self.accepted = True
        logger.info("Plan accepted with %d items", len(self.plan.items))
        for listener in self._accept_listeners:
            listener(self.plan)
        return self.plan

# dayplan/scheduler.py
from functools import reduce
from typing import FrozenSet, Iterator, List, NamedTuple, Optional, Tuple

from .clock import parse_hhmm, format_minutes
from .models import (
    BREAK_AFTER_MIN,
    BREAK_MAX_MIN,
    BREAK_MIN_MIN,
    PRIORITY_WEIGHT,
    PlanItem,
    ScheduleConfig,
    ScheduleResult,
    Task,
    clamp_focus_block,
    clamp_task_minutes,
)

INVALID_WINDOW_WARNING = "Invalid availability window. End time must be after start time."
NO_TASKS_WARNING = "No tasks were provided. Add tasks to build a schedule."


class _Window(NamedTuple):
    start: int
    end: int
    buffer: int
    add_breaks: bool


class _Chunk(NamedTuple):
    order: int               # position of the owning task after sorting
    task: Task
    index: int               # chunk index within the task
    minutes: int
    deadline: Optional[int]


class _State(NamedTuple):
    cursor: int
    since_break: int
    break_index: int
    items: Tuple[PlanItem, ...]
    warnings: Tuple[str, ...]
    dropped: FrozenSet[int]


def chunk_minutes(total: int, focus_block_min: float) -> List[int]:
    """Split a duration into pieces no larger than the focus block."""
    size = clamp_focus_block(focus_block_min)
    chunks = []
    remaining = total
    while remaining > 0:
        chunk = min(remaining, size)
        chunks.append(chunk)
        remaining -= chunk
    return chunks


def order_tasks(tasks) -> List[Tuple[Task, int]]:
    """
    Clamp durations and sort: High before Med before Low, longer first
    within a priority. Input order breaks remaining ties.
    """
    normalized = [(task, clamp_task_minutes(task.minutes)) for task in tasks]
    return sorted(normalized, key=lambda pair: (PRIORITY_WEIGHT[pair[0].priority], -pair[1]))


def _chunks(tasks, focus_block_min) -> Iterator[_Chunk]:
    for order, (task, minutes) in enumerate(order_tasks(tasks)):
        deadline = task.deadline_minutes
        for i, chunk in enumerate(chunk_minutes(minutes, focus_block_min)):
            yield _Chunk(order, task, i, chunk, deadline)


def _no_room(state: _State, step: _Chunk) -> _State:
    return state._replace(
        warnings=state.warnings + (f'Not enough time to schedule "{step.task.title}".',),
        dropped=state.dropped | {step.order},
    )


def _maybe_break(state: _State, window: _Window) -> _State:
    if not window.add_breaks or state.since_break < BREAK_AFTER_MIN:
        return state
    duration = min(BREAK_MAX_MIN, window.end - state.cursor)
    if duration < BREAK_MIN_MIN:
        return state
    item = PlanItem(
        id=f"break-{state.break_index}",
        title="Break",
        start=format_minutes(state.cursor),
        end=format_minutes(state.cursor + duration),
        priority="Low",
        kind="break",
    )
    return state._replace(
        cursor=state.cursor + duration + window.buffer,
        since_break=0,
        break_index=state.break_index + 1,
        items=state.items + (item,),
    )


def _fit_deadline(state: _State, step: _Chunk, window: _Window) -> _State:
    limit = window.end if step.deadline is None else min(step.deadline, window.end)
    if state.cursor + step.minutes <= limit:
        return state
    adjusted = max(window.start, limit - step.minutes)
    if adjusted >= state.cursor:
        return state._replace(cursor=adjusted)
    return state._replace(
        warnings=state.warnings + (f'"{step.task.title}" could not be finished before its deadline.',)
    )


def _place(window: _Window):
    def step_fn(state: _State, step: _Chunk) -> _State:
        if step.order in state.dropped:
            return state
        if state.cursor + step.minutes > window.end:
            return _no_room(state, step)

        state = _maybe_break(state, window)
        state = _fit_deadline(state, step, window)
        if state.cursor + step.minutes > window.end:
            return _no_room(state, step)

        item = PlanItem(
            id=f"{step.task.id}-{step.index}",
            title=step.task.title,
            start=format_minutes(state.cursor),
            end=format_minutes(state.cursor + step.minutes),
            priority=step.task.priority,
        )
        cursor = state.cursor + step.minutes
        since_break = state.since_break + step.minutes
        if window.buffer > 0:
            cursor += window.buffer
            since_break += window.buffer
        return state._replace(cursor=cursor, since_break=since_break, items=state.items + (item,))

    return step_fn


def generate_schedule(config: ScheduleConfig) -> ScheduleResult:
    """
    Pack tasks into the [day_start, day_end] window.

    Tasks are placed one chunk at a time behind a single cursor, with a
    buffer after every chunk and, when enabled, a short break once 90
    minutes have accumulated. Anything that cannot be honoured is reported
    in ``warnings`` instead of raising: a task that no longer fits loses its
    remaining chunks, a task that misses its deadline is still placed.
    """
    start = parse_hhmm(config.day_start)
    end = parse_hhmm(config.day_end)

    if end <= start:
        return ScheduleResult(items=[], warnings=[INVALID_WINDOW_WARNING])

    tasks = config.tasks
    if not isinstance(tasks, (list, tuple)) or len(tasks) == 0:
        return ScheduleResult(items=[], warnings=[NO_TASKS_WARNING])

    window = _Window(start=start, end=end, buffer=config.buffer_min, add_breaks=config.add_breaks)
    initial = _State(
        cursor=start,
        since_break=0,
        break_index=0,
        items=(),
        warnings=(),
        dropped=frozenset(),
    )
    final = reduce(_place(window), _chunks(tasks, config.focus_block_min), initial)
    return ScheduleResult(items=list(final.items), warnings=list(final.warnings))

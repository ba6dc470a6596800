# dayplan/models.py
import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Sequence, Union

from .clock import parse_hhmm

PRIORITIES = ("High", "Med", "Low")
PRIORITY_WEIGHT = {"High": 0, "Med": 1, "Low": 2}

MIN_TASK_MIN = 5
MIN_FOCUS_BLOCK_MIN = 10
BREAK_AFTER_MIN = 90    # work + buffer minutes before a break is due
BREAK_MAX_MIN = 10
BREAK_MIN_MIN = 5       # skip the break if less than this remains


def clamp_task_minutes(minutes: float) -> int:
    return max(MIN_TASK_MIN, math.floor(minutes))


def clamp_focus_block(minutes: float) -> int:
    return max(MIN_FOCUS_BLOCK_MIN, math.floor(minutes))


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    minutes: float
    priority: str = "Med"
    deadline: Optional[str] = None  # "HH:MM", 24h

    def __post_init__(self):
        if self.priority not in PRIORITY_WEIGHT:
            raise ValueError(f"priority must be one of {PRIORITIES}, got {self.priority!r}")
        if not str(self.title).strip():
            raise ValueError("task title must not be blank")
        if not math.isfinite(self.minutes):
            raise ValueError(f"task minutes must be a finite number, got {self.minutes!r}")

    @property
    def deadline_minutes(self) -> Optional[int]:
        return parse_hhmm(self.deadline) if self.deadline else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            minutes=data["minutes"],
            priority=data.get("priority", "Med"),
            deadline=data.get("deadline") or None,
        )


@dataclass(frozen=True)
class PlanItem:
    id: str
    title: str
    start: str  # "HH:MM"
    end: str    # "HH:MM"
    priority: str
    kind: str = "task"  # task | break

    @property
    def minutes(self) -> int:
        return parse_hhmm(self.end) - parse_hhmm(self.start)

    @property
    def is_break(self) -> bool:
        return self.kind == "break"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        del data["kind"]
        return data


@dataclass
class ScheduleConfig:
    day_start: str
    day_end: str
    tasks: Sequence[Task] = field(default_factory=list)
    buffer_min: int = 5
    focus_block_min: int = 25
    add_breaks: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduleConfig":
        """Build from the camelCase shape the planning UI sends."""
        raw_tasks = data.get("tasks")
        tasks: Union[List[Task], Any] = raw_tasks
        if isinstance(raw_tasks, (list, tuple)):
            tasks = [t if isinstance(t, Task) else Task.from_dict(t) for t in raw_tasks]
        return cls(
            day_start=data["dayStart"],
            day_end=data["dayEnd"],
            tasks=tasks,
            buffer_min=data.get("bufferMin", 5),
            focus_block_min=data.get("focusBlockMin", 25),
            add_breaks=bool(data.get("addBreaks", True)),
        )


@dataclass
class ScheduleResult:
    items: List[PlanItem] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "warnings": list(self.warnings),
        }


# Planner session settings

@dataclass
class Availability:
    start: str = "09:00"
    end: str = "17:00"
    add_breaks: bool = True

    @property
    def is_valid(self) -> bool:
        return parse_hhmm(self.start) < parse_hhmm(self.end)


@dataclass
class Constraints:
    buffer_min: int = 5
    focus_block_min: int = 25
    add_breaks: bool = True

    def sanitized(self) -> "Constraints":
        return Constraints(
            buffer_min=max(0, self.buffer_min),
            focus_block_min=max(MIN_FOCUS_BLOCK_MIN, self.focus_block_min),
            add_breaks=self.add_breaks,
        )

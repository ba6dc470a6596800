# dayplan/export.py
import logging
import math
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .models import PlanItem, ScheduleResult, Task

logger = logging.getLogger(__name__)

PLAN_COLUMNS = ["id", "title", "start", "end", "minutes", "priority", "deadline"]
TASK_COLUMNS = ["id", "title", "minutes", "priority", "deadline"]


def owner_task_id(item: PlanItem) -> Optional[str]:
    """Task id a chunk belongs to ("<task id>-<chunk index>"); None for breaks."""
    if item.is_break:
        return None
    task_id, _, _ = item.id.rpartition("-")
    return task_id or None


def schedule_frame(items: Iterable[PlanItem], tasks: Sequence[Task] = ()) -> pd.DataFrame:
    """Plan items as a table, with each chunk's task deadline alongside."""
    deadlines = {t.id: t.deadline for t in tasks}
    rows = [{
        "id": item.id,
        "title": item.title,
        "start": item.start,
        "end": item.end,
        "minutes": item.minutes,
        "priority": item.priority,
        "deadline": deadlines.get(owner_task_id(item)),
    } for item in items]
    return pd.DataFrame(rows, columns=PLAN_COLUMNS)


def save_plan(result: ScheduleResult, path: str, tasks: Sequence[Task] = ()) -> pd.DataFrame:
    df = schedule_frame(result.items, tasks)
    df.to_csv(path, index=False)
    logger.info("Saved %d plan items to %s", len(df), path)
    return df


def load_tasks(path: str) -> List[Task]:
    """
    Read tasks from a CSV with columns id, title, minutes, priority, deadline.

    Only title and minutes are required; missing ids become "task-<row>".
    """
    df = pd.read_csv(path, dtype={"id": str, "deadline": str})
    missing = {"title", "minutes"} - set(df.columns)
    if missing:
        raise ValueError(f"task file {path} is missing columns: {sorted(missing)}")

    tasks = []
    for row_no, row in df.iterrows():
        title = row["title"]
        if pd.isna(title) or not str(title).strip():
            raise ValueError(f"task file {path}, row {row_no}: title is blank")
        minutes = pd.to_numeric(row["minutes"], errors="coerce")
        if pd.isna(minutes) or not math.isfinite(minutes) or minutes <= 0:
            raise ValueError(
                f"task file {path}, row {row_no}: minutes must be a positive number, got {row['minutes']!r}"
            )

        task_id = row.get("id")
        priority = row.get("priority")
        deadline = row.get("deadline")
        tasks.append(Task(
            id=str(task_id) if pd.notnull(task_id) else f"task-{row_no}",
            title=str(title).strip(),
            minutes=float(minutes),
            priority=str(priority) if pd.notnull(priority) else "Med",
            deadline=str(deadline) if pd.notnull(deadline) else None,
        ))
    logger.debug("Loaded %d tasks from %s", len(tasks), path)
    return tasks

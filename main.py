# main.py
import logging
import os
import sys

import pandas as pd

from dayplan.export import load_tasks, schedule_frame
from dayplan.metrics import serve_metrics
from dayplan.models import Constraints
from dayplan.planner import DayPlanner


def main():
    logging.basicConfig(level=logging.INFO)

    port = os.environ.get("DAYPLAN_METRICS_PORT")
    if port:
        serve_metrics(int(port))

    planner = DayPlanner()
    planner.set_availability("09:00", "13:00", add_breaks=True)

    if len(sys.argv) > 1:
        # optional CSV of tasks instead of the built-in sample
        planner.tasks.extend(load_tasks(sys.argv[1]))
    else:
        review = planner.add_task("Sprint review prep", minutes=50, priority="High")
        planner.add_task("Write design doc", minutes=95, priority="Med")
        planner.add_task("Inbox zero", minutes=20, priority="Low")
        planner.set_deadline(review.id, "11:00")

    plan = planner.generate(Constraints(buffer_min=5, focus_block_min=45, add_breaks=True))

    print("=== Schedule ===")
    with pd.option_context("display.width", 120):
        print(schedule_frame(plan.items, planner.tasks))

    if plan.warnings:
        print("\n=== Warnings ===")
        for warning in plan.warnings:
            print(f"- {warning}")


if __name__ == "__main__":
    main()

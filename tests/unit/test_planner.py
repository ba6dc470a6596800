# Unit tests for the planning session
from unittest.mock import Mock

import pytest
from prometheus_client import REGISTRY

from dayplan.models import Availability, Constraints
from dayplan.planner import DayPlanner


@pytest.fixture
def planner():
    p = DayPlanner()
    p.set_availability("09:00", "12:00", add_breaks=True)
    return p


@pytest.mark.unit
class TestAvailability:
    def test_defaults(self):
        p = DayPlanner()
        assert p.availability == Availability("09:00", "17:00", True)
        assert p.constraints == Constraints(5, 25, True)

    def test_invalid_window_rejected(self, planner):
        with pytest.raises(ValueError):
            planner.set_availability("12:00", "12:00")
        assert planner.availability.start == "09:00"


@pytest.mark.unit
class TestTaskEditing:
    def test_add_task_trims_and_clamps(self, planner):
        task = planner.add_task("  Review PR  ", minutes=3.7, priority="High")
        assert task.id == "task-0"
        assert task.title == "Review PR"
        assert task.minutes == 5
        assert planner.tasks == [task]

    def test_ids_are_unique(self, planner):
        a = planner.add_task("A")
        planner.remove_task(a.id)
        b = planner.add_task("B")
        assert a.id != b.id

    @pytest.mark.parametrize("title,minutes,priority", [
        ("   ", 30, "Med"),
        ("Email", 0, "Med"),
        ("Email", -10, "Med"),
        ("Email", 30, "Urgent"),
        ("Email", float("inf"), "Med"),
        ("Email", float("nan"), "Med"),
    ])
    def test_add_task_rejects_bad_input(self, planner, title, minutes, priority):
        with pytest.raises(ValueError):
            planner.add_task(title, minutes=minutes, priority=priority)
        assert planner.tasks == []

    def test_update_task(self, planner):
        task = planner.add_task("Draft", minutes=30)
        updated = planner.update_task(task.id, minutes=45, priority="Low")
        assert updated.title == "Draft"
        assert updated.minutes == 45
        assert updated.priority == "Low"
        assert planner.get_task(task.id) == updated

    def test_unknown_task_id(self, planner):
        with pytest.raises(KeyError):
            planner.remove_task("nope")
        with pytest.raises(KeyError):
            planner.set_deadline("nope", "10:00")

    def test_set_and_clear_deadline(self, planner):
        task = planner.add_task("Ship")
        assert planner.set_deadline(task.id, "11:00").deadline == "11:00"
        assert planner.set_deadline(task.id, "").deadline is None


@pytest.mark.unit
class TestGenerate:
    def test_generate_uses_availability_and_constraints(self, planner):
        planner.add_task("Write", minutes=40, priority="High")
        plan = planner.generate(Constraints(buffer_min=0, focus_block_min=30, add_breaks=False))
        assert [(i.start, i.end) for i in plan.items] == [("09:00", "09:30"), ("09:30", "09:40")]
        assert planner.plan is plan

    def test_constraints_are_sanitized(self, planner):
        planner.add_task("Write", minutes=30)
        planner.generate(Constraints(buffer_min=-5, focus_block_min=5, add_breaks=True))
        assert planner.constraints == Constraints(buffer_min=0, focus_block_min=10, add_breaks=True)
        assert [i.minutes for i in planner.plan.items] == [10, 10, 10]

    def test_breaks_need_both_switches(self, planner):
        planner.set_availability("09:00", "12:00", add_breaks=False)
        planner.add_task("Long", minutes=150)
        config = planner.build_config()
        assert config.add_breaks is False
        plan = planner.generate(Constraints(add_breaks=True))
        assert not any(item.is_break for item in plan.items)

    def test_regenerate_after_edit(self, planner):
        task = planner.add_task("Write", minutes=30)
        planner.generate()
        planner.update_task(task.id, minutes=60)
        plan = planner.regenerate()
        assert sum(i.minutes for i in plan.items if not i.is_break) == 60

    def test_no_tasks_is_a_warning(self, planner):
        plan = planner.generate()
        assert plan.items == []
        assert plan.warnings == ["No tasks were provided. Add tasks to build a schedule."]

    def test_generate_records_metrics(self, planner):
        before = REGISTRY.get_sample_value("schedule_generation_seconds_count") or 0
        warnings_before = REGISTRY.get_sample_value("schedule_warnings_total") or 0
        planner.add_task("Too long", minutes=600)
        planner.generate()
        assert REGISTRY.get_sample_value("schedule_generation_seconds_count") == before + 1
        assert REGISTRY.get_sample_value("schedule_warnings_total") == warnings_before + 1

    def test_warnings_logged(self, planner, caplog):
        planner.add_task("Too long", minutes=600)
        with caplog.at_level("WARNING", logger="dayplan.planner"):
            planner.generate()
        assert 'Not enough time to schedule "Too long".' in caplog.text


@pytest.mark.unit
class TestAccept:
    def test_accept_requires_plan(self, planner):
        with pytest.raises(ValueError):
            planner.accept()

    def test_accept_notifies_listeners(self, planner):
        listener = Mock()
        planner.on_accept(listener)
        planner.add_task("Write")
        plan = planner.generate()
        assert planner.accept() is plan
        assert planner.accepted is True
        listener.assert_called_once_with(plan)

    def test_edit_clears_acceptance(self, planner):
        task = planner.add_task("Write")
        planner.generate()
        planner.accept()
        planner.set_deadline(task.id, "10:00")
        assert planner.accepted is False

    def test_regenerate_clears_acceptance(self, planner):
        planner.add_task("Write")
        planner.generate()
        planner.accept()
        planner.regenerate()
        assert planner.accepted is False

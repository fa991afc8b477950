"""Tests for the JSON shapes the API returns."""

from __future__ import annotations

from datetime import date, datetime

from taskflow.blueprints.api.serializers import event_to_dict, record_to_dict
from taskflow.domain.records import DailyStatusEntry, HabitStatus, Subtask
from taskflow.services.schedule import events_for_day


class TestRecordToDict:
    def test_task_fields(self, task_factory):
        task = task_factory(
            id="t1",
            start_date=datetime(2024, 8, 1, 9, 30),
            end_date=date(2024, 8, 2),
            subtasks=(Subtask(id="s1", title="Outline", start_date="2024-08-01"),),
            notes=("call back",),
        )

        data = record_to_dict(task)

        assert data["is_habit"] is False
        assert data["status"] == "todo"
        assert data["start_date"] == "2024-08-01T09:30:00"
        assert data["end_date"] == "2024-08-02"
        assert data["notes"] == ["call back"]
        assert data["subtasks"][0]["id"] == "s1"
        assert "cadence" not in data

    def test_habit_fields(self, habit_factory):
        habit = habit_factory(
            id="h1",
            completion_history=(date(2024, 8, 14), "2024-08-13T07:00:00Z"),
            daily_status=(DailyStatusEntry("2024-08-14", HabitStatus.NO_CHANGES),),
            last_completed_date="2024-08-14",
        )

        data = record_to_dict(habit)

        assert data["is_habit"] is True
        assert data["cadence"] == "daily"
        assert data["completion_history"] == ["2024-08-14", "2024-08-13T07:00:00Z"]
        assert data["daily_status"] == [{"date": "2024-08-14", "status": "no changes"}]
        assert "subtasks" not in data
        assert "status" not in data


class TestEventToDict:
    def test_subtask_event_names_its_parent(self, task_factory):
        parent = task_factory(
            id="p", subtasks=(Subtask(id="s", title="Proofread", start_date="2024-08-09"),)
        )
        [event] = events_for_day([parent], date(2024, 8, 9))

        assert event_to_dict(event) == {
            "kind": "subtask",
            "id": "s",
            "title": "Proofread",
            "priority": "medium",
            "start_date": "2024-08-09",
            "parent_id": "p",
        }

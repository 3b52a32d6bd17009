"""
Special schedule aggregate - a date window [start_date, end_date] with tasks.

Every task date lies inside the window (bounds inclusive). The rule is checked
when a task is added or its date changes, and when the window itself moves.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List

from lifeboard.domain.aggregate import AggregateRoot
from lifeboard.domain.collection import Entry, OwnedCollection
from lifeboard.domain.errors import ValidationError
from lifeboard.utils.dates import from_iso, parse_datetime
from lifeboard.utils.validation import require_text

TASK_DESCRIPTION_MAX = 1000


@dataclass(kw_only=True)
class SpecialTask(Entry):
    date: datetime
    description: str

    MUTABLE_FIELDS = frozenset({"date", "description"})
    NAME_FIELD = "description"
    LABEL = "Task"

    def validate(self) -> None:
        if not isinstance(self.date, datetime):
            raise ValidationError("Please add a date for the task")
        self.description = require_text(
            self.description, "Please add a task description", TASK_DESCRIPTION_MAX, "Description"
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SpecialTask":
        return cls(id=data["id"], date=from_iso(data["date"]), description=data["description"])


class SpecialSchedule(AggregateRoot):
    """Особое расписание на период"""
    KIND = "special_schedule"
    LABEL = "Special schedule"

    def __init__(self, owner_id: int, start_date: datetime, end_date: datetime, **kwargs):
        super().__init__(owner_id, **kwargs)
        if start_date is None or end_date is None:
            raise ValidationError("Please provide both startDate and endDate")
        if end_date < start_date:
            raise ValidationError("End date cannot be before start date")
        self.start_date = start_date
        self.end_date = end_date
        self.tasks: OwnedCollection[SpecialTask] = OwnedCollection(SpecialTask)

    def contains(self, moment: datetime) -> bool:
        return self.start_date <= moment <= self.end_date

    def _check_in_window(self, moment: datetime) -> None:
        if not self.contains(moment):
            raise ValidationError("Task date must be within the special schedule range")

    def change_window(self, start_date: datetime | None = None, end_date: datetime | None = None) -> None:
        """
        Сдвинуть границы периода

        Новое окно обязано содержать все уже существующие задачи.
        """
        if start_date is None and end_date is None:
            raise ValidationError("Please provide at least one of startDate or endDate to update")
        new_start = start_date or self.start_date
        new_end = end_date or self.end_date
        if new_end < new_start:
            raise ValidationError("End date cannot be before start date")
        outside = [t for t in self.tasks if not new_start <= t.date <= new_end]
        if outside:
            raise ValidationError(
                f"{len(outside)} task(s) would fall outside the new special schedule range"
            )
        self.start_date = new_start
        self.end_date = new_end
        self.touch()

    def add_task(self, date, description: str) -> SpecialTask:
        if date is None or date == "" or not description:
            raise ValidationError("Please provide both date and description")
        moment = parse_datetime(date, "task date")
        self._check_in_window(moment)
        task = self.tasks.insert(SpecialTask(date=moment, description=description))
        self.touch()
        return task

    def add_tasks(self, items: List[Dict[str, Any]]) -> List[SpecialTask]:
        """Начальные задачи при создании: все проверяются до вставки"""
        prepared = []
        for item in items:
            if not isinstance(item, dict) or not item.get("date") or not item.get("description"):
                raise ValidationError("Each task must include date and description")
            moment = parse_datetime(item["date"], "task date")
            self._check_in_window(moment)
            task = SpecialTask(date=moment, description=str(item["description"]))
            task.validate()
            prepared.append(task)
        added = [self.tasks.insert(task) for task in prepared]
        self.touch()
        return added

    def update_task(self, task_id: str, patch: Dict[str, Any]) -> SpecialTask:
        if not patch:
            raise ValidationError("Please provide at least one of date or description to update")
        patch = dict(patch)
        if "date" in patch:
            patch["date"] = parse_datetime(patch["date"], "task date")
            self.tasks.find_by_id(task_id)
            self._check_in_window(patch["date"])
        task = self.tasks.update(task_id, patch)
        self.touch()
        return task

    def remove_task(self, task_id: str) -> None:
        self.tasks.remove(task_id)
        self.touch()

    def body_to_dict(self) -> Dict[str, Any]:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "tasks": self.tasks.to_list(),
        }

    def load_body(self, body: Dict[str, Any]) -> None:
        self.start_date = from_iso(body["start_date"])
        self.end_date = from_iso(body["end_date"])
        self.tasks = OwnedCollection.from_list(SpecialTask, body.get("tasks"))

"""
Special schedule service - date windows with tasks inside them.
"""
import logging
from typing import Any, Dict, List

from lifeboard.application.documents import DocumentService
from lifeboard.domain.errors import ValidationError
from lifeboard.domain.special_schedule import SpecialSchedule, SpecialTask
from lifeboard.utils.dates import parse_datetime, parse_optional_datetime

logger = logging.getLogger(__name__)


class SpecialScheduleService(DocumentService[SpecialSchedule]):
    aggregate_cls = SpecialSchedule

    def create(self, owner_id: int, start_date, end_date, tasks: List[Dict[str, Any]] | None = None) -> SpecialSchedule:
        if not start_date or not end_date:
            raise ValidationError("Please provide both startDate and endDate")
        schedule = SpecialSchedule(
            owner_id,
            start_date=parse_datetime(start_date, "startDate"),
            end_date=parse_datetime(end_date, "endDate"),
        )
        if tasks:
            schedule.add_tasks(tasks)
        self.repo.save(schedule)
        logger.info("Special schedule %s created for user %s", schedule.id, owner_id)
        return schedule

    def list(self, owner_id: int, start_date=None, end_date=None) -> List[SpecialSchedule]:
        """
        Расписания владельца, по возрастанию startDate

        С фильтром возвращаются окна, пересекающиеся с [start_date, end_date].
        """
        start = parse_optional_datetime(start_date, "startDate")
        end = parse_optional_datetime(end_date, "endDate")
        schedules = self.repo.list(owner_id, newest_first=False)
        if start is not None:
            schedules = [s for s in schedules if s.end_date >= start]
        if end is not None:
            schedules = [s for s in schedules if s.start_date <= end]
        return sorted(schedules, key=lambda s: s.start_date)

    def change_window(self, owner_id: int, schedule_id: str, start_date=None, end_date=None) -> SpecialSchedule:
        start = parse_optional_datetime(start_date, "startDate")
        end = parse_optional_datetime(end_date, "endDate")
        schedule, _ = self.apply(owner_id, schedule_id, lambda s: s.change_window(start, end))
        return schedule

    def delete(self, owner_id: int, schedule_id: str) -> None:
        self.repo.delete(owner_id, schedule_id)

    def add_task(self, owner_id: int, schedule_id: str, date, description: str) -> SpecialTask:
        _, task = self.apply(owner_id, schedule_id, lambda s: s.add_task(date, description))
        return task

    def update_task(self, owner_id: int, schedule_id: str, task_id: str, patch: Dict[str, Any]) -> SpecialTask:
        _, task = self.apply(owner_id, schedule_id, lambda s: s.update_task(task_id, patch))
        return task

    def remove_task(self, owner_id: int, schedule_id: str, task_id: str) -> SpecialSchedule:
        schedule, _ = self.apply(owner_id, schedule_id, lambda s: s.remove_task(task_id))
        return schedule

"""
Timetable service - one DailySchedule per owner and calendar day.
"""
import logging
from typing import Any, Dict, List

from lifeboard.application.documents import DocumentService
from lifeboard.domain.daily_schedule import DailySchedule, TimeSlot
from lifeboard.domain.errors import ValidationError
from lifeboard.utils.dates import parse_day

logger = logging.getLogger(__name__)


class TimetableService(DocumentService[DailySchedule]):
    aggregate_cls = DailySchedule

    def get_day(self, owner_id: int, day) -> DailySchedule:
        """Расписание на день; если его нет - создаётся пустое"""
        day = parse_day(day)
        return self.repo.load_or_create(
            owner_id, DailySchedule.key_for(day), lambda: DailySchedule(owner_id, day)
        )

    def list_range(self, owner_id: int, start_date, end_date) -> List[DailySchedule]:
        if not start_date or not end_date:
            raise ValidationError("Please provide both startDate and endDate")
        start = parse_day(start_date, "startDate")
        end = parse_day(end_date, "endDate")
        if end < start:
            raise ValidationError("End date cannot be before start date")
        return self.repo.list(owner_id, key_from=start.isoformat(), key_to=end.isoformat())

    def replace_day(self, owner_id: int, day, time_slots: List[Dict[str, Any]]) -> DailySchedule:
        """
        Записать набор слотов дня целиком (upsert по дате)

        Переданный список полностью заменяет прежний, слияния нет.
        Клиентский id слота принимается, только если такой слот уже есть в этом дне.
        """
        day = parse_day(day)
        key = DailySchedule.key_for(day)
        stored = self.repo.find_by_natural_key(owner_id, key)
        schedule = DailySchedule(owner_id, day)
        schedule.replace_slots(time_slots, known=stored.time_slots if stored else None)
        schedule = self.repo.upsert_by_natural_key(owner_id, key, schedule)
        logger.info("Timetable %s replaced for user %s (%s slots)", day, owner_id, len(schedule.time_slots))
        return schedule

    def _change_day(self, owner_id: int, day, mutate):
        schedule = self.get_day(owner_id, day)
        result = mutate(schedule)
        self.repo.save(schedule)
        return schedule, result

    def add_slot(self, owner_id: int, day, data: Dict[str, Any]) -> TimeSlot:
        _, slot = self._change_day(owner_id, day, lambda s: s.add_slot(data))
        return slot

    def set_slot_status(self, owner_id: int, day, slot_id: str, status: str) -> TimeSlot:
        _, slot = self._change_day(owner_id, day, lambda s: s.set_slot_status(slot_id, status))
        return slot

    def update_slot(self, owner_id: int, day, slot_id: str, patch: Dict[str, Any]) -> TimeSlot:
        _, slot = self._change_day(owner_id, day, lambda s: s.update_slot(slot_id, patch))
        return slot

    def remove_slot(self, owner_id: int, day, slot_id: str) -> DailySchedule:
        schedule, _ = self._change_day(owner_id, day, lambda s: s.remove_slot(slot_id))
        return schedule

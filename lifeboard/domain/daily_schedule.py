"""
Daily schedule aggregate - time slots of one calendar day.

At most one document exists per (owner, day); the day's ISO date is its
natural key. Writing the day replaces the whole slot list.
"""
from dataclasses import dataclass, field
from datetime import date as date_type, datetime
from typing import Any, Dict, List

from lifeboard.domain.aggregate import AggregateRoot
from lifeboard.domain.collection import Entry, OwnedCollection
from lifeboard.domain.errors import ValidationError
from lifeboard.utils.dates import from_iso, utcnow, validate_hhmm
from lifeboard.utils.validation import optional_text, require_choice

SLOT_STATUSES = ("pending", "completed", "cancelled")
FREQUENCIES = ("daily", "weekly", "monthly")
SLOT_DESCRIPTION_MAX = 500


@dataclass(kw_only=True)
class RecurrencePattern:
    frequency: str = "weekly"
    days: List[int] = field(default_factory=list)

    def validate(self) -> None:
        require_choice(self.frequency, FREQUENCIES, "frequency")
        for day in self.days:
            # 0 = воскресенье, 6 = суббота
            if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
                raise ValidationError("Recurrence days must be integers 0..6")

    def to_dict(self) -> Dict[str, Any]:
        return {"frequency": self.frequency, "days": list(self.days)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "RecurrencePattern | None":
        if not data:
            return None
        return cls(frequency=data.get("frequency") or "weekly", days=list(data.get("days") or []))


@dataclass(kw_only=True)
class TimeSlot(Entry):
    start_time: str
    end_time: str
    description: str = ""
    status: str = "pending"
    category: str | None = None
    is_recurring: bool = False
    recurrence_pattern: RecurrencePattern | None = None
    completed_at: datetime | None = None
    order: int = 0

    MUTABLE_FIELDS = frozenset({
        "start_time", "end_time", "description", "status",
        "category", "is_recurring", "recurrence_pattern",
    })
    NAME_FIELD = "description"
    LABEL = "Time slot"

    def validate(self) -> None:
        if not self.start_time or not self.end_time:
            raise ValidationError("Each time slot must have startTime and endTime")
        validate_hhmm(self.start_time, "startTime")
        validate_hhmm(self.end_time, "endTime")
        # HH:MM сравнивается лексикографически
        if self.end_time <= self.start_time:
            raise ValidationError("endTime must be after startTime")
        self.description = optional_text(self.description, SLOT_DESCRIPTION_MAX, "Description")
        require_choice(self.status, SLOT_STATUSES, "status")
        if self.recurrence_pattern is not None:
            self.recurrence_pattern.validate()

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["recurrence_pattern"] = self.recurrence_pattern.to_dict() if self.recurrence_pattern else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeSlot":
        return cls(
            id=data.get("id"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            description=data.get("description") or "",
            status=data.get("status") or "pending",
            category=data.get("category") or None,
            is_recurring=bool(data.get("is_recurring", False)),
            recurrence_pattern=RecurrencePattern.from_dict(data.get("recurrence_pattern")),
            completed_at=from_iso(data.get("completed_at")),
            order=data.get("order", 0),
        )


def build_slot(data: Dict[str, Any]) -> TimeSlot:
    """Слот из входных данных; для completed проставляется completed_at"""
    if not isinstance(data, dict):
        raise ValidationError("Each time slot must be an object")
    slot = TimeSlot.from_dict(data)
    slot.order = 0
    slot.completed_at = utcnow() if slot.status == "completed" else None
    return slot


class DailySchedule(AggregateRoot):
    """Расписание на один день"""
    KIND = "daily_schedule"
    LABEL = "Daily schedule"

    def __init__(self, owner_id: int, day: date_type, **kwargs):
        kwargs.setdefault("natural_key", day.isoformat())
        super().__init__(owner_id, **kwargs)
        self.day = day
        self.time_slots: OwnedCollection[TimeSlot] = OwnedCollection(TimeSlot, ordered=True)

    @staticmethod
    def key_for(day: date_type) -> str:
        return day.isoformat()

    def replace_slots(self, items: List[Dict[str, Any]], known: OwnedCollection | None = None) -> None:
        """
        Заменить набор слотов целиком

        id сохраняется только у слотов, которые уже есть в known (по умолчанию
        текущие слоты дня); остальные получают новый id. У слота, который был
        и остался completed, completed_at не меняется.
        Порядок = порядок во входном списке.
        """
        if not isinstance(items, list):
            raise ValidationError("Time slots must be an array")
        known = self.time_slots if known is None else known
        slots = []
        for item in items:
            slot = build_slot(item)
            prior = known.get(slot.id) if slot.id else None
            if prior is None:
                slot.id = None
            elif slot.status == "completed" and prior.status == "completed" and prior.completed_at:
                slot.completed_at = prior.completed_at
            slots.append(slot)
        self.time_slots.replace_all(slots)
        self.touch()

    def add_slot(self, data: Dict[str, Any]) -> TimeSlot:
        slot = build_slot(data)
        slot.id = None
        slot = self.time_slots.insert(slot)
        self.touch()
        return slot

    def set_slot_status(self, slot_id: str, status: str) -> TimeSlot:
        require_choice(status, SLOT_STATUSES, "status")
        slot = self.time_slots.update(slot_id, {"status": status})
        if status == "completed":
            slot.completed_at = utcnow()
        self.touch()
        return slot

    def update_slot(self, slot_id: str, patch: Dict[str, Any]) -> TimeSlot:
        patch = dict(patch)
        if "recurrence_pattern" in patch:
            patch["recurrence_pattern"] = RecurrencePattern.from_dict(patch["recurrence_pattern"])
        slot = self.time_slots.update(slot_id, patch)
        if patch.get("status") == "completed":
            slot.completed_at = utcnow()
        self.touch()
        return slot

    def remove_slot(self, slot_id: str) -> None:
        self.time_slots.remove(slot_id)
        self.touch()

    def body_to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "time_slots": self.time_slots.to_list(),
        }

    def load_body(self, body: Dict[str, Any]) -> None:
        self.day = date_type.fromisoformat(body["date"])
        self.time_slots = OwnedCollection.from_list(TimeSlot, body.get("time_slots"), ordered=True)

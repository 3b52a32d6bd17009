"""
Timetable API endpoints (one schedule per calendar day)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import RequestModel, ok, created
from lifeboard.application.timetable import TimetableService
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/timetable", tags=["timetable"])


class RecurrenceIn(RequestModel):
    frequency: str = "weekly"
    days: list[int] = []


class SlotIn(RequestModel):
    id: str | None = None
    start_time: str
    end_time: str
    description: str = ""
    status: str = "pending"
    category: str | None = None
    is_recurring: bool = False
    recurrence_pattern: RecurrenceIn | None = None


class ReplaceDayRequest(RequestModel):
    time_slots: list[SlotIn]


class SlotStatusRequest(RequestModel):
    status: str


class SlotPatchRequest(RequestModel):
    start_time: str | None = None
    end_time: str | None = None
    description: str | None = None
    status: str | None = None
    category: str | None = None
    is_recurring: bool | None = None
    recurrence_pattern: RecurrenceIn | None = None


@router.get("")
def list_days(
    start_date: str | None = None,
    end_date: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    days = TimetableService(db).list_range(user.id, start_date, end_date)
    return ok([d.to_response() for d in days], count=len(days))


@router.get("/{day}")
def get_day(day: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Расписание на день (пустое создаётся при первом обращении)"""
    return ok(TimetableService(db).get_day(user.id, day).to_response())


@router.put("/{day}")
def replace_day(
    day: str,
    req: ReplaceDayRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Полная замена слотов дня"""
    schedule = TimetableService(db).replace_day(user.id, day, [s.model_dump() for s in req.time_slots])
    return ok(schedule.to_response())


@router.post("/{day}/slots")
def add_slot(
    day: str,
    req: SlotIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    slot = TimetableService(db).add_slot(user.id, day, req.model_dump())
    return created(slot.to_dict())


@router.patch("/{day}/slots/{slot_id}")
def update_slot(
    day: str,
    slot_id: str,
    req: SlotPatchRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Частичное изменение слота: меняются только переданные поля"""
    slot = TimetableService(db).update_slot(user.id, day, slot_id, req.changes())
    return ok(slot.to_dict())


@router.patch("/{day}/slots/{slot_id}/status")
def set_slot_status(
    day: str,
    slot_id: str,
    req: SlotStatusRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    slot = TimetableService(db).set_slot_status(user.id, day, slot_id, req.status)
    return ok(slot.to_dict())


@router.delete("/{day}/slots/{slot_id}")
def delete_slot(
    day: str,
    slot_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    schedule = TimetableService(db).remove_slot(user.id, day, slot_id)
    return ok(schedule.to_response())

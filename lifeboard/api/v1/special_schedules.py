"""
Special schedule API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import RequestModel, ok, created
from lifeboard.application.special_schedules import SpecialScheduleService
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/special-schedules", tags=["special-schedules"])


class TaskIn(RequestModel):
    date: str | None = None
    description: str | None = None


class CreateScheduleRequest(RequestModel):
    start_date: str | None = None
    end_date: str | None = None
    tasks: list[TaskIn] = []


class UpdateScheduleRequest(RequestModel):
    start_date: str | None = None
    end_date: str | None = None


class UpdateTaskRequest(RequestModel):
    date: str | None = None
    description: str | None = None


@router.post("")
def create_schedule(req: CreateScheduleRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    schedule = SpecialScheduleService(db).create(
        user.id, req.start_date, req.end_date, tasks=[t.model_dump() for t in req.tasks]
    )
    return created(schedule.to_response())


@router.get("")
def list_schedules(
    start_date: str | None = None,
    end_date: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Список расписаний; start_date/end_date - фильтр по пересечению периодов"""
    schedules = SpecialScheduleService(db).list(user.id, start_date, end_date)
    return ok([s.to_response() for s in schedules], count=len(schedules))


@router.get("/{schedule_id}")
def get_schedule(schedule_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok(SpecialScheduleService(db).get(user.id, schedule_id).to_response())


@router.patch("/{schedule_id}")
def update_schedule(
    schedule_id: str,
    req: UpdateScheduleRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    schedule = SpecialScheduleService(db).change_window(user.id, schedule_id, req.start_date, req.end_date)
    return ok(schedule.to_response())


@router.delete("/{schedule_id}")
def delete_schedule(schedule_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    SpecialScheduleService(db).delete(user.id, schedule_id)
    return ok({})


@router.post("/{schedule_id}/tasks")
def add_task(
    schedule_id: str,
    req: TaskIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = SpecialScheduleService(db).add_task(user.id, schedule_id, req.date, req.description)
    return created(task.to_dict())


@router.patch("/{schedule_id}/tasks/{task_id}")
def update_task(
    schedule_id: str,
    task_id: str,
    req: UpdateTaskRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = SpecialScheduleService(db).update_task(user.id, schedule_id, task_id, req.changes())
    return ok(task.to_dict())


@router.delete("/{schedule_id}/tasks/{task_id}")
def delete_task(
    schedule_id: str,
    task_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    schedule = SpecialScheduleService(db).remove_task(user.id, schedule_id, task_id)
    return ok(schedule.to_response())

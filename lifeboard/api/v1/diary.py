"""
Diary API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import RequestModel, ok, created
from lifeboard.application.diary import (
    CreateDiaryEntryUseCase,
    UpdateDiaryEntryUseCase,
    DeleteDiaryEntryUseCase,
    DiaryQuery,
    serialize_entry,
)
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/diary/entries", tags=["diary"])


class CreateEntryRequest(RequestModel):
    content: str | None = None
    date: str | None = None
    good_things: list[str] = []
    bad_things: list[str] = []


class UpdateEntryRequest(RequestModel):
    content: str | None = None
    date: str | None = None
    good_things: list[str] | None = None
    bad_things: list[str] | None = None


@router.post("")
def create_entry(req: CreateEntryRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    entry = CreateDiaryEntryUseCase(db).execute(
        user.id, req.content, date=req.date, good_things=req.good_things, bad_things=req.bad_things
    )
    return created(serialize_entry(entry))


@router.get("")
def list_entries(
    page: int = 1,
    limit: int | None = None,
    sort: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entries, pagination, total = DiaryQuery(db).list_page(user.id, page=page, limit=limit, sort=sort)
    return ok([serialize_entry(e) for e in entries], count=len(entries), pagination=pagination, total=total)


@router.get("/dates")
def entries_by_range(
    start_date: str | None = None,
    end_date: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entries = DiaryQuery(db).list_range(user.id, start_date, end_date)
    return ok([serialize_entry(e) for e in entries], count=len(entries))


@router.get("/date/{day}")
def entry_by_date(day: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Запись за день; data = null, если записи нет"""
    entry = DiaryQuery(db).get_by_date(user.id, day)
    return ok(serialize_entry(entry) if entry else None)


@router.get("/{entry_id}")
def get_entry(entry_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok(serialize_entry(DiaryQuery(db).get(user.id, entry_id)))


@router.patch("/{entry_id}")
def update_entry(
    entry_id: int,
    req: UpdateEntryRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = UpdateDiaryEntryUseCase(db).execute(user.id, entry_id, **req.changes())
    return ok(serialize_entry(entry))


@router.delete("/{entry_id}")
def delete_entry(entry_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteDiaryEntryUseCase(db).execute(user.id, entry_id)
    return ok({})

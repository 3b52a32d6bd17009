"""
Festival API endpoints (bucket lists)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import RequestModel, ok, created
from lifeboard.application.festivals import FestivalService
from lifeboard.domain.festival import Festival
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/festivals", tags=["festivals"])


class ItemIn(RequestModel):
    label: str
    price: float = 0


class CreateFestivalRequest(RequestModel):
    name: str
    description: str = ""
    items: list[ItemIn] = []


class UpdateFestivalRequest(RequestModel):
    name: str | None = None
    description: str | None = None


class UpdateItemRequest(RequestModel):
    label: str | None = None
    price: float | None = None
    completed: bool | None = None


def _festival_payload(festival: Festival) -> dict:
    data = festival.to_response()
    data["totals"] = festival.totals()
    return data


@router.get("")
def list_festivals(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    festivals = FestivalService(db).list(user.id)
    return ok([_festival_payload(f) for f in festivals], count=len(festivals))


@router.post("")
def create_festival(req: CreateFestivalRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    festival = FestivalService(db).create(
        user.id, req.name, req.description, items=[i.model_dump() for i in req.items]
    )
    return created(_festival_payload(festival))


@router.get("/{festival_id}")
def get_festival(festival_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok(_festival_payload(FestivalService(db).get(user.id, festival_id)))


@router.put("/{festival_id}")
def update_festival(
    festival_id: str,
    req: UpdateFestivalRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    festival = FestivalService(db).update(user.id, festival_id, req.changes())
    return ok(_festival_payload(festival))


@router.delete("/{festival_id}")
def delete_festival(festival_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    FestivalService(db).delete(user.id, festival_id)
    return ok({})


@router.post("/{festival_id}/items")
def add_item(
    festival_id: str,
    req: ItemIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = FestivalService(db).add_item(user.id, festival_id, req.label, req.price)
    return created(item.to_dict())


@router.put("/{festival_id}/items/{item_id}")
def update_item(
    festival_id: str,
    item_id: str,
    req: UpdateItemRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = FestivalService(db).update_item(user.id, festival_id, item_id, req.changes())
    return ok(item.to_dict())


@router.delete("/{festival_id}/items/{item_id}")
def delete_item(
    festival_id: str,
    item_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    festival = FestivalService(db).remove_item(user.id, festival_id, item_id)
    return ok(_festival_payload(festival))

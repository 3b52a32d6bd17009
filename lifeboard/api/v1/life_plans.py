"""
Life plan API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import RequestModel, ok, created
from lifeboard.application.life_plans import (
    CreateLifePlanUseCase,
    UpdateLifePlanUseCase,
    DeleteLifePlanUseCase,
    LifePlansQuery,
    serialize_plan,
)
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/life-plans", tags=["life-plans"])


class CreatePlanRequest(RequestModel):
    start_age: int | None = None
    end_age: int | None = None
    target_year: int | None = None
    description: str | None = None


class UpdatePlanRequest(RequestModel):
    start_age: int | None = None
    end_age: int | None = None
    target_year: int | None = None
    description: str | None = None


@router.get("")
def list_plans(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    plans = LifePlansQuery(db).list(user.id)
    return ok([serialize_plan(p) for p in plans], count=len(plans))


@router.post("")
def create_plan(req: CreatePlanRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    plan = CreateLifePlanUseCase(db).execute(
        user.id, req.start_age, req.end_age, req.target_year, req.description
    )
    return created(serialize_plan(plan))


@router.get("/range/{start_year}/{end_year}")
def plans_by_year_range(
    start_year: int,
    end_year: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    plans = LifePlansQuery(db).list(user.id, start_year=start_year, end_year=end_year)
    return ok([serialize_plan(p) for p in plans], count=len(plans))


@router.get("/{plan_id}")
def get_plan(plan_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok(serialize_plan(LifePlansQuery(db).get(user.id, plan_id)))


@router.put("/{plan_id}")
def update_plan(
    plan_id: int,
    req: UpdatePlanRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    plan = UpdateLifePlanUseCase(db).execute(user.id, plan_id, **req.changes())
    return ok(serialize_plan(plan))


@router.delete("/{plan_id}")
def delete_plan(plan_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteLifePlanUseCase(db).execute(user.id, plan_id)
    return ok({})

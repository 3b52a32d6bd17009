"""
Dashboard API endpoint
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import ok
from lifeboard.application.dashboard import DashboardService
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats")
def dashboard_stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok(DashboardService(db).get_stats(user.id))

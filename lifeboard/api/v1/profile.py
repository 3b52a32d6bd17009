"""
Profile API endpoint
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import ok
from lifeboard.application.profile import GetProfileQuery
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("")
def get_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok(GetProfileQuery(db).execute(user))

"""
FastAPI dependencies (DB session, authentication)
"""
from fastapi import Request, Depends
from sqlalchemy.orm import Session

from lifeboard.domain.errors import UnauthorizedError
from lifeboard.infrastructure.db.session import get_db as _get_db
from lifeboard.infrastructure.db.models import User


# Re-export get_db для удобства
get_db = _get_db


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Получить текущего пользователя из session

    Raises:
        UnauthorizedError (401): если не залогинен или пользователь удалён

    Usage:
        @router.get("/me")
        def me(user: User = Depends(get_current_user)):
            ...
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise UnauthorizedError("Not authenticated")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        request.session.clear()
        raise UnauthorizedError("User not found")

    return user

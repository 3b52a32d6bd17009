"""
Authentication routes (register, login, logout, profile, password change)
"""
from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import RequestModel, ok, created
from lifeboard.application.auth import RegisterUserUseCase, AuthenticateUserUseCase, ChangePasswordUseCase
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(RequestModel):
    username: str
    email: str
    password: str


class LoginRequest(RequestModel):
    email: str
    password: str


class ChangePasswordRequest(RequestModel):
    current_password: str
    new_password: str


def _user_payload(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


@router.post("/register")
def register(request: Request, req: RegisterRequest, db: Session = Depends(get_db)):
    """Регистрация; пользователь сразу залогинен"""
    user = RegisterUserUseCase(db).execute(req.username, req.email, req.password)
    request.session["user_id"] = user.id
    return created(_user_payload(user))


@router.post("/login")
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    user = AuthenticateUserUseCase(db).execute(req.email, req.password)
    request.session["user_id"] = user.id
    return ok(_user_payload(user))


@router.post("/logout")
def logout(request: Request):
    """
    Выход из системы
    """
    request.session.clear()
    return ok({})


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return ok(_user_payload(user))


@router.put("/change-password")
def change_password(
    req: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ChangePasswordUseCase(db).execute(user.id, req.current_password, req.new_password)
    return ok({"message": "Password changed successfully"})

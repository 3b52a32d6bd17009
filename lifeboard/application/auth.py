"""
Account use cases: explicit registration, login and password change.

An account is always provisioned with an explicit username, email and
password; nothing is derived from defaults.
"""
import logging
import re

from sqlalchemy.orm import Session

from lifeboard.auth import hash_password, verify_password, get_user_by_email, get_user_by_username
from lifeboard.config import get_settings
from lifeboard.domain.errors import ValidationError, UnauthorizedError, NotFoundError
from lifeboard.infrastructure.db.models import User
from lifeboard.utils.validation import require_text

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_MAX = 100


def _check_password(password: str) -> str:
    min_length = get_settings().MIN_PASSWORD_LENGTH
    if not isinstance(password, str) or len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters")
    return password


class RegisterUserUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, username: str, email: str, password: str) -> User:
        username = require_text(username, "Please provide a username", USERNAME_MAX, "Username")
        email = require_text(email, "Please provide an email", 255, "Email").lower()
        if not _EMAIL_RE.match(email):
            raise ValidationError("Please provide a valid email")
        _check_password(password)

        if get_user_by_email(self.db, email) or get_user_by_username(self.db, username):
            raise ValidationError("User already exists")

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
        )
        self.db.add(user)
        self.db.commit()
        logger.info("Registered user %s (%s)", user.id, username)
        return user


class AuthenticateUserUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, email: str, password: str) -> User:
        """
        Проверить учётные данные

        Raises:
            UnauthorizedError: email не найден или пароль неверный (одно сообщение)
        """
        user = get_user_by_email(self.db, email or "")
        if not user or not verify_password(password or "", user.password_hash):
            raise UnauthorizedError("Invalid credentials")
        return user


class ChangePasswordUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        if not verify_password(current_password or "", user.password_hash):
            raise ValidationError("Current password is incorrect")
        _check_password(new_password)

        user.password_hash = hash_password(new_password)
        self.db.commit()
        logger.info("Password changed for user %s", user_id)

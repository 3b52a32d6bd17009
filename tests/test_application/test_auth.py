"""Tests for account use cases: регистрация, вход, смена пароля."""
import pytest

from lifeboard.application.auth import RegisterUserUseCase, AuthenticateUserUseCase, ChangePasswordUseCase
from lifeboard.auth import verify_password
from lifeboard.domain.errors import ValidationError, UnauthorizedError, NotFoundError


def _register(db_session, username="anna", email="Anna@Example.com", password="secret123"):
    return RegisterUserUseCase(db_session).execute(username=username, email=email, password=password)


class TestRegister:
    def test_register_hashes_password(self, db_session):
        user = _register(db_session)
        assert user.email == "anna@example.com"
        assert user.password_hash != "secret123"
        assert verify_password("secret123", user.password_hash)

    def test_duplicate_email(self, db_session):
        _register(db_session)
        with pytest.raises(ValidationError, match="User already exists"):
            _register(db_session, username="other", email="anna@example.com")

    def test_duplicate_username(self, db_session):
        _register(db_session)
        with pytest.raises(ValidationError, match="User already exists"):
            _register(db_session, email="second@example.com")

    def test_short_password(self, db_session):
        with pytest.raises(ValidationError, match="Password must be at least"):
            _register(db_session, password="123")

    def test_invalid_email(self, db_session):
        with pytest.raises(ValidationError, match="valid email"):
            _register(db_session, email="not-an-email")


class TestAuthenticate:
    def test_login(self, db_session):
        user = _register(db_session)
        assert AuthenticateUserUseCase(db_session).execute(" ANNA@example.com ", "secret123").id == user.id

    @pytest.mark.parametrize("email,password", [
        ("anna@example.com", "wrong-password"),
        ("nobody@example.com", "secret123"),
    ])
    def test_invalid_credentials(self, db_session, email, password):
        _register(db_session)
        with pytest.raises(UnauthorizedError, match="Invalid credentials"):
            AuthenticateUserUseCase(db_session).execute(email, password)


class TestChangePassword:
    def test_change_password(self, db_session):
        user = _register(db_session)
        ChangePasswordUseCase(db_session).execute(user.id, "secret123", "newsecret")

        assert AuthenticateUserUseCase(db_session).execute("anna@example.com", "newsecret").id == user.id

    def test_wrong_current_password(self, db_session):
        user = _register(db_session)
        with pytest.raises(ValidationError, match="Current password is incorrect"):
            ChangePasswordUseCase(db_session).execute(user.id, "nope", "newsecret")

    def test_unknown_user(self, db_session):
        with pytest.raises(NotFoundError, match="User not found"):
            ChangePasswordUseCase(db_session).execute(999, "secret123", "newsecret")

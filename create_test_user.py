"""
Create a user account

Usage:
    python create_test_user.py <username> <email> <password>
"""
import sys

from lifeboard.infrastructure.db.session import session_scope
from lifeboard.application.auth import RegisterUserUseCase
from lifeboard.auth import get_user_by_email
from lifeboard.domain.errors import ValidationError

if len(sys.argv) != 4:
    print(__doc__)
    sys.exit(1)

username, email, password = sys.argv[1:]

with session_scope() as db:
    existing = get_user_by_email(db, email)
    if existing:
        print(f"User already exists: {existing.email} (ID: {existing.id})")
        sys.exit(0)
    try:
        user = RegisterUserUseCase(db).execute(username, email, password)
    except ValidationError as exc:
        print(f"Error: {exc.message}")
        sys.exit(1)
    print("Created user:")
    print(f"  Username: {user.username}")
    print(f"  Email: {user.email}")

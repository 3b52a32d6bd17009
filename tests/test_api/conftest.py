"""
API fixtures: TestClient поверх той же in-memory SQLite, что и db_session
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from lifeboard.api.deps import get_db
from lifeboard.main import app


@pytest.fixture
def client(db_engine):
    """Test client для FastAPI (get_db подменён на тестовую БД)"""
    TestingSession = sessionmaker(bind=db_engine, autoflush=False, autocommit=False)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client):
    """Client с залогиненным пользователем"""
    response = client.post(
        "/api/auth/register",
        json={"username": "anna", "email": "anna@example.com", "password": "secret123"},
    )
    assert response.status_code == 201, response.text
    return client

"""
Engine, sessions and readiness probe for the Lifeboard database

Один engine на процесс; сессия живёт ровно один запрос (или один скрипт).
"""
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

import psycopg
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from lifeboard.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for users, aggregate documents and the flat tables"""


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    url = settings.get_sqlalchemy_url()
    options = {"pool_pre_ping": True, "echo": settings.DB_ECHO}
    if not url.startswith("sqlite"):
        options["pool_size"] = settings.DB_POOL_SIZE
        options["pool_recycle"] = settings.DB_POOL_RECYCLE
    return create_engine(url, **options)


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return sessionmaker(bind=get_engine(), autoflush=False)


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Сессия для кода вне HTTP (скрипты обслуживания).

    Commit остаётся на вызывающем: репозитории и use cases коммитят сами.
    Незакоммиченное откатывается при выходе.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


def get_db() -> Iterator[Session]:
    """
    FastAPI dependency: one session per request

        @router.get("/diary")
        def list_entries(db: Session = Depends(get_db)): ...
    """
    with session_scope() as db:
        yield db


def check_db_connection() -> None:
    """
    Readiness probe: SELECT 1 over a raw psycopg connection, bypassing the pool.

    Raises:
        psycopg.OperationalError: база недоступна за DB_CONNECT_TIMEOUT секунд
    """
    settings = get_settings()
    with psycopg.connect(settings.DATABASE_URL, connect_timeout=settings.DB_CONNECT_TIMEOUT) as conn:
        conn.execute("SELECT 1").fetchone()

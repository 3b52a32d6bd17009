"""
SQLAlchemy ORM models (users, aggregate documents, flat feature tables)
"""
from decimal import Decimal
from datetime import datetime
from sqlalchemy import String, DateTime, Integer, Text, TIMESTAMP, func, Boolean, Numeric, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import JSONB

from lifeboard.infrastructure.db.session import Base


class User(Base):
    """
    User model

    Пользователь создаётся явно (username + email + пароль), без значений по умолчанию.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class AggregateDocument(Base):
    """
    Документ агрегата (челлендж, учебная структура, праздник, расписания)

    Весь агрегат со всеми вложенными коллекциями хранится в body (JSONB)
    и записывается одной операцией. version растёт на каждом сохранении
    (оптимистическая блокировка).
    """
    __tablename__ = "aggregate_documents"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # Natural key: ISO date for daily schedules, "default" for the study structure
    natural_key: Mapped[str | None] = mapped_column(String(64), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    body: Mapped[dict] = mapped_column(JSONB, nullable=False)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("kind", "owner_id", "natural_key", name="uq_aggregate_natural_key"),
        Index("ix_aggregate_kind_owner", "kind", "owner_id", "is_deleted"),
    )


class TransactionModel(Base):
    """Доход или расход"""
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    type: Mapped[str] = mapped_column(String(16), nullable=False)  # earning | expense
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)


class DiaryEntryModel(Base):
    """Запись дневника"""
    __tablename__ = "diary_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    good_things: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    bad_things: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)


class LifePlanModel(Base):
    """План жизни на возрастной интервал"""
    __tablename__ = "life_plans"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    start_age: Mapped[int] = mapped_column(Integer, nullable=False)
    end_age: Mapped[int] = mapped_column(Integer, nullable=False)
    target_year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(1000), nullable=False)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

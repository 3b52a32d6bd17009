"""
Shared load → mutate → save cycle for aggregate document services.
"""
import logging
from typing import Callable, Generic, Tuple, Type, TypeVar

from sqlalchemy.orm import Session

from lifeboard.domain.aggregate import AggregateRoot
from lifeboard.infrastructure.repository import AggregateRepository

logger = logging.getLogger(__name__)

A = TypeVar("A", bound=AggregateRoot)
R = TypeVar("R")


class DocumentService(Generic[A]):
    """
    Базовый сервис для агрегатов

    Подкласс задаёт aggregate_cls; мутации выполняются через apply():
    агрегат загружается, изменяется в памяти и сохраняется целиком.
    Если мутация бросила исключение, в хранилище ничего не пишется.
    """
    aggregate_cls: Type[A]

    def __init__(self, db: Session):
        self.db = db
        self.repo: AggregateRepository[A] = AggregateRepository(db, self.aggregate_cls)

    def get(self, owner_id: int, aggregate_id: str) -> A:
        return self.repo.load(owner_id, aggregate_id)

    def apply(self, owner_id: int, aggregate_id: str, mutate: Callable[[A], R]) -> Tuple[A, R]:
        aggregate = self.repo.load(owner_id, aggregate_id)
        result = mutate(aggregate)
        self.repo.save(aggregate)
        return aggregate, result

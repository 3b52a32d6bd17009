"""
AggregateRepository - persistence of whole aggregate documents.

Every aggregate (with all of its nested collections) is one row of
aggregate_documents. A save is a single INSERT or a single guarded UPDATE:

    UPDATE aggregate_documents SET body=..., version=version+1
    WHERE id=:id AND owner_id=:owner AND version=:loaded_version

Zero affected rows means another request saved the same aggregate after it
was loaded here; the save is rejected with ConflictError and nothing is
written. Store failures surface as StorageError and are never retried.
"""
import logging
from contextlib import contextmanager
from typing import Callable, Generic, List, Type, TypeVar

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from lifeboard.domain.aggregate import AggregateRoot
from lifeboard.domain.errors import ConflictError, NotFoundError, StorageError, require_owner
from lifeboard.domain.identity import is_valid_id
from lifeboard.infrastructure.db.models import AggregateDocument

logger = logging.getLogger(__name__)

A = TypeVar("A", bound=AggregateRoot)


class AggregateRepository(Generic[A]):
    """
    Repository for one aggregate type

    Usage:
        repo = AggregateRepository(db, Challenge)
        challenge = repo.load(user.id, challenge_id)
        challenge.add_section("Week 1")
        repo.save(challenge)
    """

    def __init__(self, db: Session, aggregate_cls: Type[A]):
        self.db = db
        self.aggregate_cls = aggregate_cls
        self.kind = aggregate_cls.KIND

    @contextmanager
    def _storage_errors(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Storage failure on %s %s: %s", action, self.kind, exc)
            raise StorageError(f"Storage error while trying to {action} {self.aggregate_cls.LABEL.lower()}") from exc

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.aggregate_cls.LABEL} not found")

    def _hydrate(self, row: AggregateDocument) -> A:
        aggregate = self.aggregate_cls.from_document(
            row.body,
            version=row.version,
            is_deleted=row.is_deleted,
            natural_key=row.natural_key,
        )
        aggregate.mark_persisted(row.version)
        return aggregate

    # ── Reads ──

    def load(self, owner_id: int, aggregate_id: str, include_deleted: bool = False) -> A:
        """
        Загрузить агрегат владельца

        Чужой и несуществующий документ неразличимы: оба дают NotFoundError.
        """
        require_owner(owner_id)
        if not is_valid_id(aggregate_id):
            raise self._not_found()

        with self._storage_errors("load"):
            row = self.db.execute(
                select(AggregateDocument).where(
                    AggregateDocument.id == aggregate_id,
                    AggregateDocument.owner_id == owner_id,
                    AggregateDocument.kind == self.kind,
                )
            ).scalar_one_or_none()

        if row is None or (row.is_deleted and not include_deleted):
            raise self._not_found()
        return self._hydrate(row)

    def find_by_natural_key(self, owner_id: int, natural_key: str) -> A | None:
        require_owner(owner_id)
        with self._storage_errors("load"):
            row = self.db.execute(
                select(AggregateDocument).where(
                    AggregateDocument.kind == self.kind,
                    AggregateDocument.owner_id == owner_id,
                    AggregateDocument.natural_key == natural_key,
                )
            ).scalar_one_or_none()
        return self._hydrate(row) if row is not None else None

    def list(
        self,
        owner_id: int,
        include_deleted: bool = False,
        key_from: str | None = None,
        key_to: str | None = None,
        newest_first: bool = True,
    ) -> List[A]:
        """
        Все агрегаты владельца

        key_from / key_to фильтруют по natural_key (включительно); для
        дневных расписаний ключ - ISO дата, поэтому строковое сравнение
        совпадает с календарным.
        """
        require_owner(owner_id)
        query = select(AggregateDocument).where(
            AggregateDocument.kind == self.kind,
            AggregateDocument.owner_id == owner_id,
        )
        if not include_deleted:
            query = query.where(AggregateDocument.is_deleted.is_(False))
        if key_from is not None:
            query = query.where(AggregateDocument.natural_key >= key_from)
        if key_to is not None:
            query = query.where(AggregateDocument.natural_key <= key_to)

        if key_from is not None or key_to is not None:
            query = query.order_by(AggregateDocument.natural_key.asc())
        elif newest_first:
            query = query.order_by(AggregateDocument.created_at.desc())
        else:
            query = query.order_by(AggregateDocument.created_at.asc())

        with self._storage_errors("list"):
            rows = self.db.execute(query).scalars().all()
        return [self._hydrate(row) for row in rows]

    # ── Writes ──

    def save(self, aggregate: A) -> A:
        """
        Записать агрегат целиком одной операцией

        Несохранённый агрегат (version == 0) вставляется с version = 1,
        иначе выполняется UPDATE с проверкой версии. Сохранение без
        изменений ничего не пишет.
        """
        require_owner(aggregate.owner_id)
        if aggregate.version > 0 and not aggregate.is_dirty():
            return aggregate

        if aggregate.version == 0:
            self._insert(aggregate)
            return aggregate

        next_version = aggregate.version + 1
        with self._storage_errors("save"):
            result = self.db.execute(
                update(AggregateDocument)
                .where(
                    AggregateDocument.id == aggregate.id,
                    AggregateDocument.owner_id == aggregate.owner_id,
                    AggregateDocument.kind == self.kind,
                    AggregateDocument.version == aggregate.version,
                )
                .values(
                    body=aggregate.to_document(),
                    version=next_version,
                    is_deleted=aggregate.is_deleted,
                    natural_key=aggregate.natural_key,
                    updated_at=aggregate.updated_at,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                logger.warning(
                    "Version conflict on %s %s (owner=%s, loaded version=%s)",
                    self.kind, aggregate.id, aggregate.owner_id, aggregate.version,
                )
                raise ConflictError(
                    f"{self.aggregate_cls.LABEL} was modified by another request. Reload and try again"
                )
            self.db.commit()

        aggregate.mark_persisted(next_version)
        logger.info("Saved %s %s (owner=%s, version=%s)", self.kind, aggregate.id, aggregate.owner_id, next_version)
        return aggregate

    def _insert(self, aggregate: A) -> None:
        row = AggregateDocument(
            id=aggregate.id,
            kind=self.kind,
            owner_id=aggregate.owner_id,
            natural_key=aggregate.natural_key,
            version=1,
            is_deleted=aggregate.is_deleted,
            body=aggregate.to_document(),
            created_at=aggregate.created_at,
            updated_at=aggregate.updated_at,
        )
        with self._storage_errors("create"):
            self.db.add(row)
            self.db.commit()
        aggregate.mark_persisted(1)
        logger.info("Created %s %s (owner=%s)", self.kind, aggregate.id, aggregate.owner_id)

    def load_or_create(self, owner_id: int, natural_key: str, factory: Callable[[], A]) -> A:
        """
        Вернуть агрегат по natural key или создать пустой

        Если параллельный запрос успел создать тот же ключ, возвращается
        его документ.
        """
        existing = self.find_by_natural_key(owner_id, natural_key)
        if existing is not None:
            return existing

        aggregate = factory()
        aggregate.natural_key = natural_key
        try:
            self._insert(aggregate)
        except StorageError as exc:
            if not isinstance(exc.__cause__, IntegrityError):
                raise
            winner = self.find_by_natural_key(owner_id, natural_key)
            if winner is None:
                raise
            return winner
        return aggregate

    def upsert_by_natural_key(self, owner_id: int, natural_key: str, aggregate: A) -> A:
        """
        Перезаписать документ по natural key целиком (без слияния)

        Существующий документ сохраняет свой id и created_at; всё остальное
        берётся из переданного агрегата.
        """
        require_owner(owner_id)
        aggregate.natural_key = natural_key
        with self._storage_errors("load"):
            row = self.db.execute(
                select(AggregateDocument).where(
                    AggregateDocument.kind == self.kind,
                    AggregateDocument.owner_id == owner_id,
                    AggregateDocument.natural_key == natural_key,
                )
            ).scalar_one_or_none()

        if row is None:
            self._insert(aggregate)
            return aggregate

        current = self._hydrate(row)
        aggregate.id = current.id
        aggregate.created_at = current.created_at
        aggregate.version = current.version
        aggregate.touch()
        # force write even when the new body equals the stored one
        aggregate._snapshot = None
        return self.save(aggregate)

    def delete(self, owner_id: int, aggregate_id: str) -> None:
        """Удалить документ вместе со всеми вложенными коллекциями"""
        require_owner(owner_id)
        if not is_valid_id(aggregate_id):
            raise self._not_found()

        with self._storage_errors("delete"):
            result = self.db.execute(
                delete(AggregateDocument)
                .where(
                    AggregateDocument.id == aggregate_id,
                    AggregateDocument.owner_id == owner_id,
                    AggregateDocument.kind == self.kind,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise self._not_found()
            self.db.commit()
        logger.info("Deleted %s %s (owner=%s)", self.kind, aggregate_id, owner_id)

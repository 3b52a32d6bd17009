"""
Aggregate root - one persisted document with all of its nested collections.

Nested entries are never persisted on their own: a mutation is applied to the
in-memory aggregate, `updated_at` is stamped on every level from the mutated
entry up to the root, and the repository then writes the whole document in a
single statement.
"""
from datetime import datetime
from typing import Any, ClassVar, Dict

from lifeboard.domain.errors import require_owner
from lifeboard.domain.identity import new_id
from lifeboard.utils.dates import utcnow, to_iso, from_iso


class AggregateRoot:
    """
    Базовый класс агрегата

    Подклассы задают KIND (тип документа в хранилище) и реализуют
    body_to_dict() / load_body().
    """
    KIND: ClassVar[str] = ""
    LABEL: ClassVar[str] = "Document"

    def __init__(
        self,
        owner_id: int,
        id: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        version: int = 0,
        is_deleted: bool = False,
        natural_key: str | None = None,
    ):
        require_owner(owner_id)
        now = utcnow()
        self.id = id or new_id()
        self.owner_id = owner_id
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at
        # 0 = ещё не сохранён
        self.version = version
        self.is_deleted = is_deleted
        self.natural_key = natural_key
        self._snapshot: Dict[str, Any] | None = None

    # ── Timestamps ──

    def touch(self, *entries) -> datetime:
        """
        Stamp updated_at on the given nested entries and on the root

        updated_at never moves backwards.
        """
        now = utcnow()
        for entry in entries:
            entry.touch(now)
        if now > self.updated_at:
            self.updated_at = now
        return self.updated_at

    # ── Serialization ──

    def body_to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    def load_body(self, body: Dict[str, Any]) -> None:
        raise NotImplementedError

    def to_document(self) -> Dict[str, Any]:
        """Whole aggregate as a JSON-compatible document"""
        doc = {
            "id": self.id,
            "owner_id": self.owner_id,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }
        doc.update(self.body_to_dict())
        return doc

    @classmethod
    def from_document(
        cls,
        doc: Dict[str, Any],
        version: int = 0,
        is_deleted: bool = False,
        natural_key: str | None = None,
    ) -> "AggregateRoot":
        aggregate = cls.__new__(cls)
        AggregateRoot.__init__(
            aggregate,
            owner_id=doc["owner_id"],
            id=doc["id"],
            created_at=from_iso(doc.get("created_at")),
            updated_at=from_iso(doc.get("updated_at")),
            version=version,
            is_deleted=is_deleted,
            natural_key=natural_key,
        )
        aggregate.load_body(doc)
        return aggregate

    def to_response(self) -> Dict[str, Any]:
        """Документ для ответа API (с версией)"""
        doc = self.to_document()
        doc["version"] = self.version
        return doc

    # ── Change tracking (used by the repository) ──

    def mark_persisted(self, version: int) -> None:
        self.version = version
        self._snapshot = self.to_document()

    def is_dirty(self) -> bool:
        return self._snapshot is None or self._snapshot != self.to_document()

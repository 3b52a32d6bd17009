"""
Owned collections - ordered, id-keyed containers of nested entries.

An entry lives only inside the collection of its parent aggregate. Mutations
here are in-memory only; they become durable when the whole aggregate is
saved by the repository.

Ordered collections keep `order` equal to 1..N (no gaps) after every
insert/remove.
"""
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, ClassVar, Dict, Generic, Iterator, List, Type, TypeVar

from lifeboard.domain.errors import ValidationError, NotFoundError, DuplicateNameError
from lifeboard.domain.identity import new_id
from lifeboard.utils.dates import to_iso


@dataclass(kw_only=True)
class Entry:
    """
    Базовая вложенная запись

    Подклассы объявляют:
    - MUTABLE_FIELDS: поля, которые можно менять через update()
    - NAME_FIELD: поле для проверки уникальности имени (если нужно)
    - LABEL: человекочитаемое название типа для сообщений об ошибках
    """
    id: str | None = None

    MUTABLE_FIELDS: ClassVar[frozenset] = frozenset()
    NAME_FIELD: ClassVar[str] = "name"
    LABEL: ClassVar[str] = "Entry"

    def validate(self) -> None:
        """Проверить инварианты записи (ValidationError при нарушении)"""
        pass

    def touch(self, now: datetime) -> None:
        """Обновить updated_at, если у записи есть такое поле"""
        if hasattr(self, "updated_at"):
            previous = getattr(self, "updated_at")
            setattr(self, "updated_at", now if previous is None or now > previous else previous)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _encode(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        raise NotImplementedError


def _encode(value: Any) -> Any:
    if isinstance(value, OwnedCollection):
        return value.to_list()
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, Entry):
        return value.to_dict()
    if isinstance(value, list):
        return [_encode(v) for v in value]
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    return value


T = TypeVar("T", bound=Entry)


class OwnedCollection(Generic[T]):
    """
    Ordered container of entries owned by one aggregate

    Args:
        entry_cls: класс записи (для десериализации и сообщений)
        ordered: поддерживать поле order = 1..N
    """

    def __init__(self, entry_cls: Type[T], items: List[T] | None = None, ordered: bool = False):
        self.entry_cls = entry_cls
        self.ordered = ordered
        self._items: List[T] = list(items or [])

    # ── Read ──

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def count(self) -> int:
        return len(self._items)

    def get(self, entry_id: str) -> T | None:
        for item in self._items:
            if item.id == entry_id:
                return item
        return None

    def find_by_id(self, entry_id: str) -> T:
        item = self.get(entry_id)
        if item is None:
            raise NotFoundError(f"{self.entry_cls.LABEL} not found")
        return item

    # ── Mutations ──

    def ensure_unique_name(self, name: str, exclude_id: str | None = None) -> None:
        """Case-insensitive scan of sibling names"""
        field = self.entry_cls.NAME_FIELD
        if name is not None and not isinstance(name, str):
            raise ValidationError(f"{self.entry_cls.LABEL} {field} must be a string")
        needle = (name or "").strip().lower()
        for item in self._items:
            if exclude_id is not None and item.id == exclude_id:
                continue
            if (getattr(item, field) or "").strip().lower() == needle:
                raise DuplicateNameError(
                    f"A {self.entry_cls.LABEL.lower()} with this name already exists"
                )

    def insert(self, entry: T, unique_name: bool = False, keep_id: bool = False) -> T:
        """
        Добавить запись в конец коллекции

        Args:
            entry: новая запись
            unique_name: проверить уникальность имени среди соседей
            keep_id: сохранить переданный id (иначе сгенерировать новый)

        Returns:
            сохранённая запись (с id и order)
        """
        entry.validate()
        if unique_name:
            self.ensure_unique_name(getattr(entry, self.entry_cls.NAME_FIELD))

        if keep_id and entry.id:
            if self.get(entry.id) is not None:
                raise ValidationError(f"Duplicate {self.entry_cls.LABEL.lower()} id: {entry.id}")
        else:
            entry.id = new_id()

        if self.ordered:
            entry.order = len(self._items) + 1
        self._items.append(entry)
        return entry

    def update(self, entry_id: str, patch: Dict[str, Any], unique_name: bool = False) -> T:
        """
        Partial update: only the keys present in patch are written

        Unknown or immutable keys are rejected. On validation failure the
        entry is left exactly as it was.
        """
        entry = self.find_by_id(entry_id)

        unknown = sorted(set(patch) - self.entry_cls.MUTABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Unknown or read-only {self.entry_cls.LABEL.lower()} fields: {', '.join(unknown)}"
            )

        name_field = self.entry_cls.NAME_FIELD
        if unique_name and name_field in patch:
            self.ensure_unique_name(patch[name_field], exclude_id=entry_id)

        previous = {key: getattr(entry, key) for key in patch}
        for key, value in patch.items():
            setattr(entry, key, value)
        try:
            entry.validate()
        except ValidationError:
            for key, value in previous.items():
                setattr(entry, key, value)
            raise
        return entry

    def remove(self, entry_id: str) -> T:
        """Удалить запись; в упорядоченной коллекции перенумеровать оставшиеся"""
        entry = self.find_by_id(entry_id)
        self._items.remove(entry)
        if self.ordered:
            self.renumber()
        return entry

    def renumber(self) -> None:
        for index, item in enumerate(self._items, start=1):
            item.order = index

    def replace_all(self, entries: List[T]) -> None:
        """Заменить содержимое целиком (ids сохраняются, если заданы)"""
        fresh = OwnedCollection(self.entry_cls, ordered=self.ordered)
        for entry in entries:
            fresh.insert(entry, keep_id=True)
        self._items = fresh._items

    # ── Serialization ──

    def to_list(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self._items]

    @classmethod
    def from_list(cls, entry_cls: Type[T], data: List[Dict[str, Any]] | None, ordered: bool = False) -> "OwnedCollection[T]":
        return cls(entry_cls, [entry_cls.from_dict(item) for item in (data or [])], ordered=ordered)

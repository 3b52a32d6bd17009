"""
Festival aggregate - a named bucket list of items with prices.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict

from lifeboard.domain.aggregate import AggregateRoot
from lifeboard.domain.collection import Entry, OwnedCollection
from lifeboard.domain.errors import ValidationError
from lifeboard.utils.dates import from_iso, utcnow
from lifeboard.utils.validation import require_text, optional_text

FESTIVAL_NAME_MAX = 120
FESTIVAL_DESCRIPTION_MAX = 500
ITEM_LABEL_MAX = 200


def _check_price(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("Price must be a number")
    if value < 0:
        raise ValidationError("Price cannot be negative")
    return value


@dataclass(kw_only=True)
class BucketItem(Entry):
    label: str
    price: float = 0
    completed: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    MUTABLE_FIELDS = frozenset({"label", "price", "completed"})
    NAME_FIELD = "label"
    LABEL = "Item"

    def validate(self) -> None:
        self.label = require_text(self.label, "Label is required", ITEM_LABEL_MAX, "Label")
        _check_price(self.price)
        if not isinstance(self.completed, bool):
            raise ValidationError("Completed must be a boolean")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BucketItem":
        return cls(
            id=data["id"],
            label=data["label"],
            price=data.get("price", 0),
            completed=data.get("completed", False),
            created_at=from_iso(data.get("created_at")),
            updated_at=from_iso(data.get("updated_at")),
        )


class Festival(AggregateRoot):
    """Праздник со списком покупок/дел"""
    KIND = "festival"
    LABEL = "Festival"

    MUTABLE_FIELDS = frozenset({"name", "description"})

    def __init__(self, owner_id: int, name: str, description: str = "", **kwargs):
        super().__init__(owner_id, **kwargs)
        self.name = require_text(name, "Name is required", FESTIVAL_NAME_MAX, "Name")
        self.description = optional_text(description, FESTIVAL_DESCRIPTION_MAX, "Description")
        self.items: OwnedCollection[BucketItem] = OwnedCollection(BucketItem)

    def update(self, **changes) -> None:
        unknown = sorted(set(changes) - self.MUTABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown or read-only festival fields: {', '.join(unknown)}")
        if "name" in changes:
            changes["name"] = require_text(changes["name"], "Name is required", FESTIVAL_NAME_MAX, "Name")
        if "description" in changes:
            changes["description"] = optional_text(changes["description"], FESTIVAL_DESCRIPTION_MAX, "Description")
        for key, value in changes.items():
            setattr(self, key, value)
        self.touch()

    def add_item(self, label: str, price=0) -> BucketItem:
        now = utcnow()
        item = self.items.insert(BucketItem(
            label=label,
            price=0 if price is None else price,
            created_at=now,
            updated_at=now,
        ))
        self.touch()
        return item

    def update_item(self, item_id: str, patch: Dict[str, Any]) -> BucketItem:
        item = self.items.update(item_id, patch)
        self.touch(item)
        return item

    def remove_item(self, item_id: str) -> None:
        self.items.remove(item_id)
        self.touch()

    def totals(self) -> Dict[str, str]:
        """Суммы по списку (строки Decimal, как в остальном API)"""
        total = sum((Decimal(str(i.price)) for i in self.items), Decimal("0"))
        done = sum((Decimal(str(i.price)) for i in self.items if i.completed), Decimal("0"))
        return {
            "total": str(total),
            "completed": str(done),
            "remaining": str(total - done),
        }

    def body_to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "items": self.items.to_list(),
        }

    def load_body(self, body: Dict[str, Any]) -> None:
        self.name = body["name"]
        self.description = body.get("description") or ""
        self.items = OwnedCollection.from_list(BucketItem, body.get("items"))

"""
Festival service - bucket lists with priced items.
"""
import logging
from typing import Any, Dict, List

from lifeboard.application.documents import DocumentService
from lifeboard.domain.festival import Festival, BucketItem

logger = logging.getLogger(__name__)


class FestivalService(DocumentService[Festival]):
    aggregate_cls = Festival

    def create(self, owner_id: int, name: str, description: str = "", items: List[Dict[str, Any]] | None = None) -> Festival:
        festival = Festival(owner_id, name=name, description=description or "")
        for item in items or []:
            festival.add_item(item.get("label"), item.get("price", 0))
        self.repo.save(festival)
        logger.info("Festival %s created for user %s", festival.id, owner_id)
        return festival

    def list(self, owner_id: int) -> List[Festival]:
        return self.repo.list(owner_id)

    def update(self, owner_id: int, festival_id: str, changes: Dict[str, Any]) -> Festival:
        festival, _ = self.apply(owner_id, festival_id, lambda f: f.update(**changes))
        return festival

    def delete(self, owner_id: int, festival_id: str) -> None:
        self.repo.delete(owner_id, festival_id)

    def add_item(self, owner_id: int, festival_id: str, label: str, price=0) -> BucketItem:
        _, item = self.apply(owner_id, festival_id, lambda f: f.add_item(label, price))
        return item

    def update_item(self, owner_id: int, festival_id: str, item_id: str, patch: Dict[str, Any]) -> BucketItem:
        _, item = self.apply(owner_id, festival_id, lambda f: f.update_item(item_id, patch))
        return item

    def remove_item(self, owner_id: int, festival_id: str, item_id: str) -> Festival:
        festival, _ = self.apply(owner_id, festival_id, lambda f: f.remove_item(item_id))
        return festival

"""Device-local cart persistence used while the user is anonymous"""

import logging
from typing import Optional

from ..errors import LocalStorageError
from ..models import ItemType, LineItem
from ..storage import LocalStorage
from .base import CartAdapter

logger = logging.getLogger(__name__)

CART_KEY = "cart"


class EphemeralCartAdapter(CartAdapter):
    """
    Cart kept in local storage.

    Synchronous underneath, exposed through the async adapter contract so the
    store can swap it for the durable adapter.
    """

    name = "ephemeral"

    def __init__(self, storage: LocalStorage):
        self._storage = storage

    def _read(self) -> list[LineItem]:
        raw = self._storage.get(CART_KEY)
        if not raw:
            return []
        try:
            return [LineItem.from_dict(entry) for entry in raw]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Discarding unreadable local cart: {e}")
            return []

    def _write(self, items: list[LineItem]) -> list[LineItem]:
        try:
            self._storage.set(CART_KEY, [item.to_dict() for item in items])
        except OSError as e:
            raise LocalStorageError(f"Could not save local cart: {e}") from e
        return list(items)

    async def load(self) -> list[LineItem]:
        return self._read()

    async def save(self, items: list[LineItem]) -> list[LineItem]:
        return self._write(items)

    async def put(self, item: LineItem) -> list[LineItem]:
        items = self._read()
        index = next((i for i, existing in enumerate(items) if existing.id == item.id), None)
        if index is None:
            items.append(item)
        else:
            items[index] = item
        return self._write(items)

    async def update_quantity(self, item: LineItem) -> list[LineItem]:
        return await self.put(item)

    async def delete(
        self,
        catalog_item_id: str,
        item_type: ItemType,
        line_id: Optional[str] = None,
    ) -> list[LineItem]:
        items = [
            item for item in self._read()
            if not _matches(item, catalog_item_id, item_type, line_id)
        ]
        return self._write(items)

    async def clear(self) -> list[LineItem]:
        return self._write([])


def _matches(
    item: LineItem,
    catalog_item_id: str,
    item_type: ItemType,
    line_id: Optional[str],
) -> bool:
    if line_id is not None:
        return item.id == line_id
    return item.catalog_item_id == str(catalog_item_id) and item.item_type == ItemType(item_type)

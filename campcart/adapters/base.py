"""Persistence adapter interface"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import ItemType, LineItem


class CartAdapter(ABC):
    """
    Read/write contract shared by the ephemeral and durable cart backends.

    Every mutating call returns the canonical item list as committed by the
    backend. Failures are raised as `BackendError` subclasses and leave the
    committed state unchanged.
    """

    name: str = "adapter"

    @abstractmethod
    async def load(self) -> list[LineItem]:
        """Read the committed cart"""

    @abstractmethod
    async def save(self, items: list[LineItem]) -> list[LineItem]:
        """Replace the whole cart"""

    @abstractmethod
    async def put(self, item: LineItem) -> list[LineItem]:
        """Insert an item, replacing any item with the same id"""

    @abstractmethod
    async def update_quantity(self, item: LineItem) -> list[LineItem]:
        """Commit a new quantity and total for an existing item"""

    @abstractmethod
    async def delete(
        self,
        catalog_item_id: str,
        item_type: ItemType,
        line_id: Optional[str] = None,
    ) -> list[LineItem]:
        """Remove one line item, or every line of the catalog item when no id is given"""

    @abstractmethod
    async def clear(self) -> list[LineItem]:
        """Empty the cart"""

    async def close(self) -> None:
        """Release held resources"""

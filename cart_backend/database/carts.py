"""Cart storage for the cart service"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from campcart.conflicts import find_conflicts
from campcart.errors import CartValidationError
from campcart.models import ItemType, LineItem
from campcart.pricing import price_line_item
from campcart.store import validate_line_item

from ..models.cart import Cart, CartLineItem

logger = logging.getLogger(__name__)


def to_line_item(item: CartLineItem) -> LineItem:
    """Convert the API model to the cart library's line item"""
    return LineItem.from_dict(item.model_dump(mode="json", by_alias=True, exclude_none=True))


def from_line_item(item: LineItem) -> CartLineItem:
    return CartLineItem.model_validate(item.to_dict())


class CartDatabase:
    """In-memory account carts, one per user"""

    def __init__(self):
        self.carts: dict[str, Cart] = {}

    def get_or_create_cart(self, user_id: str) -> Cart:
        """Get the user's cart, creating an empty one on first use"""
        cart = self.carts.get(user_id)
        if cart is None:
            now = datetime.utcnow()
            cart = Cart(user_id=user_id, items=[], created_at=now, updated_at=now)
            self.carts[user_id] = cart
        return cart

    def normalize(self, item: CartLineItem) -> LineItem:
        """Validate the item and recompute its id and prices from its own fields"""
        line_item = to_line_item(item)
        validate_line_item(line_item)
        return price_line_item(replace(line_item, id=line_item.key))

    def find_conflicts(self, user_id: str, item: LineItem) -> list[LineItem]:
        """Items in the user's cart overlapping the given reservation"""
        cart = self.get_or_create_cart(user_id)
        return find_conflicts(
            [to_line_item(i) for i in cart.items],
            item.item_type,
            item.catalog_item_id,
            item.start,
            item.end,
            exclude_id=item.id,
        )

    def put_item(self, user_id: str, item: LineItem) -> Cart:
        """Insert an item, replacing the one with the same id"""
        cart = self.get_or_create_cart(user_id)
        stored = from_line_item(item)
        index = next((i for i, existing in enumerate(cart.items) if existing.id == item.id), None)
        if index is None:
            cart.items.append(stored)
        else:
            cart.items[index] = stored
        self._recalculate_totals(cart)
        return cart

    def update_item_quantity(
        self,
        user_id: str,
        catalog_item_id: str,
        item_type: ItemType,
        quantity: int,
        line_id: Optional[str] = None,
    ) -> Optional[Cart]:
        """
        Update item quantity; returns None when no such item is in the cart.

        Raises:
            CartValidationError: the new quantity exceeds the item's capacity
        """
        cart = self.get_or_create_cart(user_id)
        matches = [i for i in cart.items if _matches(i, catalog_item_id, item_type, line_id)]
        if not matches:
            return None

        if quantity <= 0:
            return self.remove_items(user_id, catalog_item_id, item_type, line_id)

        for item in matches:
            validate_line_item(replace(to_line_item(item), quantity=quantity))

        for item in matches:
            item.quantity = quantity
            item.total_price = item.unit_rate * quantity

        self._recalculate_totals(cart)
        return cart

    def remove_items(
        self,
        user_id: str,
        catalog_item_id: str,
        item_type: ItemType,
        line_id: Optional[str] = None,
    ) -> Cart:
        """Remove one line, or every line of a catalog item when no id is given"""
        cart = self.get_or_create_cart(user_id)
        cart.items = [i for i in cart.items if not _matches(i, catalog_item_id, item_type, line_id)]
        self._recalculate_totals(cart)
        return cart

    def clear_cart(self, user_id: str) -> Cart:
        """Clear all items from cart"""
        cart = self.get_or_create_cart(user_id)
        cart.items = []
        self._recalculate_totals(cart)
        return cart

    def merge_items(self, user_id: str, items: list[CartLineItem]) -> tuple[Cart, list[str]]:
        """
        Import an anonymous cart.

        Items with an id already in the cart replace it, so repeating an
        import does not duplicate lines. Items overlapping a different
        reservation of the same catalog item, or failing validation, are
        skipped.

        Returns:
            The cart and the ids of skipped items
        """
        cart = self.get_or_create_cart(user_id)
        skipped = []
        for incoming in items:
            try:
                item = self.normalize(incoming)
            except CartValidationError as e:
                logger.warning(f"Skipping invalid migrated item {incoming.id}: {e}")
                skipped.append(incoming.id or "")
                continue
            if self.find_conflicts(user_id, item):
                skipped.append(item.id)
                continue
            self.put_item(user_id, item)

        if skipped:
            logger.warning(f"Skipped {len(skipped)} items while migrating cart for {user_id}")
        return cart, skipped

    def _recalculate_totals(self, cart: Cart) -> None:
        """Recalculate cart totals"""
        cart.subtotal = round(sum(item.total_price for item in cart.items), 2)
        cart.item_count = sum(item.quantity for item in cart.items)
        cart.updated_at = datetime.utcnow()


def _matches(
    item: CartLineItem,
    catalog_item_id: str,
    item_type: ItemType,
    line_id: Optional[str],
) -> bool:
    if item.catalog_item_id != catalog_item_id or item.item_type != ItemType(item_type):
        return False
    return line_id is None or item.id == line_id


# Singleton instance
cart_db = CartDatabase()

"""
Cart Store

Owns the in-memory cart. Every mutation is validated, priced and committed
through the active persistence adapter before memory changes and observers
are notified, so listeners never see uncommitted state.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Awaitable, Callable, Optional
import datetime as dt

from .adapters.base import CartAdapter
from .conflicts import find_conflicts, is_available
from .errors import CartError, CartValidationError, ConflictError, ItemNotFoundError
from .models import ItemType, LineItem
from .pricing import price_line_item

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """What happened to the cart"""
    LOADED = "loaded"
    ADDED = "added"
    REPLACED = "replaced"
    UPDATED = "updated"
    REMOVED = "removed"
    CLEARED = "cleared"
    BACKEND_CHANGED = "backend_changed"
    FAILED = "failed"


@dataclass(frozen=True)
class CartEvent:
    """Notification sent to cart observers"""
    kind: EventKind
    items: tuple[LineItem, ...]
    item: Optional[LineItem] = None
    error: Optional[Exception] = None


@dataclass(frozen=True)
class BookingSummary:
    """Cart snapshot handed to checkout"""
    lodging: tuple[LineItem, ...]
    activities: tuple[LineItem, ...]
    equipment: tuple[LineItem, ...]
    subtotal: float
    tax: float
    service_fee: float
    total: float
    currency: str

    @property
    def items(self) -> tuple[LineItem, ...]:
        return self.lodging + self.activities + self.equipment


CartListener = Callable[[CartEvent], None]


def validate_line_item(item: LineItem) -> None:
    """
    Reject malformed reservations before they reach pricing or persistence.

    Raises:
        CartValidationError: missing or ill-ordered dates, non-positive
            counts, negative rate or more people/units than capacity
    """
    if item.base_rate < 0:
        raise CartValidationError(f"Invalid base rate for {item.name}: {item.base_rate}")

    if item.item_type == ItemType.LODGING:
        _require_range(item.check_in, item.check_out, "check-out", "check-in")
        _require_count(item.guests, "guests", item.capacity)
        _require_count(item.quantity, "quantity")
    elif item.item_type == ItemType.ACTIVITY:
        if item.date is None or item.time is None:
            raise CartValidationError("Activity bookings need a date and a time")
        _require_count(item.participants, "participants", item.capacity)
        _require_count(item.quantity, "quantity")
    else:
        _require_range(item.rental_start, item.rental_end, "rental end", "rental start")
        _require_count(item.quantity, "quantity", item.capacity)


def _require_range(start: Optional[dt.date], end: Optional[dt.date], end_name: str, start_name: str) -> None:
    if start is None or end is None:
        raise CartValidationError(f"Both {start_name} and {end_name} dates are required")
    if end <= start:
        raise CartValidationError(f"The {end_name} date must be after the {start_name} date")


def _require_count(value: Optional[int], label: str, capacity: Optional[int] = None) -> None:
    if value is None or value < 1:
        raise CartValidationError(f"Number of {label} must be at least 1")
    if capacity is not None and value > capacity:
        raise CartValidationError(f"Only {capacity} {label} allowed, got {value}")


class CartStore:
    """
    Ordered collection of line items for the active identity.

    Usage:
        store = CartStore(EphemeralCartAdapter(storage))
        await store.load()
        unsubscribe = store.subscribe(render)
        await store.add(lodging_item(site, check_in, check_out, guests=2))
    """

    def __init__(
        self,
        adapter: CartAdapter,
        tax_rate: float = 0.10,
        service_fee: float = 2.50,
        currency: str = "EUR",
    ):
        self._adapter = adapter
        self._items: list[LineItem] = []
        self._listeners: list[CartListener] = []
        self.tax_rate = tax_rate
        self.service_fee = service_fee
        self.currency = currency

    @property
    def adapter(self) -> CartAdapter:
        return self._adapter

    def use_adapter(self, adapter: CartAdapter, items: Optional[list[LineItem]] = None) -> None:
        """
        Switch the active persistence backend.

        Args:
            adapter: Backend to commit to from now on
            items: Committed contents of the new backend, if already known
        """
        logger.info(f"Cart backend switched from {self._adapter.name} to {adapter.name}")
        self._adapter = adapter
        if items is not None:
            self._items = list(items)
        self._notify(CartEvent(EventKind.BACKEND_CHANGED, self.snapshot()))

    async def load(self) -> tuple[LineItem, ...]:
        """Replace memory with the backend's committed cart"""
        await self._commit(EventKind.LOADED, self._adapter.load())
        return self.snapshot()

    # ==================== Queries ====================

    def snapshot(self) -> tuple[LineItem, ...]:
        """Immutable copy of the current line items"""
        return tuple(self._items)

    def get(self, item_id: str) -> Optional[LineItem]:
        """Get a line item by id"""
        return next((item for item in self._items if item.id == item_id), None)

    @property
    def total(self) -> float:
        return sum(item.total_price for item in self._items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def is_available(
        self,
        item_type: ItemType,
        catalog_item_id: str,
        start: dt.date,
        end: Optional[dt.date] = None,
    ) -> bool:
        """Check a candidate reservation against the cart"""
        return is_available(self._items, item_type, catalog_item_id, start, end)

    def booking_summary(self) -> BookingSummary:
        """Group items by type and compute checkout totals"""
        items = self.snapshot()
        subtotal = self.total
        tax = subtotal * self.tax_rate
        fee = self.service_fee if items else 0.0
        return BookingSummary(
            lodging=tuple(i for i in items if i.item_type == ItemType.LODGING),
            activities=tuple(i for i in items if i.item_type == ItemType.ACTIVITY),
            equipment=tuple(i for i in items if i.item_type == ItemType.EQUIPMENT),
            subtotal=round(subtotal, 2),
            tax=round(tax, 2),
            service_fee=fee,
            total=round(subtotal + tax + fee, 2),
            currency=self.currency,
        )

    # ==================== Mutations ====================

    async def add(self, item: LineItem) -> LineItem:
        """
        Add a reservation, or replace the one with the same composite key.

        Args:
            item: Line item built from a catalog item; id and prices are
                recomputed here

        Returns:
            The committed, priced line item

        Raises:
            CartValidationError: malformed input
            ConflictError: overlaps another reservation of the same item
            BackendError: the commit failed; the cart is unchanged
        """
        validate_line_item(item)
        item = replace(item, id=item.key)

        conflicts = find_conflicts(
            self._items,
            item.item_type,
            item.catalog_item_id,
            item.start,
            item.end,
            exclude_id=item.id,
        )
        if conflicts:
            raise ConflictError(
                f"{item.name} is already in your cart for overlapping dates",
                tuple(c.id for c in conflicts),
            )

        priced = price_line_item(item)
        kind = EventKind.REPLACED if self.get(priced.id) else EventKind.ADDED
        await self._commit(kind, self._adapter.put(priced), priced)
        return priced

    async def remove(self, item_id: str) -> LineItem:
        """Remove a line item by id"""
        item = self._require(item_id)
        await self._commit(
            EventKind.REMOVED,
            self._adapter.delete(item.catalog_item_id, item.item_type, line_id=item.id),
            item,
        )
        return item

    async def update_quantity(self, item_id: str, quantity: int) -> Optional[LineItem]:
        """
        Change the quantity of a line item.

        A quantity of zero or less removes the item. Otherwise the total is
        rescaled from the unit rate.
        """
        if quantity <= 0:
            await self.remove(item_id)
            return None

        item = self._require(item_id)
        if item.item_type == ItemType.EQUIPMENT:
            _require_count(quantity, "quantity", item.capacity)
        updated = replace(item, quantity=quantity, total_price=item.unit_rate * quantity)
        await self._commit(EventKind.UPDATED, self._adapter.update_quantity(updated), updated)
        return updated

    async def clear(self) -> None:
        """Remove every line item"""
        await self._commit(EventKind.CLEARED, self._adapter.clear())

    # ==================== Observers ====================

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: CartEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Cart listener failed on {event.kind.value} event")

    # ==================== Internals ====================

    def _require(self, item_id: str) -> LineItem:
        item = self.get(item_id)
        if item is None:
            raise ItemNotFoundError(f"Item {item_id} is not in the cart")
        return item

    async def _commit(
        self,
        kind: EventKind,
        operation: Awaitable[list[LineItem]],
        item: Optional[LineItem] = None,
    ) -> None:
        try:
            items = await operation
        except CartError as e:
            logger.warning(f"Cart {kind.value} via {self._adapter.name} failed: {e}")
            self._notify(CartEvent(EventKind.FAILED, self.snapshot(), item, e))
            raise
        self._items = list(items)
        self._notify(CartEvent(kind, self.snapshot(), item))

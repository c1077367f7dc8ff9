"""Booking conflict detection against the local cart"""

import datetime as dt
from typing import Iterable, Optional

from .models import ItemType, LineItem


def ranges_overlap(start1: dt.date, end1: dt.date, start2: dt.date, end2: dt.date) -> bool:
    """Half-open interval intersection: the end date itself is free"""
    return start1 < end2 and start2 < end1


def conflicts_with(
    existing: LineItem,
    item_type: ItemType,
    start: dt.date,
    end: Optional[dt.date] = None,
) -> bool:
    """Check one existing line item against a candidate reservation"""
    if existing.item_type == ItemType.ACTIVITY:
        # Same calendar day blocks regardless of time slot
        return existing.date == start
    return ranges_overlap(start, end, existing.start, existing.end)


def find_conflicts(
    items: Iterable[LineItem],
    item_type: ItemType,
    catalog_item_id: str,
    start: dt.date,
    end: Optional[dt.date] = None,
    exclude_id: Optional[str] = None,
) -> list[LineItem]:
    """
    Line items of the same catalog item that overlap the candidate.

    Args:
        items: Current cart contents
        item_type: Candidate reservation type
        catalog_item_id: Candidate catalog item
        start: Check-in, rental start or activity date
        end: Check-out or rental end; unused for activities
        exclude_id: Line item being replaced, never counted as a conflict
    """
    item_type = ItemType(item_type)
    return [
        item for item in items
        if item.item_type == item_type
        and item.catalog_item_id == str(catalog_item_id)
        and item.id != exclude_id
        and conflicts_with(item, item_type, start, end)
    ]


def is_available(
    items: Iterable[LineItem],
    item_type: ItemType,
    catalog_item_id: str,
    start: dt.date,
    end: Optional[dt.date] = None,
    exclude_id: Optional[str] = None,
) -> bool:
    """
    True when the candidate overlaps nothing already in the cart.

    Only the local cart is consulted; catalog availability must be checked
    separately before a booking is committed.
    """
    return not find_conflicts(items, item_type, catalog_item_id, start, end, exclude_id)

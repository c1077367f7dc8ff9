"""
Line item pricing

Pure functions turning a line item's type-specific fields and the catalog
base rate into a unit rate and a total price.
"""

from dataclasses import replace
from typing import Optional
import datetime as dt

from .models import ItemType, LineItem, RatePeriod, day_span

HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7


def lodging_unit_rate(base_rate: float, check_in: dt.date, check_out: dt.date) -> float:
    """Nightly rate times the number of nights"""
    return base_rate * day_span(check_in, check_out)


def activity_unit_rate(base_rate: float, participants: int) -> float:
    """Per-person rate times participants"""
    return base_rate * participants


def equipment_unit_rate(
    base_rate: float,
    rate_period: RatePeriod,
    rental_start: dt.date,
    rental_end: dt.date,
) -> float:
    """
    Price of one unit of equipment for the whole rental.

    Hourly rates are billed as full days, weekly rates are prorated for
    rentals shorter than a week and charged flat otherwise.
    """
    rental_days = day_span(rental_start, rental_end)
    rate_period = RatePeriod(rate_period)

    if rate_period == RatePeriod.HOUR:
        return base_rate * HOURS_PER_DAY * rental_days
    if rate_period == RatePeriod.WEEK:
        if rental_days < DAYS_PER_WEEK:
            return (base_rate / DAYS_PER_WEEK) * rental_days
        return base_rate
    return base_rate * rental_days


def price(
    item_type: ItemType,
    base_rate: float,
    rate_period: RatePeriod = RatePeriod.DAY,
    quantity: int = 1,
    check_in: Optional[dt.date] = None,
    check_out: Optional[dt.date] = None,
    participants: Optional[int] = None,
    rental_start: Optional[dt.date] = None,
    rental_end: Optional[dt.date] = None,
) -> tuple[float, float]:
    """
    Compute (unit_rate, total_price) for a line item.

    Args:
        item_type: Kind of reservation
        base_rate: Catalog base rate
        rate_period: Period the base rate is quoted for
        quantity: Units booked; 1 for stays and activities unless updated
        check_in, check_out: Lodging dates
        participants: Activity head count
        rental_start, rental_end: Equipment rental dates

    Returns:
        Tuple of unit rate and total price
    """
    item_type = ItemType(item_type)

    if item_type == ItemType.LODGING:
        unit_rate = lodging_unit_rate(base_rate, check_in, check_out)
    elif item_type == ItemType.ACTIVITY:
        unit_rate = activity_unit_rate(base_rate, participants or 0)
    else:
        unit_rate = equipment_unit_rate(base_rate, rate_period, rental_start, rental_end)

    return unit_rate, unit_rate * quantity


def price_line_item(item: LineItem) -> LineItem:
    """Return a copy of the item with unit_rate and total_price recomputed"""
    unit_rate, total_price = price(
        item.item_type,
        item.base_rate,
        rate_period=item.rate_period,
        quantity=item.quantity,
        check_in=item.check_in,
        check_out=item.check_out,
        participants=item.participants,
        rental_start=item.rental_start,
        rental_end=item.rental_end,
    )
    return replace(item, unit_rate=unit_rate, total_price=total_price)

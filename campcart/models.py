"""Cart data models"""

import datetime as dt
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional


class ItemType(str, Enum):
    """Kind of reservable catalog item"""
    LODGING = "lodging"
    ACTIVITY = "activity"
    EQUIPMENT = "equipment"


class RatePeriod(str, Enum):
    """Period the catalog base rate is quoted for"""
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"


@dataclass(frozen=True)
class CatalogItem:
    """Snapshot of a catalog entity, owned by the catalog service"""
    id: str
    name: str
    base_rate: float
    rate_period: RatePeriod = RatePeriod.DAY
    capacity: Optional[int] = None
    location: Optional[str] = None


def day_span(start: dt.date, end: dt.date) -> int:
    """Whole days between two dates, rounded up, never less than 1"""
    seconds = (_as_datetime(end) - _as_datetime(start)).total_seconds()
    return max(1, math.ceil(seconds / 86400))


def _as_datetime(value: dt.date) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return value
    return dt.datetime.combine(value, dt.time())


def line_item_id(
    item_type: ItemType,
    catalog_item_id: str,
    start: dt.date,
    end: Optional[Any] = None,
) -> str:
    """
    Build the composite key of a line item.

    Re-adding the same catalog item for the same dates yields the same key,
    so the cart replaces the entry instead of duplicating it.
    """
    parts = [ItemType(item_type).value, str(catalog_item_id), start.isoformat()]
    if isinstance(end, dt.time):
        parts.append(end.strftime("%H:%M"))
    elif end is not None:
        parts.append(end.isoformat())
    return "-".join(parts)


@dataclass(frozen=True)
class LineItem:
    """One reservation of a catalog item in the cart"""
    id: str
    item_type: ItemType
    catalog_item_id: str
    name: str
    base_rate: float
    rate_period: RatePeriod = RatePeriod.DAY
    quantity: int = 1
    unit_rate: float = 0.0
    total_price: float = 0.0
    capacity: Optional[int] = None
    location: Optional[str] = None
    # Lodging
    check_in: Optional[dt.date] = None
    check_out: Optional[dt.date] = None
    guests: Optional[int] = None
    # Activity
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    participants: Optional[int] = None
    # Equipment
    rental_start: Optional[dt.date] = None
    rental_end: Optional[dt.date] = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def start(self) -> Optional[dt.date]:
        if self.item_type == ItemType.LODGING:
            return self.check_in
        if self.item_type == ItemType.EQUIPMENT:
            return self.rental_start
        return self.date

    @property
    def end(self) -> Optional[dt.date]:
        """Exclusive end of the reservation; None for point-in-time activities"""
        if self.item_type == ItemType.LODGING:
            return self.check_out
        if self.item_type == ItemType.EQUIPMENT:
            return self.rental_end
        return None

    @property
    def nights(self) -> Optional[int]:
        if self.check_in is None or self.check_out is None:
            return None
        return day_span(self.check_in, self.check_out)

    @property
    def rental_days(self) -> Optional[int]:
        if self.rental_start is None or self.rental_end is None:
            return None
        return day_span(self.rental_start, self.rental_end)

    @property
    def key(self) -> str:
        """Composite key derived from the current type and date fields"""
        if self.item_type == ItemType.ACTIVITY:
            return line_item_id(self.item_type, self.catalog_item_id, self.date, self.time)
        return line_item_id(self.item_type, self.catalog_item_id, self.start, self.end)

    @property
    def display_name(self) -> str:
        if self.item_type == ItemType.LODGING:
            return f"{self.name} ({_plural(self.nights, 'night')})"
        if self.item_type == ItemType.ACTIVITY:
            return f"{self.name} ({_plural(self.participants, 'participant')})"
        return f"{self.name} ({_plural(self.rental_days, 'day')})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire format used by the cart API"""
        data: dict[str, Any] = {
            "id": self.id,
            "itemType": self.item_type.value,
            "catalogItemId": self.catalog_item_id,
            "name": self.name,
            "baseRate": self.base_rate,
            "ratePeriod": self.rate_period.value,
            "quantity": self.quantity,
            "unitRate": self.unit_rate,
            "totalPrice": self.total_price,
            "capacity": self.capacity,
            "location": self.location,
            "checkIn": _iso(self.check_in),
            "checkOut": _iso(self.check_out),
            "guests": self.guests,
            "date": _iso(self.date),
            "time": self.time.strftime("%H:%M") if self.time else None,
            "participants": self.participants,
            "rentalStart": _iso(self.rental_start),
            "rentalEnd": _iso(self.rental_end),
        }
        data = {k: v for k, v in data.items() if v is not None}
        for k, v in self.extra.items():
            data.setdefault(k, v)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineItem":
        """Parse the camelCase wire format; unknown keys are kept in `extra`"""
        known = {
            "id", "itemType", "catalogItemId", "name", "baseRate", "ratePeriod",
            "quantity", "unitRate", "totalPrice", "capacity", "location",
            "checkIn", "checkOut", "guests", "date", "time", "participants",
            "rentalStart", "rentalEnd",
        }
        item_type = ItemType(data["itemType"])
        item = cls(
            id=data.get("id") or "",
            item_type=item_type,
            catalog_item_id=str(data["catalogItemId"]),
            name=data.get("name", ""),
            base_rate=float(data.get("baseRate", 0.0)),
            rate_period=RatePeriod(data.get("ratePeriod", RatePeriod.DAY.value)),
            quantity=int(data.get("quantity", 1)),
            unit_rate=float(data.get("unitRate", 0.0)),
            total_price=float(data.get("totalPrice", 0.0)),
            capacity=data.get("capacity"),
            location=data.get("location"),
            check_in=_parse_date(data.get("checkIn")),
            check_out=_parse_date(data.get("checkOut")),
            guests=data.get("guests"),
            date=_parse_date(data.get("date")),
            time=dt.time.fromisoformat(data["time"]) if data.get("time") else None,
            participants=data.get("participants"),
            rental_start=_parse_date(data.get("rentalStart")),
            rental_end=_parse_date(data.get("rentalEnd")),
            extra={k: v for k, v in data.items() if k not in known},
        )
        if not item.id:
            item = replace(item, id=item.key)
        return item


def lodging_item(
    catalog_item: CatalogItem,
    check_in: dt.date,
    check_out: dt.date,
    guests: int,
) -> LineItem:
    """Unpriced lodging stay for a catalog item"""
    return LineItem(
        id=line_item_id(ItemType.LODGING, catalog_item.id, check_in, check_out),
        item_type=ItemType.LODGING,
        catalog_item_id=catalog_item.id,
        name=catalog_item.name,
        base_rate=catalog_item.base_rate,
        rate_period=catalog_item.rate_period,
        capacity=catalog_item.capacity,
        location=catalog_item.location,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
    )


def activity_item(
    catalog_item: CatalogItem,
    date: dt.date,
    time: dt.time,
    participants: int,
) -> LineItem:
    """Unpriced activity booking for a catalog item"""
    return LineItem(
        id=line_item_id(ItemType.ACTIVITY, catalog_item.id, date, time),
        item_type=ItemType.ACTIVITY,
        catalog_item_id=catalog_item.id,
        name=catalog_item.name,
        base_rate=catalog_item.base_rate,
        rate_period=catalog_item.rate_period,
        capacity=catalog_item.capacity,
        location=catalog_item.location,
        date=date,
        time=time,
        participants=participants,
    )


def equipment_item(
    catalog_item: CatalogItem,
    rental_start: dt.date,
    rental_end: dt.date,
    quantity: int,
) -> LineItem:
    """Unpriced equipment rental for a catalog item"""
    return LineItem(
        id=line_item_id(ItemType.EQUIPMENT, catalog_item.id, rental_start, rental_end),
        item_type=ItemType.EQUIPMENT,
        catalog_item_id=catalog_item.id,
        name=catalog_item.name,
        base_rate=catalog_item.base_rate,
        rate_period=catalog_item.rate_period,
        capacity=catalog_item.capacity,
        location=catalog_item.location,
        quantity=quantity,
        rental_start=rental_start,
        rental_end=rental_end,
    )


def _plural(count: Optional[int], word: str) -> str:
    count = count or 0
    return f"{count} {word}{'s' if count != 1 else ''}"


def _iso(value: Optional[dt.date]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_date(value: Optional[str]) -> Optional[dt.date]:
    if not value:
        return None
    # Accept full ISO timestamps as well as plain dates
    return dt.date.fromisoformat(value[:10])

"""Cart models for the cart service"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from campcart.models import ItemType, RatePeriod


class CartLineItem(BaseModel):
    """Reservation stored in an account cart"""
    id: Optional[str] = None
    item_type: ItemType
    catalog_item_id: str
    name: str = ""
    base_rate: float = Field(default=0.0, ge=0)
    rate_period: RatePeriod = RatePeriod.DAY
    quantity: int = Field(default=1, gt=0)
    unit_rate: float = 0.0
    total_price: float = 0.0
    capacity: Optional[int] = None
    location: Optional[str] = None
    check_in: Optional[dt.date] = None
    check_out: Optional[dt.date] = None
    guests: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    participants: Optional[int] = None
    rental_start: Optional[dt.date] = None
    rental_end: Optional[dt.date] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "allow"


class Cart(BaseModel):
    """Account cart"""
    user_id: str
    items: list[CartLineItem] = []
    subtotal: float = 0.0
    item_count: int = 0
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UpdateCartItemRequest(BaseModel):
    """Request to change the quantity of a cart item"""
    id: Optional[str] = None
    catalog_item_id: str
    item_type: ItemType
    quantity: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MigrateCartRequest(BaseModel):
    """Bulk import of an anonymous cart"""
    items: list[CartLineItem]


class CartResponse(BaseModel):
    """Cart API response"""
    cart: Cart
    message: Optional[str] = None
    skipped: list[str] = []

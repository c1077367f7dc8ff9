# Cart service models

from .cart import Cart, CartLineItem, UpdateCartItemRequest, MigrateCartRequest, CartResponse

__all__ = [
    "Cart",
    "CartLineItem",
    "UpdateCartItemRequest",
    "MigrateCartRequest",
    "CartResponse",
]

"""Cart API routes for the cart service"""

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from campcart.errors import CartValidationError
from campcart.models import ItemType

from ..models.cart import (
    CartLineItem,
    UpdateCartItemRequest,
    MigrateCartRequest,
    CartResponse,
)
from ..database.carts import cart_db
from ..security.auth import require_user

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.get("", response_model=CartResponse)
async def get_cart(user_id: str = Depends(require_user)):
    """Get the signed-in user's cart"""
    return CartResponse(cart=cart_db.get_or_create_cart(user_id))


@router.post("", response_model=CartResponse)
async def add_to_cart(
    request: CartLineItem,
    user_id: str = Depends(require_user),
):
    """Add a line item, replacing the one with the same id"""
    try:
        item = cart_db.normalize(request)
    except CartValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    conflicts = cart_db.find_conflicts(user_id, item)
    if conflicts:
        raise HTTPException(
            status_code=409,
            detail=f"{item.name} is already booked in this cart for overlapping dates",
        )

    cart = cart_db.put_item(user_id, item)
    return CartResponse(cart=cart, message=f"{item.display_name} added to cart")


@router.put("/item", response_model=CartResponse)
async def update_cart_item(
    request: UpdateCartItemRequest,
    user_id: str = Depends(require_user),
):
    """Update item quantity in cart"""
    try:
        cart = cart_db.update_item_quantity(
            user_id,
            request.catalog_item_id,
            request.item_type,
            request.quantity,
            line_id=request.id,
        )
    except CartValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not cart:
        raise HTTPException(status_code=404, detail="Item not found in cart")
    return CartResponse(cart=cart, message="Cart updated")


@router.delete("/item/{catalog_item_id}/{item_type}", response_model=CartResponse)
async def remove_from_cart(
    catalog_item_id: str,
    item_type: ItemType,
    id: Optional[str] = Query(None),
    user_id: str = Depends(require_user),
):
    """Remove a line item, or every line of a catalog item when no id is given"""
    cart = cart_db.remove_items(user_id, catalog_item_id, item_type, line_id=id)
    return CartResponse(cart=cart, message="Item removed")


@router.delete("/clear", response_model=CartResponse)
async def clear_cart(user_id: str = Depends(require_user)):
    """Clear all items from cart"""
    return CartResponse(cart=cart_db.clear_cart(user_id), message="Cart cleared")


@router.post("/migrate", response_model=CartResponse)
async def migrate_cart(
    request: MigrateCartRequest,
    user_id: str = Depends(require_user),
):
    """Import an anonymous cart into the account cart"""
    cart, skipped = cart_db.merge_items(user_id, request.items)
    return CartResponse(
        cart=cart,
        message=f"Cart migrated with {len(request.items) - len(skipped)} items",
        skipped=skipped,
    )

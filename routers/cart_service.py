"""
Cart Service - huduma ya kikapu
Handles adding, updating and removing crops in the buyer's cart.
"""

from fastapi import APIRouter, Depends, HTTPException

from config import CURRENCY
from models.cart import CartItemAdd, CartItemUpdate, CartOut
from services.errors import MarketplaceError
from services.session import MarketplaceSession, get_session, limit_cart

router = APIRouter()


def cart_snapshot(session: MarketplaceSession) -> CartOut:
    return CartOut(
        items=session.cart.items,
        total_items=session.cart.total_items,
        subtotal=session.cart.subtotal,
        currency=CURRENCY,
        is_checking_out=session.orders.is_checking_out,
        delivery_location=session.location.delivery_location,
    )


@router.get("/api/cart", tags=["Cart"])
async def get_cart(session: MarketplaceSession = Depends(get_session)):
    """Kikapu changu (Get the current cart)."""
    return cart_snapshot(session)


@router.post("/api/cart/items", tags=["Cart"], dependencies=[Depends(limit_cart)])
async def add_to_cart(payload: CartItemAdd, session: MarketplaceSession = Depends(get_session)):
    """Ongeza zao kwenye kikapu (Add a crop to the cart)."""
    try:
        item = session.cart.add_to_cart(payload.crop, payload.quantity)
    except MarketplaceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    return {
        "message": "Kikapu kimesasishwa (Cart updated)",
        "item": item,
        "cart": cart_snapshot(session),
    }


@router.put("/api/cart/items/{crop_id}", tags=["Cart"], dependencies=[Depends(limit_cart)])
async def update_quantity(crop_id: str, payload: CartItemUpdate, session: MarketplaceSession = Depends(get_session)):
    """Badilisha kiasi (Update the quantity of a cart item; zero removes it)."""
    try:
        item = session.cart.update_quantity(crop_id, payload.quantity)
    except MarketplaceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    return {
        "message": "Kikapu kimesasishwa (Cart updated)",
        "item": item,
        "cart": cart_snapshot(session),
    }


@router.delete("/api/cart/items/{crop_id}", tags=["Cart"], dependencies=[Depends(limit_cart)])
async def remove_from_cart(crop_id: str, session: MarketplaceSession = Depends(get_session)):
    """Ondoa zao kwenye kikapu (Remove a crop from the cart)."""
    session.cart.remove_from_cart(crop_id)
    return {
        "message": "Imeondolewa kwenye kikapu (Removed from cart)",
        "removed_id": crop_id,
        "cart": cart_snapshot(session),
    }


@router.delete("/api/cart", tags=["Cart"], dependencies=[Depends(limit_cart)])
async def clear_cart(session: MarketplaceSession = Depends(get_session)):
    """Safisha kikapu (Empty the cart)."""
    session.cart.clear_cart()
    return {
        "message": "Kikapu kimesafishwa (Cart cleared)",
        "cart": cart_snapshot(session),
    }

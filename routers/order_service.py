"""
Order Service - huduma ya oda
Handles checkout, order listing, order details and status changes.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from config import ORDERS_REDIRECT_PATH
from models.order import CheckoutRequest, OrderStatusUpdate
from services.errors import MarketplaceError
from services.session import MarketplaceSession, get_session, limit_checkout
from utils.helpers import paginate

router = APIRouter()


# ─── Checkout ────────────────────────────────────────────────────────────────


@router.post("/api/checkout", tags=["Checkout"], dependencies=[Depends(limit_checkout)])
async def proceed_to_checkout(
    payload: CheckoutRequest | None = None,
    session: MarketplaceSession = Depends(get_session),
):
    """Weka oda kutoka kikapu (Place an order from the cart)."""
    payload = payload or CheckoutRequest()
    try:
        order = await session.orders.proceed_to_checkout(
            buyer_id=payload.buyer_id,
            phone_number=payload.phone_number,
            notes=payload.notes,
        )
    except MarketplaceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Hitilafu ya seva (Server error): {str(e)}")

    return {
        "message": "Oda imewekwa kikamilifu (Order placed successfully)",
        "order": order,
        "redirect": ORDERS_REDIRECT_PATH,
    }


@router.get("/api/checkout", tags=["Checkout"])
async def checkout_state(session: MarketplaceSession = Depends(get_session)):
    """Hali ya malipo (Is a checkout in progress?)."""
    return {"is_checking_out": session.orders.is_checking_out}


@router.delete("/api/checkout", tags=["Checkout"])
async def cancel_checkout(session: MarketplaceSession = Depends(get_session)):
    """Sitisha malipo yanayoendelea (Cancel the in-flight checkout)."""
    cancelled = session.orders.cancel_checkout()
    if not cancelled:
        raise HTTPException(status_code=404, detail="Hakuna malipo yanayoendelea (No checkout in progress)")
    return {"message": "Malipo yamesitishwa (Checkout cancelled)", "cancelled": True}


# ─── Orders ──────────────────────────────────────────────────────────────────


@router.get("/api/orders", tags=["Orders"])
async def list_orders(
    status: str | None = Query(None),
    buyer_id: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    session: MarketplaceSession = Depends(get_session),
):
    """Orodha ya oda (List orders, newest first)."""
    orders = session.orders.list_orders(status=status, buyer_id=buyer_id)
    return paginate(orders, page, page_size)


@router.get("/api/orders/{order_id}", tags=["Orders"])
async def get_order(order_id: str, session: MarketplaceSession = Depends(get_session)):
    """Maelezo ya oda (Get order details)."""
    order = session.orders.get_order_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Oda haikupatikana (Order not found)")
    return order


@router.put("/api/orders/{order_id}/status", tags=["Orders"])
async def update_order_status(order_id: str, update: OrderStatusUpdate, session: MarketplaceSession = Depends(get_session)):
    """Badilisha hali ya oda (Confirm or cancel an order)."""
    try:
        order = session.orders.update_status(order_id, update.status)
    except MarketplaceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    if order is None:
        raise HTTPException(status_code=404, detail="Oda haikupatikana (Order not found)")

    return {
        "message": "Hali ya oda imesasishwa (Order status updated)",
        "order": order,
    }

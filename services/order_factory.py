"""
Order Factory - turns a cart snapshot and delivery location into an Order.
"""

from datetime import datetime, timedelta
from typing import Container

from config import CURRENCY, DELIVERY_FEE, ESTIMATED_DELIVERY_MINUTES
from models.cart import CartItem
from models.location import DeliveryLocation
from models.order import DeliveryAddress, Order, OrderItem, OrderTracking, TimelineEntry
from utils.helpers import generate_id

ORDER_ID_PREFIX = "ORD-"
UNKNOWN_SELLER = "Unknown Seller"
UNKNOWN_SELLER_ID = "seller-unknown"
ORDER_PLACED = "Order Placed"


def generate_order_id(existing_ids: Container[str]) -> str:
    return generate_id(ORDER_ID_PREFIX, existing_ids)


def _placed_tracking(now: datetime) -> OrderTracking:
    return OrderTracking(
        current_status=ORDER_PLACED,
        last_update=now,
        timeline=[TimelineEntry(status=ORDER_PLACED, time=now, completed=True, current=True)],
    )


def seller_names(items: list[CartItem]) -> str:
    """Distinct seller names in cart order, comma-joined."""
    names = []
    for item in items:
        name = item.crop.seller_name or UNKNOWN_SELLER
        if name not in names:
            names.append(name)
    return ", ".join(names)


def build_order(
    order_id: str,
    items: list[CartItem],
    location: DeliveryLocation,
    buyer_id: str,
    now: datetime,
    delivery_fee: float = DELIVERY_FEE,
    currency: str = CURRENCY,
    estimated_minutes: int = ESTIMATED_DELIVERY_MINUTES,
    phone_number: str = None,
    notes: str = None,
) -> Order:
    order_items = [
        OrderItem(
            id=item.crop.id,
            crop_id=item.crop.id,
            crop_name=item.crop.name,
            quantity=item.quantity,
            unit=item.unit,
            price_per_unit=item.crop.price_per_unit,
            total_price=item.crop.price_per_unit * item.quantity,
        )
        for item in items
    ]
    subtotal = sum(item.crop.price_per_unit * item.quantity for item in items)

    return Order(
        id=order_id,
        buyer_id=buyer_id,
        seller_id=items[0].crop.seller_id if items else UNKNOWN_SELLER_ID,
        seller_name=seller_names(items),
        items=order_items,
        status="pending",
        total_amount=subtotal + delivery_fee,
        delivery_fee=delivery_fee,
        currency=currency,
        delivery_address=DeliveryAddress(
            address=location.address,
            coordinates=location.coordinates,
        ),
        phone_number=phone_number,
        notes=notes,
        created_at=now,
        estimated_delivery=now + timedelta(minutes=estimated_minutes),
        tracking=_placed_tracking(now),
    )


def stamp_order(order: Order, now: datetime, estimated_minutes: int = ESTIMATED_DELIVERY_MINUTES) -> Order:
    """Return a copy of a freshly built order with its clock started at now."""
    return order.model_copy(
        deep=True,
        update={
            "created_at": now,
            "estimated_delivery": now + timedelta(minutes=estimated_minutes),
            "tracking": _placed_tracking(now),
        },
    )

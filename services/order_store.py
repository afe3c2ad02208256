"""
Order Store - oda za mnunuzi
Runs checkout and keeps the session's orders, newest first.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from config import (
    CHECKOUT_BACKOFF_SECONDS,
    CHECKOUT_MAX_ATTEMPTS,
    CURRENCY,
    DEFAULT_BUYER_ID,
    DELIVERY_FEE,
    ESTIMATED_DELIVERY_MINUTES,
)
from models.order import Order
from services.cart_store import CartStore
from services.errors import (
    BackendError,
    CheckoutCancelled,
    CheckoutFailed,
    CheckoutInProgress,
    EmptyCart,
    InvalidStatusTransition,
    MissingDeliveryLocation,
)
from services.location_service import LocationService
from services.notifier import Notifier
from services.order_backend import LocalOrderBackend, submit_with_retry
from services.order_factory import build_order, generate_order_id, stamp_order
from services.order_lifecycle import is_forward, transition
from utils.helpers import utcnow

logger = logging.getLogger(__name__)

# status -> (title, title_sw, message suffix, message suffix sw)
STATUS_MESSAGES = {
    "confirmed": ("Order Confirmed", "Oda imethibitishwa", "has been confirmed by the seller", "imethibitishwa na muuzaji"),
    "in_transit": ("Order On The Way", "Oda iko njiani", "is on the way", "iko njiani"),
    "delivered": ("Order Delivered", "Oda imefika", "has been delivered", "imefika"),
    "cancelled": ("Order Cancelled", "Oda imesitishwa", "has been cancelled", "imesitishwa"),
}


class OrderStore:
    def __init__(
        self,
        cart: CartStore,
        location: LocationService,
        notifier: Notifier,
        backend=None,
        clock: Callable[[], datetime] = utcnow,
        delivery_fee: float = DELIVERY_FEE,
        currency: str = CURRENCY,
        estimated_minutes: int = ESTIMATED_DELIVERY_MINUTES,
        default_buyer_id: str = DEFAULT_BUYER_ID,
        max_attempts: int = CHECKOUT_MAX_ATTEMPTS,
        backoff: float = CHECKOUT_BACKOFF_SECONDS,
    ):
        self.cart = cart
        self.location = location
        self.notifier = notifier
        self.backend = backend or LocalOrderBackend()
        self.clock = clock
        self.delivery_fee = delivery_fee
        self.currency = currency
        self.estimated_minutes = estimated_minutes
        self.default_buyer_id = default_buyer_id
        self.max_attempts = max_attempts
        self.backoff = backoff

        self._orders: list[Order] = []
        self._submission: asyncio.Task | None = None
        self._cancel_requested = False
        self.is_checking_out = False

    # ─── Queries ─────────────────────────────────────────────────────────────

    @property
    def orders(self) -> list[Order]:
        return list(self._orders)

    def get_order_by_id(self, order_id: str) -> Optional[Order]:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def list_orders(self, status: str = None, buyer_id: str = None) -> list[Order]:
        orders = self._orders
        if status:
            orders = [o for o in orders if o.status == status]
        if buyer_id:
            orders = [o for o in orders if o.buyer_id == buyer_id]
        return list(orders)

    # ─── Status changes ──────────────────────────────────────────────────────

    def replace_order(self, order: Order) -> Order:
        """Swap in a newer version of an order and announce a status change."""
        for index, existing in enumerate(self._orders):
            if existing.id == order.id:
                self._orders[index] = order
                if existing.status != order.status:
                    self._announce(order)
                return order
        raise KeyError(order.id)

    def _announce(self, order: Order):
        title, title_sw, suffix, suffix_sw = STATUS_MESSAGES[order.status]
        self.notifier.notify(
            title=title,
            title_sw=title_sw,
            message=f"Your order {order.id} {suffix}.",
            message_sw=f"Oda yako {order.id} {suffix_sw}.",
            related_id=order.id,
            sms_to=order.phone_number if order.status == "delivered" else None,
        )

    def update_status(self, order_id: str, status: str) -> Optional[Order]:
        """Apply an external seller/buyer status change (confirm or cancel)."""
        order = self.get_order_by_id(order_id)
        if order is None:
            return None
        if status == order.status or not is_forward(order.status, status):
            raise InvalidStatusTransition(
                f"Order {order_id} cannot move from {order.status} to {status}",
                f"Oda {order_id} haiwezi kubadilishwa kutoka {order.status} kwenda {status}",
            )
        if status == "cancelled" and order.status not in ("pending", "confirmed"):
            raise InvalidStatusTransition(
                f"Order {order_id} is already {order.status} and can no longer be cancelled",
                f"Oda {order_id} haiwezi kusitishwa tena",
            )
        return self.replace_order(transition(order, status, self.clock()))

    # ─── Checkout ────────────────────────────────────────────────────────────

    async def proceed_to_checkout(self, buyer_id: str = None, phone_number: str = None, notes: str = None) -> Order:
        """Turn the current cart into an order.

        Nothing is mutated until the backend confirms the order. On success
        the order is prepended, the cart emptied and the delivery location
        reset. Every failure leaves cart and location as they were.
        """
        if self.is_checking_out:
            raise CheckoutInProgress()

        location = self.location.delivery_location
        if location is None:
            self.notifier.notify(
                title="Missing Delivery Location",
                title_sw="Mahali pa kupeleka hapajawekwa",
                message="Please set a delivery location to continue.",
                message_sw="Tafadhali weka mahali pa kupeleka mzigo.",
                variant="destructive",
            )
            raise MissingDeliveryLocation()

        items = self.cart.items
        if not items:
            self.notifier.notify(
                title="Empty Cart",
                title_sw="Kikapu ni tupu",
                message="Add some crops to your cart before checking out.",
                message_sw="Ongeza mazao kwenye kikapu kabla ya kulipia.",
                variant="destructive",
            )
            raise EmptyCart()

        order = build_order(
            order_id=generate_order_id({o.id for o in self._orders}),
            items=items,
            location=location,
            buyer_id=buyer_id or self.default_buyer_id,
            now=self.clock(),
            delivery_fee=self.delivery_fee,
            currency=self.currency,
            estimated_minutes=self.estimated_minutes,
            phone_number=phone_number,
            notes=notes,
        )

        self.is_checking_out = True
        self._cancel_requested = False
        try:
            self._submission = asyncio.ensure_future(
                submit_with_retry(self.backend, order, self.max_attempts, self.backoff)
            )
            confirmed = await self._submission
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            self.notifier.notify(
                title="Checkout Cancelled",
                title_sw="Malipo yamesitishwa",
                message="Your order was not placed.",
                message_sw="Oda yako haijawekwa.",
                variant="destructive",
            )
            raise CheckoutCancelled() from None
        except BackendError as e:
            logger.error(f"Checkout failed for order {order.id}: {e}")
            self.notifier.notify(
                title="Checkout Failed",
                title_sw="Malipo yameshindikana",
                message="Your order could not be placed. Please try again.",
                message_sw="Oda yako haikuweza kuwekwa. Tafadhali jaribu tena.",
                variant="destructive",
            )
            raise CheckoutFailed() from e
        finally:
            self.is_checking_out = False
            self._submission = None
            self._cancel_requested = False

        # Lifecycle timing starts once the backend has accepted the order
        confirmed = stamp_order(confirmed, self.clock(), self.estimated_minutes)
        self._orders.insert(0, confirmed)
        self.notifier.notify(
            title="Order Placed Successfully",
            title_sw="Oda imewekwa",
            message="Your order has been placed and is being processed.",
            message_sw="Oda yako imewekwa na inashughulikiwa.",
            related_id=confirmed.id,
        )
        self.cart.clear_cart()
        self.location.clear()
        return confirmed

    def cancel_checkout(self) -> bool:
        """Cancel the in-flight checkout. Returns False if none is running."""
        if self._submission is None or self._submission.done():
            return False
        self._cancel_requested = True
        self._submission.cancel()
        return True

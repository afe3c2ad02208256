"""
MarketplaceSession - the buyer session owned by the application.

Wires the notifier, cart, delivery location, order store and lifecycle task
together. Routers reach it through ``get_session``.
"""

from datetime import datetime
from typing import Callable

from fastapi import HTTPException, Request

from config import (
    CART_RATE_LIMIT,
    CHECKOUT_RATE_LIMIT,
    DELIVERED_AFTER_SECONDS,
    IN_TRANSIT_AFTER_SECONDS,
    ORDER_BACKEND,
    SIMULATOR_TICK_SECONDS,
)
from services.cart_store import CartStore
from services.location_service import LocationService
from services.notifier import Notifier
from services.order_backend import LocalOrderBackend, SupabaseOrderBackend
from services.order_lifecycle import OrderLifecycleSimulator
from services.order_store import OrderStore
from utils.helpers import utcnow
from utils.rate_limit import RateLimiter


def make_backend(kind: str = ORDER_BACKEND):
    if kind == "supabase":
        return SupabaseOrderBackend()
    return LocalOrderBackend()


class MarketplaceSession:
    def __init__(
        self,
        backend=None,
        clock: Callable[[], datetime] = utcnow,
        notifier: Notifier = None,
        reverse_geocode: Callable[[float, float], str] = None,
        tick_interval: float = SIMULATOR_TICK_SECONDS,
        in_transit_after: float = IN_TRANSIT_AFTER_SECONDS,
        delivered_after: float = DELIVERED_AFTER_SECONDS,
        checkout_rate_limit: tuple[int, float] = CHECKOUT_RATE_LIMIT,
        cart_rate_limit: tuple[int, float] = CART_RATE_LIMIT,
        **order_options,
    ):
        self.notifier = notifier or Notifier()
        self.cart = CartStore(self.notifier)
        self.location = LocationService(self.notifier, reverse_geocode)
        self.backend = backend or make_backend()
        self.orders = OrderStore(self.cart, self.location, self.notifier, self.backend, clock, **order_options)

        # Simulate only when the backend has no statuses of its own
        status_source = None if isinstance(self.backend, LocalOrderBackend) else self.backend
        self.lifecycle = OrderLifecycleSimulator(
            self.orders,
            interval=tick_interval,
            clock=clock,
            in_transit_after=in_transit_after,
            delivered_after=delivered_after,
            status_source=status_source,
        )

        self.checkout_limiter = RateLimiter(*checkout_rate_limit)
        self.cart_limiter = RateLimiter(*cart_rate_limit)


def get_session(request: Request) -> MarketplaceSession:
    return request.app.state.marketplace


def _client_id(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


def limit_cart(request: Request):
    if not get_session(request).cart_limiter(_client_id(request)):
        raise HTTPException(status_code=429, detail="Maombi mengi mno, subiri kidogo (Too many cart requests, slow down)")


def limit_checkout(request: Request):
    if not get_session(request).checkout_limiter(_client_id(request)):
        raise HTTPException(status_code=429, detail="Majaribio mengi ya malipo, subiri kidogo (Too many checkout attempts, try again later)")

"""
Tests for checkout, order queries and external status changes.
"""

import asyncio

import pytest

from config import DEFAULT_BUYER_ID
from services.errors import (
    CheckoutCancelled,
    CheckoutFailed,
    CheckoutInProgress,
    EmptyCart,
    InvalidStatusTransition,
    MissingDeliveryLocation,
    OrderRejected,
    TransientBackendError,
)
from services.notifier import Notifier
from services.order_backend import LocalOrderBackend
from services.session import MarketplaceSession
from tests.conftest import make_crop, make_location


class GatedBackend:
    """Holds every submission until ``release`` is set."""

    def __init__(self):
        self.release = asyncio.Event()
        self.submitted = []

    async def submit(self, order):
        self.submitted.append(order)
        await self.release.wait()
        return order

    async def fetch_statuses(self, order_ids):
        return {}


class FlakyBackend:
    def __init__(self, failures):
        self.failures = list(failures)
        self.attempts = 0

    async def submit(self, order):
        self.attempts += 1
        if self.failures:
            raise self.failures.pop(0)
        return order

    async def fetch_statuses(self, order_ids):
        return {}


def _session_with(backend, clock):
    return MarketplaceSession(backend=backend, clock=clock, notifier=Notifier(sms_api_key=""), backoff=0)


def _fill(session, quantity=3):
    session.cart.add_to_cart(make_crop(price_per_unit=1000, quantity_available=5), quantity)


@pytest.mark.asyncio
async def test_checkout_without_location_creates_nothing(session):
    _fill(session)

    with pytest.raises(MissingDeliveryLocation):
        await session.orders.proceed_to_checkout()

    assert session.orders.orders == []
    assert session.cart.total_items == 3
    assert session.orders.is_checking_out is False
    assert session.notifier.list()[0]["title"] == "Missing Delivery Location"


@pytest.mark.asyncio
async def test_checkout_with_empty_cart_is_rejected(session):
    session.location.set_delivery_location(make_location())

    with pytest.raises(EmptyCart):
        await session.orders.proceed_to_checkout()

    assert session.orders.orders == []
    assert session.location.delivery_location is not None


@pytest.mark.asyncio
async def test_checkout_places_order_and_resets_cart(session, clock):
    _fill(session)
    session.location.set_delivery_location(make_location())

    order = await session.orders.proceed_to_checkout(phone_number="0754123456")

    assert order.status == "pending"
    assert order.total_amount == 3000 + 4500
    assert order.buyer_id == DEFAULT_BUYER_ID
    assert order.phone_number == "0754123456"
    assert order.created_at == clock()
    assert session.orders.orders == [order]
    assert session.cart.items == []
    assert session.location.delivery_location is None
    assert session.orders.is_checking_out is False
    assert session.notifier.list()[0]["title"] == "Order Placed Successfully"


@pytest.mark.asyncio
async def test_orders_are_listed_newest_first(session):
    ids = []
    for _ in range(3):
        _fill(session, 1)
        session.location.set_delivery_location(make_location())
        ids.append((await session.orders.proceed_to_checkout()).id)

    assert [o.id for o in session.orders.orders] == list(reversed(ids))
    assert len(set(ids)) == 3


@pytest.mark.asyncio
async def test_get_order_by_id(session):
    _fill(session)
    session.location.set_delivery_location(make_location())
    order = await session.orders.proceed_to_checkout()

    assert session.orders.get_order_by_id(order.id) is order
    assert session.orders.get_order_by_id("ORD-MISSING") is None


@pytest.mark.asyncio
async def test_second_checkout_while_in_flight_is_rejected(clock):
    backend = GatedBackend()
    session = _session_with(backend, clock)
    _fill(session)
    session.location.set_delivery_location(make_location())

    first = asyncio.create_task(session.orders.proceed_to_checkout())
    await asyncio.sleep(0)
    assert session.orders.is_checking_out

    with pytest.raises(CheckoutInProgress):
        await session.orders.proceed_to_checkout()

    backend.release.set()
    order = await first
    assert session.orders.orders == [order]
    assert session.orders.is_checking_out is False


@pytest.mark.asyncio
async def test_order_clock_starts_when_backend_confirms(clock):
    backend = GatedBackend()
    session = _session_with(backend, clock)
    _fill(session)
    session.location.set_delivery_location(make_location())

    pending = asyncio.create_task(session.orders.proceed_to_checkout())
    await asyncio.sleep(0)
    clock.advance(2)
    backend.release.set()
    order = await pending

    assert order.created_at == clock()
    assert order.tracking.last_update == clock()
    assert order.tracking.timeline[0].time == clock()

    clock.advance(15)
    assert session.lifecycle.tick() == []
    clock.advance(1)
    assert [o.id for o in session.lifecycle.tick()] == [order.id]


@pytest.mark.asyncio
async def test_cancel_in_flight_checkout_keeps_cart(clock):
    backend = GatedBackend()
    session = _session_with(backend, clock)
    _fill(session)
    session.location.set_delivery_location(make_location())

    pending = asyncio.create_task(session.orders.proceed_to_checkout())
    await asyncio.sleep(0)

    assert session.orders.cancel_checkout() is True
    with pytest.raises(CheckoutCancelled):
        await pending

    assert session.orders.orders == []
    assert session.cart.total_items == 3
    assert session.location.delivery_location is not None
    assert session.orders.is_checking_out is False
    assert session.orders.cancel_checkout() is False


@pytest.mark.asyncio
async def test_transient_failures_are_retried(clock):
    backend = FlakyBackend([TransientBackendError("timeout"), TransientBackendError("reset")])
    session = _session_with(backend, clock)
    _fill(session)
    session.location.set_delivery_location(make_location())

    order = await session.orders.proceed_to_checkout()

    assert backend.attempts == 3
    assert session.orders.orders == [order]


@pytest.mark.asyncio
async def test_exhausted_retries_fail_without_clearing_cart(clock):
    backend = FlakyBackend([TransientBackendError("timeout")] * 3)
    session = _session_with(backend, clock)
    _fill(session)
    session.location.set_delivery_location(make_location())

    with pytest.raises(CheckoutFailed):
        await session.orders.proceed_to_checkout()

    assert backend.attempts == 3
    assert session.orders.orders == []
    assert session.cart.total_items == 3
    assert session.location.delivery_location is not None
    assert session.notifier.list()[0]["title"] == "Checkout Failed"


@pytest.mark.asyncio
async def test_rejected_order_is_not_retried(clock):
    backend = FlakyBackend([OrderRejected("stock no longer available")])
    session = _session_with(backend, clock)
    _fill(session)
    session.location.set_delivery_location(make_location())

    with pytest.raises(CheckoutFailed):
        await session.orders.proceed_to_checkout()

    assert backend.attempts == 1
    assert session.cart.total_items == 3


@pytest.mark.asyncio
async def test_seller_confirms_then_buyer_cannot_go_back(session):
    _fill(session)
    session.location.set_delivery_location(make_location())
    order = await session.orders.proceed_to_checkout()

    confirmed = session.orders.update_status(order.id, "confirmed")

    assert confirmed.status == "confirmed"
    assert confirmed.tracking.timeline[-1].status == "Order Confirmed"
    assert session.orders.get_order_by_id(order.id) is confirmed
    with pytest.raises(InvalidStatusTransition):
        session.orders.update_status(order.id, "confirmed")


@pytest.mark.asyncio
async def test_cancel_only_before_dispatch(session, clock):
    _fill(session)
    session.location.set_delivery_location(make_location())
    order = await session.orders.proceed_to_checkout()

    clock.advance(16)
    session.lifecycle.tick()
    assert session.orders.get_order_by_id(order.id).status == "in_transit"

    with pytest.raises(InvalidStatusTransition):
        session.orders.update_status(order.id, "cancelled")


@pytest.mark.asyncio
async def test_cancelled_order_is_terminal(session, clock):
    _fill(session)
    session.location.set_delivery_location(make_location())
    order = await session.orders.proceed_to_checkout()

    cancelled = session.orders.update_status(order.id, "cancelled")
    clock.advance(600)
    session.lifecycle.tick()

    assert cancelled.status == "cancelled"
    assert session.orders.get_order_by_id(order.id).status == "cancelled"
    assert session.notifier.list()[0]["title"] == "Order Cancelled"


def test_update_status_of_unknown_order_returns_none(session):
    assert session.orders.update_status("ORD-NOPE000", "confirmed") is None


@pytest.mark.asyncio
async def test_delivered_order_sends_sms_to_buyer(clock, monkeypatch):
    sent = []
    monkeypatch.setattr("services.notifier._send_sms_message", lambda phone, msg, *args: sent.append((phone, msg)))
    session = _session_with(LocalOrderBackend(delay=0), clock)
    _fill(session)
    session.location.set_delivery_location(make_location())
    order = await session.orders.proceed_to_checkout(phone_number="0754123456")

    clock.advance(16)
    session.lifecycle.tick()
    assert sent == []

    clock.advance(31)
    session.lifecycle.tick()
    await session.notifier.flush()
    assert sent == [("0754123456", f"AgroConnect: Oda yako {order.id} imefika.")]

"""
Order Lifecycle - moves orders through pending -> in_transit -> delivered.

``advance_order`` is the pure transition rule: given an order and the current
time it returns either the same order object (nothing due) or a new order one
step further along. ``OrderLifecycleSimulator`` is the periodic driver that
applies it to every order in an OrderStore.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable

from config import DELIVERED_AFTER_SECONDS, IN_TRANSIT_AFTER_SECONDS, SIMULATOR_TICK_SECONDS
from models.location import Coordinates
from models.order import Driver, Order, OrderTracking, TimelineEntry, TrackingLocation, Vehicle
from services.errors import BackendError
from utils.helpers import haversine_km, utcnow

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    "pending": "Order Placed",
    "confirmed": "Order Confirmed",
    "in_transit": "On The Way",
    "delivered": "Delivered",
    "cancelled": "Cancelled",
}

TERMINAL_STATUSES = ("delivered", "cancelled")

# Position of each status along the delivery path; cancelled is off-path.
STATUS_RANK = {"pending": 0, "confirmed": 1, "in_transit": 2, "delivered": 3}

DEFAULT_DRIVER = Driver(
    id="driver-1",
    name="Juma Khamis",
    phone="+255 784 123 456",
    vehicle=Vehicle(make="Toyota", model="Hilux", color="White", plate="T123 ABC"),
)

# Dar es Salaam city centre
DRIVER_REFERENCE_POINT = Coordinates(latitude=-6.7924, longitude=39.2083)


def is_terminal(order: Order) -> bool:
    return order.status in TERMINAL_STATUSES


def is_forward(current: str, target: str) -> bool:
    """True if moving from current to target never goes backwards."""
    if current in TERMINAL_STATUSES:
        return False
    if target == "cancelled":
        return True
    return STATUS_RANK[target] > STATUS_RANK[current]


def _last_update(order: Order) -> datetime:
    if order.tracking is not None:
        return order.tracking.last_update
    return order.created_at


def _driver_location(order: Order) -> TrackingLocation:
    dest = order.delivery_address.coordinates
    distance = haversine_km(
        DRIVER_REFERENCE_POINT.latitude,
        DRIVER_REFERENCE_POINT.longitude,
        dest.latitude,
        dest.longitude,
    )
    return TrackingLocation(coordinates=DRIVER_REFERENCE_POINT.model_copy(), address=f"{distance:.1f}km away")


def transition(order: Order, status: str, now: datetime, driver: Driver = DEFAULT_DRIVER) -> Order:
    """Return a copy of order moved to status, with one new current timeline entry."""
    label = STATUS_LABELS[status]
    tracking = order.tracking or OrderTracking(current_status=STATUS_LABELS[order.status], last_update=order.created_at)

    timeline = [entry.model_copy(update={"current": False}) for entry in tracking.timeline]
    timeline.append(TimelineEntry(status=label, time=now, completed=True, current=True))

    tracking_update = {
        "current_status": label,
        "last_update": now,
        "timeline": timeline,
    }
    if status == "in_transit":
        tracking_update["driver"] = driver.model_copy(deep=True)
        tracking_update["current_location"] = _driver_location(order)

    return order.model_copy(
        deep=True,
        update={
            "status": status,
            "tracking": tracking.model_copy(deep=True, update=tracking_update),
        },
    )


def advance_order(
    order: Order,
    now: datetime,
    in_transit_after: float = IN_TRANSIT_AFTER_SECONDS,
    delivered_after: float = DELIVERED_AFTER_SECONDS,
) -> Order:
    if is_terminal(order):
        return order

    elapsed = (now - _last_update(order)).total_seconds()

    if order.status == "pending" and elapsed > in_transit_after:
        return transition(order, "in_transit", now)
    if order.status == "in_transit" and elapsed > delivered_after:
        return transition(order, "delivered", now)
    return order


class OrderLifecycleSimulator:
    """Periodically advances the orders held by an OrderStore.

    With a ``status_source`` (an order backend exposing ``fetch_statuses``)
    statuses are taken from the backend instead of being simulated. A failed
    fetch skips the tick and leaves every order untouched.
    """

    def __init__(
        self,
        store,
        interval: float = SIMULATOR_TICK_SECONDS,
        clock: Callable[[], datetime] = utcnow,
        in_transit_after: float = IN_TRANSIT_AFTER_SECONDS,
        delivered_after: float = DELIVERED_AFTER_SECONDS,
        status_source=None,
    ):
        self.store = store
        self.interval = interval
        self.clock = clock
        self.in_transit_after = in_transit_after
        self.delivered_after = delivered_after
        self.status_source = status_source
        self._task: asyncio.Task | None = None

    def tick(self) -> list[Order]:
        """Apply due transitions once. Returns the orders that changed."""
        now = self.clock()
        changed = []
        for order in self.store.orders:
            advanced = advance_order(order, now, self.in_transit_after, self.delivered_after)
            if advanced is not order:
                self.store.replace_order(advanced)
                changed.append(advanced)
        for order in changed:
            logger.info(f"Order {order.id} is now {order.status}")
        return changed

    async def sync(self) -> list[Order]:
        """Pull authoritative statuses from the backend and apply forward moves."""
        pending = [o for o in self.store.orders if not is_terminal(o)]
        if not pending:
            return []
        try:
            statuses = await self.status_source.fetch_statuses([o.id for o in pending])
        except BackendError as e:
            logger.warning(f"Order status sync failed, will retry next tick: {e}")
            return []

        now = self.clock()
        changed = []
        for order in pending:
            status = statuses.get(order.id)
            if status in STATUS_LABELS and status != order.status and is_forward(order.status, status):
                changed.append(transition(order, status, now))
        for order in changed:
            self.store.replace_order(order)
            logger.info(f"Order {order.id} is now {order.status}")
        return changed

    async def run(self):
        while True:
            await asyncio.sleep(self.interval)
            if self.status_source is not None:
                await self.sync()
            else:
                self.tick()

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

"""
Order backends - where a checked-out order is committed.

LocalOrderBackend only simulates the round trip. SupabaseOrderBackend writes
the order into the ``orders`` and ``order_items`` tables and reads statuses
back for the lifecycle task.
"""

import asyncio
import logging
import random

import httpx

from config import CHECKOUT_BACKOFF_SECONDS, CHECKOUT_DELAY_SECONDS, CHECKOUT_MAX_ATTEMPTS
from models.order import Order
from services.errors import BackendError, OrderRejected, TransientBackendError

logger = logging.getLogger(__name__)


class LocalOrderBackend:
    def __init__(self, delay: float = CHECKOUT_DELAY_SECONDS):
        self.delay = delay

    async def submit(self, order: Order) -> Order:
        await asyncio.sleep(self.delay)
        return order

    async def fetch_statuses(self, order_ids: list[str]) -> dict[str, str]:
        return {}


class SupabaseOrderBackend:
    def __init__(self, client_factory=None):
        if client_factory is None:
            from db import get_supabase

            client_factory = get_supabase
        self._client_factory = client_factory

    def _insert(self, order: Order):
        sb = self._client_factory()
        row = {
            "id": order.id,
            "buyer_id": order.buyer_id,
            "seller_id": order.seller_id,
            "seller_name": order.seller_name,
            "status": order.status,
            "total_amount": order.total_amount,
            "delivery_fee": order.delivery_fee,
            "currency": order.currency,
            "delivery_address": order.delivery_address.address,
            "delivery_lat": order.delivery_address.coordinates.latitude,
            "delivery_lng": order.delivery_address.coordinates.longitude,
            "phone_number": order.phone_number,
            "notes": order.notes,
            "estimated_delivery": order.estimated_delivery.isoformat(),
            "created_at": order.created_at.isoformat(),
        }
        # Idempotent per order id: a retry rewrites the same rows
        sb.table("orders").upsert(row, on_conflict="id").execute()
        sb.table("order_items").delete().eq("order_id", order.id).execute()
        sb.table("order_items").insert([
            {
                "order_id": order.id,
                "crop_id": item.crop_id,
                "quantity": item.quantity,
                "price_per_unit": item.price_per_unit,
                "total_price": item.total_price,
            }
            for item in order.items
        ]).execute()

    def _select_statuses(self, order_ids: list[str]) -> dict[str, str]:
        sb = self._client_factory()
        result = sb.table("orders").select("id,status").in_("id", order_ids).execute()
        return {row["id"]: row["status"] for row in (result.data or [])}

    async def submit(self, order: Order) -> Order:
        try:
            await asyncio.to_thread(self._insert, order)
        except (httpx.TransportError, httpx.TimeoutException) as e:
            raise TransientBackendError(str(e)) from e
        except Exception as e:
            raise OrderRejected(str(e)) from e
        return order

    async def fetch_statuses(self, order_ids: list[str]) -> dict[str, str]:
        try:
            return await asyncio.to_thread(self._select_statuses, order_ids)
        except Exception as e:
            raise TransientBackendError(str(e)) from e


async def submit_with_retry(
    backend,
    order: Order,
    max_attempts: int = CHECKOUT_MAX_ATTEMPTS,
    base_delay: float = CHECKOUT_BACKOFF_SECONDS,
) -> Order:
    """Submit an order, retrying transient failures with exponential backoff."""
    last_error: BackendError | None = None

    for attempt in range(1, max_attempts + 1):
        try:
            confirmed = await backend.submit(order)
            logger.info(f"Order {order.id} submitted (attempt {attempt})")
            return confirmed
        except OrderRejected as e:
            logger.error(f"Order {order.id} rejected: {e}")
            raise
        except TransientBackendError as e:
            last_error = e
            logger.warning(f"Order {order.id} attempt {attempt} failed: {e}")
            if attempt < max_attempts:
                await asyncio.sleep(base_delay * (2 ** (attempt - 1)) + random.random() * base_delay)

    logger.error(f"Order {order.id} permanently failed: {last_error}")
    raise last_error

"""
Notifier - in-session notification feed with optional SMS alerts.
"""

import asyncio
import logging
import uuid
from collections import deque

import requests

from config import SMS_API_KEY, SMS_API_URL
from utils.helpers import now_iso, normalize_tz_phone

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS = 100


def _send_sms_message(phone: str, message: str, api_key: str = SMS_API_KEY, api_url: str = SMS_API_URL) -> bool:
    """Send an SMS message through the configured SMS gateway."""
    if not api_key:
        return False

    try:
        response = requests.get(api_url, params={
            "api_key": api_key,
            "msg": message,
            "to": normalize_tz_phone(phone),
        }, timeout=10)
        result = response.json()
        return result.get("error") == 0
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"SMS send error: {e}")
        return False


class Notifier:
    """Collects user-facing messages for the session, newest first."""

    def __init__(self, max_items: int = MAX_NOTIFICATIONS, sms_api_key: str = SMS_API_KEY, sms_api_url: str = SMS_API_URL):
        self._items = deque(maxlen=max_items)
        self.sms_api_key = sms_api_key
        self.sms_api_url = sms_api_url
        self._sms_sends = set()

    def notify(
        self,
        title: str,
        message: str,
        variant: str = "default",
        related_id: str = None,
        title_sw: str = None,
        message_sw: str = None,
        sms_to: str = None,
    ) -> dict:
        notif = {
            "id": f"NTF-{uuid.uuid4().hex[:8]}",
            "title": title,
            "title_sw": title_sw or title,
            "message": message,
            "message_sw": message_sw or message,
            "variant": variant,
            "related_id": related_id,
            "is_read": False,
            "created_at": now_iso(),
        }
        self._items.appendleft(notif)

        if variant == "destructive":
            logger.warning(f"{title}: {message}")
        else:
            logger.info(f"{title}: {message}")

        if sms_to:
            self._send_sms(sms_to, f"AgroConnect: {message_sw or message}")

        return notif

    def _send_sms(self, phone: str, text: str):
        # Gateway calls block, keep them off the event loop
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _send_sms_message(phone, text, self.sms_api_key, self.sms_api_url)
            return
        future = loop.run_in_executor(None, _send_sms_message, phone, text, self.sms_api_key, self.sms_api_url)
        self._sms_sends.add(future)
        future.add_done_callback(self._sms_sends.discard)

    async def flush(self):
        """Wait for SMS messages still being sent."""
        if self._sms_sends:
            await asyncio.gather(*self._sms_sends)

    def list(self, is_read: bool = None) -> list[dict]:
        if is_read is None:
            return list(self._items)
        return [n for n in self._items if n["is_read"] == is_read]

    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n["is_read"])

    def mark_read(self, notification_id: str):
        for n in self._items:
            if n["id"] == notification_id:
                n["is_read"] = True
                return n
        return None

    def mark_all_read(self):
        for n in self._items:
            n["is_read"] = True

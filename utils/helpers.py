import math
import uuid
from datetime import datetime, timezone
from typing import Container


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return utcnow().isoformat()


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great-circle distance between two points on Earth (km)."""
    R = 6371.0
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return R * c


def format_coordinates(latitude: float, longitude: float) -> str:
    return f"{latitude:.6f}, {longitude:.6f}"


def paginate(items: list, page: int = 1, page_size: int = 20) -> dict:
    """Return a paginated slice of items with metadata."""
    total = len(items)
    start = (page - 1) * page_size
    end = start + page_size
    return {
        "items": items[start:end],
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size) if total else 0,
    }


def generate_id(prefix: str, existing_ids: Container[str], length: int = 7) -> str:
    """Generate a random uppercase ID like ``ORD-1A2B3C4`` not present in existing_ids."""
    while True:
        new_id = f"{prefix}{uuid.uuid4().hex[:length].upper()}"
        if new_id not in existing_ids:
            return new_id


def normalize_tz_phone(phone: str) -> str:
    """Normalize a Tanzanian phone number to the 255XXXXXXXXX form."""
    to_number = phone.strip().replace("+", "").replace(" ", "")
    if to_number.startswith("0"):
        to_number = "255" + to_number[1:]
    elif not to_number.startswith("255"):
        to_number = "255" + to_number
    return to_number

from pydantic import BaseModel, Field
from typing import Optional


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class DeliveryLocation(BaseModel):
    address: str = Field(..., min_length=1)
    coordinates: Coordinates
    is_live_location: bool = False


class PositionReport(BaseModel):
    """Result of the device's getCurrentPosition call.

    Either ``coordinates`` is set, or ``error`` describes why the position
    could not be obtained (permission denied, unsupported, timeout).
    """

    coordinates: Optional[Coordinates] = None
    error: Optional[str] = None

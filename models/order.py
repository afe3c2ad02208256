from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from models.location import Coordinates

OrderStatus = Literal["pending", "confirmed", "in_transit", "delivered", "cancelled"]


class OrderItem(BaseModel):
    id: str
    crop_id: str
    crop_name: str
    quantity: int
    unit: str
    price_per_unit: float
    total_price: float


class Vehicle(BaseModel):
    make: str
    model: str
    color: str
    plate: str


class Driver(BaseModel):
    id: str
    name: str
    phone: str
    avatar: Optional[str] = None
    vehicle: Vehicle


class TrackingLocation(BaseModel):
    coordinates: Coordinates
    address: str


class TimelineEntry(BaseModel):
    status: str
    time: datetime
    completed: bool = True
    current: bool = False


class OrderTracking(BaseModel):
    current_status: str
    last_update: datetime
    driver: Optional[Driver] = None
    current_location: Optional[TrackingLocation] = None
    timeline: list[TimelineEntry] = []


class DeliveryAddress(BaseModel):
    address: str
    coordinates: Coordinates


class Order(BaseModel):
    id: str
    buyer_id: str
    seller_id: str
    seller_name: str
    items: list[OrderItem]
    status: OrderStatus = "pending"
    total_amount: float
    delivery_fee: float
    currency: str = "TZS"
    delivery_address: DeliveryAddress
    phone_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    estimated_delivery: datetime
    tracking: Optional[OrderTracking] = None


class CheckoutRequest(BaseModel):
    buyer_id: Optional[str] = None
    phone_number: Optional[str] = None
    notes: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., pattern="^(confirmed|cancelled)$")

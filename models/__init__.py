from models.crop import Crop
from models.location import Coordinates, DeliveryLocation, PositionReport
from models.cart import CartItem, CartItemAdd, CartItemUpdate, CartOut
from models.order import (
    CheckoutRequest,
    DeliveryAddress,
    Driver,
    Order,
    OrderItem,
    OrderStatus,
    OrderStatusUpdate,
    OrderTracking,
    TimelineEntry,
    TrackingLocation,
    Vehicle,
)
from models.notification import NotificationOut

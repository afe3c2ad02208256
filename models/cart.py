from pydantic import BaseModel, Field
from typing import Optional

from models.crop import Crop
from models.location import DeliveryLocation


class CartItem(BaseModel):
    crop: Crop
    quantity: int = Field(..., ge=1)
    unit: str

    @property
    def line_total(self) -> float:
        return self.crop.price_per_unit * self.quantity


class CartItemAdd(BaseModel):
    crop: Crop
    quantity: int = Field(1, ge=1)


class CartItemUpdate(BaseModel):
    # Zero or negative removes the item
    quantity: int


class CartOut(BaseModel):
    items: list[CartItem]
    total_items: int
    subtotal: float
    currency: str
    is_checking_out: bool = False
    delivery_location: Optional[DeliveryLocation] = None

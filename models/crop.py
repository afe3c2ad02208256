from pydantic import BaseModel, Field
from typing import Optional


class Crop(BaseModel):
    """Crop listing as published by a seller. Read-only for the cart."""

    id: str
    name: str
    price_per_unit: float = Field(..., ge=0)
    unit: str
    quantity_available: int = Field(..., ge=0)
    seller_id: str
    seller_name: Optional[str] = None
    category: str
    images: list[str] = []
    is_organic: bool = False

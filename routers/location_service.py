"""
Delivery Location Service - huduma ya mahali pa kupeleka
Handles the manual or live delivery location used at checkout.
"""

from fastapi import APIRouter, Depends, HTTPException

from models.location import DeliveryLocation, PositionReport
from services.errors import LocationUnavailable
from services.session import MarketplaceSession, get_session

router = APIRouter()


@router.get("/api/delivery-location", tags=["Delivery Location"])
async def get_delivery_location(session: MarketplaceSession = Depends(get_session)):
    """Mahali pa kupeleka (Get the delivery location)."""
    return {
        "delivery_location": session.location.delivery_location,
        "is_loading_location": session.location.is_loading_location,
    }


@router.put("/api/delivery-location", tags=["Delivery Location"])
async def set_delivery_location(location: DeliveryLocation, session: MarketplaceSession = Depends(get_session)):
    """Weka anwani kwa mkono (Set the delivery location manually)."""
    session.location.set_delivery_location(location)
    return {
        "message": "Mahali pamesasishwa (Delivery location updated)",
        "delivery_location": session.location.delivery_location,
    }


@router.delete("/api/delivery-location", tags=["Delivery Location"])
async def clear_delivery_location(session: MarketplaceSession = Depends(get_session)):
    """Futa mahali pa kupeleka (Clear the delivery location)."""
    session.location.clear()
    return {"message": "Mahali pamefutwa (Delivery location cleared)", "delivery_location": None}


@router.post("/api/delivery-location/current", tags=["Delivery Location"])
async def use_current_location(report: PositionReport, session: MarketplaceSession = Depends(get_session)):
    """Tumia mahali nilipo (Use the device's current position)."""
    try:
        location = session.location.use_current_location(report)
    except LocationUnavailable as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"message": e.detail, "manual_entry_required": True},
        )

    return {
        "message": "Tunatumia mahali ulipo (Using your current location for delivery)",
        "delivery_location": location,
    }

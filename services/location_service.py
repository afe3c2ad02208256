"""
Delivery Location Service - mahali pa kupeleka mzigo
Keeps the delivery location for the next checkout, either entered manually
or taken from the device's reported position.
"""

import logging
from typing import Callable, Optional

from models.location import DeliveryLocation, PositionReport
from services.errors import LocationUnavailable
from services.notifier import Notifier
from utils.helpers import format_coordinates

logger = logging.getLogger(__name__)

UNRESOLVED_ADDRESS = "Current Location (Tap to enter details)"


class LocationService:
    def __init__(self, notifier: Notifier, reverse_geocode: Optional[Callable[[float, float], str]] = None):
        self._notifier = notifier
        self._reverse_geocode = reverse_geocode or format_coordinates
        self.delivery_location: Optional[DeliveryLocation] = None
        self.is_loading_location = False

    def set_delivery_location(self, location: Optional[DeliveryLocation]):
        self.delivery_location = location

    def clear(self):
        self.delivery_location = None

    def _resolve_address(self, latitude: float, longitude: float) -> str:
        try:
            address = self._reverse_geocode(latitude, longitude)
        except Exception as e:
            logger.warning(f"Reverse geocoding error: {e}")
            return UNRESOLVED_ADDRESS
        return address or format_coordinates(latitude, longitude)

    def use_current_location(self, report: PositionReport) -> DeliveryLocation:
        """Use the device position as a live delivery location.

        Raises LocationUnavailable when the device could not supply
        coordinates; the previous delivery location is kept.
        """
        self.is_loading_location = True
        try:
            if report.error or report.coordinates is None:
                logger.warning(f"Error getting location: {report.error or 'no coordinates'}")
                self._notifier.notify(
                    title="Location Error",
                    title_sw="Hitilafu ya mahali",
                    message="Couldn't get your current location. Please enter manually.",
                    message_sw="Imeshindikana kupata mahali ulipo. Tafadhali andika anwani.",
                    variant="destructive",
                )
                raise LocationUnavailable()

            coords = report.coordinates
            location = DeliveryLocation(
                address=self._resolve_address(coords.latitude, coords.longitude),
                coordinates=coords,
                is_live_location=True,
            )
            self.delivery_location = location
            self._notifier.notify(
                title="Location Updated",
                title_sw="Mahali pamesasishwa",
                message="Using your current location for delivery.",
                message_sw="Tunatumia mahali ulipo sasa kupeleka mzigo.",
            )
            return location
        finally:
            self.is_loading_location = False

"""
Shared fixtures: a controllable clock, crop/location factories and a
session wired with an instant local backend.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from models.crop import Crop
from models.location import Coordinates, DeliveryLocation
from server import create_app
from services.notifier import Notifier
from services.order_backend import LocalOrderBackend
from services.session import MarketplaceSession


class FakeClock:
    def __init__(self, start: datetime = None):
        self.now = start or datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


def make_crop(
    crop_id: str = "crop-maize",
    name: str = "Maize",
    price_per_unit: float = 1000,
    quantity_available: int = 5,
    unit: str = "kg",
    seller_id: str = "seller-1",
    seller_name: str = "Mama Neema Farm",
) -> Crop:
    return Crop(
        id=crop_id,
        name=name,
        price_per_unit=price_per_unit,
        unit=unit,
        quantity_available=quantity_available,
        seller_id=seller_id,
        seller_name=seller_name,
        category="grains",
    )


def make_location(address: str = "Kariakoo, Dar es Salaam") -> DeliveryLocation:
    return DeliveryLocation(
        address=address,
        coordinates=Coordinates(latitude=-6.8161, longitude=39.2803),
        is_live_location=False,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return Notifier(sms_api_key="")


@pytest.fixture
def session(clock, notifier):
    return MarketplaceSession(
        backend=LocalOrderBackend(delay=0),
        clock=clock,
        notifier=notifier,
        backoff=0,
    )


@pytest.fixture
def client(session):
    with TestClient(create_app(session, run_simulator=False)) as c:
        yield c

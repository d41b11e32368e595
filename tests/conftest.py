import pytest
from datetime import datetime, timedelta, timezone

from drivers.models import Driver
from notifications.sink import InMemoryNotificationSink
from rides.models import Location, Preferences, Ride, RideStatus, VehicleType
from scheduling.policy import default_policy
from storage.memory import build_stores

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def policy():
    return default_policy()


@pytest.fixture
def stores():
    return build_stores(lock_timeout_seconds=1.0)


@pytest.fixture
def datastore(stores):
    return stores[0]


@pytest.fixture
def ride_store(stores):
    return stores[1]


@pytest.fixture
def driver_store(stores):
    return stores[2]


@pytest.fixture
def notifier():
    return InMemoryNotificationSink()


def make_ride(ride_id="ride_1", minutes_from_now=17, vehicle_type=VehicleType.SEDAN, now=NOW, **overrides) -> Ride:
    fields = dict(
        id=ride_id,
        user_id=f"user_{ride_id}",
        user_phone="+91 90000 00001",
        pickup=Location("12 MG Road"),
        dropoff=Location("Airport T3"),
        vehicle_type=vehicle_type,
        scheduled_for=now + timedelta(minutes=minutes_from_now),
        otp="4321",
        status=RideStatus.SCHEDULED,
        is_scheduled=True,
        preferences=Preferences(),
        created_at=now - timedelta(days=1),
    )
    fields.update(overrides)
    return Ride(**fields)


def make_driver(driver_id="drv_1", vehicle_type="sedan", rating=4.8, gender="male", is_available=True) -> Driver:
    return Driver.new(
        driver_id=driver_id,
        name=f"Driver {driver_id}",
        vehicle_type=vehicle_type,
        number_plate=f"PLATE-{driver_id}",
        gender=gender,
        rating=rating,
        is_available=is_available,
    )

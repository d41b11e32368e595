"""
Purpose: Domain models for the Rides capability.
What it does:
- Defines core data structures:
- Ride (id, owner, pickup/dropoff, vehicle type, preferences, schedule, status, driver binding)
- Location (address + coordinates)
- Preferences (female driver, pet friendly, wheelchair, silent)

Defines enums/constants:
- RideStatus = SCHEDULED | SEARCHING | CONFIRMED | ONGOING | COMPLETED | CANCELLED
- VehicleType = CYCLE | BIKE | AUTO | SEDAN | SUV | LUXURY

Rule: No store access, no scheduling logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

LatLon = Tuple[float, float]


class RideStatus(str, Enum):
    SCHEDULED = "scheduled"
    SEARCHING = "searching"
    CONFIRMED = "confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED})
# statuses that still get the one-hour reminder
REMINDABLE_STATUSES = (RideStatus.SCHEDULED, RideStatus.CONFIRMED)


class VehicleType(str, Enum):
    CYCLE = "cycle"
    BIKE = "bike"
    AUTO = "auto"
    SEDAN = "sedan"
    SUV = "suv"
    LUXURY = "luxury"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Location:
    address: str
    coordinates: LatLon = (0.0, 0.0)


@dataclass(frozen=True)
class Preferences:
    """
    Rider preferences used by the driver matcher.
    Only female_driver is a hard filter today; the rest travel with the ride.
    """
    female_driver: bool = False
    pet_friendly: bool = False
    wheelchair: bool = False
    silent: bool = False


@dataclass(frozen=True)
class Ride:
    """
    A point-in-time snapshot of a ride record.

    Rides are immutable; every transition returns a new instance via
    dataclasses.replace and is persisted with a version check.
    """
    id: str
    user_id: str
    user_phone: str
    pickup: Location
    dropoff: Location
    vehicle_type: VehicleType
    scheduled_for: datetime
    otp: str

    status: RideStatus = RideStatus.SCHEDULED
    is_scheduled: bool = True
    preferences: Preferences = field(default_factory=Preferences)

    reminder_sent: bool = False
    driver_id: Optional[str] = None
    driver_assigned_at: Optional[datetime] = None

    created_at: datetime = field(default_factory=utcnow)
    cancelled_at: Optional[datetime] = None

    # maintained by the store, bumped on every successful save
    version: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def has_driver(self) -> bool:
        return self.driver_id is not None

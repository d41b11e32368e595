"""
Purpose: Ride creation (immediate and scheduled).
What it does:
- Validates the requested pickup time against the booking lead limits
  (at least 30 minutes, at most 7 days ahead for scheduled rides).
- Builds the Ride record (status SCHEDULED or SEARCHING, fresh OTP).
- Persists it through the ride store.
"""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from notifications.messages import format_datetime
from scheduling.policy import SchedulingPolicy, default_policy

from .errors import ValidationError
from .models import Location, Preferences, Ride, RideStatus, VehicleType, utcnow

DEFAULT_VEHICLE_TYPE = VehicleType.SEDAN


@dataclass(frozen=True)
class BookingResult:
    ride: Ride
    message: str


def generate_otp() -> str:
    return str(random.randint(1000, 9999))


def book_ride(
    ride_store,
    *,
    user_id: str,
    user_phone: str,
    pickup: Location | str,
    dropoff: Location | str,
    vehicle_type: Optional[VehicleType | str] = None,
    preferences: Optional[Preferences] = None,
    scheduled_for: Optional[datetime] = None,
    now: Optional[datetime] = None,
    policy: Optional[SchedulingPolicy] = None,
) -> BookingResult:
    """
    Creates a ride. Passing `scheduled_for` books a scheduled ride, leaving it
    out books an immediate one (status SEARCHING, pickup = now).

    Raises ValidationError when the locations are missing, the vehicle type is
    unknown or the scheduled time is outside the booking lead limits.
    """
    policy = policy or default_policy()
    now = now or utcnow()

    if not pickup or not dropoff:
        raise ValidationError("Pickup and dropoff locations are required")

    if isinstance(pickup, str):
        pickup = Location(address=pickup)
    if isinstance(dropoff, str):
        dropoff = Location(address=dropoff)

    try:
        vehicle_type = VehicleType(vehicle_type) if vehicle_type else DEFAULT_VEHICLE_TYPE
    except ValueError:
        raise ValidationError(f"Unknown vehicle type: {vehicle_type}")

    is_scheduled = scheduled_for is not None
    if is_scheduled:
        if scheduled_for < now + policy.min_booking_lead:
            raise ValidationError(
                f"Scheduled rides must be at least {policy.min_booking_lead_minutes} minutes in advance"
            )
        if scheduled_for > now + policy.max_booking_lead:
            raise ValidationError(
                f"Cannot schedule rides more than {policy.max_booking_lead_days} days in advance"
            )

    ride = Ride(
        id=str(uuid.uuid4()),
        user_id=user_id,
        user_phone=user_phone,
        pickup=pickup,
        dropoff=dropoff,
        vehicle_type=vehicle_type,
        preferences=preferences or Preferences(),
        scheduled_for=scheduled_for if is_scheduled else now,
        is_scheduled=is_scheduled,
        status=RideStatus.SCHEDULED if is_scheduled else RideStatus.SEARCHING,
        otp=generate_otp(),
        created_at=now,
    )
    ride = ride_store.add(ride)

    if is_scheduled:
        message = (
            f"Ride scheduled for {format_datetime(ride.scheduled_for)}. "
            f"We'll assign a driver {policy.assignment_window_start_minutes} minutes before pickup."
        )
    else:
        message = "Ride booked successfully!"

    return BookingResult(ride=ride, message=message)

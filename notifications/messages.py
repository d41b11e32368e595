"""
Purpose: Builders for every rider/driver message the scheduler sends.
What it does:
Turns rides + drivers into push payloads (title, body, metadata) and SMS text.
Keeps wording out of the scheduling code.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from drivers.models import Driver
from rides.models import Ride


@dataclass(frozen=True)
class PushMessage:
    title: str
    body: str
    metadata: Dict[str, Any] = field(default_factory=dict)


def format_time(instant: datetime) -> str:
    """03:45 PM"""
    return instant.strftime("%I:%M %p")


def format_datetime(instant: datetime) -> str:
    """Mon, Oct 19, 03:45 PM"""
    return f"{instant.strftime('%a, %b')} {instant.day}, {format_time(instant)}"


def driver_assigned_push(ride: Ride, driver: Driver) -> PushMessage:
    return PushMessage(
        title="Driver Assigned!",
        body=f"{driver.name} will pick you up at {ride.pickup.address}",
        metadata={"ride_id": ride.id, "type": "driver_assigned"},
    )


def new_ride_push(ride: Ride) -> PushMessage:
    return PushMessage(
        title="New Scheduled Ride",
        body=f"Pickup: {ride.pickup.address} at {format_time(ride.scheduled_for)}",
        metadata={"ride_id": ride.id, "type": "new_ride"},
    )


def no_driver_push(ride: Ride) -> PushMessage:
    return PushMessage(
        title="Driver Availability Issue",
        body="We're having trouble finding a driver. We'll keep trying or you can reschedule.",
        metadata={"ride_id": ride.id, "type": "no_driver"},
    )


def no_driver_sms(ride: Ride, brand_name: str) -> str:
    return (
        f"{brand_name}: We're searching for a driver for your {format_time(ride.scheduled_for)} ride "
        f"(OTP: {ride.otp}). Reply RESCHEDULE to change time or CANCEL to cancel."
    )


def reminder_push(ride: Ride) -> PushMessage:
    return PushMessage(
        title="Ride Reminder",
        body=f"Your ride to {ride.dropoff.address} is in 1 hour",
        metadata={"ride_id": ride.id, "type": "reminder"},
    )


def reminder_sms(ride: Ride, brand_name: str) -> str:
    return (
        f"{brand_name} Reminder: Your scheduled ride from {ride.pickup.address} "
        f"is at {format_time(ride.scheduled_for)}. OTP: {ride.otp}"
    )

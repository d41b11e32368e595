from dataclasses import replace
from datetime import datetime

from drivers.models import Driver
from rides.errors import ValidationError
from rides.models import REMINDABLE_STATUSES, Ride, RideStatus


class RideStateException(ValidationError):
    """Raised when an invalid ride transition is attempted."""
    pass


def bind_driver(ride: Ride, driver: Driver, now: datetime) -> Ride:
    """
    SCHEDULED -> CONFIRMED.
    Only a scheduled ride with no driver yet can be bound.
    """
    if ride.status != RideStatus.SCHEDULED:
        raise RideStateException(f"Cannot assign a driver to ride {ride.id} in status {ride.status.value}")

    if ride.driver_assigned_at is not None or ride.driver_id is not None:
        raise RideStateException(f"Ride {ride.id} already has driver {ride.driver_id}")

    return replace(ride, driver_id=driver.id, status=RideStatus.CONFIRMED, driver_assigned_at=now)


def apply_reschedule(ride: Ride, new_time: datetime) -> Ride:
    """
    Moves pickup to `new_time`, drops any driver binding (status back to SCHEDULED)
    and re-arms the reminder. Releasing the driver record is the caller's job.
    """
    if ride.is_terminal:
        raise RideStateException("Cannot reschedule completed or cancelled rides")

    if ride.status == RideStatus.ONGOING:
        raise RideStateException("Cannot reschedule ride in progress")

    status = ride.status
    if ride.has_driver:
        status = RideStatus.SCHEDULED

    return replace(
        ride,
        scheduled_for=new_time,
        reminder_sent=False,
        driver_id=None,
        driver_assigned_at=None,
        status=status,
    )


def apply_cancellation(ride: Ride, now: datetime) -> Ride:
    if ride.status == RideStatus.COMPLETED:
        raise RideStateException("Cannot cancel a completed ride")

    return replace(
        ride,
        status=RideStatus.CANCELLED,
        cancelled_at=now,
        driver_id=None,
        driver_assigned_at=None,
    )


def mark_reminder_sent(ride: Ride) -> Ride:
    """
    Latches the reminder flag. It only goes back to False on reschedule.
    """
    if ride.reminder_sent:
        raise RideStateException(f"Reminder for ride {ride.id} was already sent")

    if ride.status not in REMINDABLE_STATUSES:
        raise RideStateException(f"Ride {ride.id} in status {ride.status.value} does not get reminders")

    return replace(ride, reminder_sent=True)

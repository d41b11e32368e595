from .driver_state import DriverStateException, mark_driver_busy, release_driver
from .ride_state import (
    RideStateException,
    apply_cancellation,
    apply_reschedule,
    bind_driver,
    mark_reminder_sent,
)

__all__ = [
    "DriverStateException",
    "RideStateException",
    "apply_cancellation",
    "apply_reschedule",
    "bind_driver",
    "mark_driver_busy",
    "mark_reminder_sent",
    "release_driver",
]

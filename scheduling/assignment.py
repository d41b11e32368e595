"""
Purpose: Assignment transition (the "bind a driver" step).
What it does:
Takes a scheduled ride that entered the assignment window, re-checks it
inside a store transaction, runs the driver matcher and binds the best
driver. Ride (-> CONFIRMED) and driver (-> busy) are persisted together
with version checks, so a duplicate or overlapping poll cannot assign the
same ride twice or hand the same driver to two rides.

Outcomes:
- Assigned: ride confirmed, driver busy, rider + driver notified
- Unavailable: nobody matched, rider gets a push + SMS, ride stays SCHEDULED
- Skipped: the ride changed since it was queried (assigned, rescheduled, cancelled)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Union

from drivers.models import Driver
from notifications import messages
from notifications.sink import NotificationSink, deliver_safely
from rides.models import Ride, RideStatus, utcnow
from storage.memory import InMemoryDatastore

from .policy import SchedulingPolicy, default_policy
from .state_machines import bind_driver, mark_driver_busy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assigned:
    ride: Ride
    driver: Driver


@dataclass(frozen=True)
class Unavailable:
    ride: Ride


@dataclass(frozen=True)
class Skipped:
    ride_id: str
    reason: str


AssignmentOutcome = Union[Assigned, Unavailable, Skipped]


class DriverAssigner:
    """
    Binds drivers to scheduled rides, one ride per call.
    """
    def __init__(
        self,
        datastore: InMemoryDatastore,
        notifier: NotificationSink,
        policy: Optional[SchedulingPolicy] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.datastore = datastore
        self.notifier = notifier
        self.policy = policy or default_policy()
        self.clock = clock

    def try_assign(self, ride: Ride, now: Optional[datetime] = None) -> AssignmentOutcome:
        now = now or self.clock()

        with self.datastore.transaction() as tx:
            # Re-read: the ride passed to us may be a stale query result.
            current = tx.get_ride(ride.id)
            if current is None:
                return Skipped(ride.id, "ride no longer exists")

            if current.status != RideStatus.SCHEDULED:
                return Skipped(ride.id, f"status is {current.status.value}")

            if current.driver_assigned_at is not None:
                return Skipped(ride.id, "driver already assigned")

            driver = tx.find_best_available(current.vehicle_type, current.preferences)
            if driver is None:
                outcome = Unavailable(current)
            else:
                confirmed = tx.save_ride(bind_driver(current, driver, now))
                busy = tx.save_driver(mark_driver_busy(driver))
                outcome = Assigned(confirmed, busy)

        # Notifications go out after commit, never while holding the store.
        if isinstance(outcome, Assigned):
            self._notify_assigned(outcome.ride, outcome.driver)
            logger.info("Driver %s assigned to ride %s", outcome.driver.name, outcome.ride.id)
        else:
            self._notify_no_driver(outcome.ride)
            logger.warning(
                "No %s driver available for ride %s (pickup %s)",
                outcome.ride.vehicle_type.value, outcome.ride.id, outcome.ride.scheduled_for.isoformat(),
            )

        return outcome

    def _notify_assigned(self, ride: Ride, driver: Driver) -> None:
        deliver_safely(self.notifier.notify_user, ride.user_id, messages.driver_assigned_push(ride, driver),
                       description=f"driver assigned push for ride {ride.id}")
        deliver_safely(self.notifier.notify_user, driver.id, messages.new_ride_push(ride),
                       description=f"new ride push to driver {driver.id}")

    def _notify_no_driver(self, ride: Ride) -> None:
        deliver_safely(self.notifier.notify_user, ride.user_id, messages.no_driver_push(ride),
                       description=f"no driver push for ride {ride.id}")
        deliver_safely(self.notifier.notify_sms, ride.user_phone, messages.no_driver_sms(ride, self.policy.brand_name),
                       description=f"no driver sms for ride {ride.id}")

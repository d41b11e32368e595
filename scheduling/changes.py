"""
Purpose: Rider-initiated reschedule and cancel.
What it does:
Reads the ride, validates the request against its current state and, in the
same store transaction, updates the ride and releases any bound driver.
The transaction holds the store lock from read to write, so a concurrent
scheduler poll either sees the ride before the change or after it.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from rides.errors import RideNotFound, ValidationError
from rides.models import Ride, RideStatus, utcnow
from storage.memory import InMemoryDatastore, Transaction

from .policy import SchedulingPolicy, default_policy
from .state_machines import apply_cancellation, apply_reschedule, release_driver

logger = logging.getLogger(__name__)


class RideChangeHandler:
    def __init__(
        self,
        datastore: InMemoryDatastore,
        policy: Optional[SchedulingPolicy] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.datastore = datastore
        self.policy = policy or default_policy()
        self.clock = clock

    def reschedule(self, ride_id: str, new_time: datetime, now: Optional[datetime] = None) -> Ride:
        """
        Moves a ride to `new_time`.

        Raises ValidationError (nothing written) when the ride is completed,
        cancelled or ongoing, or when `new_time` is less than the minimum
        lead time from now. Status is checked first.
        """
        now = now or self.clock()

        def _apply(tx: Transaction, ride: Ride) -> Ride:
            updated = apply_reschedule(ride, new_time)
            if new_time < now + self.policy.min_reschedule_lead:
                raise ValidationError(
                    f"New time must be at least {self.policy.min_reschedule_lead_minutes} minutes from now"
                )
            if ride.has_driver:
                self._release(tx, ride)
            return tx.save_ride(updated)

        ride = self._apply_to_ride(ride_id, _apply)
        logger.info("Ride %s rescheduled to %s", ride_id, new_time.isoformat())
        return ride

    def cancel(self, ride_id: str, now: Optional[datetime] = None) -> Ride:
        """
        Cancels a ride and releases its driver.
        Cancelling an already cancelled ride returns it unchanged.
        """
        now = now or self.clock()

        def _apply(tx: Transaction, ride: Ride) -> Ride:
            if ride.status == RideStatus.CANCELLED:
                return ride
            updated = apply_cancellation(ride, now)
            if ride.has_driver:
                self._release(tx, ride)
            return tx.save_ride(updated)

        ride = self._apply_to_ride(ride_id, _apply)
        logger.info("Ride %s cancelled", ride_id)
        return ride

    # ---- helpers ----

    def _release(self, tx: Transaction, ride: Ride) -> None:
        driver = tx.get_driver(ride.driver_id)
        if driver is None:
            logger.warning("Ride %s points at unknown driver %s", ride.id, ride.driver_id)
            return

        released = release_driver(driver)
        if released is driver:
            logger.warning("Driver %s bound to ride %s was already available", driver.id, ride.id)
            return

        tx.save_driver(released)
        logger.info("Driver %s released from ride %s", driver.id, ride.id)

    def _apply_to_ride(self, ride_id: str, apply: Callable[[Transaction, Ride], Ride]) -> Ride:
        # Any exception raised by `apply` discards the whole transaction.
        with self.datastore.transaction() as tx:
            ride = tx.get_ride(ride_id)
            if ride is None:
                raise RideNotFound(f"Ride {ride_id} not found")
            return apply(tx, ride)

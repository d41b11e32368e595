"""
Purpose: In-memory ride + driver store with optimistic concurrency.
What it does:
- Owns the ride and driver records (by id).
- Every write is a compare-and-swap on the record's `version`:
  a save only lands if the caller read the latest version.
- Multi-record writes (ride + driver) go through a Transaction which
  validates every staged write before any of them is applied.
- Lock acquisition is bounded by `lock_timeout_seconds` so no caller can
  block indefinitely (raises StoreTimeout).

Provides:
   - RideStore   (find_ride, add, save, find_rides_needing_assignment,
                  find_rides_needing_reminder, list_for_user)
   - DriverStore (get, add, save, count, find_best_available, list_available)

Rule: The store owns persistence and version checks, the scheduling package owns state transitions.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from drivers.models import Driver
from drivers.selection import select_driver
from rides.models import REMINDABLE_STATUSES, Preferences, Ride, RideStatus, VehicleType, utcnow

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for transient store failures."""
    pass


class StaleWriteError(StoreError):
    """Raised when a save carries a version older than the stored record."""
    pass


class StoreTimeout(StoreError):
    """Raised when the store lock could not be acquired in time."""
    pass


class RecordNotFound(StoreError):
    pass


class Transaction:
    """
    A unit of work opened by InMemoryDatastore.transaction().

    Reads see staged writes. Saves are version-checked immediately (the
    datastore lock is held for the whole transaction) and applied together
    on commit. An exception inside the `with` block discards everything.
    """
    def __init__(self, datastore: InMemoryDatastore):
        self._datastore = datastore
        self._staged_rides: Dict[str, Ride] = {}
        self._staged_drivers: Dict[str, Driver] = {}

    # --- reads ---

    def get_ride(self, ride_id: str) -> Optional[Ride]:
        if ride_id in self._staged_rides:
            return self._staged_rides[ride_id]
        return self._datastore._rides.get(ride_id)

    def get_driver(self, driver_id: str) -> Optional[Driver]:
        if driver_id in self._staged_drivers:
            return self._staged_drivers[driver_id]
        return self._datastore._drivers.get(driver_id)

    def rides(self) -> List[Ride]:
        merged = dict(self._datastore._rides)
        merged.update(self._staged_rides)
        return list(merged.values())

    def drivers(self) -> List[Driver]:
        merged = dict(self._datastore._drivers)
        merged.update(self._staged_drivers)
        return list(merged.values())

    def find_best_available(self, vehicle_type: VehicleType, preferences: Optional[Preferences] = None) -> Optional[Driver]:
        return select_driver(self.drivers(), vehicle_type, preferences)

    # --- writes ---

    def save_ride(self, ride: Ride) -> Ride:
        current = self.get_ride(ride.id)
        if current is None:
            raise RecordNotFound(f"Ride {ride.id} does not exist")
        if current.version != ride.version:
            raise StaleWriteError(f"Ride {ride.id} is at version {current.version}, write was based on {ride.version}")

        saved = replace(ride, version=ride.version + 1)
        self._staged_rides[ride.id] = saved
        return saved

    def save_driver(self, driver: Driver) -> Driver:
        current = self.get_driver(driver.id)
        if current is None:
            raise RecordNotFound(f"Driver {driver.id} does not exist")
        if current.version != driver.version:
            raise StaleWriteError(f"Driver {driver.id} is at version {current.version}, write was based on {driver.version}")

        saved = replace(driver, version=driver.version + 1)
        self._staged_drivers[driver.id] = saved
        return saved

    def _commit(self) -> None:
        self._datastore._rides.update(self._staged_rides)
        self._datastore._drivers.update(self._staged_drivers)


@dataclass
class InMemoryDatastore:
    """
    Single consistent data store shared by the ride and driver stores.
    """
    lock_timeout_seconds: float = 5.0

    _rides: Dict[str, Ride] = field(default_factory=dict)
    _drivers: Dict[str, Driver] = field(default_factory=dict)
    _lock: threading.RLock = field(default_factory=threading.RLock)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        if not self._lock.acquire(timeout=self.lock_timeout_seconds):
            logger.warning("Store lock not acquired within %ss", self.lock_timeout_seconds)
            raise StoreTimeout(f"Could not acquire store lock within {self.lock_timeout_seconds}s")
        try:
            tx = Transaction(self)
            yield tx
            tx._commit()
        finally:
            self._lock.release()


class RideStore:
    def __init__(self, datastore: InMemoryDatastore):
        self.datastore = datastore

    def find_ride(self, ride_id: str) -> Optional[Ride]:
        with self.datastore.transaction() as tx:
            return tx.get_ride(ride_id)

    def add(self, ride: Ride) -> Ride:
        """
        Insert a new ride. Idempotent: adding an existing id returns the stored record.
        """
        with self.datastore.transaction() as tx:
            existing = tx.get_ride(ride.id)
            if existing is not None:
                return existing
            stored = replace(ride, version=1)
            self.datastore._rides[ride.id] = stored
            return stored

    def save(self, ride: Ride) -> Ride:
        """
        Conditional save: only lands if `ride.version` is still the stored version.
        """
        with self.datastore.transaction() as tx:
            return tx.save_ride(ride)

    def find_rides_needing_assignment(self, window) -> List[Ride]:
        with self.datastore.transaction() as tx:
            rides = [
                ride for ride in tx.rides()
                if ride.status == RideStatus.SCHEDULED
                and ride.is_scheduled
                and ride.driver_assigned_at is None
                and window.contains(ride.scheduled_for)
            ]
        return sorted(rides, key=lambda ride: (ride.scheduled_for, ride.id))

    def find_rides_needing_reminder(self, window) -> List[Ride]:
        with self.datastore.transaction() as tx:
            rides = [
                ride for ride in tx.rides()
                if ride.status in REMINDABLE_STATUSES
                and not ride.reminder_sent
                and window.contains(ride.scheduled_for)
            ]
        return sorted(rides, key=lambda ride: (ride.scheduled_for, ride.id))

    def list_for_user(self, user_id: str, ride_filter: Optional[str] = None, now: Optional[datetime] = None) -> List[Ride]:
        """
        Rides of one user, newest pickup first.

        ride_filter:
        - "upcoming": pickup in the future and not completed/cancelled
        - "past": completed/cancelled or pickup already passed
        - "scheduled": scheduled rides still waiting for a driver
        - None: everything
        """
        now = now or utcnow()
        with self.datastore.transaction() as tx:
            rides = [ride for ride in tx.rides() if ride.user_id == user_id]

        if ride_filter == "upcoming":
            rides = [ride for ride in rides if ride.scheduled_for >= now and not ride.is_terminal]
        elif ride_filter == "past":
            rides = [ride for ride in rides if ride.is_terminal or ride.scheduled_for < now]
        elif ride_filter == "scheduled":
            rides = [ride for ride in rides if ride.is_scheduled and ride.status == RideStatus.SCHEDULED]
        elif ride_filter is not None:
            raise ValueError(f"Unknown ride filter: {ride_filter}")

        return sorted(rides, key=lambda ride: ride.scheduled_for, reverse=True)


class DriverStore:
    def __init__(self, datastore: InMemoryDatastore):
        self.datastore = datastore

    def get(self, driver_id: str) -> Optional[Driver]:
        with self.datastore.transaction() as tx:
            return tx.get_driver(driver_id)

    def add(self, driver: Driver) -> Driver:
        with self.datastore.transaction() as tx:
            existing = tx.get_driver(driver.id)
            if existing is not None:
                return existing
            stored = replace(driver, version=1)
            self.datastore._drivers[driver.id] = stored
            return stored

    def save(self, driver: Driver) -> Driver:
        with self.datastore.transaction() as tx:
            return tx.save_driver(driver)

    def count(self) -> int:
        with self.datastore.transaction() as tx:
            return len(tx.drivers())

    def find_best_available(self, vehicle_type: VehicleType, preferences: Optional[Preferences] = None) -> Optional[Driver]:
        with self.datastore.transaction() as tx:
            return tx.find_best_available(vehicle_type, preferences)

    def list_available(self, vehicle_type: Optional[VehicleType] = None, limit: int = 5) -> List[Driver]:
        with self.datastore.transaction() as tx:
            drivers = [
                driver for driver in tx.drivers()
                if driver.is_available and (vehicle_type is None or driver.vehicle.type == vehicle_type)
            ]
        drivers.sort(key=lambda driver: driver.id)
        return drivers[:limit]


def build_stores(lock_timeout_seconds: float = 5.0) -> Tuple[InMemoryDatastore, RideStore, DriverStore]:
    """
    Convenience factory: one datastore shared by both stores.
    """
    datastore = InMemoryDatastore(lock_timeout_seconds=lock_timeout_seconds)
    return datastore, RideStore(datastore), DriverStore(datastore)

"""
Drives the ride scheduler against a simulated clock.

Loads the driver roster from sampledata/drivers.csv, books a handful of
scheduled rides, then advances time one poll interval at a time and prints
what every cycle did. With --live the real background loop is started instead
and runs until Ctrl+C.
"""

import argparse
import logging
import os
import random
import time
from datetime import datetime, timedelta, timezone

from drivers.seed import load_drivers_csv, seed_drivers
from notifications import HttpNotificationSink, InMemoryNotificationSink, NotificationClient
from rides.booking import book_ride
from rides.models import Preferences
from scheduling import RideChangeHandler, RideScheduler, policy_from_env
from storage import build_stores

logger = logging.getLogger("simulation")

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class SimulatedClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def build_notifier(policy):
    if os.getenv("NOTIFY_BASE_URL"):
        return HttpNotificationSink(NotificationClient(timeout=policy.notification_timeout_seconds))
    return InMemoryNotificationSink()


def book_sample_rides(ride_store, policy, now, count=8):
    vehicle_types = ["sedan", "sedan", "luxury", "suv", "auto"]
    rides = []
    for i in range(count):
        result = book_ride(
            ride_store,
            user_id=f"user_{i}",
            user_phone=f"+91 90000 000{i:02d}",
            pickup=f"Pickup point {i}",
            dropoff=f"Dropoff point {i}",
            vehicle_type=random.choice(vehicle_types),
            preferences=Preferences(female_driver=(i % 4 == 0)),
            scheduled_for=now + timedelta(minutes=random.randint(35, 90)),
            now=now,
            policy=policy,
        )
        logger.info(result.message)
        rides.append(result.ride)
    return rides


def run_simulation(minutes: int, seed: int) -> None:
    random.seed(seed)
    policy = policy_from_env()
    clock = SimulatedClock(datetime.now(timezone.utc).replace(second=0, microsecond=0))

    datastore, ride_store, driver_store = build_stores(policy.store_timeout_seconds)
    seed_drivers(driver_store, load_drivers_csv(os.path.join(BASE_DIR, "sampledata/drivers.csv")))

    notifier = build_notifier(policy)
    scheduler = RideScheduler(datastore, notifier, policy, clock=clock)
    changes = RideChangeHandler(datastore, policy, clock=clock)

    rides = book_sample_rides(ride_store, policy, clock())

    # One rider moves their pickup later half way through.
    reschedule_at = clock() + timedelta(minutes=minutes // 2)
    rescheduled = False

    for _ in range(int(minutes * 60 / policy.poll_interval_seconds)):
        clock.advance(policy.poll_interval_seconds)
        report = scheduler.run_cycle()
        if report.assigned or report.unavailable or report.reminded:
            print(
                f"[{clock().strftime('%H:%M')}] assigned={len(report.assigned)} "
                f"no_driver={len(report.unavailable)} reminded={len(report.reminded)}"
            )

        if not rescheduled and clock() >= reschedule_at:
            ride = ride_store.find_ride(rides[0].id)
            if not ride.is_terminal:
                changes.reschedule(ride.id, clock() + timedelta(minutes=45))
            rescheduled = True

    print("\n--- Final ride states ---")
    for ride in rides:
        ride = ride_store.find_ride(ride.id)
        print(f"{ride.id[:8]} {ride.vehicle_type.value:<7} {ride.status.value:<10} "
              f"driver={ride.driver_id or '-':<8} reminder_sent={ride.reminder_sent}")

    print("\n--- Drivers ---")
    for driver in sorted(driver_store.list_available(limit=100), key=lambda d: d.id):
        print(f"{driver.id} available")


def run_live() -> None:
    policy = policy_from_env()
    datastore, ride_store, driver_store = build_stores(policy.store_timeout_seconds)
    seed_drivers(driver_store)

    scheduler = RideScheduler(datastore, build_notifier(policy), policy)
    scheduler.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--minutes", type=int, default=90, help="simulated minutes to run")
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--live", action="store_true", help="run the real background loop")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.live:
        run_live()
    else:
        run_simulation(args.minutes, args.seed)


if __name__ == "__main__":
    main()

import threading
import time
from datetime import timedelta

import pytest

from rides.models import Preferences, RideStatus
from scheduling.policy import SchedulingPolicy
from scheduling.scheduler import RideScheduler, SchedulerState

from .conftest import make_driver, make_ride


@pytest.fixture
def scheduler(datastore, notifier, policy, now):
    return RideScheduler(datastore, notifier, policy, clock=lambda: now)


def wait_for(condition, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return False


def test_scenario_sedan_ride_gets_confirmed(scheduler, ride_store, driver_store, notifier):
    ride_store.add(make_ride("r1", 17))
    driver_store.add(make_driver("d1", "sedan", rating=4.8))

    report = scheduler.run_cycle()

    assert report.assigned == ["r1"]
    assert ride_store.find_ride("r1").status == RideStatus.CONFIRMED
    assert driver_store.get("d1").is_available is False
    assert len(notifier.inbox("user_r1")) == 1
    assert len(notifier.inbox("d1")) == 1


def test_scenario_no_female_driver(scheduler, ride_store, driver_store, notifier):
    original = ride_store.add(make_ride("r1", 17, preferences=Preferences(female_driver=True)))
    driver_store.add(make_driver("d1", "sedan", gender="male"))
    driver_store.add(make_driver("d2", "suv", gender="female"))

    report = scheduler.run_cycle()

    assert report.unavailable == ["r1"]
    assert ride_store.find_ride("r1") == original
    assert len(notifier.inbox("user_r1")) == 1
    assert len(notifier.sms) == 1
    assert driver_store.get("d1").version == 1
    assert driver_store.get("d2").version == 1


def test_every_ride_in_window_is_resolved(scheduler, ride_store, driver_store, notifier, now):
    for i, minutes in enumerate([15, 16, 17, 18, 20]):
        ride_store.add(make_ride(f"r{i}", minutes))
    driver_store.add(make_driver("d1", rating=4.1))
    driver_store.add(make_driver("d2", rating=4.9))

    report = scheduler.run_cycle()

    assert len(report.assigned) == 2
    assert len(report.unavailable) == 3
    bound = [ride_store.find_ride(f"r{i}").driver_id for i in range(5)]
    assert sorted(d for d in bound if d) == ["d1", "d2"]
    # the earliest pickups get the best drivers
    assert bound[:2] == ["d2", "d1"]
    for ride_id in report.unavailable:
        assert ride_store.find_ride(ride_id).status == RideStatus.SCHEDULED


def test_unavailable_ride_is_retried_on_next_poll(scheduler, ride_store, driver_store, now):
    ride_store.add(make_ride("r1", 19))

    assert scheduler.run_cycle(now).unavailable == ["r1"]

    driver_store.add(make_driver("d1"))
    report = scheduler.run_cycle(now + timedelta(minutes=1))

    assert report.assigned == ["r1"]


def test_cycle_assigns_and_reminds(scheduler, ride_store, driver_store, notifier):
    ride_store.add(make_ride("soon", 16))
    ride_store.add(make_ride("later", 60))
    driver_store.add(make_driver("d1"))

    report = scheduler.run_cycle()

    assert report.assigned == ["soon"]
    assert report.reminded == ["later"]


def test_one_failing_ride_does_not_abort_cycle(scheduler, ride_store, driver_store, monkeypatch):
    ride_store.add(make_ride("bad", 16))
    ride_store.add(make_ride("good", 17))
    driver_store.add(make_driver("d1"))
    driver_store.add(make_driver("d2"))

    original = scheduler.assigner.try_assign

    def flaky(ride, now=None):
        if ride.id == "bad":
            raise RuntimeError("store timed out")
        return original(ride, now)

    monkeypatch.setattr(scheduler.assigner, "try_assign", flaky)

    report = scheduler.run_cycle()

    assert report.failed == ["bad"]
    assert report.assigned == ["good"]


def test_start_stop_lifecycle(datastore, notifier, now):
    scheduler = RideScheduler(datastore, notifier, SchedulingPolicy(poll_interval_seconds=0.01), clock=lambda: now)
    assert scheduler.state == SchedulerState.STOPPED

    scheduler.start()
    worker = scheduler._worker
    scheduler.start()  # no-op
    assert scheduler._worker is worker
    assert scheduler.state == SchedulerState.RUNNING

    assert wait_for(lambda: scheduler.cycles_run >= 2)

    scheduler.stop()
    assert scheduler.state == SchedulerState.STOPPED
    assert not worker.is_alive()
    cycles = scheduler.cycles_run
    time.sleep(0.05)
    assert scheduler.cycles_run == cycles

    scheduler.stop()  # no-op
    assert scheduler.state == SchedulerState.STOPPED


def test_running_loop_assigns_drivers(datastore, ride_store, driver_store, notifier, now):
    ride_store.add(make_ride("r1", 17))
    driver_store.add(make_driver("d1"))
    scheduler = RideScheduler(datastore, notifier, SchedulingPolicy(poll_interval_seconds=0.01), clock=lambda: now)

    scheduler.start()
    try:
        assert wait_for(lambda: ride_store.find_ride("r1").status == RideStatus.CONFIRMED)
    finally:
        scheduler.stop()


def test_loop_survives_failing_cycle(datastore, notifier, now, monkeypatch):
    scheduler = RideScheduler(datastore, notifier, SchedulingPolicy(poll_interval_seconds=0.01), clock=lambda: now)
    calls = []

    def exploding_reminders(now=None):
        calls.append(now)
        raise RuntimeError("boom")

    monkeypatch.setattr(scheduler.reminders, "send_reminders", exploding_reminders)

    scheduler.start()
    try:
        assert wait_for(lambda: len(calls) >= 3)
        assert scheduler.is_running
    finally:
        scheduler.stop()


def test_stop_lets_in_flight_cycle_finish(datastore, notifier, now, monkeypatch):
    scheduler = RideScheduler(datastore, notifier, SchedulingPolicy(poll_interval_seconds=0.01), clock=lambda: now)
    entered = threading.Event()
    finished = threading.Event()

    def slow_reminders(now=None):
        entered.set()
        time.sleep(0.1)
        finished.set()
        raise RuntimeError("done")

    monkeypatch.setattr(scheduler.reminders, "send_reminders", slow_reminders)

    scheduler.start()
    assert entered.wait(5)
    scheduler.stop()

    assert finished.is_set()

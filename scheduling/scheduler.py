"""
Purpose: The scheduler loop (the "heartbeat" of scheduled rides).
What it does:
Owns a background worker that, every `poll_interval_seconds`, runs one cycle:

1. find scheduled rides in the assignment window with no driver yet
2. run the assignment transition for each of them
3. run the reminder dispatcher

Lifecycle is an explicit handle: STOPPED -> start() -> RUNNING -> stop() -> STOPPED.
Stopping only prevents new cycles, a cycle already running is allowed to finish.
One ride failing never aborts the cycle, and a failing cycle never kills the loop.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from notifications.sink import NotificationSink
from rides.models import utcnow
from storage.memory import InMemoryDatastore, RideStore

from .assignment import Assigned, DriverAssigner, Skipped, Unavailable
from .policy import SchedulingPolicy, default_policy
from .reminders import ReminderDispatcher
from .windows import assignment_window

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass
class CycleReport:
    started_at: datetime
    assigned: List[str] = field(default_factory=list)
    unavailable: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    reminded: List[str] = field(default_factory=list)
    reminder_failures: List[str] = field(default_factory=list)
    reminder_skipped: List[str] = field(default_factory=list)


class RideScheduler:
    """
    Periodically reconciles scheduled rides against the driver pool.
    """
    def __init__(
        self,
        datastore: InMemoryDatastore,
        notifier: NotificationSink,
        policy: Optional[SchedulingPolicy] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.policy = policy or default_policy()
        self.clock = clock
        self.datastore = datastore
        self.ride_store = RideStore(datastore)

        self.assigner = DriverAssigner(datastore, notifier, self.policy, clock)
        self.reminders = ReminderDispatcher(self.ride_store, notifier, self.policy, clock)

        self._state = SchedulerState.STOPPED
        self._state_lock = threading.Lock()
        # Only one cycle at a time, even if run_cycle is also called by hand.
        self._cycle_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._worker: Optional[threading.Thread] = None
        self.cycles_run = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SchedulerState.RUNNING

    def start(self) -> None:
        with self._state_lock:
            if self._state == SchedulerState.RUNNING:
                return

            self._stop_event = threading.Event()
            self._worker = threading.Thread(
                target=self._run_forever,
                args=(self._stop_event,),
                name="ride-scheduler",
                daemon=True,
            )
            self._state = SchedulerState.RUNNING
            self._worker.start()

        logger.info("Ride scheduler started (every %ss)", self.policy.poll_interval_seconds)

    def stop(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """
        Prevents new cycles. With `wait`, blocks until the in-flight cycle (if any) finishes.
        """
        with self._state_lock:
            if self._state == SchedulerState.STOPPED:
                return

            self._stop_event.set()
            worker = self._worker
            self._worker = None
            self._state = SchedulerState.STOPPED

        if wait and worker is not None and worker is not threading.current_thread():
            worker.join(timeout)

        logger.info("Ride scheduler stopped")

    def _run_forever(self, stop_event: threading.Event) -> None:
        # The stop token is only checked between cycles.
        while not stop_event.wait(self.policy.poll_interval_seconds):
            try:
                self.run_cycle()
            except Exception:
                logger.exception("Scheduler cycle failed")

    def run_cycle(self, now: Optional[datetime] = None) -> CycleReport:
        now = now or self.clock()
        report = CycleReport(started_at=now)

        with self._cycle_lock:
            self._assign_drivers(now, report)
            self._send_reminders(now, report)
            self.cycles_run += 1

        logger.debug(
            "Cycle at %s: %d assigned, %d unavailable, %d failed, %d reminded",
            now.isoformat(), len(report.assigned), len(report.unavailable), len(report.failed), len(report.reminded),
        )
        return report

    def _assign_drivers(self, now: datetime, report: CycleReport) -> None:
        try:
            rides = self.ride_store.find_rides_needing_assignment(assignment_window(now, self.policy))
        except Exception as e:
            logger.error("Could not load rides needing assignment: %s", e)
            return

        for ride in rides:
            try:
                outcome = self.assigner.try_assign(ride, now)
            except Exception as e:
                logger.error("Assignment failed for ride %s: %s", ride.id, e)
                report.failed.append(ride.id)
                continue

            if isinstance(outcome, Assigned):
                report.assigned.append(ride.id)
            elif isinstance(outcome, Unavailable):
                report.unavailable.append(ride.id)
            elif isinstance(outcome, Skipped):
                logger.info("Ride %s skipped: %s", ride.id, outcome.reason)
                report.skipped.append(ride.id)

    def _send_reminders(self, now: datetime, report: CycleReport) -> None:
        try:
            reminders = self.reminders.send_reminders(now)
        except Exception as e:
            logger.error("Reminder dispatch failed: %s", e)
            return

        report.reminded.extend(reminders.sent)
        report.reminder_failures.extend(reminders.failed)
        report.reminder_skipped.extend(reminders.skipped)

"""
Purpose: Reminder dispatcher.
What it does:
Finds rides whose pickup is about an hour away and that have not been
reminded yet, sends a push + SMS (pickup address, time, OTP) and latches
`reminder_sent`. The ride is re-read before each send, so a ride cancelled or
rescheduled after the query gets nothing more. The flag is written only after
both sends were attempted, and the write is version-checked so a ride
rescheduled in the meantime keeps its re-armed flag.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from notifications import messages
from notifications.sink import NotificationSink, deliver_safely
from rides.models import REMINDABLE_STATUSES, Ride, utcnow
from storage.memory import RideStore, StoreError

from .policy import SchedulingPolicy, default_policy
from .state_machines import RideStateException, mark_reminder_sent
from .windows import reminder_window

logger = logging.getLogger(__name__)


@dataclass
class ReminderReport:
    sent: List[str] = field(default_factory=list)  # ride ids
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class ReminderDispatcher:
    def __init__(
        self,
        ride_store: RideStore,
        notifier: NotificationSink,
        policy: Optional[SchedulingPolicy] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.ride_store = ride_store
        self.notifier = notifier
        self.policy = policy or default_policy()
        self.clock = clock

    def send_reminders(self, now: Optional[datetime] = None) -> ReminderReport:
        now = now or self.clock()
        report = ReminderReport()

        rides = self.ride_store.find_rides_needing_reminder(reminder_window(now, self.policy))

        for ride in rides:
            try:
                if self._remind(ride):
                    report.sent.append(ride.id)
                else:
                    report.skipped.append(ride.id)
            except (StoreError, RideStateException) as e:
                logger.error("Reminder for ride %s not recorded: %s", ride.id, e)
                report.failed.append(ride.id)
            except Exception:
                logger.exception("Reminder for ride %s failed", ride.id)
                report.failed.append(ride.id)

        return report

    def _still_due(self, ride: Ride) -> Optional[Ride]:
        """
        Fresh copy of `ride` when it still needs this reminder, None when it
        was removed, cancelled, moved to another pickup time or already reminded.
        """
        current = self.ride_store.find_ride(ride.id)
        if current is None:
            return None
        if current.status not in REMINDABLE_STATUSES or current.reminder_sent:
            return None
        if current.scheduled_for != ride.scheduled_for:
            return None
        return current

    def _remind(self, ride: Ride) -> bool:
        current = self._still_due(ride)
        if current is None:
            logger.info("Ride %s changed since the reminder query, skipped", ride.id)
            return False

        deliver_safely(self.notifier.notify_user, current.user_id, messages.reminder_push(current),
                       description=f"reminder push for ride {current.id}")

        current = self._still_due(current)
        if current is None:
            logger.info("Ride %s changed after the reminder push, SMS not sent", ride.id)
            return False

        deliver_safely(self.notifier.notify_sms, current.user_phone, messages.reminder_sms(current, self.policy.brand_name),
                       description=f"reminder sms for ride {current.id}")

        self.ride_store.save(mark_reminder_sent(current))
        logger.info("Reminder sent for ride %s", current.id)
        return True

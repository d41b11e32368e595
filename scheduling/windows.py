"""
Purpose: Time-window classifier for the scheduler.
What it does:
Given "now", computes the pickup-time ranges the scheduler acts on:
- assignment window: pickup in 15..20 minutes -> bind a driver
- reminder window:   pickup in 58..62 minutes -> send the one-time reminder

The windows are ranges rather than instants so a ride whose trigger moment
falls between two polls is still seen by at least one poll.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .policy import SchedulingPolicy, default_policy


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        # inclusive on both ends
        return self.start <= instant <= self.end

    @property
    def width(self) -> timedelta:
        return self.end - self.start


def assignment_window(now: datetime, policy: Optional[SchedulingPolicy] = None) -> TimeWindow:
    policy = policy or default_policy()
    return TimeWindow(
        start=now + timedelta(minutes=policy.assignment_window_start_minutes),
        end=now + timedelta(minutes=policy.assignment_window_end_minutes),
    )


def reminder_window(now: datetime, policy: Optional[SchedulingPolicy] = None) -> TimeWindow:
    policy = policy or default_policy()
    return TimeWindow(
        start=now + timedelta(minutes=policy.reminder_window_start_minutes),
        end=now + timedelta(minutes=policy.reminder_window_end_minutes),
    )

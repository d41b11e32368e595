"""
Purpose: Central configuration for the ride scheduler (single source of truth).
What it does:

Stores all tunable timing thresholds:

POLL_INTERVAL_SECONDS = 60
ASSIGNMENT_WINDOW = now + 15 min .. now + 20 min
REMINDER_WINDOW = now + 58 min .. now + 62 min
MIN_RESCHEDULE_LEAD = 30 min
MIN/MAX BOOKING LEAD = 30 min / 7 days

Every value can be overridden from the environment (SCHEDULER_* variables,
optionally loaded from a .env file).

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from datetime import timedelta

from dotenv import load_dotenv

ENV_PREFIX = "SCHEDULER_"


@dataclass(frozen=True)
class SchedulingPolicy:
    """
    Central configuration for scheduled ride processing.
    """

    # --- Loop cadence ---
    # How often the scheduler wakes up to scan for rides.
    poll_interval_seconds: float = 60.0

    # --- Assignment window ---
    # A driver is bound when pickup is between these offsets from now.
    # Must be at least as wide as the poll interval or rides can slip between polls.
    assignment_window_start_minutes: int = 15
    assignment_window_end_minutes: int = 20

    # --- Reminder window ---
    # One reminder roughly an hour before pickup (60 min +/- 2).
    reminder_window_start_minutes: int = 58
    reminder_window_end_minutes: int = 62

    # --- Lead times ---
    min_reschedule_lead_minutes: int = 30
    min_booking_lead_minutes: int = 30
    max_booking_lead_days: int = 7

    # --- Bounded calls ---
    store_timeout_seconds: float = 5.0
    notification_timeout_seconds: float = 5.0

    # --- Messaging ---
    brand_name: str = "LuxeRide"

    @property
    def min_reschedule_lead(self) -> timedelta:
        return timedelta(minutes=self.min_reschedule_lead_minutes)

    @property
    def min_booking_lead(self) -> timedelta:
        return timedelta(minutes=self.min_booking_lead_minutes)

    @property
    def max_booking_lead(self) -> timedelta:
        return timedelta(days=self.max_booking_lead_days)

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup.
        """
        if self.poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be > 0")

        if self.assignment_window_start_minutes < 0:
            raise ValueError("assignment_window_start_minutes must be >= 0")

        if self.assignment_window_end_minutes <= self.assignment_window_start_minutes:
            raise ValueError("assignment window end must be after its start")

        if self.reminder_window_end_minutes <= self.reminder_window_start_minutes:
            raise ValueError("reminder window end must be after its start")

        if self.poll_interval_seconds > 60 * (self.assignment_window_end_minutes - self.assignment_window_start_minutes):
            raise ValueError("poll_interval_seconds must not exceed the assignment window width")

        if self.poll_interval_seconds > 60 * (self.reminder_window_end_minutes - self.reminder_window_start_minutes):
            raise ValueError("poll_interval_seconds must not exceed the reminder window width")

        if self.min_booking_lead_minutes < 0 or self.min_reschedule_lead_minutes < 0:
            raise ValueError("lead times must be >= 0")

        if self.max_booking_lead > timedelta(0) and self.max_booking_lead < self.min_booking_lead:
            raise ValueError("max booking lead must be >= min booking lead")

        if self.store_timeout_seconds <= 0 or self.notification_timeout_seconds <= 0:
            raise ValueError("timeouts must be > 0")


def default_policy() -> SchedulingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = SchedulingPolicy()
    p.validate()
    return p


def policy_from_env(environ=None) -> SchedulingPolicy:
    """
    Builds a policy from SCHEDULER_<FIELD_NAME> variables, e.g.
    SCHEDULER_POLL_INTERVAL_SECONDS=30. Unset variables keep their defaults.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    overrides = {}
    for policy_field in fields(SchedulingPolicy):
        raw = environ.get(ENV_PREFIX + policy_field.name.upper())
        if raw is None or raw == "":
            continue
        default = getattr(SchedulingPolicy, policy_field.name)
        try:
            overrides[policy_field.name] = type(default)(raw)
        except ValueError:
            raise ValueError(f"Invalid value for {ENV_PREFIX + policy_field.name.upper()}: {raw!r}")

    p = SchedulingPolicy(**overrides)
    p.validate()
    return p

#Expose the high-level scheduling pieces:
#Time windows (when to act)
#Assignment transition (bind a driver)
#Reminder dispatcher (one reminder per pickup time)
#Reschedule / cancel handler
#RideScheduler (the loop, the "one object" entry point)

from .assignment import Assigned, DriverAssigner, Skipped, Unavailable
from .changes import RideChangeHandler
from .policy import SchedulingPolicy, default_policy, policy_from_env
from .reminders import ReminderDispatcher, ReminderReport
from .scheduler import CycleReport, RideScheduler, SchedulerState
from .windows import TimeWindow, assignment_window, reminder_window

__all__ = [
    "Assigned",
    "CycleReport",
    "DriverAssigner",
    "ReminderDispatcher",
    "ReminderReport",
    "RideChangeHandler",
    "RideScheduler",
    "SchedulerState",
    "SchedulingPolicy",
    "Skipped",
    "TimeWindow",
    "Unavailable",
    "assignment_window",
    "default_policy",
    "policy_from_env",
    "reminder_window",
]

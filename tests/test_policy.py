import pytest

from scheduling.policy import SchedulingPolicy, default_policy, policy_from_env


def test_defaults():
    p = default_policy()

    assert p.poll_interval_seconds == 60
    assert (p.assignment_window_start_minutes, p.assignment_window_end_minutes) == (15, 20)
    assert (p.reminder_window_start_minutes, p.reminder_window_end_minutes) == (58, 62)
    assert p.min_reschedule_lead_minutes == 30
    assert (p.min_booking_lead_minutes, p.max_booking_lead_days) == (30, 7)


def test_env_overrides():
    p = policy_from_env({
        "SCHEDULER_POLL_INTERVAL_SECONDS": "15",
        "SCHEDULER_ASSIGNMENT_WINDOW_END_MINUTES": "25",
        "SCHEDULER_BRAND_NAME": "CityCabs",
        "SCHEDULER_MIN_RESCHEDULE_LEAD_MINUTES": "",
    })

    assert p.poll_interval_seconds == 15.0
    assert p.assignment_window_end_minutes == 25
    assert p.brand_name == "CityCabs"
    assert p.min_reschedule_lead_minutes == 30


def test_env_rejects_garbage():
    with pytest.raises(ValueError):
        policy_from_env({"SCHEDULER_ASSIGNMENT_WINDOW_START_MINUTES": "soon"})


@pytest.mark.parametrize("overrides", [
    {"poll_interval_seconds": 0},
    {"assignment_window_start_minutes": 20, "assignment_window_end_minutes": 15},
    {"reminder_window_start_minutes": 62, "reminder_window_end_minutes": 62},
    {"notification_timeout_seconds": 0},
])
def test_validate(overrides):
    with pytest.raises(ValueError):
        SchedulingPolicy(**overrides).validate()


@pytest.mark.parametrize("overrides", [
    {"poll_interval_seconds": 600},
    # wider than the 4 minute reminder window, narrower than the 5 minute assignment window
    {"poll_interval_seconds": 250},
    {"poll_interval_seconds": 120, "assignment_window_start_minutes": 15, "assignment_window_end_minutes": 16},
])
def test_poll_interval_must_fit_in_windows(overrides):
    with pytest.raises(ValueError):
        SchedulingPolicy(**overrides).validate()


def test_poll_interval_equal_to_window_width_is_allowed():
    SchedulingPolicy(poll_interval_seconds=240).validate()


def test_env_rejects_slow_polling():
    with pytest.raises(ValueError):
        policy_from_env({"SCHEDULER_POLL_INTERVAL_SECONDS": "600"})

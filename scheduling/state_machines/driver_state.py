from dataclasses import replace

from drivers.models import Driver


class DriverStateException(Exception):
    """Raised when an invalid driver transition is attempted."""
    pass


def mark_driver_busy(driver: Driver) -> Driver:
    """
    Called when a driver is bound to a scheduled ride.
    A busy driver can never be bound a second time.
    """
    if not driver.is_available:
        raise DriverStateException(f"Driver {driver.id} is already bound to a ride")

    return replace(driver, is_available=False)


def release_driver(driver: Driver) -> Driver:
    """
    Called when the ride holding the driver is rescheduled, cancelled or completed.
    Releasing an already available driver returns it unchanged.
    """
    if driver.is_available:
        return driver

    return replace(driver, is_available=True)

"""
Purpose: Business rules for choosing the absolute best driver for a scheduled ride.
What it does:
Accepts a ride's vehicle type + preferences and a pool of drivers, filters out
ineligible drivers, and ranks the remaining ones (highest rating first).
"""

from typing import Iterable, List, Optional

from rides.models import Preferences, VehicleType
from .models import Driver, Gender


def filter_eligible_drivers(
    drivers: Iterable[Driver],
    vehicle_type: VehicleType,
    preferences: Optional[Preferences] = None,
) -> List[Driver]:
    """
    Returns only drivers who are available, drive the requested vehicle type
    and satisfy the hard preference filters (female driver).
    """
    preferences = preferences or Preferences()
    eligible = []

    for driver in drivers:
        if not driver.is_available:
            continue

        if driver.vehicle.type != vehicle_type:
            continue

        if preferences.female_driver and driver.gender != Gender.FEMALE:
            continue

        eligible.append(driver)

    return eligible


def rank_drivers(drivers: Iterable[Driver]) -> List[Driver]:
    # rating desc, id asc keeps ties deterministic for a given snapshot
    return sorted(drivers, key=lambda driver: (-driver.rating, driver.id))


def select_driver(
    drivers: Iterable[Driver],
    vehicle_type: VehicleType,
    preferences: Optional[Preferences] = None,
) -> Optional[Driver]:
    """
    Picks the best available driver or None when nobody qualifies.
    None is a normal outcome, the caller escalates to the no-driver path.
    """
    ranked = rank_drivers(filter_eligible_drivers(drivers, vehicle_type, preferences))
    if not ranked:
        return None
    return ranked[0]

#Drivers domain package.
#Re-exports the driver models and the matcher so callers can do
#from drivers import Driver, select_driver
#No business logic.

from .models import Driver, Gender, Vehicle
from .selection import filter_eligible_drivers, rank_drivers, select_driver

__all__ = [
    "Driver",
    "Gender",
    "Vehicle",
    "filter_eligible_drivers",
    "rank_drivers",
    "select_driver",
]

"""
Rides domain package.

Public API:
- Domain models: Ride, RideStatus, VehicleType, Location, Preferences
- Errors: ValidationError, RideNotFound

Booking lives in rides.booking (it depends on the scheduling policy).
"""
from .errors import RideNotFound, ValidationError
from .models import Location, Preferences, Ride, RideStatus, VehicleType

__all__ = ["Ride",
           "RideStatus",
             "VehicleType",
               "Location",
                 "Preferences",
                   "RideNotFound",
                     "ValidationError",
               ]

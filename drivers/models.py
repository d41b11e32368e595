"""
Purpose: Core data models for the drivers domain.
What it does:
Defines the structure of a Driver, their vehicle and gender without relying on any ORM.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from rides.models import VehicleType


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


@dataclass(frozen=True)
class Vehicle:
    type: VehicleType
    number_plate: str
    model: str = ""
    color: str = ""


@dataclass(frozen=True)
class Driver:
    """
    A purely stateless representation of a Driver at a specific point in time.
    Availability flips are done with dataclasses.replace and a versioned save.
    """
    id: str
    name: str
    phone: str
    vehicle: Vehicle
    gender: Gender = Gender.OTHER
    email: str = ""

    # average rating, 0..5
    rating: float = 5.0
    is_available: bool = True

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0

    @classmethod
    def new(
        cls,
        driver_id: str,
        name: str,
        vehicle_type: str | VehicleType,
        number_plate: str,
        gender: str | Gender = Gender.OTHER,
        rating: float = 5.0,
        is_available: bool = True,
        phone: str = "",
        email: str = "",
        model: str = "",
        color: str = "",
    ) -> Driver:
        if isinstance(vehicle_type, str):
            vehicle_type = VehicleType(vehicle_type)
        if isinstance(gender, str):
            gender = Gender(gender)

        return cls(
            id=driver_id,
            name=name,
            phone=phone,
            email=email,
            gender=gender,
            vehicle=Vehicle(type=vehicle_type, number_plate=number_plate, model=model, color=color),
            rating=float(rating),
            is_available=is_available,
        )

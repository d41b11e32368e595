"""
Purpose: Roster loading for the driver store.
What it does:
- Seeds the default driver roster into an empty store (idempotent).
- Loads a roster from CSV (driver_id,name,phone,gender,vehicle_type,number_plate,...)
"""

import logging
from typing import List

import pandas as pd

from .models import Driver

logger = logging.getLogger(__name__)

DEFAULT_ROSTER: List[Driver] = [
    Driver.new("drv_rajesh", "Rajesh Kumar", "sedan", "DL01AB1234", gender="male",
               phone="+91 98765 43210", email="rajesh@luxeride.com", model="Toyota Camry", color="Black"),
    Driver.new("drv_priya", "Priya Singh", "sedan", "DL01CD5678", gender="female",
               phone="+91 98765 43211", email="priya@luxeride.com", model="Honda City", color="White"),
    Driver.new("drv_amit", "Amit Shah", "luxury", "DL01EF9012", gender="male",
               phone="+91 98765 43212", email="amit@luxeride.com", model="Mercedes S-Class", color="Silver"),
]

REQUIRED_COLUMNS = ["driver_id", "name", "vehicle_type", "number_plate"]
OPTIONAL_DEFAULTS = {"gender": "other", "rating": 5.0, "is_available": True, "phone": "", "email": "",
                     "model": "", "color": ""}


def seed_drivers(driver_store, roster: List[Driver] = None) -> int:
    """
    Inserts the roster only when the store has no drivers yet.
    Returns the number of drivers in the store afterwards.
    """
    existing = driver_store.count()
    if existing > 0:
        logger.info("Drivers already seeded (%d)", existing)
        return existing

    for driver in roster or DEFAULT_ROSTER:
        driver_store.add(driver)

    count = driver_store.count()
    logger.info("Seeded %d drivers", count)
    return count


def load_drivers_csv(filepath: str) -> List[Driver]:
    df = pd.read_csv(filepath, dtype={"phone": str, "driver_id": str})

    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"Driver roster {filepath} is missing columns: {', '.join(missing)}")

    for column, default in OPTIONAL_DEFAULTS.items():
        if column not in df.columns:
            df[column] = default
    df = df.fillna(OPTIONAL_DEFAULTS)

    drivers = []
    for _, row in df.iterrows():
        drivers.append(
            Driver.new(
                driver_id=str(row["driver_id"]),
                name=str(row["name"]),
                vehicle_type=str(row["vehicle_type"]),
                number_plate=str(row["number_plate"]),
                gender=str(row["gender"]),
                rating=float(row["rating"]),
                is_available=bool(row["is_available"]),
                phone=str(row["phone"]),
                email=str(row["email"]),
                model=str(row["model"]),
                color=str(row["color"]),
            )
        )
    return drivers

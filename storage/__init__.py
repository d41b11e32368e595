#Marks storage as a package.
#Re-exports the store API so other modules import from storage without
#knowing internal file names.
#No business logic.

from .memory import (
    DriverStore,
    InMemoryDatastore,
    RecordNotFound,
    RideStore,
    StaleWriteError,
    StoreError,
    StoreTimeout,
    Transaction,
    build_stores,
)

__all__ = [
    "DriverStore",
    "InMemoryDatastore",
    "RecordNotFound",
    "RideStore",
    "StaleWriteError",
    "StoreError",
    "StoreTimeout",
    "Transaction",
    "build_stores",
]

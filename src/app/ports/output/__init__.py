from .active_bike_repository import IActiveBikeRepository
from .location_provider import ILocationProvider
from .reference_data_repository import IReferenceDataRepository

__all__ = [
    "IActiveBikeRepository",
    "ILocationProvider",
    "IReferenceDataRepository",
]

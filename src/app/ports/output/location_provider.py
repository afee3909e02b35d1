from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import LiveLocation


class ILocationProvider(ABC):
    """Port for the backend's latest-location lookup.

    Implementations raise ``NetworkError`` for any failure, including a
    response that does not carry a usable position.
    """

    @abstractmethod
    async def latest_location(self, trip_id: int) -> LiveLocation:
        raise NotImplementedError

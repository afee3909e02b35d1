from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import ActiveBike


class IActiveBikeRepository(ABC):
    """Port for listing bikes the backend currently reports as in use."""

    @abstractmethod
    async def list_active_bikes(self) -> tuple[ActiveBike, ...]:
        raise NotImplementedError

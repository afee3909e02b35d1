from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import Rider, Station


class IReferenceDataRepository(ABC):
    """Port for the read-only station and rider pools."""

    @abstractmethod
    def list_stations(self) -> tuple[Station, ...]:
        raise NotImplementedError

    @abstractmethod
    def list_riders(self) -> tuple[Rider, ...]:
        raise NotImplementedError

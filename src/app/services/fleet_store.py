from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, field
from typing import Iterable

from src.app.ports.output import IReferenceDataRepository
from src.app.services.fleet_stepper import step_fleet
from src.app.services.telemetry_generator import TelemetryGenerator
from src.domain.algorithms.kinematics import DEFAULT_STEP_SECONDS
from src.domain.exceptions import UnknownBikeError
from src.domain.models import BikeTelemetry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FleetStore:
    """Owns the one in-memory synthetic fleet shared by all readers.

    The store is the only writer. A step builds the complete next snapshot
    and swaps it in under the lock, so readers see either the old fleet or
    the fully advanced one, never a mix.
    """

    reference_data: IReferenceDataRepository
    generator: TelemetryGenerator = field(default_factory=TelemetryGenerator)
    rng: random.Random = field(default_factory=random.Random)
    step_seconds: float = DEFAULT_STEP_SECONDS
    strict_invariants: bool = True

    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )
    _fleet: tuple[BikeTelemetry, ...] | None = field(default=None, init=False)

    def _generate(self) -> tuple[BikeTelemetry, ...]:
        fleet = self.generator.generate(
            stations=self.reference_data.list_stations(),
            riders=self.reference_data.list_riders(),
        )
        logger.info("Generated synthetic fleet of %d bikes", len(fleet))
        return fleet

    def regenerate(self) -> tuple[BikeTelemetry, ...]:
        """Replace the whole fleet with a freshly generated one."""

        fleet = self._generate()
        with self._lock:
            self._fleet = fleet
        return fleet

    def _ensure_fleet(self) -> None:
        # Generation runs outside the lock; the first fleet to land wins.
        if self._fleet is not None:
            return
        fleet = self._generate()
        with self._lock:
            if self._fleet is None:
                self._fleet = fleet

    def snapshot(self) -> tuple[BikeTelemetry, ...]:
        self._ensure_fleet()
        with self._lock:
            return self._fleet

    def get(self, bike_number: str) -> BikeTelemetry:
        for record in self.snapshot():
            if record.bike_number == bike_number:
                return record
        raise UnknownBikeError(f"No bike in use with number {bike_number!r}")

    def advance(
        self, bike_numbers: Iterable[str] | None = None
    ) -> tuple[BikeTelemetry, ...]:
        only = set(bike_numbers) if bike_numbers is not None else None
        self._ensure_fleet()
        with self._lock:
            self._fleet = step_fleet(
                self._fleet,
                rng=self.rng,
                dt_s=self.step_seconds,
                strict=self.strict_invariants,
                only=only,
            )
            return self._fleet

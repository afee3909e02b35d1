from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Sequence

from src.domain.exceptions import GenerationError
from src.domain.models import (
    OPERATING_AREA,
    BikeTelemetry,
    CurrentLocation,
    GeoPoint,
    Rider,
    RoutePoint,
    SignalQuality,
    Station,
)

BIKE_MODELS: tuple[str, ...] = (
    "City Cruiser Pro",
    "Urban Explorer",
    "Metro Glide",
    "Speed Demon",
)
BIKE_BRANDS: tuple[str, ...] = ("BikeShare", "UrbanCycle", "CityRide", "EcoMotion")

# A freshly spawned bike never reports a poor signal.
SPAWN_SIGNALS: tuple[SignalQuality, ...] = (
    SignalQuality.EXCELLENT,
    SignalQuality.GOOD,
    SignalQuality.FAIR,
)


@dataclass(slots=True)
class TelemetryGenerator:
    """Builds a synthetic fleet of bikes in use around the given stations.

    Each record gets a random origin station and rider, a start time within
    the last hour, a position up to ~1 km from its station and a short
    backfilled route history (one point per minute leading up to now).
    """

    rng: random.Random = field(default_factory=random.Random)
    min_fleet_size: int = 8
    max_fleet_size: int = 12
    history_points: int = 10
    spawn_offset_deg: float = 0.005
    backfill_step_deg: float = 0.0005

    def generate(
        self,
        *,
        stations: Sequence[Station],
        riders: Sequence[Rider],
        now: datetime | None = None,
    ) -> tuple[BikeTelemetry, ...]:
        if not stations:
            raise GenerationError("Cannot generate a fleet without stations")
        if not riders:
            raise GenerationError("Cannot generate a fleet without riders")

        now = now or datetime.now(timezone.utc)
        size = self.rng.randint(self.min_fleet_size, self.max_fleet_size)
        return tuple(
            self._spawn(
                index=i,
                station=self.rng.choice(stations),
                rider=self.rng.choice(riders),
                now=now,
            )
            for i in range(size)
        )

    def _spawn(
        self, *, index: int, station: Station, rider: Rider, now: datetime
    ) -> BikeTelemetry:
        rng = self.rng
        started_at = now - timedelta(seconds=rng.uniform(0.0, 3600.0))

        lat, lon = OPERATING_AREA.clamp(
            station.location.lat
            + rng.uniform(-self.spawn_offset_deg, self.spawn_offset_deg),
            station.location.lon
            + rng.uniform(-self.spawn_offset_deg, self.spawn_offset_deg),
        )

        return BikeTelemetry(
            id=index + 1,
            bike_number=f"B{100 + index:03d}",
            model=rng.choice(BIKE_MODELS),
            brand=rng.choice(BIKE_BRANDS),
            station_id=station.id,
            station_name=station.name,
            station_location=station.location,
            rider_id=rider.id,
            rider_email=rider.email,
            trip_id=1000 + index,
            started_at=started_at,
            current_location=CurrentLocation(
                latitude=lat,
                longitude=lon,
                heading_radians=rng.uniform(0.0, 2.0 * math.pi),
                speed_kmh=float(rng.randint(5, 29)),
                battery_percent=float(rng.randint(60, 99)),
                signal_quality=rng.choice(SPAWN_SIGNALS),
                updated_at=now,
            ),
            route_history=self._backfill_route(station.location, now),
        )

    def _backfill_route(
        self, origin: GeoPoint, now: datetime
    ) -> tuple[RoutePoint, ...]:
        # Independent of the kinematics step: a one-shot wander from the station.
        rng = self.rng
        lat, lon = origin.lat, origin.lon
        points: list[RoutePoint] = []
        for j in range(self.history_points):
            heading = rng.uniform(0.0, 2.0 * math.pi)
            distance = rng.uniform(0.0, self.backfill_step_deg)
            lat, lon = OPERATING_AREA.clamp(
                lat + distance * math.cos(heading),
                lon + distance * math.sin(heading),
            )
            points.append(
                RoutePoint(
                    latitude=lat,
                    longitude=lon,
                    timestamp=now - timedelta(minutes=self.history_points - j),
                    speed_kmh=float(rng.randint(5, 29)),
                )
            )
        return tuple(points)

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

import pytest

from src.domain.models import (
    BikeTelemetry,
    CurrentLocation,
    GeoPoint,
    Rider,
    RoutePoint,
    SignalQuality,
    Station,
)

NOW = datetime(2026, 1, 8, 8, 0, 0, tzinfo=timezone.utc)
MESKEL = GeoPoint(lat=9.0054, lon=38.7636)


@dataclass(slots=True)
class FakeReferenceRepository:
    stations: tuple[Station, ...]
    riders: tuple[Rider, ...]

    def list_stations(self) -> tuple[Station, ...]:
        return self.stations

    def list_riders(self) -> tuple[Rider, ...]:
        return self.riders


@dataclass(slots=True)
class FixedFleetGenerator:
    """Stands in for TelemetryGenerator and always yields the same fleet."""

    fleet: tuple[BikeTelemetry, ...]

    def generate(self, *, stations, riders, now=None) -> tuple[BikeTelemetry, ...]:
        return self.fleet


@pytest.fixture
def stations() -> tuple[Station, ...]:
    return (
        Station(id=1, name="Meskel Square Station", location=MESKEL),
        Station(id=2, name="Piazza Station", location=GeoPoint(9.0348, 38.7616)),
    )


@pytest.fixture
def riders() -> tuple[Rider, ...]:
    return (
        Rider(id=1, email="john@example.com"),
        Rider(id=2, email="jane@example.com"),
    )


@pytest.fixture
def reference_repo(stations, riders) -> FakeReferenceRepository:
    return FakeReferenceRepository(stations=stations, riders=riders)


@pytest.fixture
def make_record() -> Callable[..., BikeTelemetry]:
    def _make(
        *,
        bike_number: str = "B100",
        lat: float = MESKEL.lat,
        lon: float = MESKEL.lon,
        heading: float = 0.0,
        speed: float = 10.0,
        battery: float = 80.0,
        history: tuple[RoutePoint, ...] = (),
        station: GeoPoint = MESKEL,
    ) -> BikeTelemetry:
        return BikeTelemetry(
            id=1,
            bike_number=bike_number,
            model="Metro Glide",
            brand="CityRide",
            station_id=1,
            station_name="Meskel Square Station",
            station_location=station,
            rider_id=1,
            rider_email="john@example.com",
            trip_id=1000,
            started_at=NOW,
            current_location=CurrentLocation(
                latitude=lat,
                longitude=lon,
                heading_radians=heading,
                speed_kmh=speed,
                battery_percent=battery,
                signal_quality=SignalQuality.EXCELLENT,
                updated_at=NOW,
            ),
            route_history=history,
        )

    return _make


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"

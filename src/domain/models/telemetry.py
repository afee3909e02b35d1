from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .geo import GeoPoint

ROUTE_HISTORY_LIMIT = 20
MAX_SPEED_KMH = 35.0


class SignalQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass(frozen=True, slots=True)
class Station:
    id: int
    name: str
    location: GeoPoint


@dataclass(frozen=True, slots=True)
class Rider:
    id: int
    email: str


@dataclass(frozen=True, slots=True)
class RoutePoint:
    latitude: float
    longitude: float
    timestamp: datetime
    speed_kmh: float


@dataclass(frozen=True, slots=True)
class CurrentLocation:
    latitude: float
    longitude: float
    heading_radians: float
    speed_kmh: float
    battery_percent: float
    signal_quality: SignalQuality
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class BikeTelemetry:
    """Synthetic telemetry for one bike currently in use.

    Identity, origin station, rider and start time never change for the
    lifetime of a record; only ``current_location`` and ``route_history``
    are replaced on every step.
    """

    id: int
    bike_number: str
    model: str
    brand: str
    station_id: int
    station_name: str
    station_location: GeoPoint
    rider_id: int
    rider_email: str
    trip_id: int
    started_at: datetime
    current_location: CurrentLocation
    route_history: tuple[RoutePoint, ...] = field(default_factory=tuple)

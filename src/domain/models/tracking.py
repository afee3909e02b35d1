from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .telemetry import SignalQuality


class TrackingMode(str, Enum):
    SYNTHETIC = "synthetic"
    LIVE = "live"


@dataclass(frozen=True, slots=True)
class ActiveBike:
    """A bike in use as reported by the backend's active-bike listing."""

    id: int
    bike_number: str
    trip_id: int | None = None
    model: str | None = None
    brand: str | None = None
    status: str | None = None
    station_id: int | None = None
    station_name: str | None = None
    user_id: int | None = None
    user_email: str | None = None
    start_time: datetime | None = None


@dataclass(frozen=True, slots=True)
class TrackingTarget:
    bike_number: str
    trip_id: int | None = None


@dataclass(frozen=True, slots=True)
class LiveLocation:
    """Position reported by the backend's latest-location lookup."""

    trip_id: int
    latitude: float
    longitude: float
    recorded_at: datetime
    user_email: str | None = None


@dataclass(frozen=True, slots=True)
class LocationSample:
    bike_number: str
    latitude: float
    longitude: float
    updated_at: datetime
    mode: TrackingMode
    sequence: int
    speed_kmh: float | None = None
    heading_radians: float | None = None
    battery_percent: float | None = None
    signal_quality: SignalQuality | None = None
    user_email: str | None = None

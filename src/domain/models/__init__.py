from .geo import OPERATING_AREA, BoundingBox, GeoPoint
from .telemetry import (
    MAX_SPEED_KMH,
    ROUTE_HISTORY_LIMIT,
    BikeTelemetry,
    CurrentLocation,
    Rider,
    RoutePoint,
    SignalQuality,
    Station,
)
from .tracking import (
    ActiveBike,
    LiveLocation,
    LocationSample,
    TrackingMode,
    TrackingTarget,
)

__all__ = [
    "ActiveBike",
    "BikeTelemetry",
    "BoundingBox",
    "CurrentLocation",
    "GeoPoint",
    "LiveLocation",
    "LocationSample",
    "MAX_SPEED_KMH",
    "OPERATING_AREA",
    "ROUTE_HISTORY_LIMIT",
    "Rider",
    "RoutePoint",
    "SignalQuality",
    "Station",
    "TrackingMode",
    "TrackingTarget",
]

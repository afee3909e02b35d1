from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (-90.0 <= self.lat <= 90.0):
            raise ValueError(f"Invalid latitude: {self.lat}")
        if not (-180.0 <= self.lon <= 180.0):
            raise ValueError(f"Invalid longitude: {self.lon}")


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned lat/lon rectangle, bounds inclusive."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def __post_init__(self) -> None:
        if self.min_lat > self.max_lat or self.min_lon > self.max_lon:
            raise ValueError(f"Degenerate bounding box: {self}")

    def contains(self, lat: float, lon: float) -> bool:
        return (
            self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon
        )

    def clamp(self, lat: float, lon: float) -> tuple[float, float]:
        # Hard clamp: a point outside is pinned to the nearest edge.
        return (
            max(self.min_lat, min(self.max_lat, lat)),
            max(self.min_lon, min(self.max_lon, lon)),
        )


# Addis Ababa service area.
OPERATING_AREA = BoundingBox(min_lat=8.9, max_lat=9.1, min_lon=38.6, max_lon=38.9)

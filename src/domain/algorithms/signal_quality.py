from __future__ import annotations

from src.domain.algorithms.geo_utils import planar_distance_deg
from src.domain.models import GeoPoint, SignalQuality

# Upper bounds (exclusive, in degrees) for each level; anything further is POOR.
_THRESHOLDS: tuple[tuple[float, SignalQuality], ...] = (
    (0.002, SignalQuality.EXCELLENT),
    (0.005, SignalQuality.GOOD),
    (0.008, SignalQuality.FAIR),
)


def classify_distance(distance_deg: float) -> SignalQuality:
    for upper, quality in _THRESHOLDS:
        if distance_deg < upper:
            return quality
    return SignalQuality.POOR


def classify_signal(
    latitude: float, longitude: float, origin: GeoPoint
) -> SignalQuality:
    """Signal quality from the distance to the bike's origin station.

    Stateless: the same position always yields the same level.
    """

    return classify_distance(
        planar_distance_deg(latitude, longitude, origin.lat, origin.lon)
    )

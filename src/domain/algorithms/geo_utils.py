from __future__ import annotations

import math

# Flat-earth approximation used for short hops inside the operating area.
METERS_PER_DEGREE = 111_000.0


def planar_distance_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Straight-line distance in raw degrees (no projection)."""

    return math.hypot(lat2 - lat1, lon2 - lon1)


def meters_to_degrees(meters: float) -> float:
    return meters / METERS_PER_DEGREE


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))

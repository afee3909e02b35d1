from __future__ import annotations

import math
import random
from dataclasses import dataclass

from src.domain.algorithms.geo_utils import clamp, meters_to_degrees
from src.domain.models import MAX_SPEED_KMH, OPERATING_AREA, BoundingBox

HEADING_JITTER_RAD = 0.1
SPEED_JITTER_KMH = 2.5
DEFAULT_STEP_SECONDS = 2.0


@dataclass(frozen=True, slots=True)
class KinematicState:
    latitude: float
    longitude: float
    heading_radians: float
    speed_kmh: float


def step_kinematics(
    state: KinematicState,
    *,
    dt_s: float = DEFAULT_STEP_SECONDS,
    rng: random.Random,
    area: BoundingBox = OPERATING_AREA,
) -> KinematicState:
    """Advance one bike by ``dt_s`` seconds.

    Distance is covered at the current speed along a heading nudged by up to
    +/-0.1 rad. Speed is then nudged by up to +/-2.5 km/h for the next step.
    Each perturbation is drawn independently, so the heading drifts without
    memory of previous turns.
    """

    distance_deg = meters_to_degrees(state.speed_kmh * 1000.0 / 3600.0 * dt_s)

    heading = state.heading_radians + rng.uniform(
        -HEADING_JITTER_RAD, HEADING_JITTER_RAD
    )
    speed = clamp(
        state.speed_kmh + rng.uniform(-SPEED_JITTER_KMH, SPEED_JITTER_KMH),
        0.0,
        MAX_SPEED_KMH,
    )

    lat, lon = area.clamp(
        state.latitude + distance_deg * math.cos(heading),
        state.longitude + distance_deg * math.sin(heading),
    )
    return KinematicState(
        latitude=lat, longitude=lon, heading_radians=heading, speed_kmh=speed
    )

from __future__ import annotations

import logging
import random
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable

from src.domain.algorithms.kinematics import (
    DEFAULT_STEP_SECONDS,
    KinematicState,
    step_kinematics,
)
from src.domain.algorithms.signal_quality import classify_signal
from src.domain.exceptions import InvariantViolation
from src.domain.models import (
    MAX_SPEED_KMH,
    OPERATING_AREA,
    ROUTE_HISTORY_LIMIT,
    BikeTelemetry,
    CurrentLocation,
    RoutePoint,
)

logger = logging.getLogger(__name__)

MOVING_DRAIN_PCT = 0.02
IDLE_DRAIN_PCT = 0.01


def _violations(record: BikeTelemetry) -> list[str]:
    loc = record.current_location
    out: list[str] = []
    if not (0.0 <= loc.battery_percent <= 100.0):
        out.append(f"battery {loc.battery_percent}")
    if not (0.0 <= loc.speed_kmh <= MAX_SPEED_KMH):
        out.append(f"speed {loc.speed_kmh}")
    if not OPERATING_AREA.contains(loc.latitude, loc.longitude):
        out.append(f"position ({loc.latitude}, {loc.longitude})")
    if len(record.route_history) > ROUTE_HISTORY_LIMIT:
        out.append(f"route history length {len(record.route_history)}")
    return out


def ensure_invariants(record: BikeTelemetry, *, strict: bool = True) -> BikeTelemetry:
    """Validate a record before stepping it.

    In strict mode a broken record raises ``InvariantViolation``. Otherwise
    the offending fields are clamped back into range and the repair is logged.
    """

    problems = _violations(record)
    if not problems:
        return record

    message = f"Bike {record.bike_number} out of range: {', '.join(problems)}"
    if strict:
        raise InvariantViolation(message)

    logger.warning("%s; clamping", message)
    loc = record.current_location
    lat, lon = OPERATING_AREA.clamp(loc.latitude, loc.longitude)
    return replace(
        record,
        current_location=replace(
            loc,
            latitude=lat,
            longitude=lon,
            speed_kmh=max(0.0, min(MAX_SPEED_KMH, loc.speed_kmh)),
            battery_percent=max(0.0, min(100.0, loc.battery_percent)),
        ),
        route_history=record.route_history[-ROUTE_HISTORY_LIMIT:],
    )


def step_record(
    record: BikeTelemetry,
    *,
    rng: random.Random,
    now: datetime,
    dt_s: float = DEFAULT_STEP_SECONDS,
    strict: bool = True,
) -> BikeTelemetry:
    record = ensure_invariants(record, strict=strict)
    loc = record.current_location

    moved = step_kinematics(
        KinematicState(
            latitude=loc.latitude,
            longitude=loc.longitude,
            heading_radians=loc.heading_radians,
            speed_kmh=loc.speed_kmh,
        ),
        dt_s=dt_s,
        rng=rng,
    )

    drain = MOVING_DRAIN_PCT if moved.speed_kmh > 0 else IDLE_DRAIN_PCT
    point = RoutePoint(
        latitude=moved.latitude,
        longitude=moved.longitude,
        timestamp=now,
        speed_kmh=moved.speed_kmh,
    )

    return replace(
        record,
        current_location=CurrentLocation(
            latitude=moved.latitude,
            longitude=moved.longitude,
            heading_radians=moved.heading_radians,
            speed_kmh=moved.speed_kmh,
            battery_percent=max(0.0, loc.battery_percent - drain),
            signal_quality=classify_signal(
                moved.latitude, moved.longitude, record.station_location
            ),
            updated_at=now,
        ),
        route_history=(*record.route_history, point)[-ROUTE_HISTORY_LIMIT:],
    )


def step_fleet(
    fleet: Iterable[BikeTelemetry],
    *,
    rng: random.Random,
    now: datetime | None = None,
    dt_s: float = DEFAULT_STEP_SECONDS,
    strict: bool = True,
    only: set[str] | None = None,
) -> tuple[BikeTelemetry, ...]:
    """Advance every record (or just those in ``only``) by one tick."""

    now = now or datetime.now(timezone.utc)
    return tuple(
        step_record(r, rng=rng, now=now, dt_s=dt_s, strict=strict)
        if only is None or r.bike_number in only
        else r
        for r in fleet
    )

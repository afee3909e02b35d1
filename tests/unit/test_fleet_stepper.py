from __future__ import annotations

import random
from datetime import timedelta

import pytest

from src.app.services.fleet_stepper import (
    IDLE_DRAIN_PCT,
    MOVING_DRAIN_PCT,
    ensure_invariants,
    step_fleet,
    step_record,
)
from src.domain.exceptions import InvariantViolation
from src.domain.models import RoutePoint, SignalQuality

from .conftest import NOW


class _StallRandom(random.Random):
    """Always draws the lowest value, so a slow bike comes to a stop."""

    def uniform(self, a: float, b: float) -> float:
        return a


def _history(n: int) -> tuple[RoutePoint, ...]:
    return tuple(
        RoutePoint(
            latitude=9.0,
            longitude=38.7,
            timestamp=NOW - timedelta(seconds=n - i),
            speed_kmh=float(i),
        )
        for i in range(n)
    )


def test_moving_bike_drains_faster_than_stopped_bike(make_record) -> None:
    moving = step_record(make_record(speed=20.0), rng=random.Random(0), now=NOW)
    stopped = step_record(make_record(speed=1.0), rng=_StallRandom(), now=NOW)

    assert moving.current_location.battery_percent == pytest.approx(
        80.0 - MOVING_DRAIN_PCT
    )
    assert stopped.current_location.speed_kmh == 0.0
    assert stopped.current_location.battery_percent == pytest.approx(
        80.0 - IDLE_DRAIN_PCT
    )


def test_battery_floors_at_zero(make_record) -> None:
    out = step_record(make_record(battery=0.005), rng=random.Random(0), now=NOW)
    assert out.current_location.battery_percent == 0.0


def test_step_appends_route_point_and_refreshes_timestamp(make_record) -> None:
    record = make_record(history=_history(3))
    later = NOW + timedelta(seconds=2)

    out = step_record(record, rng=random.Random(0), now=later)

    assert len(out.route_history) == 4
    assert out.route_history[:3] == record.route_history
    last = out.route_history[-1]
    assert (last.latitude, last.longitude) == (
        out.current_location.latitude,
        out.current_location.longitude,
    )
    assert last.speed_kmh == out.current_location.speed_kmh
    assert last.timestamp == later
    assert out.current_location.updated_at == later


def test_route_history_is_a_fifo_window_of_twenty(make_record) -> None:
    record = make_record(history=_history(20))

    out = step_record(record, rng=random.Random(0), now=NOW)

    assert len(out.route_history) == 20
    # Oldest point (speed 0) dropped, the rest shifted left.
    assert [p.speed_kmh for p in out.route_history[:19]] == [
        float(i) for i in range(1, 20)
    ]


def test_signal_is_recomputed_from_origin_each_tick(make_record) -> None:
    near = make_record(speed=0.0)
    far = make_record(lat=9.0154, speed=0.0)

    assert (
        step_record(near, rng=_StallRandom(), now=NOW).current_location.signal_quality
        is SignalQuality.EXCELLENT
    )
    assert (
        step_record(far, rng=_StallRandom(), now=NOW).current_location.signal_quality
        is SignalQuality.POOR
    )


def test_identity_fields_survive_a_step(make_record) -> None:
    record = make_record()
    out = step_record(record, rng=random.Random(0), now=NOW)

    for name in (
        "id",
        "bike_number",
        "model",
        "brand",
        "station_id",
        "station_name",
        "station_location",
        "rider_id",
        "rider_email",
        "trip_id",
        "started_at",
    ):
        assert getattr(out, name) == getattr(record, name)


def test_many_ticks_keep_every_invariant(make_record) -> None:
    rng = random.Random(11)
    fleet = tuple(
        make_record(bike_number=f"B{100 + i}", heading=i, speed=35.0) for i in range(10)
    )

    for _ in range(300):
        previous = {r.bike_number: r.current_location.battery_percent for r in fleet}
        fleet = step_fleet(fleet, rng=rng, now=NOW, dt_s=30.0)
        for r in fleet:
            loc = r.current_location
            assert 8.9 <= loc.latitude <= 9.1
            assert 38.6 <= loc.longitude <= 38.9
            assert 0.0 <= loc.speed_kmh <= 35.0
            assert 0.0 <= loc.battery_percent <= previous[r.bike_number]
            assert len(r.route_history) <= 20


def test_step_fleet_can_target_selected_bikes(make_record) -> None:
    fleet = (make_record(bike_number="B100"), make_record(bike_number="B101"))

    out = step_fleet(fleet, rng=random.Random(0), now=NOW, only={"B101"})

    assert out[0] is fleet[0]
    assert out[1] is not fleet[1]
    assert len(out[1].route_history) == 1


def test_strict_mode_rejects_broken_records(make_record) -> None:
    with pytest.raises(InvariantViolation):
        step_record(make_record(battery=-1.0), rng=random.Random(0), now=NOW)
    with pytest.raises(InvariantViolation):
        ensure_invariants(make_record(history=_history(21)))


def test_lenient_mode_clamps_broken_records(make_record) -> None:
    record = make_record(battery=-1.0, lat=9.5, speed=50.0, history=_history(25))

    fixed = ensure_invariants(record, strict=False)

    loc = fixed.current_location
    assert loc.battery_percent == 0.0
    assert loc.latitude == 9.1
    assert loc.speed_kmh == 35.0
    assert len(fixed.route_history) == 20
    assert fixed.route_history == record.route_history[-20:]

    stepped = step_record(record, rng=random.Random(0), now=NOW, strict=False)
    assert stepped.current_location.battery_percent == 0.0
    assert len(stepped.route_history) == 20

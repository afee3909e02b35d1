from __future__ import annotations

import math
import random

import pytest

from src.domain.algorithms.kinematics import KinematicState, step_kinematics


class _MaxRandom(random.Random):
    """Every uniform draw lands on its upper bound."""

    def uniform(self, a: float, b: float) -> float:
        return b


class _ZeroRandom(random.Random):
    """Every uniform draw lands on the middle of its range."""

    def uniform(self, a: float, b: float) -> float:
        return (a + b) / 2.0


def test_distance_uses_speed_elapsed_time_and_flat_degrees() -> None:
    state = KinematicState(
        latitude=9.0, longitude=38.7, heading_radians=0.0, speed_kmh=36.0
    )

    out = step_kinematics(state, dt_s=2.0, rng=_ZeroRandom())

    # 36 km/h for 2 s is 20 m due north.
    assert out.latitude == pytest.approx(9.0 + 20.0 / 111_000.0)
    assert out.longitude == pytest.approx(38.7)
    assert out.heading_radians == 0.0
    assert out.speed_kmh == 35.0


def test_heading_and_speed_perturbations_are_bounded() -> None:
    state = KinematicState(
        latitude=9.0, longitude=38.7, heading_radians=1.0, speed_kmh=10.0
    )

    out = step_kinematics(state, rng=_MaxRandom())

    assert out.heading_radians == pytest.approx(1.1)
    assert out.speed_kmh == pytest.approx(12.5)
    expected_deg = 10.0 * 1000.0 / 3600.0 * 2.0 / 111_000.0
    assert out.latitude == pytest.approx(9.0 + expected_deg * math.cos(1.1))
    assert out.longitude == pytest.approx(38.7 + expected_deg * math.sin(1.1))


def test_speed_never_drops_below_zero() -> None:
    class _MinRandom(random.Random):
        def uniform(self, a: float, b: float) -> float:
            return a

    state = KinematicState(
        latitude=9.0, longitude=38.7, heading_radians=0.0, speed_kmh=1.0
    )
    assert step_kinematics(state, rng=_MinRandom()).speed_kmh == 0.0


def test_bike_pinned_at_boundary_keeps_reporting_boundary() -> None:
    state = KinematicState(
        latitude=9.1, longitude=38.9, heading_radians=math.pi / 4, speed_kmh=35.0
    )
    rng = random.Random(3)

    for _ in range(5):
        state = step_kinematics(state, rng=rng, dt_s=60.0)
        assert state.latitude == 9.1
        assert state.longitude == 38.9


@pytest.mark.parametrize("seed", [0, 1, 2, 42])
def test_random_walk_stays_inside_operating_area_and_speed_range(seed: int) -> None:
    rng = random.Random(seed)
    state = KinematicState(
        latitude=rng.uniform(8.9, 9.1),
        longitude=rng.uniform(38.6, 38.9),
        heading_radians=rng.uniform(0.0, 2.0 * math.pi),
        speed_kmh=rng.uniform(0.0, 35.0),
    )

    for _ in range(500):
        # Large steps push bikes into the edges quickly.
        state = step_kinematics(state, rng=rng, dt_s=600.0)
        assert 8.9 <= state.latitude <= 9.1
        assert 38.6 <= state.longitude <= 38.9
        assert 0.0 <= state.speed_kmh <= 35.0

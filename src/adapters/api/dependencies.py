from __future__ import annotations

import random
from functools import lru_cache

from src.adapters.persistence import StaticReferenceRepository
from src.adapters.realtime.http_active_bike_repository import HttpActiveBikeRepository
from src.adapters.realtime.http_location_provider import HttpLocationProvider
from src.adapters.settings import TrackingRuntimeConfig
from src.app.ports.output import ILocationProvider
from src.app.services.active_rides_service import ActiveRidesService
from src.app.services.fleet_store import FleetStore
from src.app.services.telemetry_generator import TelemetryGenerator
from src.app.services.tracking_session import (
    LiveSampler,
    SyntheticSampler,
    TrackingSession,
    TrackingSessionRegistry,
)
from src.domain.models import TrackingMode


@lru_cache(maxsize=1)
def get_config() -> TrackingRuntimeConfig:
    return TrackingRuntimeConfig.from_env()


@lru_cache(maxsize=1)
def get_fleet_store() -> FleetStore:
    cfg = get_config()
    # One seedable source drives both spawning and stepping.
    rng = random.Random(cfg.seed)
    return FleetStore(
        reference_data=StaticReferenceRepository(path=cfg.reference_data_path),
        generator=TelemetryGenerator(rng=rng),
        rng=rng,
        step_seconds=cfg.step_seconds,
        strict_invariants=cfg.strict_invariants,
    )


def get_location_provider() -> ILocationProvider:
    cfg = get_config()
    return HttpLocationProvider(
        base_url=cfg.api_base_url,
        headers_raw=cfg.api_headers_raw,
        timeout_s=cfg.request_timeout_s,
    )


@lru_cache(maxsize=1)
def get_tracking_registry() -> TrackingSessionRegistry:
    cfg = get_config()
    fleet = get_fleet_store()
    provider = get_location_provider()

    def _new_session() -> TrackingSession:
        return TrackingSession(
            samplers={
                TrackingMode.SYNTHETIC: SyntheticSampler(fleet=fleet),
                TrackingMode.LIVE: LiveSampler(
                    provider=provider, timeout_s=cfg.request_timeout_s
                ),
            },
            period_s=cfg.tick_period_s,
        )

    return TrackingSessionRegistry(session_factory=_new_session)


def get_active_rides_service() -> ActiveRidesService:
    cfg = get_config()
    return ActiveRidesService(
        repository=HttpActiveBikeRepository(
            base_url=cfg.api_base_url, headers_raw=cfg.api_headers_raw
        )
    )

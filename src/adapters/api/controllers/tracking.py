from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from src.adapters.api.dependencies import get_tracking_registry
from src.adapters.api.schemas.tracking import (
    LocationSampleSchema,
    TrackingSessionSchema,
    TrackRequestSchema,
)
from src.app.services.tracking_session import TrackingSession, TrackingSessionRegistry
from src.domain.exceptions import UnknownBikeError
from src.domain.models import LocationSample, TrackingMode, TrackingTarget

router = APIRouter(prefix="/tracking", tags=["tracking"])


def _sample_to_schema(sample: LocationSample) -> LocationSampleSchema:
    return LocationSampleSchema(
        bike_number=sample.bike_number,
        latitude=sample.latitude,
        longitude=sample.longitude,
        updated_at=sample.updated_at,
        mode=sample.mode.value,
        sequence=sample.sequence,
        speed_kmh=sample.speed_kmh,
        heading_radians=sample.heading_radians,
        battery_percent=sample.battery_percent,
        signal_quality=sample.signal_quality.value if sample.signal_quality else None,
        user_email=sample.user_email,
    )


def _session_to_schema(
    session_id: str, session: TrackingSession | None
) -> TrackingSessionSchema:
    target = session.target if session is not None else None
    if session is None or target is None:
        return TrackingSessionSchema(
            session_id=session_id,
            state="idle",
            mode=(session.mode if session else TrackingMode.SYNTHETIC).value,
        )

    latest = session.latest(target.bike_number)
    return TrackingSessionSchema(
        session_id=session_id,
        state="tracking" if session.is_tracking else "idle",
        mode=session.mode.value,
        bike_number=target.bike_number,
        trip_id=target.trip_id,
        last_error=session.last_error,
        latest=_sample_to_schema(latest) if latest else None,
    )


@router.put("/sessions/{session_id}", response_model=TrackingSessionSchema)
async def track_bike(
    session_id: str,
    req: TrackRequestSchema,
    registry: TrackingSessionRegistry = Depends(get_tracking_registry),
) -> TrackingSessionSchema:
    try:
        session = await registry.select(
            session_id,
            TrackingTarget(bike_number=req.bike_number, trip_id=req.trip_id),
            mode=TrackingMode(req.mode),
        )
    except UnknownBikeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _session_to_schema(session_id, session)


@router.get("/sessions/{session_id}", response_model=TrackingSessionSchema)
async def get_session(
    session_id: str,
    registry: TrackingSessionRegistry = Depends(get_tracking_registry),
) -> TrackingSessionSchema:
    return _session_to_schema(session_id, registry.get(session_id))


@router.get(
    "/sessions/{session_id}/samples",
    response_model=dict[str, LocationSampleSchema],
)
async def get_session_samples(
    session_id: str,
    registry: TrackingSessionRegistry = Depends(get_tracking_registry),
) -> dict[str, LocationSampleSchema]:
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return {k: _sample_to_schema(v) for k, v in session.samples.items()}


@router.delete("/sessions/{session_id}", response_model=TrackingSessionSchema)
async def stop_tracking(
    session_id: str,
    registry: TrackingSessionRegistry = Depends(get_tracking_registry),
) -> TrackingSessionSchema:
    await registry.discard(session_id)
    return _session_to_schema(session_id, None)

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from src.adapters.api.dependencies import get_fleet_store
from src.adapters.api.schemas.fleet import (
    BikeTelemetrySchema,
    CurrentLocationSchema,
    FleetStatsSchema,
    GeoPointSchema,
    RoutePointSchema,
)
from src.app.services.active_rides_service import fleet_stats, search_fleet
from src.app.services.fleet_store import FleetStore
from src.domain.exceptions import UnknownBikeError
from src.domain.models import BikeTelemetry

router = APIRouter(prefix="/fleet", tags=["fleet"])


def _telemetry_to_schema(record: BikeTelemetry) -> BikeTelemetrySchema:
    loc = record.current_location
    return BikeTelemetrySchema(
        id=record.id,
        bike_number=record.bike_number,
        model=record.model,
        brand=record.brand,
        station_id=record.station_id,
        station_name=record.station_name,
        station_location=GeoPointSchema(
            lat=record.station_location.lat, lon=record.station_location.lon
        ),
        rider_id=record.rider_id,
        rider_email=record.rider_email,
        trip_id=record.trip_id,
        started_at=record.started_at,
        current_location=CurrentLocationSchema(
            latitude=loc.latitude,
            longitude=loc.longitude,
            heading_radians=loc.heading_radians,
            speed_kmh=loc.speed_kmh,
            battery_percent=loc.battery_percent,
            signal_quality=loc.signal_quality.value,
            updated_at=loc.updated_at,
        ),
        route_history=[
            RoutePointSchema(
                latitude=p.latitude,
                longitude=p.longitude,
                timestamp=p.timestamp,
                speed_kmh=p.speed_kmh,
            )
            for p in record.route_history
        ],
    )


@router.get("", response_model=list[BikeTelemetrySchema])
def list_fleet(
    q: str | None = Query(default=None),
    station_id: int | None = Query(default=None),
    store: FleetStore = Depends(get_fleet_store),
) -> list[BikeTelemetrySchema]:
    fleet = search_fleet(store.snapshot(), query=q, station_id=station_id)
    return [_telemetry_to_schema(r) for r in fleet]


@router.get("/stats", response_model=FleetStatsSchema)
def get_fleet_stats(
    store: FleetStore = Depends(get_fleet_store),
) -> FleetStatsSchema:
    stats = fleet_stats(store.snapshot())
    return FleetStatsSchema(
        active_rides=stats.active_rides, active_stations=stats.active_stations
    )


@router.post("/regenerate", response_model=list[BikeTelemetrySchema])
def regenerate_fleet(
    store: FleetStore = Depends(get_fleet_store),
) -> list[BikeTelemetrySchema]:
    return [_telemetry_to_schema(r) for r in store.regenerate()]


@router.post("/step", response_model=list[BikeTelemetrySchema])
def step_fleet(
    store: FleetStore = Depends(get_fleet_store),
) -> list[BikeTelemetrySchema]:
    return [_telemetry_to_schema(r) for r in store.advance()]


@router.get("/{bike_number}", response_model=BikeTelemetrySchema)
def get_bike(
    bike_number: str,
    store: FleetStore = Depends(get_fleet_store),
) -> BikeTelemetrySchema:
    try:
        record = store.get(bike_number)
    except UnknownBikeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _telemetry_to_schema(record)

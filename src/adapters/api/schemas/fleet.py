from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

SignalLiteral = Literal["excellent", "good", "fair", "poor"]


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class RoutePointSchema(BaseModel):
    latitude: float
    longitude: float
    timestamp: datetime
    speed_kmh: float


class CurrentLocationSchema(BaseModel):
    latitude: float
    longitude: float
    heading_radians: float
    speed_kmh: float = Field(..., ge=0.0, le=35.0)
    battery_percent: float = Field(..., ge=0.0, le=100.0)
    signal_quality: SignalLiteral
    updated_at: datetime


class BikeTelemetrySchema(BaseModel):
    id: int
    bike_number: str
    model: str
    brand: str
    station_id: int
    station_name: str
    station_location: GeoPointSchema
    rider_id: int
    rider_email: str
    trip_id: int
    started_at: datetime
    current_location: CurrentLocationSchema
    route_history: list[RoutePointSchema] = []


class FleetStatsSchema(BaseModel):
    active_rides: int
    active_stations: int


class ActiveBikeSchema(BaseModel):
    id: int
    bike_number: str
    trip_id: int | None = None
    model: str | None = None
    brand: str | None = None
    status: str | None = None
    station_id: int | None = None
    station_name: str | None = None
    user_id: int | None = None
    user_email: str | None = None
    start_time: datetime | None = None

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from src.adapters.api.schemas.fleet import SignalLiteral

ModeLiteral = Literal["synthetic", "live"]


class TrackRequestSchema(BaseModel):
    bike_number: str
    trip_id: int | None = None
    mode: ModeLiteral = "synthetic"


class LocationSampleSchema(BaseModel):
    bike_number: str
    latitude: float
    longitude: float
    updated_at: datetime
    mode: ModeLiteral
    sequence: int
    speed_kmh: float | None = None
    heading_radians: float | None = None
    battery_percent: float | None = None
    signal_quality: SignalLiteral | None = None
    user_email: str | None = None


class TrackingSessionSchema(BaseModel):
    session_id: str
    state: Literal["idle", "tracking"]
    mode: ModeLiteral
    bike_number: str | None = None
    trip_id: int | None = None
    last_error: str | None = None
    latest: LocationSampleSchema | None = None

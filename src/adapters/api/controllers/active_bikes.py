from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.adapters.api.dependencies import get_active_rides_service
from src.adapters.api.schemas.fleet import ActiveBikeSchema
from src.app.services.active_rides_service import ActiveRidesService

router = APIRouter(tags=["active-bikes"])


@router.get("/active-bikes", response_model=list[ActiveBikeSchema])
async def list_active_bikes(
    q: str | None = Query(default=None),
    station_id: int | None = Query(default=None),
    service: ActiveRidesService = Depends(get_active_rides_service),
) -> list[ActiveBikeSchema]:
    bikes = await service.list_active_bikes(station_id=station_id, query=q)
    return [
        ActiveBikeSchema(
            id=b.id,
            bike_number=b.bike_number,
            trip_id=b.trip_id,
            model=b.model,
            brand=b.brand,
            status=b.status,
            station_id=b.station_id,
            station_name=b.station_name,
            user_id=b.user_id,
            user_email=b.user_email,
            start_time=b.start_time,
        )
        for b in bikes
    ]

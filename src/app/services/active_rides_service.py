from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from src.app.ports.output import IActiveBikeRepository
from src.domain.models import ActiveBike, BikeTelemetry


def _matches(query: str, *values: str | None) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return any(needle in v.lower() for v in values if v)


def search_fleet(
    fleet: Iterable[BikeTelemetry],
    *,
    query: str | None = None,
    station_id: int | None = None,
) -> tuple[BikeTelemetry, ...]:
    return tuple(
        r
        for r in fleet
        if (station_id is None or r.station_id == station_id)
        and _matches(
            query or "", r.bike_number, r.rider_email, r.station_name, r.model
        )
    )


@dataclass(frozen=True, slots=True)
class FleetStats:
    active_rides: int
    active_stations: int


def fleet_stats(fleet: Iterable[BikeTelemetry]) -> FleetStats:
    records = tuple(fleet)
    return FleetStats(
        active_rides=len(records),
        active_stations=len({r.station_id for r in records}),
    )


@dataclass(slots=True)
class ActiveRidesService:
    """Backs the live-tracking list of bikes the backend reports in use.

    - Station-scoped views only see bikes that left their own station.
    - Search is a case-insensitive substring match over bike number, rider
      email, station name and model.
    """

    repository: IActiveBikeRepository

    async def list_active_bikes(
        self, *, station_id: int | None = None, query: str | None = None
    ) -> tuple[ActiveBike, ...]:
        bikes = await self.repository.list_active_bikes()
        return tuple(
            b
            for b in bikes
            if (station_id is None or b.station_id == station_id)
            and _matches(
                query or "", b.bike_number, b.user_email, b.station_name, b.model
            )
        )

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

from src.adapters.realtime.http_location_provider import parse_timestamp
from src.adapters.settings import parse_headers
from src.app.ports.output import IActiveBikeRepository
from src.domain.models import ActiveBike

logger = logging.getLogger(__name__)

_WRAPPER_KEYS = ("bikes", "data", "results")


def _unwrap(payload: Any) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in _WRAPPER_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


def _optional_int(value: Any) -> int | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_active_bike(row: Any) -> ActiveBike | None:
    if not isinstance(row, dict):
        return None

    bike_id = _optional_int(row.get("id"))
    if bike_id is None:
        return None

    start_raw = row.get("created_at") or row.get("start_time")
    try:
        start_time = parse_timestamp(start_raw) if start_raw else None
    except ValueError:
        start_time = None

    trip_id = _optional_int(row.get("trip_id"))
    return ActiveBike(
        id=bike_id,
        bike_number=_optional_str(row.get("bike_number")) or str(bike_id),
        # The listing does not carry trip ids; the bike id doubles as one.
        trip_id=trip_id if trip_id is not None else bike_id,
        model=_optional_str(row.get("model")),
        brand=_optional_str(row.get("brand")),
        status=_optional_str(row.get("status")),
        station_id=_optional_int(row.get("station_id")),
        station_name=_optional_str(row.get("station_name")),
        user_id=_optional_int(row.get("user_id")),
        user_email=_optional_str(row.get("user_email")),
        start_time=start_time,
    )


@dataclass(slots=True)
class HttpActiveBikeRepository(IActiveBikeRepository):
    """Lists bikes in use from the bike-share backend's /bike/active endpoint.

    Accepts a bare JSON array or an object wrapping it under bikes/data/results.
    Any failure yields an empty listing.
    """

    base_url: str | None = None
    headers_raw: str | None = None
    timeout_s: float = 10.0
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = os.getenv("BIKESHARE_API_URL", "http://127.0.0.1:8000/api")
        if self.headers_raw is None:
            self.headers_raw = os.getenv("BIKESHARE_API_HEADERS")

    async def list_active_bikes(self) -> tuple[ActiveBike, ...]:
        url = f"{(self.base_url or '').rstrip('/')}/bike/active"
        headers = {"Accept": "application/json", **parse_headers(self.headers_raw)}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(url, headers=headers)
                resp.raise_for_status()
                payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Active bike listing unavailable: %s", exc)
            return ()

        out: list[ActiveBike] = []
        for row in _unwrap(payload):
            bike = _parse_active_bike(row)
            if bike is not None:
                out.append(bike)
        return tuple(out)

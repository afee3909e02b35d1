from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from src.adapters.settings import parse_headers
from src.app.ports.output import ILocationProvider
from src.domain.exceptions import NetworkError
from src.domain.models import LiveLocation


def parse_timestamp(raw: Any) -> datetime:
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"Invalid timestamp: {raw!r}")
    value = raw.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _coordinate(payload: dict[str, Any], key: str) -> float:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Missing or non-numeric {key!r}")
    return float(value)


def _parse_latest_location(trip_id: int, payload: Any) -> LiveLocation:
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object")

    user = payload.get("user")
    email = user.get("email") if isinstance(user, dict) else None

    return LiveLocation(
        trip_id=trip_id,
        latitude=_coordinate(payload, "latitude"),
        longitude=_coordinate(payload, "longitude"),
        recorded_at=parse_timestamp(payload.get("recorded_at")),
        user_email=email if isinstance(email, str) else None,
    )


@dataclass(slots=True)
class HttpLocationProvider(ILocationProvider):
    """Reads a trip's latest position from the bike-share backend.

    Env vars:
      - BIKESHARE_API_URL: API root (default http://127.0.0.1:8000/api)
      - BIKESHARE_API_HEADERS: optional headers, as 'Key:Value;Key2:Value2'
      - BIKESHARE_API_TIMEOUT_S: request timeout (default 2)

    Notes:
      - Unreachable backend, non-2xx status and any body that lacks a
        numeric latitude/longitude or a parseable recorded_at all raise
        NetworkError.
    """

    base_url: str | None = None
    headers_raw: str | None = None
    timeout_s: float = 2.0
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = os.getenv("BIKESHARE_API_URL", "http://127.0.0.1:8000/api")
        if self.headers_raw is None:
            self.headers_raw = os.getenv("BIKESHARE_API_HEADERS")
        if os.getenv("BIKESHARE_API_TIMEOUT_S"):
            self.timeout_s = float(os.environ["BIKESHARE_API_TIMEOUT_S"])

    async def latest_location(self, trip_id: int) -> LiveLocation:
        url = f"{(self.base_url or '').rstrip('/')}/latest_location/{trip_id}"
        headers = {"Accept": "application/json", **parse_headers(self.headers_raw)}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(url, headers=headers)
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPError as exc:
            raise NetworkError(
                f"Location lookup for trip {trip_id} failed: {exc}"
            ) from exc
        except ValueError as exc:
            raise NetworkError(
                f"Location lookup for trip {trip_id} returned non-JSON"
            ) from exc

        try:
            return _parse_latest_location(trip_id, payload)
        except ValueError as exc:
            raise NetworkError(
                f"Unexpected location payload for trip {trip_id}: {exc}"
            ) from exc

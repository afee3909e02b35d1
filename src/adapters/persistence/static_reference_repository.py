from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from src.app.ports.output import IReferenceDataRepository
from src.domain.models import GeoPoint, Rider, Station

DEFAULT_STATIONS: tuple[Station, ...] = (
    Station(id=1, name="Meskel Square Station", location=GeoPoint(9.0054, 38.7636)),
    Station(id=2, name="Piazza Station", location=GeoPoint(9.0348, 38.7616)),
    Station(id=3, name="Bole Airport Station", location=GeoPoint(8.9781, 38.7999)),
    Station(id=4, name="Mexico Station", location=GeoPoint(9.0092, 38.7569)),
    Station(id=5, name="Stadium Station", location=GeoPoint(9.0182, 38.7580)),
)

DEFAULT_RIDERS: tuple[Rider, ...] = (
    Rider(id=1, email="john@example.com"),
    Rider(id=2, email="jane@example.com"),
    Rider(id=3, email="bob@example.com"),
    Rider(id=4, email="alice@example.com"),
    Rider(id=5, email="charlie@example.com"),
    Rider(id=6, email="diana@example.com"),
    Rider(id=7, email="edward@example.com"),
    Rider(id=8, email="fiona@example.com"),
)


def _station_from_row(row: dict[str, Any]) -> Station:
    coords = row.get("coordinates") or {}
    lat = row.get("lat", coords.get("lat"))
    lon = row.get("lon", coords.get("lng", coords.get("lon")))
    return Station(
        id=int(row["id"]),
        name=str(row.get("name") or f"Station {row['id']}"),
        location=GeoPoint(lat=float(lat), lon=float(lon)),
    )


@dataclass(slots=True)
class StaticReferenceRepository(IReferenceDataRepository):
    """Station and rider pools, built in or loaded from a JSON file.

    Env vars:
      - REFERENCE_DATA_PATH: JSON file with "stations" and/or "riders" arrays

    Notes:
      - A key missing from the file falls back to the built-in pool; an
        empty array is kept as empty.
    """

    path: str | Path | None = None

    _stations: tuple[Station, ...] | None = None
    _riders: tuple[Rider, ...] | None = None

    def _load(self) -> None:
        if self._stations is not None and self._riders is not None:
            return

        value = self.path or os.getenv("REFERENCE_DATA_PATH")
        data: dict[str, Any] = {}
        if value:
            with Path(value).open("r", encoding="utf-8") as fp:
                data = json.load(fp)

        if "stations" in data:
            self._stations = tuple(_station_from_row(r) for r in data["stations"])
        else:
            self._stations = DEFAULT_STATIONS

        if "riders" in data:
            self._riders = tuple(
                Rider(id=int(r["id"]), email=str(r["email"])) for r in data["riders"]
            )
        else:
            self._riders = DEFAULT_RIDERS

    def list_stations(self) -> tuple[Station, ...]:
        self._load()
        return self._stations or ()

    def list_riders(self) -> tuple[Rider, ...]:
        self._load()
        return self._riders or ()

from __future__ import annotations

import json

import pytest

from src.adapters.persistence import StaticReferenceRepository
from src.adapters.settings import TrackingRuntimeConfig, parse_headers

_ENV_VARS = (
    "BIKESHARE_API_URL",
    "BIKESHARE_API_HEADERS",
    "BIKESHARE_API_TIMEOUT_S",
    "TRACKING_TICK_PERIOD_S",
    "TRACKING_STEP_SECONDS",
    "TELEMETRY_STRICT_INVARIANTS",
    "TELEMETRY_SEED",
    "REFERENCE_DATA_PATH",
)


@pytest.fixture
def clean_env(monkeypatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_config_defaults(clean_env) -> None:
    cfg = TrackingRuntimeConfig.from_env()

    assert cfg.api_base_url == "http://127.0.0.1:8000/api"
    assert cfg.request_timeout_s == 2.0
    assert cfg.tick_period_s == 0.5
    assert cfg.step_seconds == 2.0
    assert cfg.strict_invariants is True
    assert cfg.seed is None
    assert cfg.reference_data_path is None


def test_config_reads_env(clean_env, monkeypatch) -> None:
    monkeypatch.setenv("BIKESHARE_API_URL", "https://api.example.com/v1/")
    monkeypatch.setenv("TRACKING_TICK_PERIOD_S", "1.5")
    monkeypatch.setenv("TELEMETRY_STRICT_INVARIANTS", "off")
    monkeypatch.setenv("TELEMETRY_SEED", "17")

    cfg = TrackingRuntimeConfig.from_env()

    assert cfg.api_base_url == "https://api.example.com/v1"
    assert cfg.tick_period_s == 1.5
    assert cfg.strict_invariants is False
    assert cfg.seed == 17


def test_parse_headers_skips_malformed_parts() -> None:
    assert parse_headers(None) == {}
    assert parse_headers(" A : 1 ;; no-colon ; :x ;B:2:3") == {"A": "1", "B": "2:3"}


def test_reference_repository_has_builtin_pools(clean_env) -> None:
    repo = StaticReferenceRepository()

    stations = repo.list_stations()
    assert len(stations) == 5
    assert stations[0].name == "Meskel Square Station"
    assert len(repo.list_riders()) == 8


def test_reference_repository_loads_json_file(tmp_path) -> None:
    path = tmp_path / "reference.json"
    path.write_text(
        json.dumps(
            {
                "stations": [
                    {
                        "id": "9",
                        "name": "Arat Kilo",
                        "coordinates": {"lat": 9.03, "lng": 38.76},
                    },
                    {"id": 10, "lat": 9.01, "lon": 38.74},
                ],
                "riders": [],
            }
        ),
        encoding="utf-8",
    )

    repo = StaticReferenceRepository(path=path)

    stations = repo.list_stations()
    assert [s.id for s in stations] == [9, 10]
    assert stations[0].location.lon == 38.76
    assert stations[1].name == "Station 10"
    assert repo.list_riders() == ()

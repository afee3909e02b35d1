from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    return float(raw) if raw else default


def _env_int(name: str) -> int | None:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else None


@dataclass(frozen=True, slots=True)
class TrackingRuntimeConfig:
    api_base_url: str
    api_headers_raw: str | None
    request_timeout_s: float
    tick_period_s: float
    step_seconds: float
    strict_invariants: bool
    seed: int | None
    reference_data_path: str | None

    @staticmethod
    def from_env() -> "TrackingRuntimeConfig":
        return TrackingRuntimeConfig(
            api_base_url=(
                os.getenv("BIKESHARE_API_URL") or "http://127.0.0.1:8000/api"
            ).rstrip("/"),
            api_headers_raw=os.getenv("BIKESHARE_API_HEADERS"),
            request_timeout_s=_env_float("BIKESHARE_API_TIMEOUT_S", 2.0),
            tick_period_s=_env_float("TRACKING_TICK_PERIOD_S", 0.5),
            step_seconds=_env_float("TRACKING_STEP_SECONDS", 2.0),
            strict_invariants=_env_bool("TELEMETRY_STRICT_INVARIANTS", True),
            seed=_env_int("TELEMETRY_SEED"),
            reference_data_path=(os.getenv("REFERENCE_DATA_PATH") or "").strip()
            or None,
        )


def parse_headers(raw: str | None) -> dict[str, str]:
    """Parse 'Key:Value;Key2:Value2' into a header dict, skipping junk parts."""

    raw = (raw or "").strip()
    if not raw:
        return {}
    headers: dict[str, str] = {}
    for part in raw.split(";"):
        part = part.strip()
        if not part:
            continue
        if ":" not in part:
            continue
        k, v = part.split(":", 1)
        k = k.strip()
        v = v.strip()
        if k:
            headers[k] = v
    return headers

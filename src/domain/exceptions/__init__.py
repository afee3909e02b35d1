from .telemetry import (
    GenerationError,
    InvariantViolation,
    NetworkError,
    TelemetryError,
    UnknownBikeError,
)

__all__ = [
    "GenerationError",
    "InvariantViolation",
    "NetworkError",
    "TelemetryError",
    "UnknownBikeError",
]

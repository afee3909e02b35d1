class TelemetryError(Exception):
    """Base exception for the live bike location engine."""


class GenerationError(TelemetryError):
    """Raised when a fleet cannot be generated from the reference pools."""


class NetworkError(TelemetryError):
    """Raised when the live location backend is unreachable or rejects a call."""


class InvariantViolation(TelemetryError):
    """Raised when a telemetry record is already outside its allowed ranges."""


class UnknownBikeError(TelemetryError, LookupError):
    """Raised when no record exists for the requested bike number."""

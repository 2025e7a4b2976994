"""Errors that abort an analysis run."""


class OrphanDetectorError(Exception):
    """Base class for fatal analysis errors."""


class ConfigurationError(OrphanDetectorError):
    """Raised when the run configuration is incomplete or invalid."""


class InvalidTimeRange(ConfigurationError):
    """Raised when a time window is not of the form <integer><h|d|w|M>."""


class TelemetryError(OrphanDetectorError):
    """Raised when usage telemetry cannot be fetched or parsed."""

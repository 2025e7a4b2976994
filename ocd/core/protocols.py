"""Protocols for the pluggable parts of the detector."""

from typing import Any, Protocol

from ocd.core.models import CodeEndpoint, CodeFunction, EndpointUsage, OrphanFinding


class ProgressCallback(Protocol):
    """Protocol defining a progress callback function."""

    def update(self, message: str, **fields: Any) -> None:
        """Update progress with a message."""
        ...


class UsageGateway(Protocol):
    """Protocol defining the telemetry client interface needed by the detector."""

    def get_endpoint_usage(self, service_name: str, time_range: str) -> list[EndpointUsage]:
        """Get aggregated per-endpoint usage for a service over a time window."""
        ...


class UsageStrategy(Protocol):
    """Protocol for an orphan classification strategy."""

    def find_orphaned_endpoints(
        self, endpoints: list[CodeEndpoint], functions: list[CodeFunction]
    ) -> list[OrphanFinding]: ...

    def find_orphaned_functions(
        self, functions: list[CodeFunction], endpoints: list[CodeEndpoint]
    ) -> list[OrphanFinding]: ...

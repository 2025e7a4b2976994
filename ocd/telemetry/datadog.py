"""Datadog APM client for endpoint usage statistics."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any

import requests
from pydantic import BaseModel, ValidationError

from ocd.core.errors import TelemetryError
from ocd.core.models import ApmTrace, EndpointUsage
from ocd.core.routes import normalize_resource
from ocd.telemetry.time_range import parse_time_range

logger = logging.getLogger(__name__)

DEFAULT_SITE = "datadoghq.com"
_REQUEST_TIMEOUT = 30  # seconds
_TRACE_LIMIT = 1000


class DatadogConfig(BaseModel):
    api_key: str
    app_key: str
    site: str = DEFAULT_SITE


class _UsageAccumulator:
    def __init__(self) -> None:
        self.hit_count = 0
        self.last_accessed = 0.0
        self.total_response_time = 0.0

    def add(self, trace: ApmTrace) -> None:
        self.hit_count += 1
        self.last_accessed = max(self.last_accessed, trace.start_time)
        self.total_response_time += trace.duration


class DatadogClient:
    """Fetches APM traces for a service and aggregates them per endpoint."""

    def __init__(self, config: DatadogConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.base_url = f"https://api.{config.site}"
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "DD-API-KEY": config.api_key,
                "DD-APPLICATION-KEY": config.app_key,
                "Content-Type": "application/json",
            }
        )

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=_REQUEST_TIMEOUT)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise TelemetryError(f"Datadog request to {path} failed: {e}") from e
        except ValueError as e:
            raise TelemetryError(f"Datadog returned invalid JSON for {path}: {e}") from e

        if not isinstance(data, dict):
            raise TelemetryError(f"Datadog returned an unexpected payload for {path}")
        return data

    def validate(self) -> bool:
        """Check that the configured API key is accepted."""
        data = self._get("/api/v1/validate")
        return bool(data.get("valid"))

    def get_apm_traces(self, service_name: str, time_range: str) -> list[ApmTrace]:
        """
        Fetch raw APM traces for a service.

        Args:
            service_name: Datadog service to query
            time_range: Window ending now, e.g. "7d"

        Raises:
            InvalidTimeRange: If the time range cannot be parsed
            TelemetryError: If the request or its payload fails
        """
        end_time = int(time.time())
        start_time = end_time - parse_time_range(time_range)

        data = self._get(
            "/api/v1/traces/search",
            params={
                "service": service_name,
                "start": start_time,
                "end": end_time,
                "limit": _TRACE_LIMIT,
            },
        )

        raw_traces = data.get("traces") or []
        if not isinstance(raw_traces, list):
            raise TelemetryError("Datadog returned an unexpected traces payload")

        try:
            traces = [ApmTrace.model_validate(raw) for raw in raw_traces]
        except ValidationError as e:
            raise TelemetryError(f"Failed to parse APM traces: {e}") from e

        logger.debug(f"Fetched {len(traces)} traces for service {service_name}")
        return traces

    def get_endpoint_usage(self, service_name: str, time_range: str) -> list[EndpointUsage]:
        """Aggregate APM traces into one usage record per (method, endpoint)."""
        traces = self.get_apm_traces(service_name, time_range)
        return aggregate_usage(traces)


def aggregate_usage(traces: list[ApmTrace]) -> list[EndpointUsage]:
    """Group traces by HTTP method and normalized resource."""
    usage: dict[tuple[str, str], _UsageAccumulator] = {}

    for trace in traces:
        if not trace.resource or not trace.tags:
            continue
        method = str(trace.tags.get("http.method", "UNKNOWN")).upper()
        key = (method, normalize_resource(trace.resource))
        usage.setdefault(key, _UsageAccumulator()).add(trace)

    return [
        EndpointUsage(
            endpoint=endpoint,
            method=method,
            hit_count=acc.hit_count,
            last_accessed=datetime.fromtimestamp(acc.last_accessed, tz=timezone.utc).isoformat(),
            avg_response_time=acc.total_response_time / acc.hit_count,
        )
        for (method, endpoint), acc in usage.items()
    ]

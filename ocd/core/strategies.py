"""Orphan classification strategies.

`StaticStrategy` cross-references endpoints and functions found in source.
`TelemetryStrategy` joins endpoints against usage aggregated from APM traces.
A run uses exactly one of them, picked from the analysis mode.
"""

from __future__ import annotations

import logging

from ocd.core.models import CodeEndpoint, CodeFunction, EndpointUsage, OrphanFinding
from ocd.core.routes import route_key

logger = logging.getLogger(__name__)

HANDLER_NOT_FOUND = "Handler function not found in codebase"
HANDLER_UNREFERENCED = "Handler function has no references (potentially unused)"
FUNCTION_UNREFERENCED = "Function is not exported and has minimal references"
NO_TRACES = "No APM traces found for this endpoint"
ZERO_HITS = "Endpoint exists in APM but has zero hits"


def _handler_function_name(handler_name: str) -> str:
    # `controller.getUser` is declared as `getUser`
    return handler_name.rsplit(".", 1)[-1]


def _merge_usage(first: EndpointUsage, second: EndpointUsage) -> EndpointUsage:
    """Combine two usage records that normalize to the same route."""
    hit_count = first.hit_count + second.hit_count
    if hit_count:
        avg_response_time = (
            first.avg_response_time * first.hit_count + second.avg_response_time * second.hit_count
        ) / hit_count
    else:
        avg_response_time = 0.0
    return first.model_copy(
        update={
            "hit_count": hit_count,
            "last_accessed": max(first.last_accessed, second.last_accessed),
            "avg_response_time": avg_response_time,
        }
    )


class StaticStrategy:
    """Classify orphans purely from cross-references inside the repository."""

    def find_orphaned_endpoints(
        self, endpoints: list[CodeEndpoint], functions: list[CodeFunction]
    ) -> list[OrphanFinding]:
        functions_by_name: dict[str, CodeFunction] = {}
        for func in functions:
            functions_by_name.setdefault(func.function_name, func)

        orphaned: list[OrphanFinding] = []
        for endpoint in endpoints:
            if not endpoint.handler_name:
                continue

            handler = functions_by_name.get(_handler_function_name(endpoint.handler_name))
            if handler is None:
                orphaned.append(
                    OrphanFinding(item=endpoint, reason=HANDLER_NOT_FOUND, confidence=0.9)
                )
            elif not handler.references:
                orphaned.append(
                    OrphanFinding(item=endpoint, reason=HANDLER_UNREFERENCED, confidence=0.7)
                )

        return orphaned

    def find_orphaned_functions(
        self, functions: list[CodeFunction], endpoints: list[CodeEndpoint]
    ) -> list[OrphanFinding]:
        handlers = {
            _handler_function_name(e.handler_name) for e in endpoints if e.handler_name
        }

        return [
            OrphanFinding(item=func, reason=FUNCTION_UNREFERENCED, confidence=0.6)
            for func in functions
            if not func.is_exported
            and func.function_name not in handlers
            and len(func.references) <= 1
        ]


class TelemetryStrategy:
    """Classify endpoint orphans from a snapshot of production usage."""

    def __init__(self, usage: list[EndpointUsage]) -> None:
        self.usage = usage
        self._usage_by_key: dict[tuple[str, str], EndpointUsage] = {}
        for record in usage:
            key = route_key(record.method, record.endpoint)
            existing = self._usage_by_key.get(key)
            self._usage_by_key[key] = record if existing is None else _merge_usage(existing, record)

    def find_orphaned_endpoints(
        self, endpoints: list[CodeEndpoint], functions: list[CodeFunction]
    ) -> list[OrphanFinding]:
        orphaned: list[OrphanFinding] = []

        for endpoint in endpoints:
            active = self._usage_by_key.get(route_key(endpoint.method, endpoint.route))

            if active is None:
                orphaned.append(OrphanFinding(item=endpoint, reason=NO_TRACES, confidence=0.9))
            elif active.hit_count == 0:
                orphaned.append(
                    OrphanFinding(
                        item=endpoint,
                        reason=ZERO_HITS,
                        confidence=0.8,
                        last_accessed=active.last_accessed,
                        usage_count=active.hit_count,
                    )
                )

        return orphaned

    def find_orphaned_functions(
        self, functions: list[CodeFunction], endpoints: list[CodeEndpoint]
    ) -> list[OrphanFinding]:
        # Function usage cannot be read from request traces.
        logger.debug(f"Skipping function analysis for {len(functions)} functions in telemetry mode")
        return []

"""Route normalization shared by source and telemetry endpoints."""

import re

_PLACEHOLDER_SEGMENT = re.compile(r"/(?::\w+|<(?:\w+:)?\w+>|\{\w+\})")
_WILDCARD_SEGMENT = re.compile(r"/\*+$")

_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")
_UUID_SEGMENT = re.compile(r"/[a-fA-F0-9-]{36}(?=/|$)")
_OBJECT_ID_SEGMENT = re.compile(r"/[a-fA-F0-9]{24}(?=/|$)")


def normalize_route(route: str) -> str:
    """
    Canonicalize a route as declared in source.

    Named parameters (`:id`, `<int:id>`, `{id}`) become `:param` and a
    trailing wildcard becomes `*`.
    """
    route = _PLACEHOLDER_SEGMENT.sub("/:param", route)
    return _WILDCARD_SEGMENT.sub("/*", route)


def normalize_resource(resource: str) -> str:
    """
    Canonicalize a concrete request path as seen by the tracer.

    The query string is dropped and id-like segments are replaced with
    `:id`, `:uuid` and `:objectId` placeholders.
    """
    endpoint = resource.split("?")[0]
    endpoint = _NUMERIC_SEGMENT.sub("/:id", endpoint)
    endpoint = _UUID_SEGMENT.sub("/:uuid", endpoint)
    return _OBJECT_ID_SEGMENT.sub("/:objectId", endpoint)


def route_key(method: str, route: str) -> tuple[str, str]:
    """Join key for matching a source endpoint to a usage record."""
    return method.upper(), normalize_route(normalize_resource(route))

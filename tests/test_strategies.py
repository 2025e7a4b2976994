"""
Tests for the static and telemetry orphan strategies and the threshold filter.
"""

import pytest

from ocd.core.classifier import classify, validate_threshold
from ocd.core.errors import ConfigurationError
from ocd.core.strategies import (
    FUNCTION_UNREFERENCED,
    HANDLER_NOT_FOUND,
    HANDLER_UNREFERENCED,
    NO_TRACES,
    ZERO_HITS,
    StaticStrategy,
    TelemetryStrategy,
)


class TestStaticEndpoints:
    def test_missing_handler(self, make_endpoint):
        endpoint = make_endpoint(handler_name="getUser")

        findings = classify(StaticStrategy().find_orphaned_endpoints([endpoint], []), 0.8)

        assert len(findings) == 1
        assert findings[0].item == endpoint
        assert findings[0].reason == HANDLER_NOT_FOUND
        assert findings[0].confidence == 0.9

    def test_handler_without_references(self, make_endpoint, make_function):
        endpoint = make_endpoint(handler_name="getUser")
        handler = make_function(function_name="getUser", references=())

        findings = StaticStrategy().find_orphaned_endpoints([endpoint], [handler])

        assert [(f.reason, f.confidence) for f in findings] == [(HANDLER_UNREFERENCED, 0.7)]
        assert classify(findings, 0.8) == []

    def test_referenced_handler_is_not_orphaned(self, make_endpoint, make_function):
        endpoint = make_endpoint(handler_name="getUser")
        handler = make_function(function_name="getUser", references=(20,))

        assert StaticStrategy().find_orphaned_endpoints([endpoint], [handler]) == []

    def test_dotted_handler_matches_function_name(self, make_endpoint, make_function):
        endpoint = make_endpoint(handler_name="users.getUser")
        handler = make_function(function_name="getUser", references=(5,))

        assert StaticStrategy().find_orphaned_endpoints([endpoint], [handler]) == []

    def test_endpoints_without_handler_are_skipped(self, make_endpoint):
        endpoint = make_endpoint(handler_name=None, framework_hint="flask")

        assert StaticStrategy().find_orphaned_endpoints([endpoint], []) == []

    def test_idempotent(self, make_endpoint, make_function):
        endpoints = [make_endpoint(handler_name="a"), make_endpoint(handler_name="b")]
        functions = [make_function(function_name="b"), make_function(function_name="c")]
        strategy = StaticStrategy()

        first = strategy.find_orphaned_endpoints(endpoints, functions)
        second = strategy.find_orphaned_endpoints(endpoints, functions)

        assert first == second
        assert [f.confidence for f in first] == [0.9, 0.7]


class TestStaticFunctions:
    def test_unexported_unreferenced_helper(self, make_function):
        helper = make_function(function_name="helper", is_exported=False, references=())

        findings = StaticStrategy().find_orphaned_functions([helper], [])

        assert len(findings) == 1
        assert findings[0].reason == FUNCTION_UNREFERENCED
        assert findings[0].confidence == 0.6

    def test_single_reference_still_counts_as_minimal(self, make_function):
        helper = make_function(references=(9,))

        assert len(StaticStrategy().find_orphaned_functions([helper], [])) == 1

    def test_two_references_is_used(self, make_function):
        helper = make_function(references=(9, 12))

        assert StaticStrategy().find_orphaned_functions([helper], []) == []

    @pytest.mark.parametrize("references", [(), (1,), (1, 2, 3)])
    def test_exported_never_flagged(self, make_function, references):
        helper = make_function(is_exported=True, references=references)

        assert StaticStrategy().find_orphaned_functions([helper], []) == []

    def test_route_handlers_are_not_flagged(self, make_endpoint, make_function):
        handler = make_function(function_name="getUser")
        endpoint = make_endpoint(handler_name="getUser")

        assert StaticStrategy().find_orphaned_functions([handler], [endpoint]) == []


class TestTelemetryStrategy:
    def test_zero_hits(self, make_endpoint, make_usage):
        usage = make_usage(endpoint="/users/123", hitCount=0, lastAccessed="2024-01-01T00:00:00+00:00")
        endpoint = make_endpoint(route="/users/:id")

        findings = classify(TelemetryStrategy([usage]).find_orphaned_endpoints([endpoint], []), 0.8)

        assert len(findings) == 1
        assert findings[0].reason == ZERO_HITS
        assert findings[0].confidence == 0.8
        assert findings[0].usage_count == 0
        assert findings[0].last_accessed == "2024-01-01T00:00:00+00:00"

    def test_no_traces(self, make_endpoint, make_usage):
        endpoint = make_endpoint(method="POST", route="/users")

        findings = TelemetryStrategy([make_usage()]).find_orphaned_endpoints([endpoint], [])

        assert [(f.reason, f.confidence) for f in findings] == [(NO_TRACES, 0.9)]
        assert findings[0].usage_count is None

    def test_active_endpoint_is_not_orphaned(self, make_endpoint, make_usage):
        endpoint = make_endpoint(route="/users/:userId")

        assert TelemetryStrategy([make_usage(endpoint="/users/:id")]).find_orphaned_endpoints([endpoint], []) == []

    def test_verb_mismatch_is_no_match(self, make_endpoint, make_usage):
        endpoint = make_endpoint(method="DELETE")

        findings = TelemetryStrategy([make_usage(method="GET")]).find_orphaned_endpoints([endpoint], [])

        assert findings[0].reason == NO_TRACES

    def test_endpoints_without_handler_are_still_checked(self, make_endpoint):
        endpoint = make_endpoint(handler_name=None, framework_hint="spring", route="/api/users/{id}")

        findings = TelemetryStrategy([]).find_orphaned_endpoints([endpoint], [])

        assert len(findings) == 1

    def test_records_for_the_same_route_are_merged(self, make_endpoint, make_usage):
        quiet = make_usage(endpoint="/users/:id", hitCount=0, lastAccessed="2024-01-01T00:00:00+00:00")
        busy = make_usage(
            endpoint="/users/0b7a6a10-2f3c-4c8e-9d7e-1f2a3b4c5d6e",
            hitCount=12,
            lastAccessed="2024-03-01T00:00:00+00:00",
        )
        endpoint = make_endpoint(route="/users/:id")

        for usage in ([quiet, busy], [busy, quiet]):
            assert TelemetryStrategy(usage).find_orphaned_endpoints([endpoint], []) == []

    def test_merged_zero_hit_records_stay_orphaned(self, make_endpoint, make_usage):
        older = make_usage(endpoint="/users/1", hitCount=0, lastAccessed="2024-01-01T00:00:00+00:00")
        newer = make_usage(endpoint="/users/:id", hitCount=0, lastAccessed="2024-02-01T00:00:00+00:00")

        findings = TelemetryStrategy([older, newer]).find_orphaned_endpoints([make_endpoint()], [])

        assert len(findings) == 1
        assert findings[0].reason == ZERO_HITS
        assert findings[0].usage_count == 0
        assert findings[0].last_accessed == "2024-02-01T00:00:00+00:00"

    def test_functions_are_not_analyzed(self, make_function, make_usage):
        helper = make_function()

        assert TelemetryStrategy([make_usage()]).find_orphaned_functions([helper], []) == []


class TestClassifier:
    def test_monotonic_in_threshold(self, make_endpoint, make_function):
        findings = StaticStrategy().find_orphaned_endpoints(
            [make_endpoint(handler_name="missing"), make_endpoint(handler_name="quiet")],
            [make_function(function_name="quiet")],
        ) + StaticStrategy().find_orphaned_functions([make_function(function_name="lonely")], [])

        thresholds = [0.0, 0.5, 0.6, 0.65, 0.7, 0.8, 0.9, 0.95, 1.0]
        counts = [len(classify(findings, t)) for t in thresholds]

        assert counts == sorted(counts, reverse=True)
        assert counts[0] == 3
        assert counts[-1] == 0

    def test_threshold_is_inclusive(self, make_endpoint):
        findings = StaticStrategy().find_orphaned_endpoints([make_endpoint()], [])

        assert len(classify(findings, 0.9)) == 1

    @pytest.mark.parametrize("threshold", [-0.1, 1.1])
    def test_invalid_threshold(self, threshold):
        with pytest.raises(ConfigurationError):
            validate_threshold(threshold)

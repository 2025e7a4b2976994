"""Confidence threshold filtering."""

from collections.abc import Iterable

from ocd.core.errors import ConfigurationError
from ocd.core.models import OrphanFinding

DEFAULT_CONFIDENCE_THRESHOLD = 0.8


def validate_threshold(threshold: float) -> float:
    if not 0.0 <= threshold <= 1.0:
        raise ConfigurationError(f"Confidence threshold must be between 0 and 1, got {threshold}")
    return threshold


def classify(findings: Iterable[OrphanFinding], threshold: float) -> list[OrphanFinding]:
    """Keep only findings whose confidence reaches the threshold."""
    return [finding for finding in findings if finding.confidence >= threshold]

"""GitHub Actions workflow-command annotations for high-confidence findings."""

import os
from pathlib import Path

from ocd.core.models import AnalysisResult, OrphanFinding

ANNOTATION_CONFIDENCE = 0.9
MAX_ANNOTATIONS = 10


def high_confidence_findings(result: AnalysisResult) -> list[OrphanFinding]:
    return [f for f in result.findings if f.confidence >= ANNOTATION_CONFIDENCE]


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_annotation(finding: OrphanFinding, workspace: Path) -> str:
    """Render one finding as a `::warning` workflow command."""
    item = finding.item
    file_path = os.path.relpath(item.file, workspace)
    properties = ",".join(
        [
            f"file={_escape_property(file_path)}",
            f"line={item.start_line}",
            f"endLine={item.end_line}",
            f"title={_escape_property(f'Potentially orphaned {item.type}')}",
        ]
    )
    return f"::warning {properties}::{_escape_data(finding.reason)}"


def build_annotations(result: AnalysisResult, workspace: Path) -> list[str]:
    """Annotations for at most MAX_ANNOTATIONS findings with confidence >= 0.9."""
    findings = high_confidence_findings(result)[:MAX_ANNOTATIONS]
    return [format_annotation(finding, workspace) for finding in findings]

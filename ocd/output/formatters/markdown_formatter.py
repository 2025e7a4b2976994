"""Markdown formatter for CI job summaries."""

from pathlib import Path

from ocd.core.models import AnalysisMode, AnalysisResult, CodeEndpoint, OrphanFinding
from ocd.output.formatters.protocols import BaseFormatter

MAX_ROWS = 10

RECOMMENDATIONS = [
    "Review high-confidence orphaned items for potential removal",
    "Consider adding tests or documentation for low-usage endpoints",
    "Use Datadog integration (full mode) for production accuracy",
    "Set up regular orphaned code detection in CI/CD pipeline",
]


def _table(header: list[str], rows: list[list[str]]) -> list[str]:
    lines = [
        "| " + " | ".join(header) + " |",
        "| " + " | ".join("---" for _ in header) + " |",
    ]
    lines.extend("| " + " | ".join(cell.replace("|", "\\|") for cell in row) + " |" for row in rows)
    return lines


def _percent(confidence: float) -> str:
    return f"{confidence * 100:.0f}%"


def _endpoint_row(finding: OrphanFinding) -> list[str]:
    item = finding.item
    endpoint = f"{item.method} {item.route}" if isinstance(item, CodeEndpoint) else ""
    usage = "N/A" if finding.usage_count is None else str(finding.usage_count)
    return [Path(item.file).name, endpoint, finding.reason, _percent(finding.confidence), usage]


def _function_row(finding: OrphanFinding) -> list[str]:
    item = finding.item
    name = getattr(item, "function_name", "Unknown")
    return [Path(item.file).name, name, finding.reason, _percent(finding.confidence)]


class MarkdownFormatter(BaseFormatter):
    """Format results as a GitHub-flavored markdown summary."""

    def format(self, result: AnalysisResult) -> str:
        summary = result.summary
        full_mode = summary.analysis_mode is AnalysisMode.FULL

        metrics = [
            ["Total Endpoints", str(summary.total_endpoints)],
            ["Total Functions", str(summary.total_functions)],
            ["Orphaned Endpoints", str(len(result.orphaned_endpoints))],
            ["Orphaned Functions", str(len(result.orphaned_functions))],
            ["**Total Orphaned**", f"**{summary.orphaned_count}**"],
        ]
        if full_mode:
            metrics.append(["Active Endpoints (Datadog)", str(len(result.active_endpoints))])

        lines = ["## 🔍 Orphaned Code Detection Results", ""]
        lines.extend(_table(["Metric", "Count"], metrics))
        lines.append("")
        lines.append(f"**Analysis Mode:** {'Full (with Datadog)' if full_mode else 'PR Changes Only'}")
        lines.append("")
        lines.append(f"**Confidence Threshold:** {summary.confidence_threshold}")

        if result.orphaned_endpoints:
            lines.extend(["", "### 🚫 Orphaned Endpoints", ""])
            lines.extend(
                _table(
                    ["File", "Endpoint", "Reason", "Confidence", "Usage"],
                    [_endpoint_row(f) for f in result.orphaned_endpoints[:MAX_ROWS]],
                )
            )
            if len(result.orphaned_endpoints) > MAX_ROWS:
                lines.append("")
                lines.append(
                    f"*Showing first {MAX_ROWS} of {len(result.orphaned_endpoints)} orphaned endpoints*"
                )

        if result.orphaned_functions:
            lines.extend(["", "### 🗑️ Orphaned Functions", ""])
            lines.extend(
                _table(
                    ["File", "Function", "Reason", "Confidence"],
                    [_function_row(f) for f in result.orphaned_functions[:MAX_ROWS]],
                )
            )
            if len(result.orphaned_functions) > MAX_ROWS:
                lines.append("")
                lines.append(
                    f"*Showing first {MAX_ROWS} of {len(result.orphaned_functions)} orphaned functions*"
                )

        lines.append("")
        if summary.orphaned_count > 0:
            lines.extend(["### 💡 Recommendations", ""])
            lines.extend(f"- {recommendation}" for recommendation in RECOMMENDATIONS)
        else:
            lines.append("✅ **No orphaned code detected!** Your codebase looks clean.")

        return "\n".join(lines) + "\n"

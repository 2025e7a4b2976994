"""CSV formatter for spreadsheet-compatible output."""

import csv
from io import StringIO

from ocd.core.models import AnalysisResult, CodeEndpoint
from ocd.output.formatters.protocols import BaseFormatter


class CsvFormatter(BaseFormatter):
    """Format results as CSV."""

    def format(self, result: AnalysisResult) -> str:
        """Format findings as CSV, one row per orphaned item."""
        output = StringIO()
        writer = csv.writer(output)

        writer.writerow(["Kind", "File", "Line", "Name", "Reason", "Confidence", "Usage"])

        for finding in result.findings:
            item = finding.item
            if isinstance(item, CodeEndpoint):
                name = f"{item.method} {item.route}"
            else:
                name = item.function_name
            writer.writerow(
                [
                    item.type,
                    item.file,
                    item.start_line,
                    name,
                    finding.reason,
                    finding.confidence,
                    "" if finding.usage_count is None else finding.usage_count,
                ]
            )

        return output.getvalue()

"""JSON formatter for structured output."""

from ocd.core.models import AnalysisResult
from ocd.output.formatters.protocols import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Format results as JSON."""

    def format(self, result: AnalysisResult) -> str:
        """Format the full analysis result as JSON, with camelCase usage fields."""
        return result.model_dump_json(indent=2, by_alias=True)

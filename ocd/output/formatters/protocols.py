"""Base formatter interface for output formatting."""

from pathlib import Path
from typing import Protocol

from ocd.core.models import AnalysisResult


class BaseFormatter(Protocol):
    """Base class for output formatters."""

    def format(self, result: AnalysisResult) -> str:
        """Format the analysis result into a string."""
        ...

    def save(self, result: AnalysisResult, output_file: Path) -> None:
        """Save formatted result to a file."""
        content = self.format(result)
        output_file.write_text(content, encoding="utf-8")

from ocd.output.formatters.csv_formatter import CsvFormatter
from ocd.output.formatters.enums import OutputFormat
from ocd.output.formatters.json_formatter import JsonFormatter
from ocd.output.formatters.markdown_formatter import MarkdownFormatter
from ocd.output.formatters.protocols import BaseFormatter
from ocd.output.formatters.tree_formatter import TreeFormatter


def get_formatter(output_format: OutputFormat) -> BaseFormatter:
    """Get the appropriate formatter for the output format."""
    formatters = {
        OutputFormat.TREE: TreeFormatter(),
        OutputFormat.JSON: JsonFormatter(),
        OutputFormat.CSV: CsvFormatter(),
        OutputFormat.MARKDOWN: MarkdownFormatter(),
    }

    return formatters[output_format]

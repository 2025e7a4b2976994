"""CLI interface for orphaned code detector."""

import asyncio
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from ocd.core.classifier import DEFAULT_CONFIDENCE_THRESHOLD
from ocd.core.detector import DEFAULT_TIME_RANGE, OrphanedCodeDetector
from ocd.core.errors import ConfigurationError, OrphanDetectorError
from ocd.core.models import AnalysisMode
from ocd.output.annotations import build_annotations, high_confidence_findings
from ocd.output.formatters.enums import OutputFormat
from ocd.output.formatters.formatter_factory import get_formatter
from ocd.output.formatters.json_formatter import JsonFormatter
from ocd.output.formatters.markdown_formatter import MarkdownFormatter
from ocd.output.progress.callbacks import RichProgressCallback
from ocd.telemetry.datadog import DEFAULT_SITE, DatadogClient, DatadogConfig

app = typer.Typer(
    name="ocd",
    help="🔍 Find orphaned HTTP endpoints and functions in multi-language codebases",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()

DEFAULT_PATH = Path(".")
DEFAULT_EXCLUDE_PATHS = "node_modules,dist,build,vendor"


def parse_exclude_paths(value: str) -> list[str]:
    """Split a comma-separated directory list, dropping blanks."""
    return [p.strip() for p in value.split(",") if p.strip()]


def build_datadog_client(
    api_key: str | None, app_key: str | None, site: str, service_name: str | None
) -> DatadogClient:
    if not api_key or not app_key or not service_name:
        raise ConfigurationError(
            "Datadog API key, application key, and service name are required for full mode"
        )
    return DatadogClient(DatadogConfig(api_key=api_key, app_key=app_key, site=site))


@app.command()
def check(
    path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=False,
            dir_okay=True,
            envvar=["OCD_WORKSPACE_PATH", "GITHUB_WORKSPACE"],
            help="Repository root to analyze",
        ),
    ] = DEFAULT_PATH,
    mode: Annotated[
        AnalysisMode,
        typer.Option(
            "--mode",
            "-m",
            envvar="OCD_MODE",
            help="full: join endpoints with Datadog APM usage, pr: static analysis only",
        ),
    ] = AnalysisMode.PR,
    exclude_paths: Annotated[
        str,
        typer.Option(
            "--exclude-paths",
            "-e",
            envvar="OCD_EXCLUDE_PATHS",
            help="Comma-separated directory names to skip",
        ),
    ] = DEFAULT_EXCLUDE_PATHS,
    confidence_threshold: Annotated[
        float,
        typer.Option(
            "--confidence-threshold",
            "-t",
            min=0.0,
            max=1.0,
            envvar="OCD_CONFIDENCE_THRESHOLD",
            help="Minimum confidence for a finding to be reported",
        ),
    ] = DEFAULT_CONFIDENCE_THRESHOLD,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--output",
            "-o",
            help="Output format: tree, json, csv, markdown",
        ),
    ] = OutputFormat.TREE,
    output_file: Annotated[
        Path | None,
        typer.Option(
            "--output-file",
            "-f",
            envvar="OCD_OUTPUT_FILE",
            help="Save the full JSON report to file",
        ),
    ] = None,
    summary_file: Annotated[
        Path | None,
        typer.Option(
            "--summary-file",
            envvar="GITHUB_STEP_SUMMARY",
            help="Append a markdown summary to file",
        ),
    ] = None,
    annotations: Annotated[
        bool,
        typer.Option(
            "--annotations/--no-annotations",
            help="Print GitHub Actions warnings for high-confidence findings",
        ),
    ] = False,
    fail_on_orphans: Annotated[
        bool,
        typer.Option(
            "--fail-on-orphans",
            help="Exit with status 1 when orphaned code is found",
        ),
    ] = False,
    datadog_api_key: Annotated[
        str | None,
        typer.Option("--datadog-api-key", envvar="DD_API_KEY", help="Datadog API key (full mode)"),
    ] = None,
    datadog_app_key: Annotated[
        str | None,
        typer.Option(
            "--datadog-app-key", envvar="DD_APP_KEY", help="Datadog application key (full mode)"
        ),
    ] = None,
    datadog_site: Annotated[
        str,
        typer.Option("--datadog-site", envvar="DD_SITE", help="Datadog site"),
    ] = DEFAULT_SITE,
    service_name: Annotated[
        str | None,
        typer.Option(
            "--service-name", "-s", envvar="OCD_SERVICE_NAME", help="APM service name (full mode)"
        ),
    ] = None,
    time_range: Annotated[
        str,
        typer.Option(
            "--time-range", envvar="OCD_TIME_RANGE", help="Usage window, e.g. 12h, 7d, 2w, 1M"
        ),
    ] = DEFAULT_TIME_RANGE,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose output",
        ),
    ] = False,
) -> None:
    """
    Scan a codebase for orphaned endpoints and functions.

    PR mode cross-references route handlers and function declarations found
    in source. Full mode compares every route against Datadog APM traces.

    Examples:
        ocd ./my-service
        ocd --mode full --service-name api --time-range 2w
        ocd -o json -f orphans.json --annotations
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        detector = OrphanedCodeDetector(
            exclude_paths=parse_exclude_paths(exclude_paths),
            confidence_threshold=confidence_threshold,
            verbose=verbose,
        )
        gateway = None
        if mode is AnalysisMode.FULL:
            gateway = build_datadog_client(
                datadog_api_key, datadog_app_key, datadog_site, service_name
            )
    except OrphanDetectorError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Scanning for orphaned code...", total=None)
        progress_callback = RichProgressCallback(progress, task_id)

        try:
            result = asyncio.run(
                detector.analyze(
                    path=path,
                    mode=mode,
                    gateway=gateway,
                    service_name=service_name,
                    time_range=time_range,
                    progress_callback=progress_callback,
                )
            )
        except OrphanDetectorError as e:
            console.print(f"[red]Orphaned code detection failed: {e}[/red]")
            if verbose:
                console.print_exception()
            raise typer.Exit(1)

    formatter = get_formatter(output_format)

    if output_format is OutputFormat.TREE:
        formatter.format(result)
    else:
        typer.echo(formatter.format(result))

    if output_file:
        JsonFormatter().save(result, output_file)
        console.print(f"[green]Detailed results saved to {output_file}[/green]")

    if summary_file:
        with summary_file.open("a", encoding="utf-8") as fh:
            fh.write(MarkdownFormatter().format(result))

    if annotations:
        for annotation in build_annotations(result, path):
            typer.echo(annotation)

    high_confidence = high_confidence_findings(result)
    if high_confidence:
        console.print(
            f"[yellow]⚠️  Found {len(high_confidence)} high-confidence orphaned code item(s)[/yellow]"
        )

    if result.summary.orphaned_count:
        console.print(
            f"[yellow]⚠️  Found {result.summary.orphaned_count} orphaned item(s)[/yellow]"
        )
        if fail_on_orphans:
            raise typer.Exit(1)
    else:
        console.print("[green]✅ No orphaned code found![/green]")


@app.command("version")
def cli_version() -> None:
    """Show version information."""
    try:
        console.print(version("orphaned-code-detector"))
    except PackageNotFoundError:
        console.print("unknown")


@app.command()
def doctor(
    datadog_api_key: Annotated[
        str | None, typer.Option("--datadog-api-key", envvar="DD_API_KEY")
    ] = None,
    datadog_app_key: Annotated[
        str | None, typer.Option("--datadog-app-key", envvar="DD_APP_KEY")
    ] = None,
    datadog_site: Annotated[str, typer.Option("--datadog-site", envvar="DD_SITE")] = DEFAULT_SITE,
) -> None:
    """Check system requirements and Datadog credentials."""
    console.print("🔧 Checking system requirements...")

    python_version = sys.version_info
    if python_version >= (3, 10):
        console.print(f"[green]✓ Python {python_version.major}.{python_version.minor}[/green]")
    else:
        console.print(
            f"[red]✗ Python {python_version.major}.{python_version.minor} (requires 3.10+)[/red]"
        )
        raise typer.Exit(1)

    if not datadog_api_key or not datadog_app_key:
        console.print("[yellow]⚠ Datadog keys not configured (only pr mode is available)[/yellow]")
        console.print("Set DD_API_KEY and DD_APP_KEY to enable full mode")
    else:
        client = DatadogClient(
            DatadogConfig(api_key=datadog_api_key, app_key=datadog_app_key, site=datadog_site)
        )
        try:
            valid = client.validate()
        except OrphanDetectorError as e:
            console.print(f"[red]✗ Could not reach Datadog at {client.base_url}: {e}[/red]")
            raise typer.Exit(1)
        if not valid:
            console.print(f"[red]✗ Datadog rejected the API key for {datadog_site}[/red]")
            raise typer.Exit(1)
        console.print(f"[green]✓ Datadog API key valid for {datadog_site}[/green]")

    console.print("\n[green]✓ System check complete[/green]")


if __name__ == "__main__":
    app()

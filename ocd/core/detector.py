"""Main orphaned code detector."""

import asyncio
import logging
import time
from collections.abc import Iterable
from pathlib import Path

from ocd.core.classifier import DEFAULT_CONFIDENCE_THRESHOLD, classify, validate_threshold
from ocd.core.errors import ConfigurationError
from ocd.core.models import AnalysisMode, AnalysisResult, AnalysisSummary, EndpointUsage
from ocd.core.protocols import ProgressCallback, UsageGateway, UsageStrategy
from ocd.core.scanner import scan_repository
from ocd.core.strategies import StaticStrategy, TelemetryStrategy
from ocd.telemetry.time_range import parse_time_range

logger = logging.getLogger(__name__)

DEFAULT_TIME_RANGE = "7d"


class OrphanedCodeDetector:
    """Main class for detecting orphaned endpoints and functions."""

    def __init__(
        self,
        exclude_paths: Iterable[str] = (),
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        verbose: bool = False,
    ) -> None:
        self.exclude_paths = set(exclude_paths)
        self.confidence_threshold = validate_threshold(confidence_threshold)
        self.verbose = verbose

        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    async def analyze(
        self,
        path: Path,
        mode: AnalysisMode = AnalysisMode.PR,
        gateway: UsageGateway | None = None,
        service_name: str | None = None,
        time_range: str = DEFAULT_TIME_RANGE,
        progress_callback: ProgressCallback | None = None,
    ) -> AnalysisResult:
        """
        Analyze a repository for orphaned code.

        Args:
            path: Repository root to scan
            mode: FULL joins endpoints with telemetry, PR uses static analysis only
            gateway: Usage telemetry source, required in FULL mode
            service_name: Service to query telemetry for, required in FULL mode
            time_range: Telemetry window such as "7d"
            progress_callback: Receives scanning progress messages

        Returns:
            AnalysisResult with the findings that reach the confidence threshold

        Raises:
            ConfigurationError: If the path or the telemetry settings are invalid
            TelemetryError: If usage data cannot be fetched
        """
        start_time = time.time()
        mode = AnalysisMode(mode)

        if not path.is_dir():
            raise ConfigurationError(f"Path is not a directory: {path}")

        if mode is AnalysisMode.FULL:
            if gateway is None or not service_name:
                raise ConfigurationError("A telemetry client and service name are required for full mode")
            # Fail on a bad window before spending time on the scan.
            parse_time_range(time_range)

        logger.info(f"Scanning {path} in {mode.value} mode")
        scan = scan_repository(path, self.exclude_paths, progress_callback)

        active_endpoints: list[EndpointUsage] = []
        strategy: UsageStrategy
        if mode is AnalysisMode.FULL:
            if progress_callback is not None:
                progress_callback.update(f"Fetching usage for {service_name}")
            active_endpoints = await asyncio.to_thread(
                gateway.get_endpoint_usage, service_name, time_range
            )
            logger.info(f"Fetched usage for {len(active_endpoints)} endpoints of {service_name}")
            strategy = TelemetryStrategy(active_endpoints)
        else:
            strategy = StaticStrategy()

        orphaned_endpoints = classify(
            strategy.find_orphaned_endpoints(scan.endpoints, scan.functions),
            self.confidence_threshold,
        )
        orphaned_functions = classify(
            strategy.find_orphaned_functions(scan.functions, scan.endpoints),
            self.confidence_threshold,
        )

        logger.debug(
            f"Found {len(orphaned_endpoints)} orphaned endpoints and "
            f"{len(orphaned_functions)} orphaned functions"
        )

        return AnalysisResult(
            orphaned_endpoints=orphaned_endpoints,
            orphaned_functions=orphaned_functions,
            active_endpoints=active_endpoints,
            summary=AnalysisSummary(
                total_endpoints=len(scan.endpoints),
                total_functions=len(scan.functions),
                orphaned_count=len(orphaned_endpoints) + len(orphaned_functions),
                confidence_threshold=self.confidence_threshold,
                analysis_mode=mode,
                files_scanned=scan.files_scanned,
                scan_duration=time.time() - start_time,
            ),
        )

"""
Orphaned Code Detector - Find unused HTTP endpoints and functions in multi-language codebases.
"""

__version__ = "0.1.0"

from ocd.core.detector import OrphanedCodeDetector
from ocd.telemetry.datadog import DatadogClient

__all__ = ["DatadogClient", "OrphanedCodeDetector"]

"""Repository walking for orphaned code detection."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ocd.core.extractor import extract_from_content
from ocd.core.models import CodeEndpoint, CodeFunction
from ocd.core.protocols import ProgressCallback

logger = logging.getLogger(__name__)

LANGUAGE_MAP: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".java": "java",
    ".rb": "ruby",
    ".php": "php",
    ".go": "go",
    ".cs": "csharp",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".c": "c",
    ".rs": "rust",
    ".kt": "kotlin",
    ".scala": "scala",
    ".swift": "swift",
}


@dataclass
class ScanOutput:
    endpoints: list[CodeEndpoint] = field(default_factory=list)
    functions: list[CodeFunction] = field(default_factory=list)
    files_scanned: int = 0


def detect_language(file_path: Path) -> str:
    return LANGUAGE_MAP.get(file_path.suffix.lower(), "unknown")


def should_skip_directory(name: str, exclude_paths: Iterable[str]) -> bool:
    return name in exclude_paths or name.startswith(".")


def iter_source_files(root: Path, exclude_paths: Iterable[str] = ()) -> Iterator[Path]:
    """Recursively yield source files, skipping excluded and hidden directories."""
    excluded = set(exclude_paths)

    for dirpath, dirnames, filenames in os.walk(root):
        # Pruning in place keeps os.walk out of excluded trees.
        dirnames[:] = [name for name in dirnames if not should_skip_directory(name, excluded)]
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.suffix.lower() in LANGUAGE_MAP:
                yield path


def scan_repository(
    root: Path,
    exclude_paths: Iterable[str] = (),
    progress_callback: ProgressCallback | None = None,
) -> ScanOutput:
    """
    Extract every endpoint and function declared under a directory.

    Files that cannot be read or decoded are skipped so that a single bad
    file does not fail the whole run.
    """
    output = ScanOutput()

    for file_path in iter_source_files(root, exclude_paths):
        logger.debug(f"Processing {file_path}")
        if progress_callback is not None:
            progress_callback.update(f"Scanning {file_path.name}")

        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable file {file_path}: {e}")
            continue

        endpoints, functions = extract_from_content(content, str(file_path), detect_language(file_path))
        output.endpoints.extend(endpoints)
        output.functions.extend(functions)
        output.files_scanned += 1

    logger.debug(
        f"Found {len(output.endpoints)} endpoints and {len(output.functions)} functions "
        f"in {output.files_scanned} files"
    )

    return output

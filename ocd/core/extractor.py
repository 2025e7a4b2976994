"""Turn source lines into candidate endpoints and functions."""

from __future__ import annotations

import re
from bisect import bisect_right

from ocd.core.models import CodeEndpoint, CodeFunction
from ocd.core.patterns import ENDPOINT_RECOGNIZERS, FUNCTION_RECOGNIZERS


def extract_endpoint(
    line: str,
    line_number: int,
    file_path: str,
    language: str,
) -> CodeEndpoint | None:
    """
    Match a single source line against the known routing idioms.

    Args:
        line: Raw source line
        line_number: 1-based line number
        file_path: Path of the file the line comes from
        language: Language tag of the file

    Returns:
        The endpoint declared on the line, or None if no idiom matches
    """
    trimmed = line.strip()

    for recognizer in ENDPOINT_RECOGNIZERS:
        match = recognizer.recognize(trimmed)
        if match is None:
            continue
        return CodeEndpoint(
            language=language,
            file=file_path,
            start_line=line_number,
            end_line=line_number,
            snippet=trimmed,
            method=match.method,
            route=match.route,
            handler_name=match.handler_name,
            framework_hint=match.framework,
            confidence=match.confidence,
        )

    return None


def extract_function(
    line: str,
    line_number: int,
    file_path: str,
    language: str,
    content: str,
) -> CodeFunction | None:
    """
    Match a single source line against the function declaration idioms.

    `content` is the full text of the enclosing file, used to count references.
    """
    trimmed = line.strip()

    for recognizer in FUNCTION_RECOGNIZERS:
        if language not in recognizer.languages:
            continue
        match = recognizer.recognize(trimmed)
        if match is None:
            continue
        return CodeFunction(
            language=language,
            file=file_path,
            start_line=line_number,
            end_line=line_number,
            snippet=trimmed,
            function_name=match.name,
            is_exported=match.is_exported,
            references=find_function_references(match.name, content),
            confidence=match.confidence,
        )

    return None


def find_function_references(function_name: str, content: str) -> tuple[int, ...]:
    """
    Find whole-word occurrences of a name in a file.

    The first occurrence is assumed to be the declaration and is dropped.
    This is a textual search, so shadowed or reused names are overcounted.

    Returns:
        1-based line numbers of every remaining occurrence, in file order
    """
    pattern = re.compile(rf"\b{re.escape(function_name)}\b")
    newlines = [i for i, char in enumerate(content) if char == "\n"]
    lines = [bisect_right(newlines, m.start()) + 1 for m in pattern.finditer(content)]
    return tuple(lines[1:])


def extract_from_content(
    content: str,
    file_path: str,
    language: str,
) -> tuple[list[CodeEndpoint], list[CodeFunction]]:
    """Run both extractors over every line of a file."""
    endpoints: list[CodeEndpoint] = []
    functions: list[CodeFunction] = []

    for index, line in enumerate(content.split("\n")):
        line_number = index + 1

        endpoint = extract_endpoint(line, line_number, file_path, language)
        if endpoint:
            endpoints.append(endpoint)

        # A line can declare both a route and a function; keep both.
        func = extract_function(line, line_number, file_path, language, content)
        if func:
            functions.append(func)

    return endpoints, functions

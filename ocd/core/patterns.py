"""Single-line idiom recognizers for endpoint and function declarations.

Each recognizer knows one framework or language idiom. Recognizers see one
trimmed source line at a time, so declarations split across lines are missed.
To support another framework, add a recognizer to the registry at the bottom.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD", "ALL"})

SCRIPT_LANGUAGES = frozenset({"javascript", "typescript"})

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*$")
_EXPORT_TOKEN = re.compile(r"\bexport\b")


@dataclass(frozen=True)
class RouteMatch:
    """Raw pieces of an endpoint declaration before it becomes a CodeEndpoint."""

    method: str
    route: str
    handler_name: str | None
    framework: str
    confidence: float


@dataclass(frozen=True)
class FunctionMatch:
    """Raw pieces of a function declaration before it becomes a CodeFunction."""

    name: str
    is_exported: bool
    confidence: float


class EndpointRecognizer(Protocol):
    framework: str

    def recognize(self, line: str) -> RouteMatch | None: ...


class FunctionRecognizer(Protocol):
    languages: frozenset[str]

    def recognize(self, line: str) -> FunctionMatch | None: ...


def normalize_method(method: str) -> str | None:
    """Upper-case an HTTP verb, or return None if it is not a known verb."""
    upper = method.upper()
    return upper if upper in HTTP_METHODS else None


def _handler_from_arguments(arguments: str) -> str | None:
    # Inline callbacks are cut at their first ")" and have no name.
    if "(" in arguments:
        return None
    # The handler is the last argument; middleware comes before it.
    candidate = arguments.split(",")[-1].strip()
    if _IDENTIFIER.match(candidate):
        return candidate
    return None


class ExpressRecognizer:
    """`app.get('/users/:id', getUser)` and `router.post(...)`."""

    framework = "express"
    confidence = 0.95
    pattern = re.compile(
        r"(?:app|router)\.(get|post|put|delete|patch|options|head|all)\s*\(\s*"
        r"['\"`]([^'\"`]+)['\"`]\s*,\s*([^)]+)\)",
        re.IGNORECASE,
    )

    def recognize(self, line: str) -> RouteMatch | None:
        match = self.pattern.search(line)
        if not match:
            return None
        method = normalize_method(match.group(1))
        if method is None:
            return None
        return RouteMatch(
            method=method,
            route=match.group(2),
            handler_name=_handler_from_arguments(match.group(3)),
            framework=self.framework,
            confidence=self.confidence,
        )


class FlaskRecognizer:
    """`@app.route('/path')` with an optional single-verb `methods=[...]`."""

    framework = "flask"
    confidence = 0.9
    pattern = re.compile(
        r"@app\.route\s*\(\s*['\"`]([^'\"`]+)['\"`]"
        r"(?:\s*,\s*methods\s*=\s*\[['\"`](\w+)['\"`]\])?\s*\)",
        re.IGNORECASE,
    )

    def recognize(self, line: str) -> RouteMatch | None:
        match = self.pattern.search(line)
        if not match:
            return None
        method = normalize_method(match.group(2) or "GET")
        if method is None:
            return None
        return RouteMatch(
            method=method,
            route=match.group(1),
            handler_name=None,
            framework=self.framework,
            confidence=self.confidence,
        )


class SpringRecognizer:
    """`@GetMapping("/path")` and the other verb-specific mapping annotations."""

    framework = "spring"
    confidence = 0.9
    pattern = re.compile(
        r"@(Get|Post|Put|Delete|Patch)Mapping\s*\(\s*['\"`]([^'\"`]+)['\"`]\s*\)",
        re.IGNORECASE,
    )

    def recognize(self, line: str) -> RouteMatch | None:
        match = self.pattern.search(line)
        if not match:
            return None
        return RouteMatch(
            method=match.group(1).upper(),
            route=match.group(2),
            handler_name=None,
            framework=self.framework,
            confidence=self.confidence,
        )


class FunctionStatementRecognizer:
    """`[export] [async] function name(`."""

    languages = SCRIPT_LANGUAGES
    confidence = 0.9
    pattern = re.compile(r"(?:export\s+)?(?:async\s+)?function\s+(\w+)\s*\(")

    def recognize(self, line: str) -> FunctionMatch | None:
        match = self.pattern.search(line)
        if not match:
            return None
        return FunctionMatch(
            name=match.group(1),
            is_exported=bool(_EXPORT_TOKEN.search(line)),
            confidence=self.confidence,
        )


class ArrowFunctionRecognizer:
    """`[export] const name = [async] (...) =>`."""

    languages = SCRIPT_LANGUAGES
    confidence = 0.85
    pattern = re.compile(r"(?:export\s+)?(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?\([^)]*\)\s*=>")

    def recognize(self, line: str) -> FunctionMatch | None:
        match = self.pattern.search(line)
        if not match:
            return None
        return FunctionMatch(
            name=match.group(1),
            is_exported=bool(_EXPORT_TOKEN.search(line)),
            confidence=self.confidence,
        )


ENDPOINT_RECOGNIZERS: list[EndpointRecognizer] = [
    ExpressRecognizer(),
    FlaskRecognizer(),
    SpringRecognizer(),
]

FUNCTION_RECOGNIZERS: list[FunctionRecognizer] = [
    FunctionStatementRecognizer(),
    ArrowFunctionRecognizer(),
]

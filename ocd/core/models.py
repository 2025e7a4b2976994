"""Data models for orphaned code detection."""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Confidence = Annotated[float, Field(ge=0.0, le=1.0)]


class AnalysisMode(str, Enum):
    FULL = "full"
    PR = "pr"


class CodeEndpoint(BaseModel):
    """An HTTP route declaration found in source."""

    model_config = ConfigDict(frozen=True)

    type: Literal["endpoint"] = "endpoint"
    language: str
    file: str
    start_line: int
    end_line: int
    snippet: str
    method: str
    route: str
    handler_name: str | None = None
    framework_hint: str
    confidence: Confidence


class CodeFunction(BaseModel):
    """A named function declaration found in source."""

    model_config = ConfigDict(frozen=True)

    type: Literal["function"] = "function"
    language: str
    file: str
    start_line: int
    end_line: int
    snippet: str
    function_name: str
    is_exported: bool
    references: tuple[int, ...] = ()
    confidence: Confidence


CodeItem = Annotated[CodeEndpoint | CodeFunction, Field(discriminator="type")]


class EndpointUsage(BaseModel):
    """Usage statistics for one (method, route) pair, aggregated from telemetry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    endpoint: str
    method: str
    hit_count: int = Field(alias="hitCount")
    last_accessed: str = Field(alias="lastAccessed")
    avg_response_time: float = Field(default=0.0, alias="avgResponseTime")


class ApmTrace(BaseModel):
    """A raw APM span as returned by the trace search API."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    trace_id: str | None = None
    span_id: str | None = None
    resource: str | None = None
    service: str | None = None
    operation_name: str | None = None
    start_time: float = 0.0
    duration: float = 0.0
    tags: dict[str, Any] = Field(default_factory=dict)


class OrphanFinding(BaseModel):
    """A code item judged unused by one of the usage strategies."""

    model_config = ConfigDict(frozen=True)

    item: CodeItem
    reason: str
    confidence: Confidence
    last_accessed: str | None = None
    usage_count: int | None = None


class AnalysisSummary(BaseModel):
    total_endpoints: int
    total_functions: int
    orphaned_count: int
    confidence_threshold: float
    analysis_mode: AnalysisMode
    files_scanned: int = 0
    scan_duration: float = 0.0


class AnalysisResult(BaseModel):
    """Results of one orphaned code analysis run."""

    orphaned_endpoints: list[OrphanFinding]
    orphaned_functions: list[OrphanFinding]
    active_endpoints: list[EndpointUsage]
    summary: AnalysisSummary

    @property
    def findings(self) -> list[OrphanFinding]:
        return [*self.orphaned_endpoints, *self.orphaned_functions]
